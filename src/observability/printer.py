"""Human-readable event output.

`PrettyPrinter` is a plain channel observer that writes one line per event.
It is meant for demos and manual debugging; durable storage goes through
`ObservabilityRecorder`.
"""

from __future__ import annotations

import json
import sys
from typing import TextIO

from tracked.models import SequenceEvent

_COLORS = {
    "reset": "\x1b[0m",
    "cyan": "\x1b[36m",
    "yellow": "\x1b[33m",
    "green": "\x1b[32m",
}


class PrettyPrinter:
    """Observer printing `Type: ... Method: ... Args: ... Array: [...]` lines."""

    def __init__(self, stream: TextIO | None = None, *, color: bool = True) -> None:
        self._stream = stream if stream is not None else sys.stdout
        self._color = color

    def _paint(self, text: str, color: str) -> str:
        if not self._color:
            return text
        return f"{_COLORS[color]}{text}{_COLORS['reset']}"

    def format(self, event: SequenceEvent) -> str:
        args = json.dumps(list(event.arguments), default=str)
        items = ", ".join(str(item) for item in event.snapshot)
        return (
            f"{self._paint('Type:', 'cyan')} {self._paint(event.kind.upper(), 'yellow')} "
            f"{self._paint('Method:', 'cyan')} {self._paint(event.operation, 'green')} "
            f"{self._paint('Args:', 'cyan')} {args} "
            f"{self._paint('Array:', 'cyan')} [{items}]"
        )

    def __call__(self, event: SequenceEvent) -> None:
        print(self.format(event), file=self._stream)
