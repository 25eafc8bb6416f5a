"""Observability for tracked sequences.

This package turns `SequenceEvent`s into something people and tools can use:
- `PrettyPrinter` writes one colourised line per event for manual inspection.
- `ObservabilityRecorder` converts events into durable `ObservabilityRecord`s
  and persists them to a sink (DuckDB or in-memory) without blocking the
  publishing sequence.

Both are ordinary channel observers; attach them with `tracked.attach_all`.
"""

from .models import ObservabilityRecord
from .printer import PrettyPrinter
from .recorder import ObservabilityRecorder
from .sinks import DuckDBObservabilitySink, InMemoryObservabilitySink, ObservabilitySink

__all__ = [
    "DuckDBObservabilitySink",
    "InMemoryObservabilitySink",
    "ObservabilityRecord",
    "ObservabilityRecorder",
    "ObservabilitySink",
    "PrettyPrinter",
]
