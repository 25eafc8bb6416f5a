"""Errors raised by tracked sequences.

Only construction-time wiring validation is defined here; element-level and
callback errors propagate to the caller unchanged.
"""

from __future__ import annotations

from typing import Any


class TrackedError(Exception):
    """Base error for all tracked-sequence operations."""


class InvalidWiring(TrackedError, TypeError):
    """The wiring argument passed to a sequence constructor is not callable."""

    def __init__(self, wiring: Any) -> None:
        self.wiring = wiring
        super().__init__(f"wiring must be callable, not {type(wiring).__name__}")
