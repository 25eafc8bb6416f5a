"""Event records published by observable sequences.

One `SequenceEvent` is built per intercepted operation, after the operation's
effect has been committed. Records are frozen and carry a tuple snapshot, so
an observer holding on to an event never sees it change.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

EventKind = Literal["created", "accessed", "modified"]

CREATED: EventKind = "created"
ACCESSED: EventKind = "accessed"
MODIFIED: EventKind = "modified"


def utc_now() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(tz=timezone.utc)


class SequenceEvent(BaseModel):
    """A read or write observed on an `ObservableSequence`."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    kind: EventKind

    # Name of the method that produced the event ("index" for bracket access).
    operation: str

    # Non-callback inputs of the call, in order.
    arguments: tuple[Any, ...] = ()

    # Elements at emission time (the result's elements for derived operations).
    snapshot: tuple[Any, ...] = ()

    # Identifier of the sequence whose channel published the event.
    sequence_id: str

    ts: datetime = Field(default_factory=utc_now)

    @property
    def is_write(self) -> bool:
        """True for `modified` events."""
        return self.kind == MODIFIED
