"""Observability record models.

Records are designed to be:
- Durable and append-only (sink decides storage).
- Easy to link back to the sequence that produced them via `sequence_id`.
- Detached from live objects: arguments and snapshot are stored as plain data.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from tracked.models import EventKind, SequenceEvent, utc_now
from tracked.sequence import ObservableSequence


class ObservabilityRecord(BaseModel):
    """A durable, structured record derived from a `SequenceEvent`."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    # created / accessed / modified, for downstream filtering.
    kind: EventKind

    # The method that produced the event (e.g., "append", "index", "slice").
    operation: str

    # Where the record was produced (e.g., "sequence", "demo").
    stage: str

    # Identifier used to group records per sequence instance.
    sequence_id: str

    # Timing fields.
    occurred_at: datetime
    logged_at: datetime = Field(default_factory=utc_now)

    # Arguments + snapshot as lists, plus the resulting length.
    summary: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_event(cls, event: SequenceEvent, *, stage: str) -> ObservabilityRecord:
        """Build a record from an event, copying its arguments and snapshot."""
        return cls(
            kind=event.kind,
            operation=event.operation,
            stage=stage,
            sequence_id=event.sequence_id,
            occurred_at=event.ts,
            logged_at=utc_now(),
            summary=_summarize(event),
        )


def _summarize(event: SequenceEvent) -> dict[str, Any]:
    """Plain-data view of an event's payload.

    Nested observable sequences in the arguments (e.g. `concat` inputs) or in
    the snapshot (a sequence held as an element) are replaced by a copy of
    their elements so the record never holds live state.
    """
    return {
        "arguments": [_plain(arg) for arg in event.arguments],
        "snapshot": [_plain(item) for item in event.snapshot],
        "length": len(event.snapshot),
    }


def _plain(value: Any) -> Any:
    if isinstance(value, ObservableSequence):
        return [_plain(item) for item in value.snapshot()]
    if isinstance(value, slice):
        return {"start": value.start, "stop": value.stop, "step": value.step}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value
