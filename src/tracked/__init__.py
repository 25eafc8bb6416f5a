"""Observable sequences.

An `ObservableSequence` behaves like a list, but every read and write also
publishes a `SequenceEvent` on the sequence's own `EventChannel`. A wiring
function, supplied at construction and reused for every derived sequence,
decides which observers those channels feed.

Quick start:
    >>> from tracked import ObservableSequence, attach_all
    >>> events = []
    >>> seq = ObservableSequence(attach_all(events.append), 1, 2)
    >>> seq.append(3)
    3
    >>> [(e.kind, e.operation) for e in events]
    [('created', 'constructor'), ('modified', 'append')]
"""

from .channel import EventChannel, Observer
from .errors import InvalidWiring, TrackedError
from .models import ACCESSED, CREATED, MODIFIED, EventKind, SequenceEvent
from .sequence import ObservableSequence, observable_sequence
from .wiring import Wiring, attach_all, chain, no_wiring

__all__ = [
    "ACCESSED",
    "CREATED",
    "MODIFIED",
    "EventChannel",
    "EventKind",
    "InvalidWiring",
    "ObservableSequence",
    "Observer",
    "SequenceEvent",
    "TrackedError",
    "Wiring",
    "attach_all",
    "chain",
    "no_wiring",
    "observable_sequence",
]
