"""Per-sequence event channel with full history replay.

Every `ObservableSequence` owns exactly one `EventChannel`. Publication is
synchronous: a top-level `publish` returns only after every attached observer
has been called. An event published from inside an observer is queued and
delivered once the current event has reached every observer, so all
observers see events in history order. Observers attached late first receive
every event published since the channel was created, then continue with live
events, in order.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable, Iterable

from .models import SequenceEvent

logger = logging.getLogger(__name__)

Observer = Callable[[SequenceEvent], None]


class EventChannel:
    """Broadcast stream of `SequenceEvent` records with replay for late observers."""

    def __init__(self, *, name: str = "") -> None:
        """Create an empty channel (no history, no observers)."""
        self._name = name
        self._history: list[SequenceEvent] = []
        self._observers: list[Observer] = []
        self._pending: deque[SequenceEvent] = deque()
        self._delivering = False

    @property
    def name(self) -> str:
        return self._name

    @property
    def history(self) -> tuple[SequenceEvent, ...]:
        """Every event published so far, oldest first."""
        return tuple(self._history)

    @property
    def observers(self) -> tuple[Observer, ...]:
        return tuple(self._observers)

    def __len__(self) -> int:
        return len(self._history)

    def __repr__(self) -> str:
        return f"EventChannel(name={self._name!r}, events={len(self._history)}, observers={len(self._observers)})"

    def attach(self, observer: Observer) -> Observer:
        """Replay the history to `observer`, then register it for live events.

        Events published while the replay is running (an observer reacting by
        touching the sequence again) are replayed as well before the observer
        goes live, so it always sees the channel's exact publication order.
        Events still queued for live delivery are left to that delivery.

        Returns the observer so it can be handed back to `detach`.
        """
        replayed = 0
        while replayed < len(self._history) - len(self._pending):
            self._deliver(observer, self._history[replayed])
            replayed += 1
        self._observers.append(observer)
        return observer

    def detach(self, observer: Observer) -> None:
        """Stop delivering events to `observer` (no-op if it is not attached)."""
        try:
            self._observers.remove(observer)
        except ValueError:
            pass

    def publish(self, event: SequenceEvent) -> None:
        """Record `event` and deliver it to every attached observer, in attach order.

        Called from inside an observer, the event is recorded immediately but
        only delivered after the event in flight has reached every observer.
        """
        self._history.append(event)
        self._pending.append(event)
        if self._delivering:
            return
        self._delivering = True
        try:
            while self._pending:
                current = self._pending.popleft()
                logger.debug(
                    "%s %s.%s -> %d observer(s)", self._name, current.kind, current.operation, len(self._observers)
                )
                for observer in list(self._observers):
                    self._deliver(observer, current)
        finally:
            self._delivering = False


    def publish_many(self, events: Iterable[SequenceEvent]) -> None:
        """Publish multiple events sequentially, preserving order."""
        for event in events:
            self.publish(event)

    def _deliver(self, observer: Observer, event: SequenceEvent) -> None:
        try:
            observer(event)
        except Exception:  # noqa: BLE001 - a failing observer must not break the publisher or its peers
            logger.exception("observer %r failed on %s.%s", observer, event.kind, event.operation)
