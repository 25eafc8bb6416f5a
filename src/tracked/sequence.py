"""Observable sequence: a list-like container that reports every read and write.

Each public operation:
- applies the change (or computes the answer) on the private backing list,
- builds a `SequenceEvent` describing the call and the resulting elements,
- publishes it on the instance's own `EventChannel`,
- returns the conventional result.

Operations that produce a new collection (slice, map, filter, flat, flat_map,
concat, and the removed part of a splice) return a new `ObservableSequence`
built with the same wiring function, so derived data reaches the same sinks.

Failing operations (bad index, raising callback) publish nothing.
"""

from __future__ import annotations

import functools
import logging
import operator
from collections.abc import Callable, Iterable, Iterator, MutableSequence
from typing import Any, Generic, TypeVar, overload
from uuid import uuid4

from .channel import EventChannel
from .errors import InvalidWiring
from .models import ACCESSED, CREATED, MODIFIED, EventKind, SequenceEvent
from .wiring import Wiring

logger = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")

_MISSING: Any = object()


def _relative_index(value: int | None, length: int, default: int) -> int:
    """Resolve a start/end argument the way JavaScript array methods do.

    Negative values count from the end; results are clamped to [0, length].
    """
    if value is None:
        return default
    value = operator.index(value)
    if value < 0:
        return max(length + value, 0)
    return min(value, length)


def _join_text(value: Any) -> str:
    return "" if value is None else str(value)


def _locale_text(value: Any) -> str:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return format(value, "n")
    return _join_text(value)


class ObservableSequence(Generic[T]):
    """Ordered, indexable container that publishes an event for every operation.

    Args:
        wiring: Called once with this instance's channel, right after the
            `created` event is published. Reused for every derived sequence.
        *items: Initial elements (copied).

    Raises:
        InvalidWiring: `wiring` is not callable. No event is published.
    """

    __slots__ = ("_channel", "_elements", "_id", "_wiring")

    def __init__(self, wiring: Wiring, *items: T) -> None:
        self._elements: list[T] = list(items)
        if not callable(wiring):
            raise InvalidWiring(wiring)

        self._wiring = wiring
        self._id = uuid4().hex
        self._channel = EventChannel(name=f"sequence-{self._id[:8]}")
        logger.debug("created sequence %s with %d element(s)", self._id, len(self._elements))

        self._emit(CREATED, "constructor")
        wiring(self._channel)

    @classmethod
    def from_iterable(cls, wiring: Wiring, items: Iterable[T]) -> ObservableSequence[T]:
        """Build a sequence from any iterable instead of positional items."""
        return cls(wiring, *items)

    # ----- identity / uninstrumented inspection -----

    @property
    def id(self) -> str:
        return self._id

    @property
    def channel(self) -> EventChannel:
        """The channel this instance publishes on (owned exclusively by it)."""
        return self._channel

    @property
    def wiring(self) -> Wiring:
        return self._wiring

    def snapshot(self) -> tuple[T, ...]:
        """Copy of the current elements. Publishes nothing."""
        return tuple(self._elements)

    def __len__(self) -> int:
        return len(self._elements)

    def __iter__(self) -> Iterator[T]:
        return iter(self._elements)

    def __reversed__(self) -> Iterator[T]:
        return reversed(self._elements)

    def __contains__(self, value: object) -> bool:
        return value in self._elements

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ObservableSequence):
            return self._elements == other._elements
        if isinstance(other, (list, tuple)):
            return self._elements == list(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._elements!r})"

    # ----- plumbing -----

    def _emit(
        self,
        kind: EventKind,
        operation: str,
        arguments: Iterable[Any] = (),
        *,
        snapshot: tuple[Any, ...] | None = None,
    ) -> None:
        event = SequenceEvent(
            kind=kind,
            operation=operation,
            arguments=tuple(arguments),
            snapshot=tuple(self._elements) if snapshot is None else snapshot,
            sequence_id=self._id,
        )
        self._channel.publish(event)

    def _derive(self, elements: Iterable[U], operation: str) -> ObservableSequence[U]:
        result: ObservableSequence[U] = type(self)(self._wiring, *elements)  # type: ignore[arg-type]
        logger.debug("sequence %s derived %s via %s", self._id, result.id, operation)
        return result

    @staticmethod
    def _int_key(key: Any) -> int:
        if isinstance(key, bool):
            raise TypeError("sequence indices must be integers or slices, not bool")
        try:
            return operator.index(key)
        except TypeError:
            raise TypeError(f"sequence indices must be integers or slices, not {type(key).__name__}") from None

    def _normalise_index(self, key: Any) -> int:
        """Turn an int-like key into a non-negative in-range index or raise IndexError."""
        index = self._int_key(key)
        if index < 0:
            index += len(self._elements)
        if not 0 <= index < len(self._elements):
            raise IndexError("sequence index out of range")
        return index

    # ----- bracket access -----

    @overload
    def __getitem__(self, key: int) -> T: ...

    @overload
    def __getitem__(self, key: slice) -> ObservableSequence[T]: ...

    def __getitem__(self, key: int | slice) -> T | ObservableSequence[T]:
        if isinstance(key, slice):
            if key.step is None:
                return self.slice(key.start, key.stop)
            result = self._derive(self._elements[key], "slice")
            self._emit(ACCESSED, "slice", (key.start, key.stop, key.step), snapshot=result.snapshot())
            return result

        index = self._normalise_index(key)
        value = self._elements[index]
        self._emit(ACCESSED, "index", (index,))
        return value

    def __setitem__(self, key: int | slice, value: Any) -> None:
        if isinstance(key, slice):
            values = list(value)
            self._elements[key] = values
            self._emit(MODIFIED, "index", (key, tuple(values)))
            return

        index = self._int_key(key)
        length = len(self._elements)
        if index < 0:
            index = self._normalise_index(index)
        elif index >= length:
            # Writing past the end grows the sequence; the gap holds None.
            self._elements.extend([None] * (index - length + 1))  # type: ignore[list-item]
        self._elements[index] = value
        self._emit(MODIFIED, "index", (index, value))

    def __delitem__(self, key: int | slice) -> None:
        if isinstance(key, slice):
            del self._elements[key]
            self._emit(MODIFIED, "delete", (key,))
            return
        index = self._normalise_index(key)
        del self._elements[index]
        self._emit(MODIFIED, "delete", (index,))

    def __add__(self, other: Any) -> ObservableSequence[Any]:
        if not isinstance(other, (list, tuple, ObservableSequence)):
            return NotImplemented
        return self.concat(other)

    def __iadd__(self, other: Iterable[T]) -> ObservableSequence[T]:
        self.extend(other)
        return self

    # ----- mutating operations -----

    def append(self, *items: T) -> int:
        """Add `items` to the end; returns the new length."""
        self._elements.extend(items)
        self._emit(MODIFIED, "append", items)
        return len(self._elements)

    def pop(self, index: int = _MISSING) -> T:
        """Remove and return the element at `index` (default: the last one).

        The event carries the normalised index only when one was passed.
        """
        if not self._elements:
            raise IndexError("pop from empty sequence")
        if index is _MISSING:
            item = self._elements.pop()
            self._emit(MODIFIED, "pop")
            return item
        position = self._normalise_index(index)
        item = self._elements.pop(position)
        self._emit(MODIFIED, "pop", (position,))
        return item

    def shift(self) -> T:
        """Remove and return the first element."""
        if not self._elements:
            raise IndexError("shift from empty sequence")
        item = self._elements.pop(0)
        self._emit(MODIFIED, "shift")
        return item

    def unshift(self, *items: T) -> int:
        """Insert `items` at the front (keeping their order); returns the new length."""
        self._elements[0:0] = items
        self._emit(MODIFIED, "unshift", items)
        return len(self._elements)

    def splice(self, start: int, delete_count: int = 0, *items: T) -> ObservableSequence[T]:
        """Remove `delete_count` elements at `start`, insert `items` there.

        The removed elements come back as a new sequence sharing this one's
        wiring. The event's arguments are the call's inputs, never the
        removed elements.
        """
        start_index = _relative_index(start, len(self._elements), 0)
        count = max(0, min(operator.index(delete_count), len(self._elements) - start_index))
        removed = self._elements[start_index : start_index + count]
        self._elements[start_index : start_index + count] = items
        self._emit(MODIFIED, "splice", (start, delete_count, *items))
        return self._derive(removed, "splice")

    def sort(self, key: Callable[[T], Any] | None = None, *, reverse: bool = False) -> ObservableSequence[T]:
        """Sort in place; returns self."""
        self._elements.sort(key=key, reverse=reverse)
        self._emit(MODIFIED, "sort", (reverse,))
        return self

    def fill(self, value: T, start: int | None = None, end: int | None = None) -> ObservableSequence[T]:
        """Overwrite positions [start, end) with `value`; the length never changes."""
        length = len(self._elements)
        lo = _relative_index(start, length, 0)
        hi = _relative_index(end, length, length)
        for i in range(lo, hi):
            self._elements[i] = value
        self._emit(MODIFIED, "fill", (value, start, end))
        return self

    def copy_within(self, target: int, start: int = 0, end: int | None = None) -> ObservableSequence[T]:
        """Copy the block [start, end) over the positions beginning at `target`."""
        length = len(self._elements)
        to = _relative_index(target, length, 0)
        lo = _relative_index(start, length, 0)
        hi = _relative_index(end, length, length)
        count = min(hi - lo, length - to)
        if count > 0:
            self._elements[to : to + count] = self._elements[lo : lo + count]
        self._emit(MODIFIED, "copy_within", (target, start, end))
        return self

    def reverse(self) -> ObservableSequence[T]:
        """Reverse in place and return the same instance."""
        self._elements.reverse()
        self._emit(MODIFIED, "reverse")
        return self

    def insert(self, index: int, value: T) -> None:
        self._elements.insert(index, value)
        self._emit(MODIFIED, "insert", (index, value))

    def extend(self, values: Iterable[T]) -> int:
        values = list(values)
        self._elements.extend(values)
        self._emit(MODIFIED, "extend", values)
        return len(self._elements)

    def remove(self, value: T) -> None:
        """Remove the first occurrence of `value` (ValueError if absent)."""
        self._elements.remove(value)
        self._emit(MODIFIED, "remove", (value,))

    def clear(self) -> None:
        self._elements.clear()
        self._emit(MODIFIED, "clear")

    # ----- derived collections -----

    def slice(self, start: int | None = None, end: int | None = None) -> ObservableSequence[T]:
        """Copy of [start, end) as a new sequence; the source is untouched."""
        result = self._derive(self._elements[start:end], "slice")
        self._emit(ACCESSED, "slice", (start, end), snapshot=result.snapshot())
        return result

    def concat(self, *others: Any) -> ObservableSequence[Any]:
        """New sequence of these elements followed by `others`.

        List, tuple and sequence arguments are spread one level; anything else
        (strings included) is appended as a single element. Reported as a
        `modified` event even though the source does not change.
        """
        combined: list[Any] = list(self._elements)
        for other in others:
            if isinstance(other, ObservableSequence):
                combined.extend(other._elements)
            elif isinstance(other, (list, tuple)):
                combined.extend(other)
            else:
                combined.append(other)
        result = self._derive(combined, "concat")
        self._emit(MODIFIED, "concat", others, snapshot=result.snapshot())
        return result

    def map(self, fn: Callable[[T], U]) -> ObservableSequence[U]:
        result = self._derive([fn(item) for item in self._elements], "map")
        self._emit(ACCESSED, "map", snapshot=result.snapshot())
        return result

    def filter(self, fn: Callable[[T], Any]) -> ObservableSequence[T]:
        result = self._derive([item for item in self._elements if fn(item)], "filter")
        self._emit(ACCESSED, "filter", snapshot=result.snapshot())
        return result

    def flat(self, depth: int = 1) -> ObservableSequence[Any]:
        """Flatten nested lists, tuples and sequences up to `depth` levels."""
        result = self._derive(_flatten(self._elements, depth), "flat")
        self._emit(ACCESSED, "flat", (depth,), snapshot=result.snapshot())
        return result

    def flat_map(self, fn: Callable[[T], Any]) -> ObservableSequence[Any]:
        """Map each element, then flatten the results one level."""
        result = self._derive(_flatten([fn(item) for item in self._elements], 1), "flat_map")
        self._emit(ACCESSED, "flat_map", snapshot=result.snapshot())
        return result

    # ----- queries -----

    def for_each(self, fn: Callable[[T], Any]) -> None:
        for item in list(self._elements):
            fn(item)
        self._emit(ACCESSED, "for_each")

    def reduce(self, fn: Callable[[Any, T], Any], initial: Any = _MISSING) -> Any:
        """Left fold; without `initial` an empty sequence raises TypeError."""
        if initial is _MISSING:
            result = functools.reduce(fn, self._elements)
            self._emit(ACCESSED, "reduce")
        else:
            result = functools.reduce(fn, self._elements, initial)
            self._emit(ACCESSED, "reduce", (initial,))
        return result

    def reduce_right(self, fn: Callable[[Any, T], Any], initial: Any = _MISSING) -> Any:
        """Right fold (last element first)."""
        items = self._elements[::-1]
        if initial is _MISSING:
            result = functools.reduce(fn, items)
            self._emit(ACCESSED, "reduce_right")
        else:
            result = functools.reduce(fn, items, initial)
            self._emit(ACCESSED, "reduce_right", (initial,))
        return result

    def find(self, fn: Callable[[T], Any]) -> T | None:
        found = next((item for item in self._elements if fn(item)), None)
        self._emit(ACCESSED, "find")
        return found

    def find_index(self, fn: Callable[[T], Any]) -> int:
        found = next((i for i, item in enumerate(self._elements) if fn(item)), -1)
        self._emit(ACCESSED, "find_index")
        return found

    def index_of(self, value: Any, from_index: int | None = None) -> int:
        """Position of the first `value` at or after `from_index`, or -1."""
        found = self._search(value, from_index)
        self._emit(ACCESSED, "index_of", (value, from_index))
        return found

    def index(self, value: Any, start: int = 0, stop: int | None = None) -> int:
        """List-style lookup: like `index_of`, but a missing `value` raises ValueError.

        Reported as `index_of` with `(value, start, stop)`; a failed lookup
        publishes nothing.
        """
        if stop is None:
            found = self._elements.index(value, start)
        else:
            found = self._elements.index(value, start, stop)
        self._emit(ACCESSED, "index_of", (value, start, stop))
        return found

    def last_index_of(self, value: Any, from_index: int | None = None) -> int:
        """Position of the last `value` at or before `from_index`, or -1."""
        length = len(self._elements)
        if from_index is None:
            start = length - 1
        elif from_index < 0:
            start = length + from_index
        else:
            start = min(from_index, length - 1)
        found = next((i for i in range(start, -1, -1) if self._elements[i] == value), -1)
        self._emit(ACCESSED, "last_index_of", (value, from_index))
        return found

    def includes(self, value: Any, from_index: int | None = None) -> bool:
        found = self._search(value, from_index) != -1
        self._emit(ACCESSED, "includes", (value, from_index))
        return found

    def count(self, value: Any) -> int:
        found = self._elements.count(value)
        self._emit(ACCESSED, "count", (value,))
        return found

    def every(self, fn: Callable[[T], Any]) -> bool:
        result = all(fn(item) for item in self._elements)
        self._emit(ACCESSED, "every")
        return result

    def some(self, fn: Callable[[T], Any]) -> bool:
        result = any(fn(item) for item in self._elements)
        self._emit(ACCESSED, "some")
        return result

    def join(self, separator: str = ",") -> str:
        """Render elements with `str()` (None as empty) joined by `separator`."""
        text = separator.join(_join_text(item) for item in self._elements)
        self._emit(ACCESSED, "join", (separator,))
        return text

    def to_string(self) -> str:
        text = ",".join(_join_text(item) for item in self._elements)
        self._emit(ACCESSED, "to_string")
        return text

    def to_locale_string(self) -> str:
        """Like `to_string`, with numbers grouped per the current locale."""
        text = ",".join(_locale_text(item) for item in self._elements)
        self._emit(ACCESSED, "to_locale_string")
        return text

    def _search(self, value: Any, from_index: int | None) -> int:
        start = _relative_index(from_index, len(self._elements), 0)
        for i in range(start, len(self._elements)):
            item = self._elements[i]
            if item is value or item == value:
                return i
        return -1


MutableSequence.register(ObservableSequence)


def _flatten(items: Iterable[Any], depth: int) -> list[Any]:
    out: list[Any] = []
    for item in items:
        if depth > 0 and isinstance(item, ObservableSequence):
            out.extend(_flatten(item._elements, depth - 1))
        elif depth > 0 and isinstance(item, (list, tuple)):
            out.extend(_flatten(item, depth - 1))
        else:
            out.append(item)
    return out


def observable_sequence(wiring: Wiring, items: Iterable[T] = ()) -> ObservableSequence[T]:
    """Build an `ObservableSequence` over `items` routed through `wiring`."""
    return ObservableSequence.from_iterable(wiring, items)
