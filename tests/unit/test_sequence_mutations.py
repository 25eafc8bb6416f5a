from __future__ import annotations

from collections.abc import MutableSequence

import pytest

from tracked import ObservableSequence


def _last(seq: ObservableSequence):
    return seq.channel.history[-1]


def test_append_returns_length_and_reports_items(collector) -> None:
    seq = ObservableSequence(collector, 1, 2)

    assert seq.append("a", "b") == 4

    assert seq.snapshot() == (1, 2, "a", "b")
    assert collector.operations() == [("created", "constructor"), ("modified", "append")]
    assert _last(seq).arguments == ("a", "b")
    assert _last(seq).snapshot == (1, 2, "a", "b")


def test_pop_and_shift(collector) -> None:
    seq = ObservableSequence(collector, 1, 2, 3)

    assert seq.pop() == 3
    assert seq.snapshot() == (1, 2)
    assert _last(seq).operation == "pop"
    assert _last(seq).arguments == ()

    assert seq.shift() == 1
    assert seq.snapshot() == (2,)
    assert _last(seq).operation == "shift"
    assert _last(seq).snapshot == (2,)


def test_shift_on_example_from_three(collector) -> None:
    seq = ObservableSequence(collector, 1, 2, 3)
    assert seq.shift() == 1
    assert seq.snapshot() == (2, 3)
    assert [e.kind for e in seq.channel.history] == ["created", "modified"]


def test_pop_at_index_reports_normalised_position(collector) -> None:
    seq = ObservableSequence(collector, "a", "b", "c", "d")

    assert seq.pop(0) == "a"
    assert seq.snapshot() == ("b", "c", "d")
    assert _last(seq).operation == "pop"
    assert _last(seq).arguments == (0,)

    assert seq.pop(-2) == "c"
    assert seq.snapshot() == ("b", "d")
    assert _last(seq).arguments == (1,)

    with pytest.raises(IndexError):
        seq.pop(5)
    assert len(seq.channel) == 3


def test_registered_as_mutable_sequence(collector) -> None:
    seq = ObservableSequence(collector, 1, 2, 3)

    assert isinstance(seq, MutableSequence)
    assert seq.index(2) == 1
    assert seq.pop(0) == 1
    assert seq.snapshot() == (2, 3)


@pytest.mark.parametrize("method", ["pop", "shift"])
def test_removing_from_empty_raises_without_event(collector, method: str) -> None:
    seq = ObservableSequence(collector)
    with pytest.raises(IndexError):
        getattr(seq, method)()
    assert len(seq.channel) == 1


def test_unshift_keeps_argument_order(collector) -> None:
    seq = ObservableSequence(collector, 2, 3)
    assert seq.unshift(0, 1) == 4
    assert seq.snapshot() == (0, 1, 2, 3)
    assert _last(seq).operation == "unshift"
    assert _last(seq).arguments == (0, 1)


def test_splice_returns_observable_removed_segment(collector) -> None:
    seq = ObservableSequence(collector, 1, 2, 3, 4)

    removed = seq.splice(1, 2, 5, 6)

    assert seq.snapshot() == (1, 5, 6, 4)
    assert isinstance(removed, ObservableSequence)
    assert removed.snapshot() == (2, 3)
    assert removed.wiring is seq.wiring

    source_events = seq.channel.history
    assert [(e.kind, e.operation) for e in source_events] == [("created", "constructor"), ("modified", "splice")]
    assert source_events[-1].arguments == (1, 2, 5, 6)
    assert source_events[-1].snapshot == (1, 5, 6, 4)

    removed_events = removed.channel.history
    assert [(e.kind, e.operation) for e in removed_events] == [("created", "constructor")]
    assert removed_events[0].snapshot == (2, 3)
    assert len(collector.channels) == 2


def test_splice_defaults_and_clamping(collector) -> None:
    seq = ObservableSequence(collector, 1, 2, 3, 4)

    assert seq.splice(1).snapshot() == ()
    assert seq.snapshot() == (1, 2, 3, 4)

    assert seq.splice(-2, 10).snapshot() == (3, 4)
    assert seq.snapshot() == (1, 2)

    assert seq.splice(99, 1, "x").snapshot() == ()
    assert seq.snapshot() == (1, 2, "x")

    assert seq.splice(0, -3, "y").snapshot() == ()
    assert seq.snapshot() == ("y", 1, 2, "x")


def test_sort_in_place(collector) -> None:
    seq = ObservableSequence(collector, 3, 1, 2)

    assert seq.sort() is seq
    assert seq.snapshot() == (1, 2, 3)
    assert _last(seq).arguments == (False,)

    seq.sort(key=lambda n: -n)
    assert seq.snapshot() == (3, 2, 1)

    seq.sort(reverse=True)
    assert _last(seq).arguments == (True,)
    assert _last(seq).snapshot == (3, 2, 1)


def test_fill_uses_relative_bounds(collector) -> None:
    seq = ObservableSequence(collector, 1, 2, 3, 4, 5)

    assert seq.fill(0, 1, 3) is seq
    assert seq.snapshot() == (1, 0, 0, 4, 5)
    assert _last(seq).arguments == (0, 1, 3)

    seq.fill(9, -2)
    assert seq.snapshot() == (1, 0, 0, 9, 9)

    seq.fill(7)
    assert seq.snapshot() == (7, 7, 7, 7, 7)


def test_copy_within(collector) -> None:
    seq = ObservableSequence(collector, 1, 2, 3, 4, 5)
    assert seq.copy_within(0, 3) is seq
    assert seq.snapshot() == (4, 5, 3, 4, 5)
    assert _last(seq).operation == "copy_within"
    assert _last(seq).arguments == (0, 3, None)

    seq = ObservableSequence(collector, 1, 2, 3, 4, 5)
    seq.copy_within(-2, 0, 3)
    assert seq.snapshot() == (1, 2, 3, 1, 2)

    seq = ObservableSequence(collector, 1, 2, 3, 4, 5)
    seq.copy_within(1, 0)
    assert seq.snapshot() == (1, 1, 2, 3, 4)


def test_reverse_mutates_and_returns_same_instance(collector) -> None:
    seq = ObservableSequence(collector, 1, 2, 3)

    result = seq.reverse()

    assert result is seq
    assert seq.snapshot() == (3, 2, 1)
    assert _last(seq).operation == "reverse"
    assert _last(seq).snapshot == (3, 2, 1)


def test_list_style_mutators(collector) -> None:
    seq = ObservableSequence(collector, 1, 2)

    seq.insert(1, 9)
    assert seq.snapshot() == (1, 9, 2)
    assert _last(seq).arguments == (1, 9)

    assert seq.extend(x for x in (3, 4)) == 5
    assert _last(seq).operation == "extend"
    assert _last(seq).arguments == (3, 4)

    seq.remove(9)
    assert seq.snapshot() == (1, 2, 3, 4)
    with pytest.raises(ValueError):
        seq.remove(42)
    assert _last(seq).operation == "remove"

    seq += [5]
    assert seq.snapshot() == (1, 2, 3, 4, 5)

    seq.clear()
    assert seq.snapshot() == ()
    assert _last(seq).operation == "clear"
    assert _last(seq).snapshot == ()


def test_last_snapshot_always_matches_elements(collector) -> None:
    seq = ObservableSequence(collector, 5, 3, 8)
    steps = [
        lambda s: s.append(1),
        lambda s: s.unshift(0),
        lambda s: s.sort(),
        lambda s: s.reverse(),
        lambda s: s.fill(2, 0, 1),
        lambda s: s.copy_within(0, 2),
        lambda s: s.splice(1, 1, 7, 7),
        lambda s: s.pop(),
        lambda s: s.shift(),
        lambda s: s.__setitem__(6, "far"),
        lambda s: s.__getitem__(0),
        lambda s: s.__delitem__(-1),
        lambda s: s.includes(7),
        lambda s: s.join("-"),
    ]
    for step in steps:
        step(seq)
        assert seq.channel.history[-1].snapshot == seq.snapshot()
