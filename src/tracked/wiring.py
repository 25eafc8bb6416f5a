"""Wiring helpers.

A wiring function receives a freshly created `EventChannel` during sequence
construction and attaches whatever observers the caller wants. The same
function is handed to every sequence derived from the first one, so building
it once with these helpers routes a whole family of sequences to the same
sinks.
"""

from __future__ import annotations

from collections.abc import Callable

from .channel import EventChannel, Observer

Wiring = Callable[[EventChannel], None]


def no_wiring(channel: EventChannel) -> None:
    """Attach nothing; events stay available through `channel.history`."""


def attach_all(*observers: Observer) -> Wiring:
    """Build a wiring that attaches each observer, in order, to every channel it sees."""

    def _wire(channel: EventChannel) -> None:
        for observer in observers:
            channel.attach(observer)

    return _wire


def chain(*wirings: Wiring) -> Wiring:
    """Build a wiring that runs each of `wirings` in order."""
    for wiring in wirings:
        if not callable(wiring):
            raise TypeError(f"wiring must be callable, not {type(wiring).__name__}")

    def _wire(channel: EventChannel) -> None:
        for wiring in wirings:
            wiring(channel)

    return _wire
