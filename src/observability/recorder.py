"""Recorder that writes observability records without blocking publishers.

The recorder is itself a channel observer: attach it through a wiring function
and every event of every sequence built with that wiring becomes an
`ObservabilityRecord`. Channels call observers synchronously, so the recorder
only converts and enqueues; a background task performs the (blocking) sink
writes in a worker thread.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any

from tracked.models import SequenceEvent

from .models import ObservabilityRecord, utc_now
from .sinks import ObservabilitySink

logger = logging.getLogger(__name__)


class ObservabilityRecorder:
    """Queues records and writes them in a background task."""

    def __init__(self, *, sink: ObservabilitySink, max_queue_size: int = 10000, stage: str = "sequence") -> None:
        """Create a recorder backed by a synchronous sink.

        Args:
            sink: Storage backend used by the background writer.
            max_queue_size: Bound for in-memory buffering; records may be dropped
                when full to avoid blocking the publishing sequence.
            stage: Label stored on every record produced by this recorder.
        """
        self._sink = sink
        self._stage = stage
        self._queue: asyncio.Queue[ObservabilityRecord | None] = asyncio.Queue(maxsize=max_queue_size)
        self._worker: asyncio.Task[None] | None = None
        self._closed = False

        # Degradation tracking: counts and time window.
        self._write_failures = 0
        self._first_failure_at: datetime | None = None
        self._last_failure_at: datetime | None = None

    @property
    def stage(self) -> str:
        return self._stage

    def __call__(self, event: SequenceEvent) -> None:
        self.record_event(event)

    def _ensure_started(self) -> bool:
        """Start the background writer if a loop is running; False when there is none."""
        if self._worker is not None:
            return True
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return False
        self._worker = asyncio.create_task(self._run_worker(), name="observability-writer")
        return True

    def record_event(self, event: SequenceEvent, *, stage: str | None = None) -> None:
        """Record an event (non-blocking when an event loop is running).

        Outside of a running loop the record is written inline.
        """
        if self._closed:
            return

        record = ObservabilityRecord.from_event(event, stage=stage or self._stage)

        if not self._ensure_started():
            self._write(record)
            return

        # In overload conditions we prefer dropping records over blocking publishers.
        try:
            self._queue.put_nowait(record)
        except asyncio.QueueFull:
            self._note_failure("queue full, dropped %s.%s", record.kind, record.operation)

    async def aclose(self) -> None:
        """Flush and close the recorder.

        Safe to call multiple times.
        """
        if self._closed:
            return
        self._closed = True
        if self._worker is not None:
            await self._queue.put(None)
            await self._worker
        await asyncio.to_thread(self._sink.close)

    def close(self) -> None:
        """Close a recorder that never started its background writer.

        Use `aclose()` when records were produced inside an event loop.
        """
        if self._closed:
            return
        if self._worker is not None:
            raise RuntimeError("recorder has a running writer; use `await recorder.aclose()`")
        self._closed = True
        self._sink.close()

    def _write(self, record: ObservabilityRecord) -> None:
        try:
            self._sink.write(record)
        except Exception as exc:  # noqa: BLE001 - observability must not break the sequence
            self._note_failure("sink write failed: %s", exc)

    async def _run_worker(self) -> None:
        """Background loop that drains the queue and writes to the sink."""
        while True:
            item = await self._queue.get()
            try:
                if item is None:
                    return
                await asyncio.to_thread(self._write, item)
            finally:
                self._queue.task_done()

    def _note_failure(self, message: str, *args: Any) -> None:
        now = utc_now()
        self._write_failures += 1
        self._first_failure_at = self._first_failure_at or now
        self._last_failure_at = now
        logger.warning("observability degraded: " + message, *args)

    def degraded_status(self) -> dict[str, Any]:
        """Return a minimal degraded-status snapshot."""
        return {
            "write_failures": self._write_failures,
            "first_failure_at": self._first_failure_at,
            "last_failure_at": self._last_failure_at,
        }
