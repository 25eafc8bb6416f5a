"""Observability sinks (storage backends)."""

from __future__ import annotations

import json
import threading
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import duckdb

from .models import ObservabilityRecord


class ObservabilitySink(Protocol):
    """A synchronous sink for observability records.

    Sinks are intentionally synchronous because the recorder isolates blocking I/O
    in a background worker (thread) to keep publishers unblocked.
    """

    def write(self, record: ObservabilityRecord) -> None:
        """Persist a single record."""

    def close(self) -> None:
        """Close any underlying resources."""


class InMemoryObservabilitySink:
    """In-memory sink for tests and local debugging."""

    def __init__(self) -> None:
        """Create an empty in-memory sink."""
        self._lock = threading.Lock()
        self._records: list[ObservabilityRecord] = []

    def write(self, record: ObservabilityRecord) -> None:
        """Append a record to the in-memory list (thread-safe)."""
        with self._lock:
            self._records.append(record)

    def close(self) -> None:  # noqa: D401 - keep interface consistent
        """No-op."""

    def snapshot(self) -> Sequence[ObservabilityRecord]:
        """Return a point-in-time copy of all recorded entries."""
        with self._lock:
            return list(self._records)


def _to_json(value: object) -> str:
    return json.dumps(value, separators=(",", ":"), sort_keys=True, default=str)


@dataclass(frozen=True)
class DuckDBOptions:
    path: Path
    table: str = "sequence_events"


class DuckDBObservabilitySink:
    """DuckDB sink for durable local persistence of sequence events."""

    def __init__(self, *, path: str | Path, table: str = "sequence_events") -> None:
        """Create (or open) a DuckDB-backed sink at the given path."""
        if not table.isidentifier():
            raise ValueError(f"table must be a plain identifier. Got: {table!r}")
        self._opts = DuckDBOptions(path=Path(path), table=table)
        self._lock = threading.Lock()
        self._conn = duckdb.connect(str(self._opts.path))
        self._ensure_schema()

    @property
    def table(self) -> str:
        return self._opts.table

    def _ensure_schema(self) -> None:
        """Create the backing table if it does not exist yet."""
        create_sql = f"""
        create table if not exists {self._opts.table} (
          logged_at timestamptz not null,
          occurred_at timestamptz not null,
          kind varchar not null,
          operation varchar not null,
          stage varchar not null,
          sequence_id varchar not null,
          arguments_json varchar not null,
          snapshot_json varchar not null,
          length integer not null
        )
        """
        with self._lock:
            self._conn.execute(create_sql)

    def write(self, record: ObservabilityRecord) -> None:
        """Insert a single record into DuckDB.

        Arguments and snapshot are stored as stable JSON; values JSON cannot
        represent fall back to `str()`.
        """
        summary = record.summary
        insert_sql = f"""
        insert into {self._opts.table}
        (logged_at, occurred_at, kind, operation, stage, sequence_id, arguments_json, snapshot_json, length)
        values (?, ?, ?, ?, ?, ?, ?, ?, ?)
        """
        with self._lock:
            self._conn.execute(
                insert_sql,
                [
                    record.logged_at,
                    record.occurred_at,
                    record.kind,
                    record.operation,
                    record.stage,
                    record.sequence_id,
                    _to_json(summary.get("arguments", [])),
                    _to_json(summary.get("snapshot", [])),
                    int(summary.get("length", 0)),
                ],
            )

    def close(self) -> None:
        """Close the underlying DuckDB connection."""
        with self._lock:
            self._conn.close()
