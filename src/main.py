"""Demo entrypoint wiring observers to an observable sequence.

This module intentionally contains a small, end-to-end "smoke test" that:

- Loads configuration from environment.
- Builds a recorder (DuckDB when `OBSERVABILITY_DB_PATH` is set, in-memory otherwise).
- Wires a pretty printer and the recorder into every sequence it creates.
- Removes all 4s from a sequence through `filter`, then mutates the result.

It is **not** intended as library API; it is a convenient manual harness for
watching the event stream.
"""

from __future__ import annotations

import asyncio
import logging

from config import Config, load_config
from observability import (
    DuckDBObservabilitySink,
    InMemoryObservabilitySink,
    ObservabilityRecorder,
    ObservabilitySink,
    PrettyPrinter,
)
from tracked import ObservableSequence, attach_all, observable_sequence

logger = logging.getLogger(__name__)

DEMO_ITEMS = [1, 2, 3, 4, 5, 4, 4, 4, 6, 7, 8, 9, 10]


def remove_all(item: object, sequence: ObservableSequence) -> ObservableSequence:
    """Return a derived sequence without any occurrence of `item`."""
    return sequence.filter(lambda value: value != item)


def _build_sink(cfg: Config) -> ObservabilitySink:
    if cfg.observability.db_path:
        return DuckDBObservabilitySink(path=cfg.observability.db_path, table=cfg.observability.table)
    return InMemoryObservabilitySink()


async def run_demo(cfg: Config) -> None:
    """Run the demo sequence operations with printing and recording attached."""
    recorder = ObservabilityRecorder(
        sink=_build_sink(cfg),
        max_queue_size=cfg.observability.max_queue_size,
        stage=cfg.observability.stage,
    )
    wiring = attach_all(PrettyPrinter(color=cfg.demo.color), recorder)
    try:
        numbers = observable_sequence(wiring, DEMO_ITEMS)
        without_fours = remove_all(4, numbers)
        without_fours.append(11, 12)
        without_fours[0] = 0
        removed = without_fours.splice(1, 2)
        without_fours.reverse()
        logger.info(
            "demo finished: %d element(s) left, %d removed by splice",
            len(without_fours),
            len(removed),
        )
    finally:
        await recorder.aclose()
        logger.info("recorder closed: %s", recorder.degraded_status())


def main() -> None:
    """CLI entrypoint for running the demo with `python src/main.py`."""
    cfg = load_config()
    logging.basicConfig(level=cfg.demo.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    asyncio.run(run_demo(cfg))


if __name__ == "__main__":
    main()
