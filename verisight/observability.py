# verisight/observability.py
"""
Observability helpers: a millisecond timer that reports to the debug log.
"""
from __future__ import annotations

import time
from dataclasses import dataclass

from loguru import logger


@dataclass
class Timer:
    """Context manager timing a block; logs '<name> took N ms' at debug level.

    The duration is recorded whether or not the block raised.
    """

    name: str
    start: float = 0.0
    duration_ms: float = 0.0
    failed: bool = False

    def __enter__(self) -> "Timer":
        self.start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.duration_ms = (time.perf_counter() - self.start) * 1000.0
        self.failed = exc_type is not None
        logger.debug(
            "{name} {outcome} in {ms:.2f}ms",
            name=self.name,
            outcome="failed" if self.failed else "completed",
            ms=self.duration_ms,
        )
