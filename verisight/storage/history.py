"""
Bounded scan history: the last ten results, newest first.

History is an explicit value (a tuple). `record` never mutates its input; it
returns the new history for the caller to keep as current state. Every write
replaces the whole persisted blob, so overlapping writers resolve as
last-write-wins.
"""

from __future__ import annotations

from typing import Tuple

from loguru import logger

from verisight.analysis.base import AnalysisResult
from verisight.formats.result_schema import ResultParseError, dumps_results, loads_results
from verisight.storage.backends import KeyValueStore

History = Tuple[AnalysisResult, ...]

HISTORY_KEY = "verisight_history"
HISTORY_LIMIT = 10


def push(history: History, result: AnalysisResult, limit: int = HISTORY_LIMIT) -> History:
    """Prepend `result` and keep the first `limit` entries."""
    return ((result,) + tuple(history))[:limit]


class HistoryStore:
    """Loads and persists History through a KeyValueStore."""

    def __init__(self, backend: KeyValueStore, *, key: str = HISTORY_KEY, limit: int = HISTORY_LIMIT):
        if limit < 1:
            raise ValueError("History limit must be at least 1")
        self.backend = backend
        self.key = key
        self.limit = limit

    def load(self) -> History:
        """Read the persisted history; missing or corrupt data yields ()."""
        try:
            blob = self.backend.get(self.key)
        except OSError as e:
            logger.error("Failed to read history {key}: {error}", key=self.key, error=e)
            return ()
        except UnicodeDecodeError as e:
            logger.warning("Discarding undecodable history {key}: {error}", key=self.key, error=e)
            return ()
        if blob is None:
            return ()
        try:
            history = loads_results(blob)
        except ResultParseError as e:
            logger.warning("Discarding corrupt history {key}: {error}", key=self.key, error=e)
            return ()
        # a longer blob can only come from an outside writer
        return history[: self.limit]

    def record(self, result: AnalysisResult, history: History) -> History:
        """Prepend `result`, truncate, persist, and return the new history."""
        updated = push(history, result, self.limit)
        self.backend.set(self.key, dumps_results(updated))
        logger.debug("History now holds {n} result(s)", n=len(updated))
        return updated

    def clear(self) -> History:
        """Drop the persisted history and return the empty history."""
        self.backend.delete(self.key)
        return ()
