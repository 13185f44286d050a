"""Short-lived memoization of the user's open issues.

A single entry per key holding (value, fetched_at). The entry is served for
ttl seconds after the fetch, then the next read refreshes it wholesale. The
cache lives as long as the process; nothing is persisted.
"""

import logging
import time
from typing import Callable, Generic, TypeVar

T = TypeVar("T")

PROJECT_USER_ISSUES_KEY = "project.user.issues"
DEFAULT_TTL_SECONDS = 60.0

LOG = logging.getLogger("jiraflow.services.cache")


class IssueCache(Generic[T]):
    """Keyed entries with a fixed freshness window."""

    def __init__(
        self,
        ttl: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl
        self._clock = clock
        self._entries: dict[str, tuple[T, float]] = {}

    @property
    def ttl(self) -> float:
        return self._ttl

    def get_or_refresh(self, key: str, refresh: Callable[[], T]) -> T:
        """Return the fresh entry for key, calling refresh on miss or expiry."""
        now = self._clock()
        cached = self._entries.get(key)
        if cached is not None and (now - cached[1]) < self._ttl:
            LOG.debug("Cache hit for %s", key)
            return cached[0]
        LOG.debug("Cache %s for %s", "expired" if cached else "miss", key)
        value = refresh()
        self._entries[key] = (value, now)
        return value

    def clear(self) -> None:
        self._entries.clear()
