# ABOUTME: Per-domain site info cache with explicit TTL and invalidation
# ABOUTME: Passed into the MediaWiki client rather than living as module-level state

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from parsoid_media.utils.logging import get_logger


@dataclass
class _Entry:
    value: dict[str, Any]
    stored_at: float


class SiteInfoCache:
    """Site info keyed by wiki domain.

    Entries expire ``ttl_seconds`` after they were stored. A TTL of 0 disables
    caching altogether.
    """

    def __init__(self, ttl_seconds: float = 3600.0, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, _Entry] = {}
        self.logger = get_logger(__name__)

    def get(self, domain: str) -> dict[str, Any] | None:
        entry = self._entries.get(domain)
        if entry is None:
            return None
        if self._clock() - entry.stored_at >= self.ttl_seconds:
            self.logger.debug("Site info expired", domain=domain)
            del self._entries[domain]
            return None
        return entry.value

    def set(self, domain: str, value: dict[str, Any]) -> None:
        if self.ttl_seconds <= 0:
            return
        self._entries[domain] = _Entry(value=value, stored_at=self._clock())

    def invalidate(self, domain: str | None = None) -> None:
        """Drop one domain's entry, or every entry when no domain is given."""
        if domain is None:
            self._entries.clear()
        else:
            self._entries.pop(domain, None)

    def __contains__(self, domain: str) -> bool:
        return self.get(domain) is not None

    def __len__(self) -> int:
        return len(self._entries)
