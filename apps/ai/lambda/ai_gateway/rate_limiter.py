"""Fixed-window request limiter keyed by client identity.

Each key gets ``max_requests`` calls per ``window_seconds``. The window starts
at a key's first request and is replaced wholesale once it has passed, so a
client can burst up to twice the limit across a window edge.

State is process-local. Instances behind a load balancer do not share counts.
"""

import logging
import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass

from .constants import (
    RATE_LIMIT_MAX_REQUESTS,
    RATE_LIMIT_MAX_TRACKED_KEYS,
    RATE_LIMIT_WINDOW_SECONDS,
)

logger = logging.getLogger(__name__)


@dataclass
class RateLimitEntry:
    count: int
    window_reset_at: float


class FixedWindowRateLimiter:
    def __init__(
        self,
        max_requests: int = RATE_LIMIT_MAX_REQUESTS,
        window_seconds: float = RATE_LIMIT_WINDOW_SECONDS,
        max_tracked_keys: int = RATE_LIMIT_MAX_TRACKED_KEYS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._max_requests = max_requests
        self._window_seconds = window_seconds
        self._max_tracked_keys = max_tracked_keys
        self._clock = clock
        self._entries: OrderedDict[str, RateLimitEntry] = OrderedDict()
        self._lock = threading.Lock()

    def allow(self, client_key: str) -> bool:
        """Count one request for ``client_key`` and report whether it may proceed."""
        with self._lock:
            now = self._clock()
            entry = self._entries.get(client_key)

            if entry is None or now > entry.window_reset_at:
                self._entries[client_key] = RateLimitEntry(
                    count=1, window_reset_at=now + self._window_seconds
                )
                self._entries.move_to_end(client_key)
                self._evict_overflow()
                return True

            self._entries.move_to_end(client_key)
            if entry.count < self._max_requests:
                entry.count += 1
                return True

        logger.warning("Rate limit exceeded", extra={"client_key": client_key})
        return False

    def get_entry(self, client_key: str) -> RateLimitEntry | None:
        with self._lock:
            entry = self._entries.get(client_key)
            if entry is None:
                return None
            return RateLimitEntry(count=entry.count, window_reset_at=entry.window_reset_at)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _evict_overflow(self) -> None:
        # Caller holds the lock.
        while len(self._entries) > self._max_tracked_keys:
            evicted_key, _ = self._entries.popitem(last=False)
            logger.debug("Evicted rate limit entry", extra={"client_key": evicted_key})
