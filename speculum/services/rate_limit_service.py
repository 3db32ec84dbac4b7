"""
Rate Limiting Service
In-memory fixed-window rate limiting for login and comment endpoints.

Single-process only; a multi-worker deployment needs a shared store.
"""

import time
from collections import defaultdict
from dataclasses import dataclass
from threading import Lock
from typing import Dict, Optional, Tuple

from speculum.utils.ip_utils import normalize_ip


@dataclass
class RateLimitEntry:
    """Request count inside the current window."""

    count: int
    window_start: float


class RateLimiter:
    """
    Thread-safe in-memory rate limiter.
    """

    def __init__(self):
        self._lock = Lock()
        self._requests: Dict[str, RateLimitEntry] = defaultdict(
            lambda: RateLimitEntry(0, 0)
        )
        self._operation_count = 0

    def is_allowed(
        self, key: str, max_requests: int, window_seconds: int
    ) -> Tuple[bool, Optional[int]]:
        """
        Count a request against ``key``.

        Returns:
            Tuple of (is_allowed, retry_after_seconds)
        """
        with self._lock:
            self._operation_count += 1

            # Lazy cleanup every 100 operations once the table grows
            if self._operation_count >= 100 and len(self._requests) > 1000:
                self._cleanup_old_entries_unlocked(max_age_seconds=7200)

            current_time = time.time()
            entry = self._requests[key]

            if entry.window_start < current_time - window_seconds:
                entry.count = 0
                entry.window_start = current_time

            if entry.count >= max_requests:
                retry_after = int(entry.window_start + window_seconds - current_time)
                return False, max(1, retry_after)

            entry.count += 1
            return True, None

    def reset(self) -> None:
        with self._lock:
            self._requests.clear()
            self._operation_count = 0

    def _cleanup_old_entries_unlocked(self, max_age_seconds: int = 3600):
        current_time = time.time()
        stale = [
            key
            for key, entry in self._requests.items()
            if current_time - entry.window_start > max_age_seconds
        ]
        for key in stale:
            del self._requests[key]
        self._operation_count = 0


rate_limiter = RateLimiter()


def check_login_rate_limit(ip: str) -> Tuple[bool, Optional[int]]:
    """Admin login: 5 attempts per IP per 15 minutes."""
    return rate_limiter.is_allowed(
        key=f"login:{normalize_ip(ip)}", max_requests=5, window_seconds=15 * 60
    )


def check_comment_rate_limit(ip: str) -> Tuple[bool, Optional[int]]:
    """Comments: 10 per IP per 10 minutes."""
    return rate_limiter.is_allowed(
        key=f"comment:{normalize_ip(ip)}", max_requests=10, window_seconds=10 * 60
    )
