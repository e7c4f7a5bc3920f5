"""
Common utility functions for the job board.

Shared helpers used by several services and the web layer.
"""

import threading
from typing import Optional


class RequestSequencer:
    """
    Monotonic request tokens for fetches whose results may arrive out of order.

    Each fetch calls ``next_token()`` before it starts and ``is_current(token)``
    when its result arrives; a result whose token is no longer the latest is
    stale and must be discarded.

    Example:
        >>> seq = RequestSequencer()
        >>> first = seq.next_token()
        >>> second = seq.next_token()
        >>> seq.is_current(first), seq.is_current(second)
        (False, True)
    """

    def __init__(self) -> None:
        self._latest = 0
        self._lock = threading.Lock()

    @property
    def latest(self) -> int:
        return self._latest

    def next_token(self) -> int:
        with self._lock:
            self._latest += 1
            return self._latest

    def is_current(self, token: int) -> bool:
        return token == self._latest


def normalize_email(email: Optional[str]) -> str:
    """Lower-case and strip an email address for storage and lookup."""
    return (email or "").strip().lower()


def parse_bool(value: Optional[str]) -> bool:
    """Parse query-string booleans ("true", "1", "yes", "on"), case-insensitively."""
    return (value or "").strip().lower() in {"true", "1", "yes", "on"}
