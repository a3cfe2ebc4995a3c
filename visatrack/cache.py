"""
visatrack.cache
===============

Small response cache owned by the calling layer.

:class:`TTLCache` keeps entries in a dict until their time‑to‑live runs
out; :class:`NullCache` exposes the same surface but never stores, which
is what tests (or a deployment with ``CACHE_ENABLED=false``) plug in.
Neither is a process‑wide singleton: the API hands one out through a
FastAPI dependency that can be overridden.
"""

from __future__ import annotations

import time
from typing import Any, Callable, Dict, Optional, Tuple


class TTLCache:
    """
    Dictionary‑backed cache with per‑entry expiry.

    Example
    -------
    >>> cache = TTLCache(default_ttl=60)
    >>> cache.set("dashboard:acme", {"total": 3})
    >>> cache.get("dashboard:acme")
    {'total': 3}
    """

    def __init__(self, default_ttl: float = 300.0, clock: Callable[[], float] = time.monotonic) -> None:
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: Dict[str, Tuple[Any, float]] = {}

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value or ``None`` if missing / expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() > expires_at:
            self._entries.pop(key, None)
            return None
        return value

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        ttl = self.default_ttl if ttl is None else ttl
        self._entries[key] = (value, self._clock() + ttl)

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def gc(self) -> int:
        """Drop expired entries; return how many were removed."""
        now = self._clock()
        stale = [k for k, (_, expires_at) in list(self._entries.items()) if now > expires_at]
        for key in stale:
            self._entries.pop(key, None)
        return len(stale)

    def __len__(self) -> int:
        return len(self._entries)


class NullCache:
    """Cache that remembers nothing."""

    def get(self, key: str) -> Optional[Any]:
        return None

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        pass

    def delete(self, key: str) -> None:
        pass

    def clear(self) -> None:
        pass

    def gc(self) -> int:
        return 0

    def __len__(self) -> int:
        return 0
