"""
Response cache keyed by absolute URL.

One cache lives for one navigation unless the caller passes the same
instance to several. There is no eviction and no TTL; the owner drops
the object when done. All access happens on the event loop without a
suspension point between a read and the matching write, so concurrent
branches of a wave can share it; a race only costs a redundant fetch.
"""

from typing import Any, Optional

import structlog

logger = structlog.get_logger(__name__)


class Cache:
    """
    URL -> payload lookup.

    Usage:
        cache = Cache()
        cache.set("https://api.example.com/", payload)
        cache.get_or("https://api.example.com/")
    """

    def __init__(self):
        self._entries: dict[str, Any] = {}

    def get_or(self, url: str, default: Optional[Any] = None) -> Any:
        """Return the payload stored for url, or default."""
        return self._entries.get(url, default)

    def set(self, url: str, payload: Any) -> None:
        """Store payload for url (last write wins)."""
        self._entries[url] = payload
        logger.debug("cache_set", url=url)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, url: str) -> bool:
        return url in self._entries

    def __len__(self) -> int:
        return len(self._entries)
