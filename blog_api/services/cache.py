"""Time-windowed cache for normalized post collections."""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from blog_api.models.post import Post

logger = logging.getLogger(__name__)

# Five minutes
DEFAULT_TTL = 300.0


@dataclass(frozen=True)
class CacheEntry:
    posts: list[Post]
    timestamp: float


class PostsCache:
    """In-memory post collection cache keyed by canonical fetch options.

    An entry is served only while ``now - timestamp < ttl``. Expired entries
    behave exactly like missing ones: they are dropped and recomputed, never
    extended. Concurrent misses for the same key share one computation.

    Usage::

        cache = PostsCache(ttl=300)
        posts = await cache.get_or_compute(key, load_posts)
    """

    def __init__(
        self, ttl: float = DEFAULT_TTL, clock: Callable[[], float] = time.monotonic
    ) -> None:
        self._ttl = ttl
        self._clock = clock
        self._store: dict[str, CacheEntry] = {}
        self._inflight: dict[str, asyncio.Future[list[Post]]] = {}

    @property
    def ttl(self) -> float:
        return self._ttl

    def __len__(self) -> int:
        return len(self._store)

    def get(self, key: str) -> list[Post] | None:
        """Return the cached posts if present and fresh, else None."""
        entry = self._store.get(key)
        if entry is None:
            return None
        if self._clock() - entry.timestamp >= self._ttl:
            del self._store[key]
            return None
        return entry.posts

    def set(self, key: str, posts: list[Post]) -> None:
        """Replace the entry for *key* with *posts*, stamped with the current time."""
        self._store[key] = CacheEntry(posts=posts, timestamp=self._clock())

    def clear(self) -> None:
        """Drop every entry."""
        self._store.clear()

    async def get_or_compute(
        self, key: str, compute: Callable[[], Awaitable[list[Post]]]
    ) -> list[Post]:
        """Return fresh cached posts, or run *compute* once and cache its result.

        Callers that miss on a key whose computation is already running await
        that computation instead of starting another one. A failed computation
        is not cached; the error reaches every waiter.
        """
        cached = self.get(key)
        if cached is not None:
            logger.debug("Using cached blog posts (%d posts)", len(cached))
            return cached

        pending = self._inflight.get(key)
        if pending is None:
            pending = asyncio.ensure_future(self._compute_and_store(key, compute))
            self._inflight[key] = pending
            pending.add_done_callback(lambda _f: self._inflight.pop(key, None))
        # A cancelled waiter must not cancel the computation other waiters share
        return await asyncio.shield(pending)

    async def _compute_and_store(
        self, key: str, compute: Callable[[], Awaitable[list[Post]]]
    ) -> list[Post]:
        posts = await compute()
        self.set(key, posts)
        return posts
