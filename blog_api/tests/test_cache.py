"""Tests for PostsCache: TTL expiry, clearing, and miss coalescing."""

import asyncio

import pytest

from blog_api.models.post import Post
from blog_api.services.cache import PostsCache

POSTS = [Post(date="2024-01-01", path="a.md")]


def test_set_and_get_returns_same_list(clock):
    cache = PostsCache(ttl=300, clock=clock)
    cache.set("k", POSTS)
    assert cache.get("k") is POSTS


def test_missing_key_returns_none(clock):
    assert PostsCache(clock=clock).get("nope") is None


def test_entry_valid_until_ttl(clock):
    cache = PostsCache(ttl=300, clock=clock)
    cache.set("k", POSTS)
    clock.advance(299.9)
    assert cache.get("k") is POSTS


def test_expired_entry_is_dropped(clock):
    cache = PostsCache(ttl=300, clock=clock)
    cache.set("k", POSTS)
    clock.advance(300)
    assert cache.get("k") is None
    assert len(cache) == 0


def test_get_does_not_extend_entry(clock):
    cache = PostsCache(ttl=300, clock=clock)
    cache.set("k", POSTS)
    clock.advance(200)
    cache.get("k")
    clock.advance(150)
    assert cache.get("k") is None


def test_clear_drops_everything(clock):
    cache = PostsCache(clock=clock)
    cache.set("a", POSTS)
    cache.set("b", POSTS)
    cache.clear()
    assert cache.get("a") is None
    assert cache.get("b") is None


async def test_get_or_compute_caches_result(clock):
    cache = PostsCache(ttl=300, clock=clock)
    calls = 0

    async def compute():
        nonlocal calls
        calls += 1
        return [Post(path=f"{calls}.md")]

    first = await cache.get_or_compute("k", compute)
    second = await cache.get_or_compute("k", compute)
    assert first is second
    assert calls == 1

    clock.advance(301)
    third = await cache.get_or_compute("k", compute)
    assert calls == 2
    assert third[0].path == "2.md"


async def test_concurrent_misses_share_one_computation(clock):
    cache = PostsCache(clock=clock)
    calls = 0
    release = asyncio.Event()

    async def compute():
        nonlocal calls
        calls += 1
        await release.wait()
        return POSTS

    waiters = [asyncio.create_task(cache.get_or_compute("k", compute)) for _ in range(5)]
    await asyncio.sleep(0)
    release.set()
    results = await asyncio.gather(*waiters)

    assert calls == 1
    assert all(r is POSTS for r in results)


async def test_failed_computation_is_not_cached(clock):
    cache = PostsCache(clock=clock)

    async def boom():
        raise RuntimeError("disk on fire")

    with pytest.raises(RuntimeError):
        await cache.get_or_compute("k", boom)

    async def ok():
        return POSTS

    assert await cache.get_or_compute("k", ok) is POSTS


async def test_different_keys_compute_separately(clock):
    cache = PostsCache(clock=clock)

    async def compute_a():
        return [Post(path="a.md")]

    async def compute_b():
        return [Post(path="b.md")]

    a = await cache.get_or_compute("a", compute_a)
    b = await cache.get_or_compute("b", compute_b)
    assert a[0].path == "a.md"
    assert b[0].path == "b.md"
