"""Derived views over a post collection: popular terms, recency, related posts."""

import logging
from collections import Counter
from collections.abc import Sequence

from blog_api.models.post import Post
from blog_api.services.context import BlogContext
from blog_api.services.posts import get_all_posts
from blog_api.services.taxonomy import get_post_categories, get_post_tags

logger = logging.getLogger(__name__)

CATEGORY_MATCH_SCORE = 5
TAG_MATCH_SCORE = 2


def _count_terms(posts: Sequence[Post], extractor, limit: int | None) -> list[str]:
    counts: Counter[str] = Counter()
    for post in posts or ():
        if post is None:
            continue
        counts.update(extractor(post))
    # most_common keeps first-seen order among equal counts
    return [term for term, _ in counts.most_common(limit)]


def get_all_categories(posts: Sequence[Post], limit: int | None = None) -> list[str]:
    """Return category names, most used first, truncated to *limit*."""
    return _count_terms(posts, get_post_categories, limit)


def get_all_tags(posts: Sequence[Post], limit: int | None = None) -> list[str]:
    """Return tag names, most used first, truncated to *limit*."""
    return _count_terms(posts, get_post_tags, limit)


def get_recent_posts(posts: Sequence[Post], count: int) -> list[Post]:
    """Return the first *count* posts of an already date-sorted collection."""
    if not posts:
        return []
    return list(posts[:count])


def _primary_category(post: Post) -> str | None:
    fm = post.metadata
    if fm.category:
        return fm.category
    return fm.categories[0] if fm.categories else None


def get_similar_posts(
    all_posts: Sequence[Post],
    current_post_id: str,
    current_category: str | None,
    current_tags: Sequence[str] = (),
    count: int = 3,
) -> list[Post]:
    """Rank other posts by shared category and tags.

    A post scores 5 when its primary category equals ``current_category`` and
    2 for each of ``current_tags`` it carries. Comparison is exact string
    equality, not slug equality. Posts with no overlap are dropped.
    """
    if not all_posts:
        return []

    scored: list[tuple[Post, int]] = []
    for post in all_posts:
        if post.path == current_post_id:
            continue
        score = 0
        if current_category and _primary_category(post) == current_category:
            score += CATEGORY_MATCH_SCORE
        post_tags = post.metadata.tags or []
        score += TAG_MATCH_SCORE * sum(1 for tag in current_tags if tag in post_tags)
        if score > 0:
            scored.append((post, score))

    scored.sort(key=lambda item: item[1], reverse=True)
    return [post for post, _ in scored[:count]]


def get_related_posts(all_posts: Sequence[Post], post: Post, count: int = 3) -> list[Post]:
    """Return posts similar to *post* using its own primary category and tags."""
    return get_similar_posts(
        all_posts,
        post.path,
        _primary_category(post),
        post.metadata.tags or [],
        count,
    )


async def get_popular_categories(
    ctx: BlogContext, posts: Sequence[Post] | None = None
) -> list[str]:
    """Most used categories of *posts*, or of the whole collection when omitted."""
    if posts is None:
        try:
            posts = await get_all_posts(ctx)
        except Exception:
            logger.exception("Error getting popular categories")
            posts = []
    return get_all_categories(posts, ctx.settings.popular_categories_count)


async def get_popular_tags(
    ctx: BlogContext, posts: Sequence[Post] | None = None
) -> list[str]:
    """Most used tags of *posts*, or of the whole collection when omitted."""
    if posts is None:
        try:
            posts = await get_all_posts(ctx)
        except Exception:
            logger.exception("Error getting popular tags")
            posts = []
    return get_all_tags(posts, ctx.settings.popular_tags_count)
