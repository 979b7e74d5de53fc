"""Post ingestion: discovery -> normalization -> localization -> cache.

``get_all_posts`` is the source of truth for post data. Every collection it
returns is sorted newest first and shared through the context's cache, so
callers must treat it as read-only.
"""

import asyncio
import json
import logging
from dataclasses import asdict, dataclass
from pathlib import PurePosixPath
from typing import Any

from pydantic import ValidationError

from blog_api.models.post import Post, PostMetadata, parse_post_date
from blog_api.services.content_source import ContentResolver
from blog_api.services.context import BlogContext
from blog_api.services.localization import expand_localized
from blog_api.services.read_time import get_post_read_time

logger = logging.getLogger(__name__)

_FIELD_BY_ALIAS = {
    field.alias: name for name, field in PostMetadata.model_fields.items() if field.alias
}


@dataclass(frozen=True)
class FetchOptions:
    """Options for one ingestion pass.

    The cache key covers every field, so new options cannot produce stale
    cross-option hits.
    """

    lang: str = "en"
    include_content: bool = False
    include_localized_versions: bool = False

    def cache_key(self) -> str:
        return json.dumps(asdict(self), sort_keys=True)


def build_url_path(file_path: str, metadata: PostMetadata) -> str | None:
    """Return ``/YYYY/MM/slug`` for a post, or None if its date is invalid."""
    published = parse_post_date(metadata.date)
    if published is None:
        return None
    filename = PurePosixPath(file_path).name
    if filename.endswith(".md"):
        filename = filename[: -len(".md")]
    slug = metadata.slug or filename
    return f"/{published.year}/{published.month:02d}/{slug}"


def validate_metadata(file_path: str, raw_metadata: dict[str, Any]) -> PostMetadata | None:
    """Validate frontmatter, dropping fields whose values have the wrong shape.

    Only the date decides whether a post exists, so a malformed optional field
    (say ``readTime: soon``) is logged and ignored instead of rejecting the post.
    """
    try:
        return PostMetadata.model_validate(raw_metadata)
    except ValidationError as e:
        invalid = {str(err["loc"][0]) for err in e.errors() if err["loc"]}

    logger.warning(
        "Ignoring invalid frontmatter fields in %s: %s", file_path, ", ".join(sorted(invalid))
    )
    # Errors are reported under the alias; the input may use either name
    invalid |= {_FIELD_BY_ALIAS[key] for key in invalid if key in _FIELD_BY_ALIAS}
    cleaned = {k: v for k, v in raw_metadata.items() if k not in invalid}
    try:
        return PostMetadata.model_validate(cleaned)
    except ValidationError as e:
        logger.warning("Skipping post %s: invalid metadata: %s", file_path, e)
        return None


async def normalize_entry(
    ctx: BlogContext,
    file_path: str,
    resolver: ContentResolver,
    options: FetchOptions,
) -> list[Post]:
    """Turn one discovered content file into its post variants.

    Returns an empty list when the entry has no valid date or its frontmatter
    cannot be read; one bad file never fails the whole pass.
    """
    try:
        raw = await resolver()
    except Exception:
        logger.warning("Skipping post %s: could not resolve content", file_path, exc_info=True)
        return []

    raw_metadata = (raw or {}).get("metadata") or {}
    if not raw_metadata.get("date"):
        logger.debug("Skipping post due to missing metadata: %s", file_path)
        return []

    metadata = validate_metadata(file_path, raw_metadata)
    if metadata is None:
        return []

    url_path = build_url_path(file_path, metadata)
    if url_path is None:
        logger.debug("Skipping post due to invalid date: %s", file_path)
        return []

    content = ""
    if options.include_content:
        content = await ctx.source.fetch_body(file_path)

    if not metadata.read_time:
        read_time = get_post_read_time(
            Post(metadata=metadata, content=content),
            config=ctx.settings.read_time,
        )
        metadata = metadata.model_copy(update={"read_time": read_time})

    base = Post(
        metadata=metadata,
        date=metadata.date,
        url_path=url_path,
        path=file_path,
        content=content,
        lang=ctx.settings.default_language,
    )
    return expand_localized(
        base,
        options.lang,
        options.include_localized_versions,
        default_lang=ctx.settings.default_language,
    )


def sort_posts(posts: list[Post]) -> list[Post]:
    """Sort newest first. Equal dates keep their input order."""
    return sorted(posts, key=lambda p: p.published, reverse=True)


async def load_posts(ctx: BlogContext, options: FetchOptions) -> list[Post]:
    """Run one full ingestion pass, bypassing the cache."""
    logger.info(
        "Loading blog posts from disk%s",
        f" for language: {options.lang}"
        if options.lang != ctx.settings.default_language
        else "",
    )
    entries = await ctx.source.discover()

    results = await asyncio.gather(
        *[
            normalize_entry(ctx, file_path, resolver, options)
            for file_path, resolver in entries.items()
        ],
        return_exceptions=True,
    )

    posts: list[Post] = []
    for file_path, result in zip(entries, results):
        if isinstance(result, BaseException):
            logger.error("Unexpected error processing %s: %s", file_path, result)
            continue
        posts.extend(result)

    sorted_posts = sort_posts(posts)
    logger.info("Successfully processed %d blog posts", len(sorted_posts))
    return sorted_posts


async def get_all_posts(
    ctx: BlogContext, options: FetchOptions | None = None
) -> list[Post]:
    """Return every post, newest first, from cache when fresh.

    Args:
        ctx: Pipeline context providing settings, content source and cache.
        options: Language and inclusion flags; defaults to English, no bodies,
            no localized variants.
    """
    if options is None:
        options = FetchOptions(lang=ctx.settings.default_language)
    return await ctx.cache.get_or_compute(
        options.cache_key(), lambda: load_posts(ctx, options)
    )


def clear_blog_cache(ctx: BlogContext) -> None:
    """Drop every cached collection for *ctx*."""
    ctx.cache.clear()
    logger.debug("Blog cache cleared")


async def find_post(
    ctx: BlogContext,
    year: int,
    month: int,
    slug: str,
    lang: str | None = None,
) -> Post | None:
    """Look up a single post by its ``/YYYY/MM/slug`` URL path, with content."""
    lang = lang or ctx.settings.default_language
    url_path = f"/{year}/{month:02d}/{slug}"
    posts = await get_all_posts(ctx, FetchOptions(lang=lang, include_content=True))
    for post in posts:
        if post.url_path == url_path:
            return post
    return None
