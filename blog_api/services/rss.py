"""RSS 2.0 feed generation for blog posts."""

import logging
from collections.abc import Sequence
from datetime import datetime, timezone
from email.utils import format_datetime
from xml.sax.saxutils import escape

from blog_api.errors import BlogError, ErrorKind
from blog_api.models.post import Post, parse_post_date
from blog_api.services.context import BlogContext
from blog_api.services.posts import FetchOptions, get_all_posts
from blog_api.services.taxonomy import get_post_categories, get_post_tags
from blog_api.services.urls import UrlBuilder, get_post_excerpt

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITEMS = 20

# Maximum length for item descriptions
MAX_DESCRIPTION_LENGTH = 300

GENERATOR = "Blog Content API RSS Generator"

_XML_ENTITIES = {'"': "&quot;", "'": "&apos;"}


def escape_xml(value: object) -> str:
    """Escape the five predefined XML entities (``& < > " '``)."""
    if not value:
        return ""
    return escape(str(value), _XML_ENTITIES)


def _rfc1123(value: object) -> str:
    dt = parse_post_date(value)
    if dt is None:
        raise ValueError(f"Invalid date: {value!r}")
    return format_datetime(dt.astimezone(timezone.utc), usegmt=True)


def _categories_xml(post: Post) -> str:
    # Tags are published as categories too (common RSS practice)
    terms = dict.fromkeys([*get_post_categories(post), *get_post_tags(post)])
    return "".join(f"    <category>{escape_xml(term)}</category>\n" for term in terms)


def _item_xml(post: Post, base_url: str, urls: UrlBuilder, default_author: str) -> str:
    fm = post.metadata
    link = escape_xml(f"{base_url}{urls.post(post)}")
    title = fm.title or "Untitled Post"
    excerpt = get_post_excerpt(post, MAX_DESCRIPTION_LENGTH) or "No description available"
    author = fm.author.name or default_author

    lines = [
        "  <item>",
        f"    <title>{escape_xml(title)}</title>",
        f"    <link>{link}</link>",
        f'    <guid isPermaLink="true">{link}</guid>',
        f"    <pubDate>{_rfc1123(post.date)}</pubDate>",
    ]
    if fm.updated:
        lines.append(f"    <lastBuildDate>{_rfc1123(fm.updated)}</lastBuildDate>")
    lines.append(f"    <description>{escape_xml(excerpt)}</description>")
    lines.append(f"    <author>{escape_xml(author)}</author>")
    return "\n".join(lines) + "\n" + _categories_xml(post) + "  </item>\n"


def generate_rss_feed(
    posts: Sequence[Post],
    *,
    site_url: str | None,
    feed_title: str | None = None,
    feed_description: str | None = None,
    feed_path: str | None = None,
    max_items: int = DEFAULT_MAX_ITEMS,
    language: str = "en",
    blog_uri: str = "/blog",
    now: datetime | None = None,
) -> str:
    """Render posts as an RSS 2.0 document.

    Args:
        posts: Posts sorted newest first. Posts without a title or date are
            left out, then the list is cut to ``max_items``.
        site_url: Absolute site URL; required.
        feed_title: Channel title (defaults to "Blog").
        feed_description: Channel description.
        feed_path: Path of the feed itself, for the ``atom:link`` self link.
        max_items: Maximum number of items.
        language: Channel language code.
        blog_uri: Base path of the blog on the site.
        now: Build time; defaults to the current time.

    Returns:
        The feed XML. An item that fails to render is logged and skipped.

    Raises:
        BlogError: If ``site_url`` is missing.
    """
    if not site_url:
        raise BlogError(
            "site_url is required to generate RSS feed", kind=ErrorKind.VALIDATION
        )

    logger.info("Generating RSS feed for %d posts", len(posts))

    base_url = site_url[:-1] if site_url.endswith("/") else site_url
    urls = UrlBuilder(blog_uri)
    feed_title = feed_title or "Blog"
    feed_description = feed_description or ""
    feed_path = feed_path or f"{urls.blog_uri}/rss.xml"
    build_date = format_datetime((now or datetime.now(timezone.utc)), usegmt=True)

    selected = [p for p in posts if p is not None and p.metadata.title and p.date]
    selected = selected[:max_items]

    parts = [
        '<?xml version="1.0" encoding="UTF-8" ?>\n'
        '<rss version="2.0" xmlns:atom="http://www.w3.org/2005/Atom" '
        'xmlns:content="http://purl.org/rss/1.0/modules/content/">\n'
        "<channel>\n"
        f"  <title>{escape_xml(feed_title)}</title>\n"
        f"  <link>{escape_xml(base_url + urls.blog_uri)}</link>\n"
        f"  <description>{escape_xml(feed_description)}</description>\n"
        f"  <language>{escape_xml(language)}</language>\n"
        f"  <lastBuildDate>{build_date}</lastBuildDate>\n"
        f"  <generator>{GENERATOR}</generator>\n"
        f'  <atom:link href="{escape_xml(base_url + feed_path)}" rel="self" '
        'type="application/rss+xml" />\n'
    ]

    for post in selected:
        try:
            parts.append(_item_xml(post, base_url, urls, feed_title))
        except Exception as e:
            logger.warning("Error adding post to RSS feed: %s (%s)", e, post.path)

    parts.append("</channel>\n</rss>")
    return "".join(parts)


async def render_site_feed(ctx: BlogContext, lang: str | None = None) -> str:
    """Load the collection for *lang* and render it with the site settings."""
    settings = ctx.settings
    lang = lang or settings.default_language
    posts = await get_all_posts(ctx, FetchOptions(lang=lang))
    return generate_rss_feed(
        posts,
        site_url=settings.site_url,
        feed_title=settings.blog_name,
        feed_description=settings.blog_description,
        max_items=settings.feed_max_items,
        language=lang,
        blog_uri=settings.blog_uri,
    )
