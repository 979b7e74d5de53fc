"""URL, excerpt, date and image helpers for posts."""

import re
from collections.abc import Callable
from typing import Any

from blog_api.models.post import Post, parse_post_date
from blog_api.services.slug import slugify

_HTML_TAG_RE = re.compile(r"<[^>]*>")
_MARKDOWN_MARKER_RE = re.compile(r"[#*_~`]")
_NEWLINES_RE = re.compile(r"\n+")

DEFAULT_BLOG_URI = "/blog"
DEFAULT_IMAGE_PREFIX = "/content/blog/"
DEFAULT_AUTHORS_PATH = "/images/authors/"
DEFAULT_COVER_IMAGE = "/images/default-cover.jpg"
DEFAULT_AUTHOR_AVATAR = "/images/default-avatar.jpg"

_MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)  # fmt: skip


def format_date(value: Any, short_format: bool = False) -> str:
    """Format a post date as ``January 2, 2024`` or ``1/2/2024``."""
    dt = parse_post_date(value)
    if dt is None:
        return "Unknown date"
    if short_format:
        return f"{dt.month}/{dt.day}/{dt.year}"
    return f"{_MONTHS[dt.month - 1]} {dt.day}, {dt.year}"


def get_post_excerpt(post: Post | None, max_length: int = 160) -> str:
    """Return the post excerpt, derived from the body when frontmatter has none.

    Long excerpts are cut at the last space before *max_length* and end with
    ``...``.
    """
    if post is None:
        return ""

    excerpt = post.metadata.excerpt or ""
    if not excerpt and post.content:
        text = _HTML_TAG_RE.sub("", post.content)
        text = _MARKDOWN_MARKER_RE.sub("", text)
        excerpt = _NEWLINES_RE.sub(" ", text).strip()[: max_length * 2]

    if len(excerpt) > max_length:
        truncated = excerpt[:max_length]
        last_space = truncated.rfind(" ")
        excerpt = (truncated[:last_space] if last_space > 0 else truncated) + "..."
    return excerpt


class UrlBuilder:
    """Builds blog URLs under a base URI.

    ``localizer`` adds a locale prefix when a URL is requested with
    ``with_language=True``; the default leaves URLs unchanged.
    """

    def __init__(
        self,
        blog_uri: str = DEFAULT_BLOG_URI,
        localizer: Callable[[str], str] | None = None,
    ) -> None:
        self.blog_uri = blog_uri.rstrip("/")
        self.localizer = localizer or (lambda url: url)

    def _finish(self, url: str, with_language: bool) -> str:
        return self.localizer(url) if with_language else url

    def blog(self, with_language: bool = False) -> str:
        return self._finish(self.blog_uri or "/", with_language)

    def post(self, post: Post | None, with_language: bool = False) -> str:
        if post is None or not post.url_path:
            return self.blog(with_language)
        return self._finish(f"{self.blog_uri}{post.url_path}", with_language)

    def category(self, category: str | None, with_language: bool = False) -> str:
        if not category:
            return self.blog(with_language)
        return self._finish(f"{self.blog_uri}/category/{slugify(category)}", with_language)

    def tag(self, tag: str | None, with_language: bool = False) -> str:
        if not tag:
            return self.blog(with_language)
        return self._finish(f"{self.blog_uri}/tag/{slugify(tag)}", with_language)

    def for_kind(self, kind: str, data: Any = None, with_language: bool = False) -> str:
        """Dispatch on ``post`` / ``category`` / ``tag`` / ``blog``."""
        if kind == "post":
            return self.post(data, with_language)
        if kind == "category":
            return self.category(data, with_language)
        if kind == "tag":
            return self.tag(data, with_language)
        if kind == "blog":
            return self.blog(with_language)
        return self._finish("/", with_language)


def process_image_path(
    image_path: str | None,
    default_prefix: str = DEFAULT_IMAGE_PREFIX,
    fallback_image: str = "",
) -> str:
    """Normalize an image reference from frontmatter into a usable URL."""
    if not image_path:
        return fallback_image or ""
    if image_path.startswith(("http://", "https://", "/", "data:")):
        if image_path.startswith("//"):
            return f"https:{image_path}"
        return image_path
    return f"{default_prefix}{image_path}"


def get_post_image_data(post: Post | None, blog_name: str = "Blog") -> dict[str, Any]:
    """Return ``src``/``alt`` (and width/height when known) for a post's card image.

    The thumbnail wins over the cover image; alt text falls back to the title.
    """
    if post is None:
        return {"src": "", "alt": "Blog post"}
    fm = post.metadata
    thumb, image = fm.thumbnail, fm.image

    src = (thumb and thumb.src) or (image and image.src) or ""
    alt = (thumb and thumb.alt) or (image and image.alt) or fm.title or "Blog post"
    width = (thumb and thumb.width) or (image and image.width)
    height = (thumb and thumb.height) or (image and image.height)

    data: dict[str, Any] = {"src": src, "alt": f"{alt} - {blog_name}"}
    if width:
        data["width"] = width
    if height:
        data["height"] = height
    return data


def get_cover_image_url(post: Post | None, fallback_image: str = DEFAULT_COVER_IMAGE) -> str:
    raw = post.metadata.image.src if post and post.metadata.image else ""
    return process_image_path(raw, DEFAULT_IMAGE_PREFIX, fallback_image)


def get_author_avatar_url(
    post: Post | None, fallback_image: str = DEFAULT_AUTHOR_AVATAR
) -> str:
    avatar = post.metadata.author.avatar if post else None
    if avatar and "authors/" in avatar:
        return f"/static{avatar}"
    return process_image_path(avatar, DEFAULT_AUTHORS_PATH, fallback_image)
