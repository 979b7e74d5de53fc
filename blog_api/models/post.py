"""Blog post data models."""

from datetime import date, datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def parse_post_date(value: Any) -> datetime | None:
    """Parse a frontmatter date into a timezone-aware datetime.

    Accepts ISO 8601 strings (date-only or full timestamps, ``Z`` suffix
    included) as well as ``date``/``datetime`` objects produced by a YAML
    loader. Naive values are taken to be UTC. Returns None when the value
    cannot be interpreted as a calendar date.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value.strip():
        try:
            dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _coerce_date(value: Any) -> Any:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


def _coerce_text(value: Any) -> Any:
    # YAML reads `title: 1984` or `slug: 2024-recap`-style values as numbers or dates
    if isinstance(value, (int, float, date)):
        return str(value)
    return value


def _coerce_term_list(value: Any) -> Any:
    if isinstance(value, str):
        return [value] if value else []
    if isinstance(value, (int, float, date)):
        return [str(value)]
    if isinstance(value, list):
        return [_coerce_text(term) for term in value if term is not None]
    return value


class Author(BaseModel):
    """Post author as written in frontmatter."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    avatar: str | None = None
    url: str | None = None


class ImageRef(BaseModel):
    """Image reference (cover image or thumbnail)."""

    model_config = ConfigDict(frozen=True)

    src: str = ""
    alt: str = ""
    width: int | None = None
    height: int | None = None


class PostMetadata(BaseModel):
    """Parsed frontmatter of a content file.

    Unknown frontmatter keys are kept as extra fields so that consumers can
    read site-specific values without the model having to know about them.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    title: str = ""
    date: str | None = None
    updated: str | None = None
    slug: str | None = None
    category: str | None = None
    categories: list[str] | None = None
    tags: list[str] | None = None
    excerpt: str | None = None
    featured: bool = False
    author: Author = Author()
    image: ImageRef | None = None
    thumbnail: ImageRef | None = None
    read_time: int | None = Field(default=None, alias="readTime")
    i18n: dict[str, dict[str, Any] | None] | None = None

    @field_validator("date", "updated", mode="before")
    @classmethod
    def _normalize_dates(cls, value: Any) -> Any:
        return _coerce_date(value)

    @field_validator("title", "slug", "category", "excerpt", mode="before")
    @classmethod
    def _normalize_text(cls, value: Any) -> Any:
        return _coerce_text(value)

    @field_validator("categories", "tags", mode="before")
    @classmethod
    def _normalize_terms(cls, value: Any) -> Any:
        return _coerce_term_list(value)

    @field_validator("author", mode="before")
    @classmethod
    def _author_from_name(cls, value: Any) -> Any:
        """Frontmatter often writes ``author: Jane`` instead of a mapping."""
        if isinstance(value, str):
            return {"name": value}
        return value


class Post(BaseModel):
    """Canonical post record produced by ingestion.

    Posts are immutable; localized variants are new records built from a base
    post, never in-place edits.
    """

    model_config = ConfigDict(frozen=True)

    metadata: PostMetadata = PostMetadata()
    date: str = ""
    url_path: str = ""
    path: str = ""
    content: str = ""
    lang: str = "en"

    @property
    def published(self) -> datetime | None:
        return parse_post_date(self.date)


class PostIndex(BaseModel):
    """Post collection page."""

    posts: list[Post]
    total: int


class PostDetail(BaseModel):
    """Single post with related posts."""

    post: Post
    related: list[Post]
    read_time: int
