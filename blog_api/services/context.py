"""Pipeline context: settings snapshot, content source and collection cache."""

from dataclasses import dataclass, field
from functools import lru_cache

from blog_api.config import Settings, get_settings
from blog_api.services.cache import PostsCache
from blog_api.services.content_source import ContentSource, FileSystemContentSource


@dataclass
class BlogContext:
    """Everything an ingestion pass needs, passed explicitly.

    Each context owns its cache, so separate contexts never see each other's
    collections.
    """

    settings: Settings
    source: ContentSource
    cache: PostsCache = field(default_factory=PostsCache)

    @classmethod
    def from_settings(cls, settings: Settings) -> "BlogContext":
        source = FileSystemContentSource(
            settings.content_dir, base_url=settings.content_base_url
        )
        return cls(settings=settings, source=source, cache=PostsCache(ttl=settings.cache_ttl))


@lru_cache
def get_blog_context() -> BlogContext:
    """Return the process-wide default context (FastAPI dependency)."""
    return BlogContext.from_settings(get_settings())
