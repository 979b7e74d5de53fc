"""Shared fixtures for blog content API tests."""

from collections.abc import Callable
from typing import Any

import pytest

from blog_api.config import Settings
from blog_api.models.post import Post, PostMetadata
from blog_api.services.cache import PostsCache
from blog_api.services.content_source import InMemoryContentSource
from blog_api.services.context import BlogContext


@pytest.fixture(autouse=True)
def _reset_global_state():
    """Reset all module-level singletons and caches between tests."""
    yield

    # 1. Settings LRU cache
    from blog_api.config import get_settings

    get_settings.cache_clear()

    # 2. Default pipeline context
    from blog_api.services.context import get_blog_context

    get_blog_context.cache_clear()

    # 3. HTTP client singleton
    import blog_api.services.http_client as http_mod

    http_mod._client = None

    # 4. Category descriptor file cache
    import blog_api.services.category_descriptions as desc_mod

    desc_mod._descriptor_file_cache.clear()


@pytest.fixture
def mock_settings(monkeypatch, tmp_path):
    """Provide a Settings snapshot with safe test defaults."""
    from blog_api.config import get_settings

    test_settings = Settings(
        site_url="https://example.com",
        blog_name="Test Blog",
        blog_description="Posts for testing",
        content_dir=str(tmp_path / "blog"),
        categories_file=str(tmp_path / "_categories.md"),
        supported_languages=["en", "es"],
    )

    get_settings.cache_clear()
    monkeypatch.setattr("blog_api.config.get_settings", lambda: test_settings)

    # Patch get_settings in modules that import it directly
    for mod_path in [
        "blog_api.services.read_time",
        "blog_api.services.context",
        "blog_api.main",
    ]:
        monkeypatch.setattr(f"{mod_path}.get_settings", lambda: test_settings)

    return test_settings


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_post() -> Callable[..., Post]:
    """Factory for posts built directly from frontmatter fields."""

    def _make(
        path: str = "post.md",
        content: str = "",
        lang: str = "en",
        url_path: str | None = None,
        **fm: Any,
    ) -> Post:
        fm.setdefault("title", "Untitled")
        fm.setdefault("date", "2024-01-01")
        metadata = PostMetadata.model_validate(fm)
        return Post(
            metadata=metadata,
            date=metadata.date or "",
            url_path=url_path if url_path is not None else f"/2024/01/{path[:-3]}",
            path=path,
            content=content,
            lang=lang,
        )

    return _make


SAMPLE_ENTRIES: dict[str, tuple[dict[str, Any], str]] = {
    "2024/first.md": (
        {
            "title": "First Post",
            "date": "2024-01-01",
            "categories": ["Tech"],
            "tags": ["python", "testing"],
            "excerpt": "The very first post.",
            "author": {"name": "Ada"},
        },
        "# Intro\n\nHello world.\n",
    ),
    "2024/second.md": (
        {
            "title": "Second Post",
            "date": "2024-03-01",
            "slug": "second-post",
            "category": "Life",
            "tags": ["Tech"],
            "i18n": {
                "es": {"title": "Segunda entrada", "excerpt": "Hola"},
                "fr": {"title": "Deuxième article"},
            },
        },
        "Body of the second post.\n",
    ),
    "2024/undated.md": ({"title": "No date"}, "Lost post.\n"),
    "2024/bad-date.md": ({"title": "Bad", "date": "not-a-date"}, ""),
}


@pytest.fixture
def memory_source() -> InMemoryContentSource:
    return InMemoryContentSource(SAMPLE_ENTRIES)


@pytest.fixture
def blog_ctx(mock_settings, memory_source, clock) -> BlogContext:
    """Pipeline context over the sample entries, with a manual clock."""
    return BlogContext(
        settings=mock_settings,
        source=memory_source,
        cache=PostsCache(ttl=mock_settings.cache_ttl, clock=clock),
    )
