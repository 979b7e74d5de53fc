"""Application configuration via environment variables."""

from functools import lru_cache

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings


class ReadTimeSettings(BaseModel):
    """Parameters for the read-time estimator."""

    model_config = ConfigDict(frozen=True)

    words_per_minute: int = 225
    default_time: int = 3
    min_time_for_long_article: int = 5
    min_time_for_very_long_article: int = 10
    long_article_threshold: int = 1500  # word count
    very_long_article_threshold: int = 3000  # word count
    headings_weight: int = 5  # headings per extra minute


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # App
    debug: bool = False
    environment: str = "development"

    # CORS
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:8000",
    ]

    # Blog identity
    blog_name: str = "Blog"
    blog_description: str = "Our Blog"
    blog_uri: str = "/blog"
    site_url: str = ""

    # Content location. When content_base_url is set, post bodies are
    # fetched over HTTP instead of being read from content_dir.
    content_dir: str = "content/blog"
    content_base_url: str = ""
    categories_file: str = "content/_categories.md"

    # Collection views
    excerpt_length: int = 160
    related_posts_count: int = 3
    recent_posts_count: int = 5
    popular_tags_count: int = 10
    popular_categories_count: int = 5
    feed_max_items: int = 20

    # i18n
    default_language: str = "en"
    supported_languages: list[str] = ["en"]

    # Collection cache lifetime in seconds
    cache_ttl: float = 300

    read_time: ReadTimeSettings = ReadTimeSettings()

    model_config = {
        "env_file": ".env",
        "extra": "ignore",
        "env_nested_delimiter": "__",
        "frozen": True,
    }


@lru_cache
def get_settings() -> Settings:
    return Settings()
