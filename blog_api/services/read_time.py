"""Read-time estimation from word and heading counts.

Configuration is resolved with decreasing priority from the call options,
the application settings (``Settings.read_time``) and the built-in
``DEFAULT_READ_TIME_CONFIG``.
"""

import logging
import math
import re
from collections.abc import Mapping
from typing import Any

from blog_api.config import ReadTimeSettings, get_settings
from blog_api.models.post import Post

logger = logging.getLogger(__name__)

DEFAULT_READ_TIME_CONFIG = ReadTimeSettings()

_HTML_TAG_RE = re.compile(r"<[^>]*>")
_HEADING_RE = re.compile(r"^#+\s+.+$", re.MULTILINE)

# Excerpts cover roughly a third of an article.
EXCERPT_MULTIPLIER = 3


def resolve_read_time_config(
    options: Mapping[str, Any] | None = None,
    config: ReadTimeSettings | None = None,
) -> ReadTimeSettings:
    """Merge call options over the configured (or default) read-time settings."""
    if config is None:
        try:
            config = get_settings().read_time
        except Exception:
            logger.warning("Could not load read-time settings, using defaults")
            config = DEFAULT_READ_TIME_CONFIG
    if not options:
        return config
    return ReadTimeSettings.model_validate({**config.model_dump(), **options})


def _default_time(
    options: Mapping[str, Any] | None, config: ReadTimeSettings | None
) -> int:
    if options and options.get("default_time"):
        return int(options["default_time"])
    try:
        return resolve_read_time_config(None, config).default_time
    except Exception:
        return DEFAULT_READ_TIME_CONFIG.default_time


def calculate_read_time(
    content: str | None,
    options: Mapping[str, Any] | None = None,
    *,
    config: ReadTimeSettings | None = None,
) -> int:
    """Estimate reading time in minutes for markdown or HTML content.

    Args:
        content: Text to analyze. HTML tags are stripped before counting words;
            markdown headings are counted on the original text.
        options: Per-call overrides keyed by ``ReadTimeSettings`` field names.
        config: Settings block to use instead of ``get_settings().read_time``.

    Returns:
        A positive whole number of minutes, never below ``default_time``.
    """
    if not content or not isinstance(content, str):
        return _default_time(options, config)

    try:
        cfg = resolve_read_time_config(options, config)

        clean = _HTML_TAG_RE.sub("", content)
        word_count = len(clean.split())
        heading_count = len(_HEADING_RE.findall(content))

        minutes = math.ceil(word_count / cfg.words_per_minute)
        if heading_count > 0:
            # Structured articles take longer to read than their word count suggests
            minutes += math.ceil(heading_count / cfg.headings_weight)

        if word_count > cfg.very_long_article_threshold:
            minutes = max(minutes, cfg.min_time_for_very_long_article)
        elif word_count > cfg.long_article_threshold:
            minutes = max(minutes, cfg.min_time_for_long_article)

        return max(minutes, cfg.default_time)
    except Exception:
        logger.exception("Read time calculation failed")
        return _default_time(options, config)


def get_post_read_time(
    post: Post | Mapping[str, Any] | None,
    options: Mapping[str, Any] | None = None,
    *,
    config: ReadTimeSettings | None = None,
) -> int:
    """Return the read time for a post.

    An explicit ``readTime`` in the frontmatter wins. Otherwise the time is
    computed from the body, or estimated from the excerpt when only that is
    available. Missing or malformed posts get the default time.
    """
    if post is None:
        return _default_time(options, config)

    try:
        if not isinstance(post, Post):
            post = Post.model_validate(post)

        if post.metadata.read_time:
            return post.metadata.read_time

        if post.content:
            return calculate_read_time(post.content, options, config=config)

        if post.metadata.excerpt:
            cfg = resolve_read_time_config(options, config)
            estimate = (
                calculate_read_time(post.metadata.excerpt, options, config=config)
                * EXCERPT_MULTIPLIER
            )
            return max(estimate, cfg.default_time)
    except Exception:
        logger.exception("Read time lookup failed")

    return _default_time(options, config)
