"""Localized post variants built from the ``i18n`` frontmatter map."""

import copy
import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from blog_api.models.post import Post, PostMetadata

logger = logging.getLogger(__name__)


def localize_metadata(
    metadata: PostMetadata, lang: str, override: Mapping[str, Any] | None = None
) -> PostMetadata:
    """Return new metadata with the ``lang`` override laid over ``metadata``.

    The full ``i18n`` map is carried over so consumers can still list every
    available translation. The base metadata is left untouched.

    Raises:
        pydantic.ValidationError: If the override holds values of the wrong type.
    """
    if override is None:
        override = (metadata.i18n or {}).get(lang) or {}
    merged = metadata.model_dump(by_alias=True)
    merged.update(copy.deepcopy(dict(override)))
    merged["i18n"] = copy.deepcopy(metadata.i18n)
    return PostMetadata.model_validate(merged)


def apply_override(base: Post, lang: str, override: Mapping[str, Any] | None) -> Post:
    """Build the ``lang`` variant of ``base`` from an i18n override.

    An empty (``None``) override yields a copy of ``base`` tagged with ``lang``.
    """
    return Post(
        metadata=localize_metadata(base.metadata, lang, override or {}),
        date=base.date,
        url_path=base.url_path,
        path=base.path,
        content=base.content,
        lang=lang,
    )


def _try_override(base: Post, lang: str, override: Mapping[str, Any] | None) -> Post | None:
    try:
        return apply_override(base, lang, override)
    except ValidationError as e:
        logger.warning("Skipping %s variant of %s: invalid override: %s", lang, base.path, e)
        return None


def expand_localized(
    base: Post,
    lang: str,
    include_localized_versions: bool,
    default_lang: str = "en",
) -> list[Post]:
    """Return the variants of ``base`` to emit for one ingestion pass.

    - With ``include_localized_versions``, the base post followed by one
      variant per ``i18n`` language.
    - Otherwise, for a non-default ``lang`` with an override, only that variant.
    - Otherwise the base post alone.

    A variant whose override does not validate is left out; with a single
    requested language the base post is returned in its place.
    """
    i18n = base.metadata.i18n
    if include_localized_versions and i18n:
        variants = (_try_override(base, code, fields) for code, fields in i18n.items())
        return [base, *(v for v in variants if v is not None)]
    if lang != default_lang and i18n and lang in i18n:
        variant = _try_override(base, lang, i18n[lang])
        return [variant if variant is not None else base]
    return [base]
