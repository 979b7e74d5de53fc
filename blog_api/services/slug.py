"""Slug normalization for taxonomy terms and post identifiers."""

import re

_WHITESPACE_RE = re.compile(r"\s+")
_UNSAFE_RE = re.compile(r"[^A-Za-z0-9_\-]+")
_REPEATED_HYPHEN_RE = re.compile(r"--+")


def slugify(text: str) -> str:
    """Convert text to a URL-friendly slug (lowercase and dasherized).

    ``"Hello  World!"`` becomes ``"hello-world"``. Applying it to its own
    output returns the same slug.
    """
    slug = str(text).lower().strip()
    slug = _WHITESPACE_RE.sub("-", slug)
    slug = _UNSAFE_RE.sub("", slug)
    return _REPEATED_HYPHEN_RE.sub("-", slug)
