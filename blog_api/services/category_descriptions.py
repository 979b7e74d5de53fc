"""Category descriptor file parser: reads and caches ``_categories.md``.

The descriptor file holds a restricted frontmatter block, not general YAML::

    ---
    tech:
      title: "Technology"
      description: Articles about software
    ---

A top-level ``key:`` line starts a category; two-space-indented
``prop: value`` lines attach properties to it. Anything else is ignored.
Parsed files are cached by modification time.
"""

import logging
import os
import re
from pathlib import Path

from blog_api.models.taxonomy import CategoryDescriptor

logger = logging.getLogger(__name__)

_BLOCK_RE = re.compile(r"\A---\n(.*?)\n---", re.DOTALL)
_TERM_RE = re.compile(r"^([a-z0-9-]+):\s*$")
_QUOTED_PROP_RE = re.compile(r'^\s\s([a-z-]+):\s*"(.+)"$')
_PROP_RE = re.compile(r"^\s\s([a-z-]+):\s*(.+)$")
_SURROUNDING_QUOTES_RE = re.compile(r'^"(.*)"$')

# path -> (mtime, parsed raw data)
_descriptor_file_cache: dict[str, tuple[float, dict[str, dict[str, str]]]] = {}


def parse_category_descriptions(file_content: str) -> dict[str, dict[str, str]]:
    """Parse descriptor text into ``{term: {prop: value}}``."""
    match = _BLOCK_RE.match(file_content.replace("\r\n", "\n"))
    if not match or not match.group(1):
        return {}

    data: dict[str, dict[str, str]] = {}
    current: str | None = None
    for line in match.group(1).split("\n"):
        if not line.strip():
            continue

        term_match = _TERM_RE.match(line)
        if term_match:
            current = term_match.group(1)
            data[current] = {}
            continue

        if current is not None:
            prop_match = _QUOTED_PROP_RE.match(line) or _PROP_RE.match(line)
            if prop_match:
                name, value = prop_match.groups()
                data[current][name] = _SURROUNDING_QUOTES_RE.sub(r"\1", value)
    return data


def localized_descriptor_path(default_path: str | Path, lang: str) -> Path:
    """``_categories.md`` -> ``_categories.<lang>.md``."""
    path = Path(default_path)
    return path.with_name(f"{path.stem}.{lang}{path.suffix}")


def _read_descriptor_file(path: Path) -> dict[str, dict[str, str]]:
    """Parse *path*, reusing the cached result while its mtime is unchanged.

    Unreadable or missing files yield an empty mapping.
    """
    key = str(path)
    try:
        mtime = os.path.getmtime(path)
    except OSError:
        return {}

    cached = _descriptor_file_cache.get(key)
    if cached is not None and cached[0] == mtime:
        return cached[1]

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        logger.warning("Could not read category descriptions file: %s", e)
        return {}

    parsed = parse_category_descriptions(text)
    _descriptor_file_cache[key] = (mtime, parsed)
    return parsed


def load_category_descriptions(
    default_path: str | Path, lang: str = "en"
) -> dict[str, CategoryDescriptor]:
    """Load category descriptors, overlaying the ``lang`` file on the default.

    Properties from ``_categories.<lang>.md`` replace the same properties of
    the same term in ``_categories.md``; terms only present in one file are
    kept as they are.
    """
    default_path = Path(default_path)
    merged: dict[str, dict[str, str]] = {
        term: dict(props) for term, props in _read_descriptor_file(default_path).items()
    }
    if not merged and not default_path.exists():
        logger.warning("Category descriptions file not found at %s", default_path)

    localized = _read_descriptor_file(localized_descriptor_path(default_path, lang))
    for term, props in localized.items():
        merged.setdefault(term, {}).update(props)

    return {
        term.lower(): CategoryDescriptor.model_validate(props)
        for term, props in merged.items()
    }
