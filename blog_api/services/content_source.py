"""Content discovery and body access for markdown posts.

The pipeline only sees the ``ContentSource`` protocol: a mapping from content
path to a lazy resolver, plus a body fetch. The filesystem implementation
parses YAML frontmatter with PyYAML; bodies come either from disk or, when a
base URL is configured, over HTTP.
"""

import asyncio
import logging
import re
from collections.abc import Awaitable, Callable, Mapping
from functools import partial
from pathlib import Path
from typing import Any, Protocol, TypedDict

import yaml

from blog_api.services.http_client import fetch_text

logger = logging.getLogger(__name__)

_FRONTMATTER_RE = re.compile(r"\A---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)", re.DOTALL)


class RawContent(TypedDict, total=False):
    """Resolved content entry: parsed frontmatter and optional body."""

    metadata: dict[str, Any]
    default: str


ContentResolver = Callable[[], Awaitable[RawContent]]


class ContentSource(Protocol):
    """Where posts come from."""

    async def discover(self) -> Mapping[str, ContentResolver]:
        """Return content path -> zero-argument resolver."""
        ...

    async def fetch_body(self, path: str) -> str:
        """Return the markdown body for *path*, frontmatter removed."""
        ...


def strip_frontmatter(text: str) -> str:
    """Drop the leading ``---`` frontmatter block from a markdown document.

    Documents without at least two ``---`` delimiters yield an empty string.
    """
    parts = text.split("---")
    if len(parts) >= 3:
        return "---".join(parts[2:])
    return ""


def split_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Split a markdown document into (frontmatter mapping, body).

    Raises:
        yaml.YAMLError: If the frontmatter block is not valid YAML.
    """
    match = _FRONTMATTER_RE.match(text)
    if not match:
        return {}, text
    data = yaml.safe_load(match.group(1))
    if not isinstance(data, dict):
        data = {}
    return data, text[match.end() :]


class FileSystemContentSource:
    """Markdown files under a directory tree.

    Files and directories whose name starts with ``_`` (descriptor files,
    drafts folders) are not treated as posts.
    """

    def __init__(self, root: str | Path, base_url: str = "", pattern: str = "**/*.md"):
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")
        self.pattern = pattern

    async def discover(self) -> dict[str, ContentResolver]:
        return await asyncio.to_thread(self._scan)

    def _scan(self) -> dict[str, ContentResolver]:
        if not self.root.is_dir():
            logger.warning("Content directory not found: %s", self.root)
            return {}
        found: dict[str, ContentResolver] = {}
        for file_path in sorted(self.root.glob(self.pattern)):
            rel = file_path.relative_to(self.root)
            if any(part.startswith("_") for part in rel.parts):
                continue
            found[rel.as_posix()] = partial(self._load_entry, file_path)
        return found

    async def _load_entry(self, file_path: Path) -> RawContent:
        text = await asyncio.to_thread(file_path.read_text, encoding="utf-8")
        metadata, body = split_frontmatter(text)
        return {"metadata": metadata, "default": body}

    async def fetch_body(self, path: str) -> str:
        if self.base_url:
            text = await fetch_text(f"{self.base_url}/{path}", context="post body")
            return strip_frontmatter(text) if text is not None else ""
        try:
            text = await asyncio.to_thread(
                (self.root / path).read_text, encoding="utf-8"
            )
        except OSError:
            logger.warning("Could not read markdown file %s", path, exc_info=True)
            return ""
        return strip_frontmatter(text)


class InMemoryContentSource:
    """Posts supplied as ``path -> (frontmatter mapping, body)``.

    Useful when content has already been collected by a build step, and in
    tests. ``discover_calls`` counts discovery passes.
    """

    def __init__(self, entries: Mapping[str, tuple[Mapping[str, Any], str]]):
        self.entries = dict(entries)
        self.discover_calls = 0

    async def discover(self) -> dict[str, ContentResolver]:
        self.discover_calls += 1
        return {path: partial(self._load_entry, path) for path in self.entries}

    async def _load_entry(self, path: str) -> RawContent:
        metadata, body = self.entries[path]
        return {"metadata": dict(metadata), "default": body}

    async def fetch_body(self, path: str) -> str:
        entry = self.entries.get(path)
        return entry[1] if entry else ""
