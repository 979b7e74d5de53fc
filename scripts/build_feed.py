"""Build the RSS feed from a content directory.

Usage:
    python -m scripts.build_feed --site-url https://example.com
    python -m scripts.build_feed --content-dir content/blog --output public/rss.xml --lang es
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from blog_api.config import get_settings
from blog_api.errors import BlogError
from blog_api.services.context import BlogContext
from blog_api.services.posts import FetchOptions, get_all_posts
from blog_api.services.queries import get_all_categories, get_all_tags
from blog_api.services.rss import render_site_feed

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate the blog RSS feed")
    parser.add_argument("--content-dir", help="Directory of markdown posts")
    parser.add_argument("--site-url", help="Absolute site URL used in feed links")
    parser.add_argument("--lang", default=None, help="Language code of the feed")
    parser.add_argument(
        "--output", default="rss.xml", help="Where to write the feed (default: rss.xml)"
    )
    return parser.parse_args(argv)


async def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    overrides = {}
    if args.content_dir:
        overrides["content_dir"] = args.content_dir
    if args.site_url:
        overrides["site_url"] = args.site_url
    settings = get_settings().model_copy(update=overrides)
    ctx = BlogContext.from_settings(settings)
    lang = args.lang or settings.default_language

    try:
        xml = await render_site_feed(ctx, lang)
    except BlogError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(xml, encoding="utf-8")

    # Served from cache, the feed pass already loaded this collection
    posts = await get_all_posts(ctx, FetchOptions(lang=lang))
    print("\nFeed written:")
    print(f"  Output:     {output}")
    print(f"  Posts:      {len(posts)}")
    print(f"  Items:      {xml.count('<item>')}")
    categories = get_all_categories(posts, settings.popular_categories_count)
    tags = get_all_tags(posts, settings.popular_tags_count)
    print(f"  Categories: {', '.join(categories) or '-'}")
    print(f"  Tags:       {', '.join(tags) or '-'}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
