"""Tests for RSS feed generation."""

from datetime import datetime, timezone

import feedparser
import pytest

from blog_api.errors import BlogError, ErrorKind
from blog_api.services.rss import escape_xml, generate_rss_feed, render_site_feed

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def _feed(posts, **kwargs):
    kwargs.setdefault("site_url", "https://example.com")
    kwargs.setdefault("now", NOW)
    return generate_rss_feed(posts, **kwargs)


def test_escape_xml():
    assert escape_xml("""Tom & "Jerry" <'s>""") == "Tom &amp; &quot;Jerry&quot; &lt;&apos;s&gt;"
    assert escape_xml(None) == ""
    assert escape_xml("") == ""


def test_site_url_required(make_post):
    with pytest.raises(BlogError) as exc_info:
        generate_rss_feed([make_post()], site_url="")
    assert exc_info.value.kind is ErrorKind.VALIDATION


def test_channel_fields(make_post):
    xml = _feed(
        [make_post()],
        site_url="https://example.com/",
        feed_title="My Blog",
        feed_description="About things",
        language="es",
    )
    assert xml.startswith('<?xml version="1.0" encoding="UTF-8" ?>')
    assert "<title>My Blog</title>" in xml
    assert "<link>https://example.com/blog</link>" in xml
    assert "<language>es</language>" in xml
    assert "<lastBuildDate>Sat, 01 Jun 2024 12:00:00 GMT</lastBuildDate>" in xml
    assert 'href="https://example.com/blog/rss.xml"' in xml


def test_one_item_per_post(make_post):
    posts = [
        make_post(path="a.md", title="A", url_path="/2024/01/a"),
        make_post(path="b.md", title="B", url_path="/2024/01/b"),
    ]
    xml = _feed(posts)
    assert xml.count("<item>") == 2
    assert '<guid isPermaLink="true">https://example.com/blog/2024/01/a</guid>' in xml


def test_item_fields(make_post):
    post = make_post(
        title="Fish & Chips",
        date="2024-01-02T10:00:00Z",
        updated="2024-02-03",
        excerpt="<Tasty>",
        author={"name": "Ada"},
    )
    xml = _feed([post])
    assert "<title>Fish &amp; Chips</title>" in xml
    assert "<pubDate>Tue, 02 Jan 2024 10:00:00 GMT</pubDate>" in xml
    assert "<lastBuildDate>Sat, 03 Feb 2024 00:00:00 GMT</lastBuildDate>" in xml
    assert "<description>&lt;Tasty&gt;</description>" in xml
    assert "<author>Ada</author>" in xml


def test_item_defaults(make_post):
    xml = _feed([make_post(title="Plain")], feed_title="Feed Name")
    assert "<description>No description available</description>" in xml
    assert "<author>Feed Name</author>" in xml


def test_categories_and_tags_deduplicated(make_post):
    post = make_post(categories=["Tech", "Python"], tags=["Python", "web"])
    xml = _feed([post])
    assert xml.count("<category>Python</category>") == 1
    assert xml.count("<category>") == 3


def test_posts_without_title_are_left_out(make_post):
    xml = _feed([make_post(path="a.md", title=""), make_post(path="b.md", title="B")])
    assert xml.count("<item>") == 1


def test_max_items(make_post):
    posts = [make_post(path=f"{i}.md", title=f"P{i}") for i in range(5)]
    xml = _feed(posts, max_items=3)
    assert xml.count("<item>") == 3
    assert "<title>P3</title>" not in xml


def test_bad_item_is_skipped(make_post, caplog):
    posts = [
        make_post(path="good.md", title="Good"),
        make_post(path="bad.md", title="Bad", date="someday"),
    ]
    xml = _feed(posts)
    assert xml.count("<item>") == 1
    assert "<title>Good</title>" in xml
    assert "bad.md" in caplog.text


def test_output_parses_as_rss(make_post):
    post = make_post(
        title="Fish & Chips",
        url_path="/2024/01/hello",
        categories=["Tech"],
        tags=["python"],
        excerpt="Intro & more",
    )
    parsed = feedparser.parse(_feed([post], feed_title="Test Blog"))

    assert parsed.version == "rss20"
    assert parsed.feed.title == "Test Blog"
    (entry,) = parsed.entries
    assert entry.title == "Fish & Chips"
    assert entry.link == "https://example.com/blog/2024/01/hello"
    assert [t.term for t in entry.tags] == ["Tech", "python"]


async def test_render_site_feed(blog_ctx):
    xml = await render_site_feed(blog_ctx)
    assert "<title>Test Blog</title>" in xml
    assert "<description>Posts for testing</description>" in xml
    assert xml.count("<item>") == 2
    assert xml.index("Second Post") < xml.index("First Post")
    assert "https://example.com/blog/2024/03/second-post" in xml


async def test_render_site_feed_localized(blog_ctx):
    xml = await render_site_feed(blog_ctx, lang="es")
    assert "<language>es</language>" in xml
    assert "<title>Segunda entrada</title>" in xml
