"""Tests for URL building, excerpts, date formatting and image helpers."""

import pytest

from blog_api.services.urls import (
    DEFAULT_AUTHOR_AVATAR,
    DEFAULT_COVER_IMAGE,
    UrlBuilder,
    format_date,
    get_author_avatar_url,
    get_cover_image_url,
    get_post_excerpt,
    get_post_image_data,
    process_image_path,
)


@pytest.mark.parametrize(
    "value,short,expected",
    [
        ("2024-01-02", False, "January 2, 2024"),
        ("2024-12-25T10:00:00Z", False, "December 25, 2024"),
        ("2024-01-02", True, "1/2/2024"),
        ("nonsense", False, "Unknown date"),
        (None, False, "Unknown date"),
    ],
)
def test_format_date(value, short, expected):
    assert format_date(value, short_format=short) == expected


def test_excerpt_from_frontmatter(make_post):
    assert get_post_excerpt(make_post(excerpt="Short one.")) == "Short one."


def test_excerpt_derived_from_body(make_post):
    post = make_post(content="# Title\n\nSome **bold** <em>text</em>.\n")
    assert get_post_excerpt(post) == "Title Some bold text."


def test_excerpt_truncated_at_word(make_post):
    post = make_post(excerpt="alpha beta gamma delta")
    assert get_post_excerpt(post, max_length=12) == "alpha beta..."


def test_excerpt_missing_post():
    assert get_post_excerpt(None) == ""


def test_url_builder_paths(make_post):
    urls = UrlBuilder("/blog/")
    post = make_post(path="hello.md", url_path="/2024/01/hello")

    assert urls.blog() == "/blog"
    assert urls.post(post) == "/blog/2024/01/hello"
    assert urls.category("Machine Learning") == "/blog/category/machine-learning"
    assert urls.tag("C++") == "/blog/tag/c"
    assert urls.post(None) == "/blog"
    assert urls.category("") == "/blog"


def test_url_builder_localizer(make_post):
    urls = UrlBuilder("/blog", localizer=lambda url: f"/es{url}")
    assert urls.tag("python") == "/blog/tag/python"
    assert urls.tag("python", with_language=True) == "/es/blog/tag/python"
    assert urls.for_kind("blog", with_language=True) == "/es/blog"
    assert urls.for_kind("unknown") == "/"


def test_for_kind_dispatch(make_post):
    urls = UrlBuilder()
    post = make_post(path="x.md", url_path="/2024/01/x")
    assert urls.for_kind("post", post) == "/blog/2024/01/x"
    assert urls.for_kind("category", "Tech") == "/blog/category/tech"
    assert urls.for_kind("tag", "AI") == "/blog/tag/ai"


@pytest.mark.parametrize(
    "path,expected",
    [
        ("cover.jpg", "/content/blog/cover.jpg"),
        ("/images/a.png", "/images/a.png"),
        ("https://cdn.example.com/a.png", "https://cdn.example.com/a.png"),
        ("//cdn.example.com/a.png", "https://cdn.example.com/a.png"),
        ("", ""),
    ],
)
def test_process_image_path(path, expected):
    assert process_image_path(path) == expected


def test_image_data_prefers_thumbnail(make_post):
    post = make_post(
        title="Hello",
        image={"src": "/big.jpg", "alt": "Big", "width": 1200},
        thumbnail={"src": "/small.jpg"},
    )
    data = get_post_image_data(post, blog_name="Test Blog")
    assert data == {"src": "/small.jpg", "alt": "Big - Test Blog", "width": 1200}


def test_image_data_alt_falls_back_to_title(make_post):
    data = get_post_image_data(make_post(title="Hello"), blog_name="B")
    assert data == {"src": "", "alt": "Hello - B"}


def test_cover_and_avatar_fallbacks(make_post):
    assert get_cover_image_url(make_post()) == DEFAULT_COVER_IMAGE
    assert get_cover_image_url(make_post(image={"src": "c.jpg"})) == "/content/blog/c.jpg"
    assert get_author_avatar_url(make_post()) == DEFAULT_AUTHOR_AVATAR
    assert (
        get_author_avatar_url(make_post(author={"avatar": "ada.png"}))
        == "/images/authors/ada.png"
    )
    assert (
        get_author_avatar_url(make_post(author={"avatar": "/img/authors/ada.png"}))
        == "/static/img/authors/ada.png"
    )
