"""Category and tag resolution for posts.

Categories and tags are free-form strings living in independent namespaces.
Their slugs can collide ("Tech" the category vs. "tech" the tag), so every
lookup is decided per post and per namespace instead of through a shared
slug-to-term table.
"""

from collections.abc import Callable, Iterable, Sequence

from pydantic import ValidationError

from blog_api.models.post import Post
from blog_api.services.localization import localize_metadata
from blog_api.services.slug import slugify

TermExtractor = Callable[[Post], list[str]]
SlugifyFn = Callable[[str], str]

UNCATEGORIZED_PLACEHOLDER = "uncategorized"
UNTAGGED_PLACEHOLDER = "general"


def get_post_categories(post: Post | None) -> list[str]:
    """Return the post's categories, falling back to the singular field."""
    if post is None:
        return []
    fm = post.metadata
    if fm.categories:
        return list(fm.categories)
    if fm.category:
        return [fm.category]
    return []


def get_post_tags(post: Post | None) -> list[str]:
    """Return the post's tags. There is no singular ``tag`` fallback."""
    if post is None:
        return []
    return list(post.metadata.tags or [])


def _has_slug(terms: Iterable[str] | None, target: str, slugify_fn: SlugifyFn) -> bool:
    return any(slugify_fn(term) == target for term in terms or ())


def filter_posts_by_category(
    posts: Sequence[Post], category_slug: str, slugify_fn: SlugifyFn = slugify
) -> list[Post]:
    """Return posts filed under the category whose slug is ``category_slug``.

    A post whose only match is a tag with the same slug is not included.
    """
    matched = []
    for post in posts:
        fm = post.metadata
        in_categories = _has_slug(fm.categories, category_slug, slugify_fn)
        in_category = isinstance(fm.category, str) and (
            slugify_fn(fm.category) == category_slug
        )
        tag_only = (
            _has_slug(fm.tags, category_slug, slugify_fn)
            and not in_categories
            and not in_category
        )
        if (in_categories or in_category) and not tag_only:
            matched.append(post)
    return matched


def filter_posts_by_tag(
    posts: Sequence[Post], tag_slug: str, slugify_fn: SlugifyFn = slugify
) -> list[Post]:
    """Return posts tagged with the tag whose slug is ``tag_slug``.

    A post whose only match is a category with the same slug is not included.
    """
    matched = []
    for post in posts:
        fm = post.metadata
        in_tags = _has_slug(fm.tags, tag_slug, slugify_fn)
        category_only = not in_tags and (
            _has_slug(fm.categories, tag_slug, slugify_fn)
            or (isinstance(fm.category, str) and slugify_fn(fm.category) == tag_slug)
        )
        if in_tags and not category_only:
            matched.append(post)
    return matched


def get_original_taxonomy_name(
    posts: Sequence[Post],
    extractor: TermExtractor,
    slugified_term: str,
    slugify_fn: SlugifyFn = slugify,
) -> str:
    """Recover the display name of a term from its slug.

    Returns the first literal term across ``posts`` whose slug matches, or the
    slug itself when no post carries the term.
    """
    for post in posts:
        for term in extractor(post):
            if slugify_fn(term) == slugified_term:
                return term
    return slugified_term


def generate_taxonomy_entries(
    posts: Sequence[Post],
    extractor: TermExtractor,
    slugify_fn: SlugifyFn = slugify,
    languages: Sequence[str] = (),
) -> list[dict[str, str]]:
    """Build one ``{"slug": ...}`` entry per unique term for static prerendering.

    Terms from every localized variant of a post are included. With more than
    one language, each term yields one entry per language. An empty
    collection yields a single placeholder term so that prerendering always
    has at least one page to build.
    """
    unique_terms: dict[str, None] = {}
    for post in posts:
        for term in extractor(post):
            unique_terms.setdefault(term)
        for lang in post.metadata.i18n or {}:
            try:
                localized = post.model_copy(
                    update={"metadata": localize_metadata(post.metadata, lang)}
                )
            except ValidationError:
                continue
            for term in extractor(localized):
                unique_terms.setdefault(term)

    if not unique_terms:
        placeholder = (
            UNCATEGORIZED_PLACEHOLDER
            if extractor is get_post_categories
            else UNTAGGED_PLACEHOLDER
        )
        unique_terms[placeholder] = None

    entries: list[dict[str, str]] = []
    for term in unique_terms:
        if len(languages) > 1:
            entries.extend({"slug": slugify_fn(term), "lang": lang} for lang in languages)
        else:
            entries.append({"slug": slugify_fn(term)})
    return entries
