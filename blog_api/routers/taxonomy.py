"""Category and tag endpoints."""

import asyncio

from fastapi import APIRouter, Depends, Path, Query

from blog_api.errors import BlogError, ErrorKind
from blog_api.models.taxonomy import CategoryPage, TagPage, TermList
from blog_api.services.category_descriptions import load_category_descriptions
from blog_api.services.context import BlogContext, get_blog_context
from blog_api.services.posts import FetchOptions, get_all_posts
from blog_api.services.queries import get_all_categories, get_all_tags
from blog_api.services.slug import slugify
from blog_api.services.taxonomy import (
    filter_posts_by_category,
    filter_posts_by_tag,
    generate_taxonomy_entries,
    get_original_taxonomy_name,
    get_post_categories,
    get_post_tags,
)

router = APIRouter(prefix="/blog", tags=["taxonomy"])


@router.get("/categories", response_model=TermList)
async def list_categories(
    lang: str | None = Query(default=None, pattern=r"^[a-zA-Z-]{2,10}$"),
    limit: int | None = Query(default=None, ge=1, le=100),
    ctx: BlogContext = Depends(get_blog_context),
):
    """Get categories, most used first."""
    lang = lang or ctx.settings.default_language
    posts = await get_all_posts(ctx, FetchOptions(lang=lang))
    terms = get_all_categories(posts, limit or ctx.settings.popular_categories_count)
    return TermList(terms=terms)


@router.get("/tags", response_model=TermList)
async def list_tags(
    lang: str | None = Query(default=None, pattern=r"^[a-zA-Z-]{2,10}$"),
    limit: int | None = Query(default=None, ge=1, le=100),
    ctx: BlogContext = Depends(get_blog_context),
):
    """Get tags, most used first."""
    lang = lang or ctx.settings.default_language
    posts = await get_all_posts(ctx, FetchOptions(lang=lang))
    return TermList(terms=get_all_tags(posts, limit or ctx.settings.popular_tags_count))


@router.get("/taxonomy/entries")
async def list_taxonomy_entries(
    kind: str = Query(default="categories", pattern=r"^(categories|tags)$"),
    ctx: BlogContext = Depends(get_blog_context),
):
    """List every category or tag slug, for static prerendering."""
    posts = await get_all_posts(ctx)
    extractor = get_post_categories if kind == "categories" else get_post_tags
    return generate_taxonomy_entries(
        posts, extractor, slugify, ctx.settings.supported_languages
    )


@router.get("/categories/{slug}", response_model=CategoryPage)
async def get_category(
    slug: str = Path(..., pattern=r"^[A-Za-z0-9_-]+$", max_length=200),
    lang: str | None = Query(default=None, pattern=r"^[a-zA-Z-]{2,10}$"),
    ctx: BlogContext = Depends(get_blog_context),
):
    """Get the posts filed under a category, with its descriptor."""
    lang = lang or ctx.settings.default_language
    slug = slug.lower()
    all_posts = await get_all_posts(ctx, FetchOptions(lang=lang))
    posts = filter_posts_by_category(all_posts, slug, slugify)
    if not posts:
        raise BlogError(
            f'Category "{slug}" not found or has no posts',
            kind=ErrorKind.CONTENT_NOT_FOUND,
        )

    descriptors = await asyncio.to_thread(
        load_category_descriptions, ctx.settings.categories_file, lang
    )
    info = descriptors.get(slug)
    return CategoryPage(
        slug=slug,
        category=get_original_taxonomy_name(all_posts, get_post_categories, slug, slugify),
        description=info.description if info else None,
        image=info.image if info else None,
        image_alt=info.alt if info else None,
        posts=posts,
        total=len(posts),
    )


@router.get("/tags/{slug}", response_model=TagPage)
async def get_tag(
    slug: str = Path(..., pattern=r"^[A-Za-z0-9_-]+$", max_length=200),
    lang: str | None = Query(default=None, pattern=r"^[a-zA-Z-]{2,10}$"),
    ctx: BlogContext = Depends(get_blog_context),
):
    """Get the posts carrying a tag."""
    lang = lang or ctx.settings.default_language
    slug = slug.lower()
    all_posts = await get_all_posts(ctx, FetchOptions(lang=lang))
    posts = filter_posts_by_tag(all_posts, slug, slugify)
    if not posts:
        raise BlogError(
            f'Tag "{slug}" not found or has no posts', kind=ErrorKind.CONTENT_NOT_FOUND
        )
    return TagPage(
        slug=slug,
        tag=get_original_taxonomy_name(all_posts, get_post_tags, slug, slugify),
        posts=posts,
        total=len(posts),
    )
