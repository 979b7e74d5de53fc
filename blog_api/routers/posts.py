"""Blog post endpoints."""

from fastapi import APIRouter, Depends, Path, Query

from blog_api.errors import BlogError, ErrorKind
from blog_api.models.post import Post, PostDetail, PostIndex
from blog_api.services.context import BlogContext, get_blog_context
from blog_api.services.posts import FetchOptions, find_post, get_all_posts
from blog_api.services.queries import get_recent_posts, get_related_posts
from blog_api.services.read_time import get_post_read_time

router = APIRouter(prefix="/blog", tags=["blog"])


@router.get("/posts", response_model=PostIndex)
async def list_posts(
    lang: str | None = Query(default=None, pattern=r"^[a-zA-Z-]{2,10}$"),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    ctx: BlogContext = Depends(get_blog_context),
):
    """Get the post index for a language, newest first."""
    lang = lang or ctx.settings.default_language
    posts = await get_all_posts(ctx, FetchOptions(lang=lang))
    return PostIndex(posts=posts[offset : offset + limit], total=len(posts))


@router.get("/recent", response_model=list[Post])
async def list_recent_posts(
    lang: str | None = Query(default=None, pattern=r"^[a-zA-Z-]{2,10}$"),
    count: int | None = Query(default=None, ge=1, le=50),
    ctx: BlogContext = Depends(get_blog_context),
):
    """Get the most recent posts."""
    lang = lang or ctx.settings.default_language
    posts = await get_all_posts(ctx, FetchOptions(lang=lang))
    return get_recent_posts(posts, count or ctx.settings.recent_posts_count)


@router.get("/posts/{year}/{month}/{slug}", response_model=PostDetail)
async def get_post(
    year: int = Path(..., ge=1000, le=9999),
    month: int = Path(..., ge=1, le=12),
    slug: str = Path(..., pattern=r"^[A-Za-z0-9_-]+$", max_length=200),
    lang: str | None = Query(default=None, pattern=r"^[a-zA-Z-]{2,10}$"),
    ctx: BlogContext = Depends(get_blog_context),
):
    """Get a single post with its body and related posts."""
    lang = lang or ctx.settings.default_language
    post = await find_post(ctx, year, month, slug, lang=lang)
    if post is None:
        raise BlogError(
            "Blog post not found",
            kind=ErrorKind.CONTENT_NOT_FOUND,
            details={"url_path": f"/{year}/{month:02d}/{slug}"},
        )
    all_posts = await get_all_posts(ctx, FetchOptions(lang=lang))
    return PostDetail(
        post=post,
        related=get_related_posts(all_posts, post, ctx.settings.related_posts_count),
        read_time=get_post_read_time(post, config=ctx.settings.read_time),
    )
