"""RSS feed endpoint."""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from blog_api.services.context import BlogContext, get_blog_context
from blog_api.services.rss import render_site_feed

router = APIRouter(prefix="/blog", tags=["feed"])


@router.get("/rss.xml")
async def get_rss_feed(
    lang: str | None = Query(default=None, pattern=r"^[a-zA-Z-]{2,10}$"),
    ctx: BlogContext = Depends(get_blog_context),
):
    """Serve the RSS 2.0 feed of the most recent posts."""
    xml = await render_site_feed(ctx, lang)
    return Response(
        content=xml,
        media_type="application/rss+xml; charset=utf-8",
        headers={"Cache-Control": f"public, max-age={int(ctx.settings.cache_ttl)}"},
    )
