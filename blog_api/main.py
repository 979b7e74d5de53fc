"""
Blog Content API

Thin FastAPI layer over the markdown content pipeline: post collections,
taxonomy pages and the RSS feed.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from blog_api.config import get_settings
from blog_api.errors import BlogError, ErrorKind, user_friendly_message
from blog_api.middleware import (
    RequestIDMiddleware,
    SecurityHeadersMiddleware,
    install_request_id_logging,
)
from blog_api.routers import feed, posts, taxonomy
from blog_api.services.http_client import close_shared_client

logger = logging.getLogger(__name__)

VERSION = "0.1.0"

settings = get_settings()
install_request_id_logging()

_STATUS_BY_KIND = {
    ErrorKind.CONTENT_NOT_FOUND: 404,
    ErrorKind.ROUTE_NOT_FOUND: 404,
    ErrorKind.VALIDATION: 400,
    ErrorKind.INVALID_METADATA: 500,
    ErrorKind.RSS_GENERATION: 500,
    ErrorKind.UNKNOWN: 500,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: startup and shutdown."""
    yield
    await close_shared_client()


app = FastAPI(
    title="Blog Content API",
    description="Markdown blog posts, taxonomy and RSS served from content files",
    version=VERSION,
    lifespan=lifespan,
)

# Security headers and request IDs
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestIDMiddleware)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

# Routers
app.include_router(posts.router, prefix="/api")
app.include_router(taxonomy.router, prefix="/api")
app.include_router(feed.router, prefix="/api")


@app.exception_handler(BlogError)
async def blog_error_handler(request: Request, exc: BlogError) -> JSONResponse:
    status_code = _STATUS_BY_KIND.get(exc.kind, 500)
    if status_code >= 500:
        logger.error("Blog error on %s: %s", request.url.path, exc.message)
    return JSONResponse(
        status_code=status_code,
        content={
            "detail": exc.message,
            "type": exc.kind.value,
            "message": user_friendly_message(exc),
        },
    )


def _check_config() -> str:
    """Verify required configuration is loaded. Returns 'ok' or 'fail'."""
    s = get_settings()
    if s.site_url and s.blog_uri:
        return "ok"
    return "fail"


def _check_content() -> str:
    s = get_settings()
    if s.content_base_url or Path(s.content_dir).is_dir():
        return "ok"
    return "fail"


@app.get("/api/blog/health")
async def health_check() -> JSONResponse:
    """Health check verifying configuration and content availability."""
    checks = {"config": _check_config(), "content": _check_content()}
    failed = [k for k, v in checks.items() if v != "ok"]
    if failed:
        logger.warning("Health check degraded, failed: %s", ", ".join(failed))

    result: dict[str, Any] = {
        "status": "degraded" if failed else "ok",
        "service": "blog-content-api",
        "version": VERSION,
        "checks": checks,
    }
    return JSONResponse(content=result, status_code=200)
