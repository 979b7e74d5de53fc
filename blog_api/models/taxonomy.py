"""Taxonomy (category / tag) data models."""

from pydantic import BaseModel, ConfigDict

from blog_api.models.post import Post


class CategoryDescriptor(BaseModel):
    """Display metadata for a category, from the descriptor file."""

    model_config = ConfigDict(extra="allow", frozen=True)

    title: str | None = None
    description: str | None = None
    image: str | None = None
    alt: str | None = None


class CategoryPage(BaseModel):
    """Posts filed under one category."""

    slug: str
    category: str
    description: str | None = None
    image: str | None = None
    image_alt: str | None = None
    posts: list[Post]
    total: int


class TagPage(BaseModel):
    """Posts carrying one tag."""

    slug: str
    tag: str
    posts: list[Post]
    total: int


class TermList(BaseModel):
    """Popular categories or tags, most used first."""

    terms: list[str]
