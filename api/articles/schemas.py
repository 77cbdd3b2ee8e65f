"""
Article API schemas (request/response models).
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import Field, StringConstraints, field_validator

from core.schemas import ApiModel

Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=5)]
Excerpt = Annotated[str, StringConstraints(strip_whitespace=True, min_length=10, max_length=500)]
Category = Annotated[str, StringConstraints(strip_whitespace=True, max_length=100)]


class ImageDescriptor(ApiModel):
    # Client-supplied "sizes" are ignored; they are derived on every read.
    id: str | None = None
    url: str = Field(..., min_length=1)
    caption: str = ""
    alt: str = ""


class VideoDescriptor(ApiModel):
    id: str | None = None
    url: str = Field(..., min_length=1)
    caption: str = ""
    thumbnail: str | None = None
    duration: float | None = None
    format: str | None = None


class ImageResponse(ImageDescriptor):
    sizes: dict[str, str] = Field(default_factory=dict)


def _clean_tags(tags: list[str]) -> list[str]:
    return [tag.strip() for tag in tags if tag and tag.strip()]


def _clean_category(category: str | None) -> str | None:
    return category or None


class CreateArticleRequest(ApiModel):
    title: Title
    excerpt: Excerpt
    content: str = ""
    category: Category | None = None
    tags: list[str] = Field(default_factory=list)
    images: list[ImageDescriptor] = Field(default_factory=list)
    videos: list[VideoDescriptor] = Field(default_factory=list)
    published: bool = False
    featured: bool = False

    @field_validator("tags")
    @classmethod
    def _strip_tags(cls, value: list[str]) -> list[str]:
        return _clean_tags(value)

    @field_validator("category")
    @classmethod
    def _blank_category(cls, value: str | None) -> str | None:
        return _clean_category(value)


class UpdateArticleRequest(ApiModel):
    title: Title | None = None
    excerpt: Excerpt | None = None
    content: str | None = None
    category: Category | None = None
    tags: list[str] | None = None
    images: list[ImageDescriptor] | None = None
    videos: list[VideoDescriptor] | None = None
    published: bool | None = None
    featured: bool | None = None

    @field_validator("title", "excerpt", "content", "tags", "images", "videos", "published", "featured")
    @classmethod
    def _reject_null(cls, value):
        # Only runs for values actually sent; `category: null` clears the category.
        if value is None:
            raise ValueError("may not be null")
        return value

    @field_validator("tags")
    @classmethod
    def _strip_tags(cls, value: list[str]) -> list[str]:
        return _clean_tags(value)

    @field_validator("category")
    @classmethod
    def _blank_category(cls, value: str | None) -> str | None:
        return _clean_category(value)


class PublishRequest(ApiModel):
    published: bool


class AuthorSummary(ApiModel):
    id: int
    name: str
    email: str


class ArticleResponse(ApiModel):
    id: int
    title: str
    content: str
    excerpt: str
    category: str | None = None
    tags: list[str] = Field(default_factory=list)
    images: list[ImageResponse] = Field(default_factory=list)
    videos: list[VideoDescriptor] = Field(default_factory=list)
    published: bool
    featured: bool
    views: int
    publish_date: datetime | None = None
    created_at: datetime
    updated_at: datetime
    author_id: int
    author: AuthorSummary
