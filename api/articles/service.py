"""
Article business logic.

Publish state rule: whenever `published` is written (create, update or the
publish toggle) `publish_date` is rewritten with it: now() for true, NULL for
false. Rewriting happens even when the value does not change.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from auth import policy
from core import media
from core.errors import Forbidden, NotFound
from core.pagination import PageParams, pagination_block

from . import schemas
from .repository import ArticleRepository

logger = logging.getLogger(__name__)

FEATURED_LIMIT = 6


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def publish_date_for(published: bool) -> datetime | None:
    return _utc_now() if published else None


def parse_tags(raw: str | None) -> list[str] | None:
    """
    "a, b,,c" -> ["a", "b", "c"]; None when nothing usable was given.
    """
    if not raw:
        return None
    tags = [tag.strip() for tag in raw.split(",") if tag.strip()]
    return tags or None


def _to_image(image: dict) -> schemas.ImageResponse:
    payload = {**image, "sizes": media.image_sizes(image.get("id"), str(image.get("url") or ""))}
    return schemas.ImageResponse.model_validate(payload)


def to_article_response(row: dict) -> schemas.ArticleResponse:
    return schemas.ArticleResponse(
        id=int(row["id"]),
        title=str(row["title"]),
        content=str(row["content"] or ""),
        excerpt=str(row["excerpt"]),
        category=row.get("category"),
        tags=list(row.get("tags") or []),
        images=[_to_image(image) for image in row.get("images") or []],
        videos=[schemas.VideoDescriptor.model_validate(video) for video in row.get("videos") or []],
        published=bool(row["published"]),
        featured=bool(row["featured"]),
        views=int(row["views"]),
        publish_date=row.get("publish_date"),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        author_id=int(row["author_id"]),
        author=schemas.AuthorSummary(
            id=int(row["author_id"]),
            name=str(row["author_name"]),
            email=str(row["author_email"]),
        ),
    )


async def list_published(
    repo: ArticleRepository,
    *,
    search: str | None,
    tags: list[str] | None,
    category: str | None,
    featured: bool | None,
    params: PageParams,
) -> dict:
    search = (search or "").strip() or None
    category = (category or "").strip() or None
    rows = await repo.list_published(
        search=search,
        tags=tags,
        category=category,
        featured=featured,
        limit=params.limit,
        offset=params.offset,
    )
    total = await repo.count_published(search=search, tags=tags, category=category, featured=featured)
    return {
        "articles": [to_article_response(row) for row in rows],
        "pagination": pagination_block(params, total),
    }


async def list_featured(repo: ArticleRepository) -> list[schemas.ArticleResponse]:
    rows = await repo.list_featured(limit=FEATURED_LIMIT)
    return [to_article_response(row) for row in rows]


async def list_tags(repo: ArticleRepository) -> list[str]:
    return sorted(set(await repo.list_published_tags()))


async def list_categories(repo: ArticleRepository) -> list[str]:
    return sorted({c for c in await repo.list_published_categories() if c})


async def read_published(repo: ArticleRepository, article_id: int) -> schemas.ArticleResponse:
    # Drafts answer 404 like missing articles and are never counted.
    row = await repo.increment_views(article_id)
    if row is None:
        raise NotFound("Article not found")
    return to_article_response(row)


async def list_by_author(
    repo: ArticleRepository,
    author_id: int,
    *,
    current_user: dict,
    params: PageParams,
) -> dict:
    if not policy.owns_or_admin(current_user, author_id):
        raise Forbidden("You can only access your own articles")

    rows = await repo.list_by_author(author_id, limit=params.limit, offset=params.offset)
    total = await repo.count_by_author(author_id)
    return {
        "articles": [to_article_response(row) for row in rows],
        "pagination": pagination_block(params, total),
    }


async def create_article(
    repo: ArticleRepository,
    payload: schemas.CreateArticleRequest,
    *,
    current_user: dict,
) -> schemas.ArticleResponse:
    row = await repo.create_article(
        author_id=int(current_user["id"]),
        title=payload.title,
        content=payload.content,
        excerpt=payload.excerpt,
        category=payload.category,
        tags=payload.tags,
        images=[image.model_dump() for image in payload.images],
        videos=[video.model_dump() for video in payload.videos],
        published=payload.published,
        featured=payload.featured,
        publish_date=publish_date_for(payload.published),
    )
    logger.info(
        "article_created article_id=%s author_id=%s published=%s",
        row["id"],
        row["author_id"],
        row["published"],
    )
    return to_article_response(row)


async def _load_owned(repo: ArticleRepository, article_id: int, *, current_user: dict, action: str) -> dict:
    existing = await repo.get_article(article_id)
    if existing is None:
        raise NotFound("Article not found")
    policy.ensure_owns_or_admin(
        current_user,
        int(existing["author_id"]),
        detail=f"You can only {action} your own articles",
    )
    return existing


async def update_article(
    repo: ArticleRepository,
    article_id: int,
    payload: schemas.UpdateArticleRequest,
    *,
    current_user: dict,
) -> schemas.ArticleResponse:
    await _load_owned(repo, article_id, current_user=current_user, action="edit")

    fields = payload.model_dump(exclude_unset=True)
    if "published" in fields:
        fields["publish_date"] = publish_date_for(fields["published"])

    row = await repo.update_article(article_id, fields)
    if row is None:
        raise NotFound("Article not found")
    logger.info("article_updated article_id=%s fields=%s", article_id, sorted(fields))
    return to_article_response(row)


async def set_published(
    repo: ArticleRepository,
    article_id: int,
    published: bool,
    *,
    current_user: dict,
) -> schemas.ArticleResponse:
    await _load_owned(repo, article_id, current_user=current_user, action="publish")

    row = await repo.update_article(
        article_id,
        {"published": published, "publish_date": publish_date_for(published)},
    )
    if row is None:
        raise NotFound("Article not found")
    logger.info("article_publish_toggled article_id=%s published=%s", article_id, published)
    return to_article_response(row)


async def delete_article(repo: ArticleRepository, article_id: int, *, current_user: dict) -> None:
    await _load_owned(repo, article_id, current_user=current_user, action="delete")

    if not await repo.delete_article(article_id):
        raise NotFound("Article not found")
    logger.info("article_deleted article_id=%s", article_id)
