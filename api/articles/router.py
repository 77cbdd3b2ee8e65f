"""
Article API endpoints.

Listing, facets and single reads are public; everything else needs a bearer
token from a contributor or admin.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from auth import dependencies as auth_dependencies
from core.pagination import PageParams, page_params
from core.schemas import RowId, envelope

from . import schemas, service
from .repository import ArticleRepository, get_repository

router = APIRouter(prefix="/articles")


@router.get("")
async def list_articles(
    search: str | None = Query(default=None, max_length=200),
    tags: str | None = Query(default=None, max_length=1000, description="Comma-separated list of tags"),
    category: str | None = Query(default=None, max_length=100),
    featured: bool | None = Query(default=None),
    params: PageParams = Depends(page_params),
    repo: ArticleRepository = Depends(get_repository),
) -> dict:
    result = await service.list_published(
        repo,
        search=search,
        tags=service.parse_tags(tags),
        category=category,
        featured=featured,
        params=params,
    )
    return envelope(result)


@router.get("/featured")
async def featured_articles(repo: ArticleRepository = Depends(get_repository)) -> dict:
    return envelope({"articles": await service.list_featured(repo)})


@router.get("/tags")
async def article_tags(repo: ArticleRepository = Depends(get_repository)) -> dict:
    return envelope({"tags": await service.list_tags(repo)})


@router.get("/categories")
async def article_categories(repo: ArticleRepository = Depends(get_repository)) -> dict:
    return envelope({"categories": await service.list_categories(repo)})


@router.get("/author/{author_id}")
async def articles_by_author(
    author_id: RowId,
    params: PageParams = Depends(page_params),
    current_user: dict = Depends(auth_dependencies.get_current_user),
    repo: ArticleRepository = Depends(get_repository),
) -> dict:
    result = await service.list_by_author(repo, author_id, current_user=current_user, params=params)
    return envelope(result)


@router.get("/{article_id}")
async def get_article(
    article_id: RowId,
    repo: ArticleRepository = Depends(get_repository),
) -> dict:
    article = await service.read_published(repo, article_id)
    return envelope({"article": article})


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_article(
    payload: schemas.CreateArticleRequest,
    current_user: dict = Depends(auth_dependencies.require_contributor),
    repo: ArticleRepository = Depends(get_repository),
) -> dict:
    article = await service.create_article(repo, payload, current_user=current_user)
    return envelope({"article": article}, message="Article created successfully")


@router.put("/{article_id}")
async def update_article(
    article_id: RowId,
    payload: schemas.UpdateArticleRequest,
    current_user: dict = Depends(auth_dependencies.require_contributor),
    repo: ArticleRepository = Depends(get_repository),
) -> dict:
    article = await service.update_article(repo, article_id, payload, current_user=current_user)
    return envelope({"article": article}, message="Article updated successfully")


@router.patch("/{article_id}/publish")
async def publish_article(
    article_id: RowId,
    payload: schemas.PublishRequest,
    current_user: dict = Depends(auth_dependencies.require_contributor),
    repo: ArticleRepository = Depends(get_repository),
) -> dict:
    article = await service.set_published(repo, article_id, payload.published, current_user=current_user)
    verb = "published" if payload.published else "unpublished"
    return envelope({"article": article}, message=f"Article {verb} successfully")


@router.delete("/{article_id}")
async def delete_article(
    article_id: RowId,
    current_user: dict = Depends(auth_dependencies.require_contributor),
    repo: ArticleRepository = Depends(get_repository),
) -> dict:
    await service.delete_article(repo, article_id, current_user=current_user)
    return envelope(message="Article deleted successfully")
