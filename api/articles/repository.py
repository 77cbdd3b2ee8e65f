"""
Article persistence (raw SQL).

Every read joins the author so callers get `author_name`/`author_email`
alongside the article columns.
"""

from __future__ import annotations

from typing import Any

from fastapi import Depends

from core.db import Database, get_database

ARTICLE_COLUMNS = (
    "id",
    "title",
    "content",
    "excerpt",
    "category",
    "tags",
    "images",
    "videos",
    "published",
    "featured",
    "views",
    "publish_date",
    "created_at",
    "updated_at",
    "author_id",
)

# Whitelisted columns for partial updates: field name -> SQL column.
UPDATABLE_COLUMNS = {
    "title": "title",
    "content": "content",
    "excerpt": "excerpt",
    "category": "category",
    "tags": "tags",
    "images": "images",
    "videos": "videos",
    "published": "published",
    "featured": "featured",
    "publish_date": "publish_date",
}


def _select_list(alias: str) -> str:
    columns = ", ".join(f"{alias}.{c}" for c in ARTICLE_COLUMNS)
    return f"{columns}, u.name AS author_name, u.email AS author_email"


def like_pattern(term: str) -> str:
    """
    Case-insensitive substring pattern; wildcards in `term` match literally.
    """
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


_PUBLISHED_FILTER = """
    WHERE a.published = true
      AND ($1::text IS NULL
           OR a.title ILIKE $1
           OR a.content ILIKE $1
           OR a.excerpt ILIKE $1)
      AND ($2::text[] IS NULL OR a.tags && $2::text[])
      AND ($3::text IS NULL OR a.category = $3)
      AND ($4::boolean IS NULL OR a.featured = $4)
"""


class ArticleRepository:
    def __init__(self, db: Database):
        self.db = db

    async def list_published(
        self,
        *,
        search: str | None,
        tags: list[str] | None,
        category: str | None,
        featured: bool | None,
        limit: int,
        offset: int,
    ) -> list[dict]:
        return await self.db.fetch_all(
            f"""
            SELECT {_select_list("a")}
            FROM articles a
            JOIN users u ON u.id = a.author_id
            {_PUBLISHED_FILTER}
            ORDER BY a.publish_date DESC NULLS LAST, a.id DESC
            LIMIT $5 OFFSET $6
            """,
            like_pattern(search) if search else None,
            tags or None,
            category,
            featured,
            limit,
            offset,
        )

    async def count_published(
        self,
        *,
        search: str | None,
        tags: list[str] | None,
        category: str | None,
        featured: bool | None,
    ) -> int:
        total = await self.db.fetch_val(
            f"""
            SELECT count(*)
            FROM articles a
            {_PUBLISHED_FILTER}
            """,
            like_pattern(search) if search else None,
            tags or None,
            category,
            featured,
        )
        return int(total or 0)

    async def list_featured(self, *, limit: int) -> list[dict]:
        return await self.db.fetch_all(
            f"""
            SELECT {_select_list("a")}
            FROM articles a
            JOIN users u ON u.id = a.author_id
            WHERE a.published = true
              AND a.featured = true
            ORDER BY a.publish_date DESC NULLS LAST, a.id DESC
            LIMIT $1
            """,
            limit,
        )

    async def list_published_tags(self) -> list[str]:
        rows = await self.db.fetch_all(
            """
            SELECT DISTINCT unnest(tags) AS tag
            FROM articles
            WHERE published = true
            """
        )
        return [str(row["tag"]) for row in rows]

    async def list_published_categories(self) -> list[str]:
        rows = await self.db.fetch_all(
            """
            SELECT DISTINCT category
            FROM articles
            WHERE published = true
              AND category IS NOT NULL
            """
        )
        return [str(row["category"]) for row in rows]

    async def increment_views(self, article_id: int) -> dict | None:
        """
        Atomically bump the view counter of a published article.

        Returns the row with the post-increment count, or None when the
        article does not exist or is not published (nothing is incremented).
        """
        return await self.db.fetch_one(
            f"""
            WITH bumped AS (
                UPDATE articles
                SET views = views + 1
                WHERE id = $1
                  AND published = true
                RETURNING *
            )
            SELECT {_select_list("b")}
            FROM bumped b
            JOIN users u ON u.id = b.author_id
            """,
            article_id,
        )

    async def list_by_author(self, author_id: int, *, limit: int, offset: int) -> list[dict]:
        return await self.db.fetch_all(
            f"""
            SELECT {_select_list("a")}
            FROM articles a
            JOIN users u ON u.id = a.author_id
            WHERE a.author_id = $1
            ORDER BY a.created_at DESC, a.id DESC
            LIMIT $2 OFFSET $3
            """,
            author_id,
            limit,
            offset,
        )

    async def count_by_author(self, author_id: int) -> int:
        total = await self.db.fetch_val(
            """
            SELECT count(*)
            FROM articles
            WHERE author_id = $1
            """,
            author_id,
        )
        return int(total or 0)

    async def get_article(self, article_id: int) -> dict | None:
        """
        Fetch an article in any publish state (ownership checks, admin reads).
        """
        return await self.db.fetch_one(
            f"""
            SELECT {_select_list("a")}
            FROM articles a
            JOIN users u ON u.id = a.author_id
            WHERE a.id = $1
            """,
            article_id,
        )

    async def create_article(
        self,
        *,
        author_id: int,
        title: str,
        content: str,
        excerpt: str,
        category: str | None,
        tags: list[str],
        images: list[dict],
        videos: list[dict],
        published: bool,
        featured: bool,
        publish_date: Any,
    ) -> dict:
        row = await self.db.fetch_one(
            f"""
            WITH inserted AS (
                INSERT INTO articles (
                    title, content, excerpt, category, tags, images, videos,
                    published, featured, publish_date, author_id
                )
                VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11)
                RETURNING *
            )
            SELECT {_select_list("i")}
            FROM inserted i
            JOIN users u ON u.id = i.author_id
            """,
            title,
            content,
            excerpt,
            category,
            tags,
            images,
            videos,
            published,
            featured,
            publish_date,
            author_id,
        )
        if row is None:
            raise RuntimeError("Failed to create article.")
        return row

    async def update_article(self, article_id: int, fields: dict[str, Any]) -> dict | None:
        if not fields:
            return await self.get_article(article_id)

        assignments: list[str] = []
        args: list[Any] = [article_id]
        for key, value in fields.items():
            args.append(value)
            assignments.append(f"{UPDATABLE_COLUMNS[key]} = ${len(args)}")

        return await self.db.fetch_one(
            f"""
            WITH updated AS (
                UPDATE articles
                SET {", ".join(assignments)},
                    updated_at = now()
                WHERE id = $1
                RETURNING *
            )
            SELECT {_select_list("d")}
            FROM updated d
            JOIN users u ON u.id = d.author_id
            """,
            *args,
        )

    async def delete_article(self, article_id: int) -> bool:
        row = await self.db.fetch_one(
            """
            DELETE FROM articles
            WHERE id = $1
            RETURNING id
            """,
            article_id,
        )
        return row is not None


def get_repository(db: Database = Depends(get_database)) -> ArticleRepository:
    return ArticleRepository(db)
