"""In-memory stand-in for the auth, user and article repositories.

One store implements all three repository interfaces so cross-table behaviour
(author joins, article counts, delete cascade) matches the SQL versions.
"""

from __future__ import annotations

import copy
import itertools
from datetime import datetime, timedelta, timezone
from typing import Any

from core.db import UniqueViolation

ACCOUNT_KEYS = ("id", "email", "name", "role", "approved", "enabled", "created_at", "updated_at")


class InMemoryStore:
    def __init__(self) -> None:
        self.users: dict[int, dict] = {}
        self.articles: dict[int, dict] = {}
        self._user_ids = itertools.count(1)
        self._article_ids = itertools.count(1)
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def _tick(self) -> datetime:
        self._clock += timedelta(seconds=1)
        return self._clock

    def _account(self, row: dict) -> dict:
        return {key: row[key] for key in ACCOUNT_KEYS}

    def _with_author(self, article: dict) -> dict:
        author = self.users[article["author_id"]]
        return {**copy.deepcopy(article), "author_name": author["name"], "author_email": author["email"]}

    def _email_taken(self, email: str, *, exclude_id: int | None = None) -> bool:
        return any(u["email"] == email and u["id"] != exclude_id for u in self.users.values())

    # auth repository

    def add_user(
        self,
        *,
        email: str,
        name: str,
        password_hash: str,
        role: str,
        approved: bool,
        enabled: bool = True,
    ) -> dict:
        if self._email_taken(email):
            raise UniqueViolation("users_email_key")
        now = self._tick()
        row = {
            "id": next(self._user_ids),
            "email": email,
            "name": name,
            "password_hash": password_hash,
            "role": role,
            "approved": approved,
            "enabled": enabled,
            "created_at": now,
            "updated_at": now,
        }
        self.users[row["id"]] = row
        return self._account(row)

    async def create_user(
        self,
        *,
        email: str,
        name: str,
        password_hash: str,
        role: str,
        approved: bool,
        enabled: bool = True,
    ) -> dict:
        return self.add_user(
            email=email,
            name=name,
            password_hash=password_hash,
            role=role,
            approved=approved,
            enabled=enabled,
        )

    async def get_credentials_by_email(self, email: str) -> dict | None:
        for row in self.users.values():
            if row["email"] == email:
                return {**self._account(row), "password_hash": row["password_hash"]}
        return None

    async def get_user_by_id(self, user_id: int) -> dict | None:
        row = self.users.get(user_id)
        return self._account(row) if row else None

    # user repository

    def _filter_users(self, role: str | None, approved: bool | None) -> list[dict]:
        return [
            u
            for u in self.users.values()
            if (role is None or u["role"] == role) and (approved is None or u["approved"] == approved)
        ]

    def _article_count(self, user_id: int) -> int:
        return sum(1 for a in self.articles.values() if a["author_id"] == user_id)

    async def list_users(self, *, role: str | None, approved: bool | None, limit: int, offset: int) -> list[dict]:
        rows = sorted(self._filter_users(role, approved), key=lambda u: (u["created_at"], u["id"]), reverse=True)
        return [
            {**self._account(u), "article_count": self._article_count(u["id"])}
            for u in rows[offset:offset + limit]
        ]

    async def count_users(self, *, role: str | None, approved: bool | None) -> int:
        return len(self._filter_users(role, approved))

    async def stats(self) -> dict:
        users = list(self.users.values())
        articles = list(self.articles.values())
        return {
            "total_users": len(users),
            "pending_users": sum(1 for u in users if not u["approved"]),
            "admin_users": sum(1 for u in users if u["role"] == "ADMIN"),
            "contributor_users": sum(1 for u in users if u["role"] == "CONTRIBUTOR"),
            "total_articles": len(articles),
            "published_articles": sum(1 for a in articles if a["published"]),
        }

    async def get_user(self, user_id: int) -> dict | None:
        return await self.get_user_by_id(user_id)

    async def list_user_articles(self, user_id: int) -> list[dict]:
        rows = sorted(
            (a for a in self.articles.values() if a["author_id"] == user_id),
            key=lambda a: (a["created_at"], a["id"]),
            reverse=True,
        )
        return [
            {"id": a["id"], "title": a["title"], "published": a["published"], "views": a["views"], "created_at": a["created_at"]}
            for a in rows
        ]

    async def update_user(self, user_id: int, fields: dict[str, Any]) -> dict | None:
        row = self.users.get(user_id)
        if row is None:
            return None
        if "email" in fields and self._email_taken(fields["email"], exclude_id=user_id):
            raise UniqueViolation("users_email_key")
        row.update(fields)
        row["updated_at"] = self._tick()
        return self._account(row)

    async def set_approved(self, user_id: int, approved: bool) -> dict | None:
        return await self.update_user(user_id, {"approved": approved})

    async def set_password_hash(self, user_id: int, password_hash: str) -> bool:
        row = self.users.get(user_id)
        if row is None:
            return False
        row["password_hash"] = password_hash
        return True

    async def delete_user(self, user_id: int) -> bool:
        if self.users.pop(user_id, None) is None:
            return False
        for article_id in [a["id"] for a in self.articles.values() if a["author_id"] == user_id]:
            del self.articles[article_id]
        return True

    # article repository

    def _published_matches(
        self,
        article: dict,
        search: str | None,
        tags: list[str] | None,
        category: str | None,
        featured: bool | None,
    ) -> bool:
        if not article["published"]:
            return False
        if search:
            needle = search.lower()
            haystacks = (article["title"], article["content"] or "", article["excerpt"])
            if not any(needle in h.lower() for h in haystacks):
                return False
        if tags and not set(tags) & set(article["tags"]):
            return False
        if category is not None and article["category"] != category:
            return False
        if featured is not None and article["featured"] != featured:
            return False
        return True

    @staticmethod
    def _by_publish_date(article: dict) -> tuple:
        published_at = article["publish_date"]
        return (published_at is not None, published_at or datetime.min.replace(tzinfo=timezone.utc), article["id"])

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
        rows = [a for a in self.articles.values() if self._published_matches(a, search, tags, category, featured)]
        rows.sort(key=self._by_publish_date, reverse=True)
        return [self._with_author(a) for a in rows[offset:offset + limit]]

    async def count_published(
        self,
        *,
        search: str | None,
        tags: list[str] | None,
        category: str | None,
        featured: bool | None,
    ) -> int:
        return sum(1 for a in self.articles.values() if self._published_matches(a, search, tags, category, featured))

    async def list_featured(self, *, limit: int) -> list[dict]:
        rows = [a for a in self.articles.values() if a["published"] and a["featured"]]
        rows.sort(key=self._by_publish_date, reverse=True)
        return [self._with_author(a) for a in rows[:limit]]

    async def list_published_tags(self) -> list[str]:
        return list({tag for a in self.articles.values() if a["published"] for tag in a["tags"]})

    async def list_published_categories(self) -> list[str]:
        return list({a["category"] for a in self.articles.values() if a["published"] and a["category"] is not None})

    async def increment_views(self, article_id: int) -> dict | None:
        article = self.articles.get(article_id)
        if article is None or not article["published"]:
            return None
        article["views"] += 1
        return self._with_author(article)

    async def list_by_author(self, author_id: int, *, limit: int, offset: int) -> list[dict]:
        rows = sorted(
            (a for a in self.articles.values() if a["author_id"] == author_id),
            key=lambda a: (a["created_at"], a["id"]),
            reverse=True,
        )
        return [self._with_author(a) for a in rows[offset:offset + limit]]

    async def count_by_author(self, author_id: int) -> int:
        return self._article_count(author_id)

    async def get_article(self, article_id: int) -> dict | None:
        article = self.articles.get(article_id)
        return self._with_author(article) if article else None

    async def create_article(self, *, author_id: int, **fields: Any) -> dict:
        now = self._tick()
        article = {
            "id": next(self._article_ids),
            "views": 0,
            "created_at": now,
            "updated_at": now,
            "author_id": author_id,
            **copy.deepcopy(fields),
        }
        self.articles[article["id"]] = article
        return self._with_author(article)

    async def update_article(self, article_id: int, fields: dict[str, Any]) -> dict | None:
        article = self.articles.get(article_id)
        if article is None:
            return None
        article.update(copy.deepcopy(fields))
        article["updated_at"] = self._tick()
        return self._with_author(article)

    async def delete_article(self, article_id: int) -> bool:
        return self.articles.pop(article_id, None) is not None

    def add_article(self, author_id: int, **overrides: Any) -> dict:
        """Seed an article directly; published articles get a distinct publish_date."""
        now = self._tick()
        published = overrides.pop("published", True)
        article = {
            "id": next(self._article_ids),
            "title": "Tracking snow leopards",
            "content": "<p>Field notes from the high valleys.</p>",
            "excerpt": "Notes from a season in the mountains.",
            "category": None,
            "tags": [],
            "images": [],
            "videos": [],
            "published": published,
            "featured": False,
            "views": 0,
            "publish_date": now if published else None,
            "created_at": now,
            "updated_at": now,
            "author_id": author_id,
        }
        article.update(overrides)
        self.articles[article["id"]] = article
        return copy.deepcopy(article)
