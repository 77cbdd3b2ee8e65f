"""Shared fixtures: app wired to the in-memory store, account and token helpers."""

from __future__ import annotations

from typing import Callable

import pytest
from fastapi.testclient import TestClient

from articles import repository as articles_repository
from auth import repository as auth_repository
from auth import security
from fakes import InMemoryStore
from main import app
from users import repository as users_repository

DEFAULT_PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def fast_hashing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(security, "BCRYPT_ROUNDS", 4)
    monkeypatch.setenv("JWT_SECRET", "test-secret")
    monkeypatch.delenv("CLOUDINARY_CLOUD_NAME", raising=False)


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def client(store: InMemoryStore):
    for get_repository in (
        auth_repository.get_repository,
        users_repository.get_repository,
        articles_repository.get_repository,
    ):
        app.dependency_overrides[get_repository] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_account(store: InMemoryStore) -> Callable[..., dict]:
    counter = {"n": 0}

    def _make(
        role: str = "CONTRIBUTOR",
        *,
        approved: bool = True,
        enabled: bool = True,
        email: str | None = None,
        name: str | None = None,
        password: str = DEFAULT_PASSWORD,
    ) -> dict:
        counter["n"] += 1
        n = counter["n"]
        # Direct write to the store; bypasses the API on purpose.
        row = store.add_user(
            email=email or f"user{n}@example.org",
            name=name or f"User {n}",
            password_hash=security.hash_password(password),
            role=role,
            approved=approved,
            enabled=enabled,
        )
        return row

    return _make


def bearer(account: dict) -> dict[str, str]:
    token = security.build_access_token(user_id=account["id"], email=account["email"], role=account["role"])
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers() -> Callable[[dict], dict[str, str]]:
    return bearer


@pytest.fixture
def admin(make_account) -> dict:
    return make_account("ADMIN", name="Admin One")


@pytest.fixture
def contributor(make_account) -> dict:
    return make_account("CONTRIBUTOR", name="Casey Contributor")


@pytest.fixture
def make_article(store: InMemoryStore) -> Callable[..., dict]:
    return store.add_article
