"""Общие фикстуры: MongoDB в памяти (mongomock), приложение и токены."""

from __future__ import annotations

from collections.abc import Generator
from datetime import datetime, timezone

import mongomock
import pytest
from fastapi.testclient import TestClient

from resume_api.core.config import settings
from resume_api.core.database import MongoConnection
from resume_api.core.security import create_access_token, hash_password
from resume_api.main import create_app


@pytest.fixture
def connection() -> Generator[MongoConnection]:
    """MongoConnection поверх mongomock. Переподключение отдаёт тот же клиент."""
    mongo_client = mongomock.MongoClient()
    conn = MongoConnection(
        uri="mongodb://test",
        db_name="cv-test",
        client_factory=lambda uri: mongo_client,
    )
    conn.connect()
    conn.ensure_indexes()
    yield conn
    conn.close()


@pytest.fixture
def users(connection: MongoConnection):
    return connection.users


@pytest.fixture
def resumes(connection: MongoConnection):
    return connection.resumes


@pytest.fixture
def client(connection: MongoConnection) -> Generator[TestClient]:
    """TestClient с lifespan: подключение к тестовой базе при входе."""
    with TestClient(create_app(connection=connection)) as test_client:
        yield test_client


def make_user(users, username: str, password: str = "secret-password") -> dict:
    """Создать пользователя напрямую в коллекции."""
    now = datetime.now(timezone.utc)
    doc = {
        "username": username,
        "passwordHash": hash_password(password),
        "createdAt": now,
        "updatedAt": now,
    }
    doc["_id"] = users.insert_one(doc).inserted_id
    return doc


def auth_header(user: dict) -> dict[str, str]:
    token, _ = create_access_token(str(user["_id"]), user["username"])
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin(users) -> dict:
    return make_user(users, settings.ADMIN_USERNAME, settings.ADMIN_PASSWORD)


@pytest.fixture
def admin_headers(admin: dict) -> dict[str, str]:
    return auth_header(admin)


def gql(client: TestClient, query: str, variables: dict | None = None, headers: dict | None = None) -> dict:
    """POST /graphql и вернуть JSON ответа."""
    response = client.post(
        "/graphql",
        json={"query": query, "variables": variables or {}},
        headers=headers or {},
    )
    assert response.status_code == 200, response.text
    return response.json()
