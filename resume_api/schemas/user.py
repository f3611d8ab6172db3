"""
Схемы для пользователей и авторизации.
"""
from datetime import datetime

from pydantic import BaseModel


class User(BaseModel):
    """Пользователь в ответах API (без хеша пароля)."""

    id: str
    username: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class AuthPayload(BaseModel):
    """Результат логина: JWT, срок действия и пользователь."""

    token: str
    expires_at: datetime
    user: User
