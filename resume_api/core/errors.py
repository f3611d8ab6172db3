"""
Ошибки домена. Каждая несёт короткое сообщение для клиента и код.

Код уходит в GraphQL-ответ как extensions.code, сообщение — как message.
Стектрейсы и внутренние id клиенту не отдаём.
"""
import logging
from collections.abc import Iterator
from contextlib import contextmanager

from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)


class ResumeAPIError(Exception):
    """Базовая ошибка: всё, что можно показать клиенту как есть."""

    code = "INTERNAL"
    default_message = "Request failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def extensions(self) -> dict:
        return {"code": self.code}


class Unauthenticated(ResumeAPIError):
    code = "UNAUTHENTICATED"
    default_message = "Authentication required"


class InvalidCredentials(ResumeAPIError):
    # Одно сообщение на все причины, чтобы не подсказывать, что именно не совпало
    code = "INVALID_CREDENTIALS"
    default_message = "Invalid credentials"


class NotFound(ResumeAPIError):
    code = "NOT_FOUND"
    default_message = "Resume data not found"


class ParseError(ResumeAPIError):
    code = "PARSE_ERROR"
    default_message = "Invalid JSON data"


class StoreError(ResumeAPIError):
    code = "STORE_ERROR"
    default_message = "Database error"


@contextmanager
def store_errors(message: str) -> Iterator[None]:
    """Ошибку pymongo залогировать целиком, наружу отдать StoreError с коротким текстом."""
    try:
        yield
    except PyMongoError as exc:
        logger.exception("%s: %s", message, exc)
        raise StoreError(message) from exc
