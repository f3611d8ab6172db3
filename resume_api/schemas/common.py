"""
Конверт REST-ответов (/, /health, ошибки middleware и exception handlers).

Успех: { "success": true, "data": <payload> }
Ошибка: { "success": false, "error": "<code>", "message": "<text>" }

GraphQL отвечает в своём формате: data / errors[].message / errors[].extensions.code.
"""
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class SuccessResponse(BaseModel, Generic[T]):
    """Успешный ответ: success=true, data — полезная нагрузка."""

    success: bool = True
    data: T | None = Field(default=None, description="Тело ответа")


class ErrorResponse(BaseModel):
    """Ответ с ошибкой: success=false, error и message."""

    success: bool = False
    error: str = Field(..., description="Код ошибки (например, rate_limit_exceeded, validation_error)")
    message: str = Field(..., description="Человекочитаемое сообщение")
