# schemas — Pydantic-модели ответов API и GraphQL-типы. Валидация и сериализация из коробки.
from resume_api.schemas.common import ErrorResponse, SuccessResponse

__all__ = ["SuccessResponse", "ErrorResponse"]
