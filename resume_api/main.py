"""
Точка входа FastAPI.

lifespan: подключение/отключение MongoDB при старте/остановке.
CORS, exception handlers (структурированные ответы), GraphQL на /graphql, health.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from resume_api.core.config import settings
from resume_api.core.database import MongoConnection
from resume_api.middleware.rate_limit import RateLimitMiddleware
from resume_api.routers import graphql, health
from resume_api.schemas.common import ErrorResponse, SuccessResponse

# Логирование
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Жизненный цикл: при старте — проверка конфига и подключение к Mongo, при остановке — отключение."""
    if settings.is_production:
        problems = settings.production_problems()
        if problems:
            for problem in problems:
                logger.error("Configuration error: %s", problem)
            raise RuntimeError("Refusing to start in production: " + "; ".join(problems))

    connection: MongoConnection = app.state.mongo
    logger.info("Starting up: connecting to MongoDB...")
    connection.connect()
    connection.ensure_indexes()
    yield
    logger.info("Shutting down: closing MongoDB...")
    connection.close()


def create_app(
    connection: MongoConnection | None = None,
    rate_limit: tuple[int, int] | None = None,
) -> FastAPI:
    """Собрать приложение. connection и rate_limit подменяются в тестах."""
    app = FastAPI(
        title="CV API",
        description="GraphQL API резюме (/graphql). REST: /health. Структурированные ответы: success, data / error, message.",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.mongo = connection or MongoConnection()

    # CORS — список origins из конфига (добавляем первым, выполняется после rate limit)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_list(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    # Rate limit по IP — выполняется первым
    app.add_middleware(RateLimitMiddleware, limit=rate_limit)

    # Обработчик неожиданных исключений — структурированный ответ
    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s: %s", request.url.path, exc)
        body = ErrorResponse(error="internal_server_error", message="An unexpected error occurred")
        return JSONResponse(status_code=500, content=body.model_dump())

    # Обработчик HTTPException (и 404/405 самого Starlette) — структурированный ответ
    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        detail = exc.detail
        if isinstance(detail, dict) and "error" in detail and "message" in detail:
            body = ErrorResponse(error=detail["error"], message=detail["message"])
        else:
            body = ErrorResponse(error="request_failed", message=str(detail) if detail else "Request failed")
        return JSONResponse(status_code=exc.status_code, content=body.model_dump())

    # Обработчик валидации (422) — структурированный ответ
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        msg = "; ".join(f"{e.get('loc', [])}: {e.get('msg', '')}" for e in errors[:3])
        body = ErrorResponse(error="validation_error", message=msg or "Validation failed")
        return JSONResponse(status_code=422, content=body.model_dump())

    # Корень — структурированный ответ
    @app.get("/", response_model=SuccessResponse[dict])
    def root():
        return SuccessResponse(data={"message": "CV API", "graphql": "/graphql", "health": "/health"})

    # Роутеры
    app.include_router(health.router)
    app.include_router(graphql.create_graphql_router(), prefix="/graphql")
    return app


app = create_app()
