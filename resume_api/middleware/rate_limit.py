"""
Rate limit по IP: защищает в первую очередь login от перебора паролей.

Лимит задаётся в config: RATE_LIMIT (например, "100/minute").
При превышении — 429, Retry-After и структурированный ответ ErrorResponse.
"""
import logging
import time
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from resume_api.core.config import settings
from resume_api.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)

# Пробы оркестратора не считаем
EXEMPT_PATHS = frozenset({"/health"})

# Сколько IP держим в памяти, прежде чем чистить истёкшие окна
MAX_TRACKED_CLIENTS = 10_000


def client_ip(request: Request) -> str:
    """IP клиента: X-Forwarded-For (первый) или request.client.host."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client:
        return request.client.host
    return "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Фиксированное окно на каждый IP."""

    def __init__(
        self,
        app,
        limit: tuple[int, int] | None = None,
        key_func: Callable[[Request], str] | None = None,
        max_clients: int = MAX_TRACKED_CLIENTS,
    ):
        super().__init__(app)
        self.key_func = key_func or client_ip
        self.max_requests, self.window_seconds = limit or settings.rate_limit_parsed()
        self.max_clients = max_clients
        # ip -> (count, window_start)
        self._windows: dict[str, tuple[int, float]] = {}

    def _hit(self, key: str, now: float) -> tuple[int, float]:
        count, start = self._windows.get(key, (0, now))
        if now - start >= self.window_seconds:
            count, start = 0, now
        self._windows[key] = (count + 1, start)
        if len(self._windows) > self.max_clients:
            self._evict_expired(now)
        return count + 1, start

    def _evict_expired(self, now: float) -> None:
        expired = [k for k, (_, start) in self._windows.items() if now - start >= self.window_seconds]
        for k in expired:
            del self._windows[k]

    async def dispatch(self, request: Request, call_next):
        if request.url.path in EXEMPT_PATHS:
            return await call_next(request)

        key = self.key_func(request)
        now = time.monotonic()
        count, start = self._hit(key, now)
        if count > self.max_requests:
            logger.warning("Rate limit exceeded for %s on %s", key, request.url.path)
            retry_after = max(1, int(self.window_seconds - (now - start)))
            body = ErrorResponse(
                error="rate_limit_exceeded",
                message=f"Too many requests. Limit: {self.max_requests} per {self.window_seconds}s.",
            )
            return JSONResponse(
                status_code=429,
                content=body.model_dump(),
                headers={"Retry-After": str(retry_after)},
            )
        return await call_next(request)
