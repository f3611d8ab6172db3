"""
Конфигурация приложения из переменных окружения.

Один класс Settings (pydantic-settings), все секреты и настройки читаются из .env.
В коде используем только settings.*, не os.getenv.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_JWT_SECRET = "change-me-in-production"
DEFAULT_ADMIN_PASSWORD = "admin123"


class Settings(BaseSettings):
    """Настройки из env."""

    # development | production
    ENVIRONMENT: str = "development"

    # MongoDB: локально в dev, Atlas в проде
    MONGO_URI: str = "mongodb://localhost:27017"
    MONGO_DB_NAME: str = "cv-app"

    # CORS: список origin через запятую в .env (по умолчанию dev-сервер Angular)
    CORS_ORIGINS: str = "http://localhost:4200,http://localhost:3000"

    # Rate limit: запросов с одного IP за окно (например, "100/minute" — 100 в минуту)
    RATE_LIMIT: str = "100/minute"

    # Логирование
    LOG_LEVEL: str = "INFO"

    # JWT
    JWT_SECRET: str = DEFAULT_JWT_SECRET
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_MINUTES: int = 60 * 24 * 7  # 7 дней

    # Админ, который создаётся при первом логине с этими данными
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str = DEFAULT_ADMIN_PASSWORD

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.strip().lower() == "production"

    def cors_list(self) -> list[str]:
        """CORS origins как список для CORSMiddleware."""
        return [x.strip() for x in self.CORS_ORIGINS.split(",") if x.strip()]

    def rate_limit_parsed(self) -> tuple[int, int]:
        """RATE_LIMIT разобрать в (max_requests, window_seconds). Пример: '100/minute' -> (100, 60)."""
        s = self.RATE_LIMIT.strip().lower().replace(" ", "")
        if "/" not in s:
            return 100, 60
        part, window = s.split("/", 1)
        try:
            max_req = int(part)
        except ValueError:
            return 100, 60
        if window in ("minute", "min", "m"):
            return max_req, 60
        if window in ("hour", "h"):
            return max_req, 3600
        if window in ("second", "sec", "s"):
            return max_req, 1
        return max_req, 60

    def production_problems(self) -> list[str]:
        """Что мешает запуску в проде. Пустой список — всё ок."""
        problems = []
        if not self.MONGO_URI:
            problems.append("MONGO_URI is not set")
        elif "localhost" in self.MONGO_URI or "127.0.0.1" in self.MONGO_URI:
            problems.append("MONGO_URI points to localhost")
        if self.JWT_SECRET == DEFAULT_JWT_SECRET:
            problems.append("JWT_SECRET must be changed")
        if not self.ADMIN_USERNAME:
            problems.append("ADMIN_USERNAME is not set")
        if self.ADMIN_PASSWORD == DEFAULT_ADMIN_PASSWORD:
            problems.append("ADMIN_PASSWORD must be changed from default")
        return problems


# Глобальный экземпляр — импортируй: from resume_api.core.config import settings
settings = Settings()
