"""
Подключение к MongoDB.

Один MongoConnection на приложение: создаётся в main (create_app), подключается
в lifespan, лежит в app.state и передаётся резолверам через контекст GraphQL.
Перед каждым запросом ensure_connected() проверяет клиент и при необходимости
переподключается.
"""
import logging
from collections.abc import Callable

from pymongo import ASCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

from resume_api.core.config import settings
from resume_api.core.errors import StoreError

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"
RESUMES_COLLECTION = "resumedatas"


class MongoConnection:
    """Владелец MongoClient: connect / close / ensure_connected."""

    def __init__(
        self,
        uri: str | None = None,
        db_name: str | None = None,
        client_factory: Callable[..., MongoClient] = MongoClient,
    ):
        self.uri = uri if uri is not None else settings.MONGO_URI
        self.db_name = db_name or settings.MONGO_DB_NAME
        self._client_factory = client_factory
        self._client: MongoClient | None = None

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    def connect(self) -> None:
        """Создать клиент и проверить доступность (ping)."""
        client = self._client_factory(self.uri)
        client.admin.command("ping")
        self._client = client
        logger.info("Connected to MongoDB database %r", self.db_name)

    def close(self) -> None:
        """Закрыть клиент. Повторный вызов безопасен."""
        if self._client is not None:
            self._client.close()
            self._client = None
            logger.info("MongoDB connection closed")

    def ping(self) -> bool:
        if not self.is_connected:
            return False
        try:
            self._client.admin.command("ping")
        except PyMongoError:
            return False
        return True

    def ensure_connected(self) -> None:
        """Подключиться, если ещё нет; если клиент не отвечает — одна попытка переподключения."""
        if self.ping():
            return
        if self.is_connected:
            logger.warning("MongoDB ping failed, reconnecting...")
            self.close()
        try:
            self.connect()
        except PyMongoError as exc:
            logger.exception("MongoDB is unavailable: %s", exc)
            raise StoreError("Database unavailable") from exc

    @property
    def client(self) -> MongoClient:
        if self._client is None:
            raise RuntimeError("MongoDB not connected. Call connect() first.")
        return self._client

    @property
    def db(self) -> Database:
        return self.client[self.db_name]

    @property
    def users(self) -> Collection:
        """Коллекция пользователей (админ)."""
        return self.db[USERS_COLLECTION]

    @property
    def resumes(self) -> Collection:
        """Коллекция документов резюме."""
        return self.db[RESUMES_COLLECTION]

    def ensure_indexes(self) -> None:
        """username уникален; ownerId — для поиска документа владельца."""
        self.users.create_index([("username", ASCENDING)], unique=True)
        self.resumes.create_index([("ownerId", ASCENDING)])
