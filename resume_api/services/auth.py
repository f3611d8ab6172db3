"""
Авторизация: логин (с созданием админа при первом входе) и проверка Bearer-токена.
"""
import logging
from datetime import datetime, timezone

from bson import ObjectId
from bson.errors import InvalidId
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError

from resume_api.core.config import settings
from resume_api.core.errors import InvalidCredentials, Unauthenticated
from resume_api.core.security import (
    bearer_token,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from resume_api.schemas.user import AuthPayload, User

logger = logging.getLogger(__name__)


def doc_to_user(doc: dict) -> User:
    """Документ MongoDB -> User."""
    return User(
        id=str(doc["_id"]),
        username=doc["username"],
        created_at=doc.get("createdAt"),
        updated_at=doc.get("updatedAt"),
    )


def _is_bootstrap_admin(username: str, password: str) -> bool:
    return bool(settings.ADMIN_USERNAME) and (
        username == settings.ADMIN_USERNAME and password == settings.ADMIN_PASSWORD
    )


def _create_admin(users: Collection, username: str, password: str) -> dict:
    """Создать админа из настроек. Если параллельный логин успел раньше — взять его запись."""
    now = datetime.now(timezone.utc)
    user_doc = {
        "username": username,
        "passwordHash": hash_password(password),
        "lastLogin": None,
        "createdAt": now,
        "updatedAt": now,
    }
    try:
        result = users.insert_one(user_doc)
    except DuplicateKeyError:
        return users.find_one({"username": username})
    user_doc["_id"] = result.inserted_id
    logger.info("Created admin user %r", username)
    return user_doc


def login(users: Collection, username: str, password: str) -> AuthPayload:
    """Проверить логин/пароль и выдать токен. На любую неудачу — InvalidCredentials."""
    user = users.find_one({"username": username})
    if user is None and _is_bootstrap_admin(username, password):
        user = _create_admin(users, username, password)

    if not user or not user.get("passwordHash"):
        logger.warning("Failed login for %r", username)
        raise InvalidCredentials()
    if not verify_password(password, user["passwordHash"]):
        logger.warning("Failed login for %r", username)
        raise InvalidCredentials()

    users.update_one(
        {"_id": user["_id"]},
        {"$set": {"lastLogin": datetime.now(timezone.utc)}},
    )

    token, expires_at = create_access_token(str(user["_id"]), user["username"])
    return AuthPayload(token=token, expires_at=expires_at, user=doc_to_user(user))


def authenticate(users: Collection, authorization: str | None) -> dict:
    """
    Заголовок Authorization -> документ пользователя.
    Нет заголовка, плохой/просроченный токен, пользователь удалён — Unauthenticated.
    """
    payload = decode_access_token(bearer_token(authorization))
    try:
        user_id = ObjectId(payload["sub"])
    except (InvalidId, TypeError) as exc:
        raise Unauthenticated() from exc
    user = users.find_one({"_id": user_id})
    if user is None:
        raise Unauthenticated()
    return user


def current_user_or_none(users: Collection, authorization: str | None) -> dict | None:
    """Как authenticate, но без ошибки: для публичного запроса me."""
    try:
        return authenticate(users, authorization)
    except Unauthenticated:
        return None
