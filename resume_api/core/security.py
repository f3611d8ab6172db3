"""
Безопасность: JWT access token и хеширование паролей.
"""
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext

from resume_api.core.config import settings
from resume_api.core.errors import Unauthenticated

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

BEARER_PREFIX = "bearer "


def hash_password(password: str) -> str:
    """Хешировать пароль."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Проверить пароль."""
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(user_id: str, username: str) -> tuple[str, datetime]:
    """Создать access token. Возвращает (token, момент истечения)."""
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    claims = {"sub": user_id, "username": username, "exp": expire, "type": "access"}
    token = jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
    return token, expire


def decode_access_token(token: str) -> dict:
    """
    Проверить подпись и срок действия. Возвращает claims.
    Любая проблема (подпись, exp, формат, тип токена) — Unauthenticated.
    """
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as exc:
        raise Unauthenticated() from exc
    if payload.get("type") != "access" or not payload.get("sub"):
        raise Unauthenticated()
    return payload


def bearer_token(authorization: str | None) -> str:
    """Достать токен из заголовка 'Authorization: Bearer <token>'."""
    if not authorization or not authorization.lower().startswith(BEARER_PREFIX):
        raise Unauthenticated()
    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        raise Unauthenticated()
    return token
