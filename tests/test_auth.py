"""Токены, логин (с созданием админа) и проверка Bearer-заголовка."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from resume_api.core.config import settings
from resume_api.core.errors import InvalidCredentials, Unauthenticated
from resume_api.core.security import bearer_token, create_access_token, decode_access_token
from resume_api.services import auth as auth_service

from conftest import auth_header, make_user


def _expired_token(user_id: str) -> str:
    claims = {
        "sub": user_id,
        "username": "ghost",
        "type": "access",
        "exp": datetime.now(timezone.utc) - timedelta(minutes=1),
    }
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def test_access_token_round_trip():
    token, expires_at = create_access_token("abc", "admin")

    payload = decode_access_token(token)

    assert payload["sub"] == "abc"
    assert payload["username"] == "admin"
    assert expires_at > datetime.now(timezone.utc)


def test_decode_rejects_expired_and_forged_tokens():
    with pytest.raises(Unauthenticated):
        decode_access_token(_expired_token("abc"))

    forged = jwt.encode({"sub": "abc", "type": "access"}, "other-secret", algorithm="HS256")
    with pytest.raises(Unauthenticated):
        decode_access_token(forged)

    with pytest.raises(Unauthenticated):
        decode_access_token("not-a-jwt")


def test_decode_rejects_non_access_token():
    token = jwt.encode({"sub": "abc", "type": "refresh"}, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
    with pytest.raises(Unauthenticated):
        decode_access_token(token)


@pytest.mark.parametrize("header", [None, "", "Token abc", "Bearer ", "Basic dXNlcjpwYXNz"])
def test_bearer_token_requires_bearer_scheme(header):
    with pytest.raises(Unauthenticated):
        bearer_token(header)


def test_bearer_token_is_case_insensitive_on_scheme():
    assert bearer_token("bearer abc.def") == "abc.def"
    assert bearer_token("Bearer abc.def") == "abc.def"


def test_bootstrap_admin_login_creates_user_once(users):
    first = auth_service.login(users, settings.ADMIN_USERNAME, settings.ADMIN_PASSWORD)
    second = auth_service.login(users, settings.ADMIN_USERNAME, settings.ADMIN_PASSWORD)

    assert users.count_documents({"username": settings.ADMIN_USERNAME}) == 1
    assert first.user.id == second.user.id
    assert decode_access_token(first.token)["sub"] == first.user.id
    stored = users.find_one({"username": settings.ADMIN_USERNAME})
    assert stored["passwordHash"] != settings.ADMIN_PASSWORD
    assert stored["lastLogin"] is not None


def test_login_existing_user(users):
    user = make_user(users, "jane", "correct horse")

    payload = auth_service.login(users, "jane", "correct horse")

    assert payload.user.id == str(user["_id"])
    assert payload.user.username == "jane"


def test_login_failures_share_one_message(users):
    make_user(users, "jane", "correct horse")

    with pytest.raises(InvalidCredentials) as wrong_password:
        auth_service.login(users, "jane", "battery staple")
    with pytest.raises(InvalidCredentials) as unknown_user:
        auth_service.login(users, "nobody", "battery staple")

    assert str(wrong_password.value) == str(unknown_user.value) == "Invalid credentials"
    assert users.count_documents({}) == 1


def test_admin_username_with_wrong_password_does_not_create_user(users):
    with pytest.raises(InvalidCredentials):
        auth_service.login(users, settings.ADMIN_USERNAME, "wrong")

    assert users.count_documents({}) == 0


def test_authenticate_returns_user_for_valid_header(users):
    user = make_user(users, "jane")

    found = auth_service.authenticate(users, auth_header(user)["Authorization"])

    assert found["_id"] == user["_id"]


def test_authenticate_rejects_deleted_user_and_bad_subject(users):
    user = make_user(users, "jane")
    header = auth_header(user)["Authorization"]
    users.delete_one({"_id": user["_id"]})

    with pytest.raises(Unauthenticated):
        auth_service.authenticate(users, header)

    token, _ = create_access_token("not-an-object-id", "jane")
    with pytest.raises(Unauthenticated):
        auth_service.authenticate(users, f"Bearer {token}")


def test_current_user_or_none(users):
    user = make_user(users, "jane")

    assert auth_service.current_user_or_none(users, None) is None
    assert auth_service.current_user_or_none(users, f"Bearer {_expired_token(str(user['_id']))}") is None
    assert auth_service.current_user_or_none(users, auth_header(user)["Authorization"])["username"] == "jane"


def test_doc_to_user_hides_password_hash(users):
    user = make_user(users, "jane")

    result = auth_service.doc_to_user(user)

    assert result.id == str(user["_id"])
    assert "passwordHash" not in result.model_dump()
    assert not hasattr(result, "password_hash")
