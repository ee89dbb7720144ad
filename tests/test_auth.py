from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from tubely_backend.auth import (
    AuthenticationError,
    get_bearer_token,
    make_jwt,
    validate_jwt,
)

SECRET = "test-secret"


def test_get_bearer_token_extracts_token() -> None:
    assert get_bearer_token({"Authorization": "Bearer abc.def.ghi"}) == "abc.def.ghi"


@pytest.mark.parametrize(
    "headers",
    [
        {},
        {"Authorization": ""},
        {"Authorization": "Basic dXNlcjpwYXNz"},
        {"Authorization": "Bearer"},
        {"Authorization": "Bearer   "},
    ],
)
def test_get_bearer_token_rejects_missing_or_malformed(headers) -> None:
    with pytest.raises(AuthenticationError):
        get_bearer_token(headers)


def test_validate_jwt_returns_subject() -> None:
    user_id = uuid.uuid4()
    token = make_jwt(user_id, SECRET, timedelta(minutes=5))

    assert validate_jwt(token, SECRET) == user_id


def test_validate_jwt_rejects_wrong_secret() -> None:
    token = make_jwt(uuid.uuid4(), SECRET, timedelta(minutes=5))

    with pytest.raises(AuthenticationError, match="invalid access token"):
        validate_jwt(token, "another-secret")


def test_validate_jwt_rejects_expired_token() -> None:
    token = make_jwt(uuid.uuid4(), SECRET, timedelta(seconds=-30))

    with pytest.raises(AuthenticationError):
        validate_jwt(token, SECRET)


def test_validate_jwt_rejects_foreign_issuer() -> None:
    expires = datetime.now(timezone.utc) + timedelta(minutes=5)
    token = jwt.encode(
        {"iss": "someone-else", "sub": str(uuid.uuid4()), "exp": expires},
        SECRET,
        algorithm="HS256",
    )

    with pytest.raises(AuthenticationError):
        validate_jwt(token, SECRET)


def test_validate_jwt_requires_uuid_subject() -> None:
    expires = datetime.now(timezone.utc) + timedelta(minutes=5)
    token = jwt.encode(
        {"iss": "tubely-access", "sub": "not-a-uuid", "exp": expires},
        SECRET,
        algorithm="HS256",
    )

    with pytest.raises(AuthenticationError, match="not a user id"):
        validate_jwt(token, SECRET)
