"""Bearer-token extraction and JWT validation for API callers."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Mapping

from fastapi import Depends, HTTPException, Request, status
from jose import JWTError, jwt

from .settings import Settings, get_settings

logger = logging.getLogger(__name__)

TOKEN_ISSUER = "tubely-access"


class AuthenticationError(Exception):
    """Raised when a request does not carry a usable credential."""


def get_bearer_token(headers: Mapping[str, str]) -> str:
    """Return the token from an ``Authorization: Bearer <token>`` header."""
    authorization = headers.get("authorization") or headers.get("Authorization")
    if not authorization:
        raise AuthenticationError("authorization header is missing")

    scheme, _, token = authorization.strip().partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise AuthenticationError("authorization header is not a bearer credential")

    return token


def make_jwt(
    user_id: uuid.UUID,
    secret: str,
    expires_in: timedelta,
    *,
    algorithm: str = "HS256",
) -> str:
    """Issue a signed access token whose subject is the user id."""
    issued_at = datetime.now(timezone.utc)
    claims = {
        "iss": TOKEN_ISSUER,
        "sub": str(user_id),
        "iat": issued_at,
        "exp": issued_at + expires_in,
    }
    return jwt.encode(claims, secret, algorithm=algorithm)


def validate_jwt(token: str, secret: str, *, algorithm: str = "HS256") -> uuid.UUID:
    """Verify the token signature and claims, returning the caller's user id."""
    try:
        claims = jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            issuer=TOKEN_ISSUER,
        )
    except JWTError as exc:
        raise AuthenticationError(f"invalid access token: {exc}") from exc

    subject = claims.get("sub")
    if not isinstance(subject, str):
        raise AuthenticationError("access token has no subject")

    try:
        return uuid.UUID(subject)
    except ValueError as exc:
        raise AuthenticationError("access token subject is not a user id") from exc


def get_current_user_id(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> uuid.UUID:
    """Resolve the authenticated caller from the request's bearer credential."""
    try:
        token = get_bearer_token(request.headers)
    except AuthenticationError as exc:
        logger.info("Rejected request without bearer token: %s", exc)
        raise HTTPException(
            status.HTTP_401_UNAUTHORIZED,
            detail="Couldn't find JWT",
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc

    try:
        return validate_jwt(token, settings.jwt_secret, algorithm=settings.jwt_algorithm)
    except AuthenticationError as exc:
        logger.info("Rejected request with invalid JWT: %s", exc)
        raise HTTPException(
            status.HTTP_401_UNAUTHORIZED,
            detail="Couldn't validate JWT",
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc


__all__ = [
    "AuthenticationError",
    "TOKEN_ISSUER",
    "get_bearer_token",
    "get_current_user_id",
    "make_jwt",
    "validate_jwt",
]
