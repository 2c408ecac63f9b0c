#!/usr/bin/env python3
import hashlib
import hmac
import secrets
from dataclasses import dataclass
from datetime import timedelta

from fastapi import Header, HTTPException, Request, status
from jose import JWTError, jwt

from droneplanner.core.config import Settings
from droneplanner.core.timeutils import utcnow


PASSWORD_SCHEME = "pbkdf2_sha256"
PASSWORD_ITERATIONS = 390_000


@dataclass(frozen=True)
class Principal:
    """Authenticated caller, passed explicitly to every /api handler."""
    user_id: str


def hash_password(password: str, iterations: int = PASSWORD_ITERATIONS) -> str:
    salt = secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), iterations)
    return f"{PASSWORD_SCHEME}${iterations}${salt}${digest.hex()}"


def verify_password(password: str, stored: str) -> bool:
    try:
        scheme, iterations, salt, expected = stored.split("$")
    except ValueError:
        return False
    if scheme != PASSWORD_SCHEME:
        return False
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), int(iterations))
    return hmac.compare_digest(digest.hex(), expected)


def create_access_token(subject: str, settings: Settings, expires_delta: timedelta | None = None) -> str:
    now = utcnow()
    expire = now + (expires_delta or timedelta(hours=settings.ACCESS_TOKEN_EXPIRE_HOURS))
    claims = {"sub": subject, "iat": int(now.timestamp()), "exp": int(expire.timestamp())}
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_subject(token: str, settings: Settings) -> str:
    """Return the ``sub`` claim of a valid token, raising 401 otherwise."""
    try:
        claims = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise unauthorized("Invalid token")

    subject = claims.get("sub")
    if not isinstance(subject, str) or not subject:
        raise unauthorized("Invalid user ID in token")
    return subject


def unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_principal(
    request: Request,
    authorization: str | None = Header(None),
) -> Principal:
    if not authorization:
        raise unauthorized("Authorization header is required")

    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        raise unauthorized("Invalid authorization header format")

    settings: Settings = request.app.state.settings
    return Principal(user_id=decode_subject(parts[1], settings))
