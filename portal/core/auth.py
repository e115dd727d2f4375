"""
Authentication Utility - JWT and Password handling.

Provides:
- Password hashing with bcrypt (cost factor 10)
- JWT session token creation/verification (subject id only)
- FastAPI dependency reading the session cookie for protected routes
- Helpers to set and clear the session cookie
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends, Response
from fastapi.security import APIKeyCookie

from portal.core.config import get_settings
from portal.core.errors import InvalidToken, Unauthenticated

settings = get_settings()

BCRYPT_ROUNDS = 10

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)

# Session cookie extractor (we raise our own error when it is missing)
cookie_scheme = APIKeyCookie(name=settings.cookie_name, auto_error=False)


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify password against hash. Accounts without a hash never match."""
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Malformed stored hash
        return False


def create_access_token(subject_id: str, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT binding only the subject id, valid for jwt_expire_minutes."""
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode = {"sub": str(subject_id), "exp": expire}
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> str:
    """Decode and verify JWT token, returning the subject id."""
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        raise InvalidToken("Invalid or expired token") from exc

    subject_id = payload.get("sub")
    if not subject_id:
        raise InvalidToken("Invalid or expired token")
    return subject_id


async def get_current_user_id(token: Optional[str] = Depends(cookie_scheme)) -> str:
    """
    FastAPI dependency - Get the authenticated subject id from the cookie.

    Usage:
        @router.post("/protected")
        async def route(user_id: str = Depends(get_current_user_id)):
            ...
    """
    if not token:
        raise Unauthenticated()
    try:
        return decode_token(token)
    except InvalidToken as exc:
        raise Unauthenticated() from exc


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.cookie_name,
        value=token,
        max_age=settings.cookie_max_age,
        httponly=True,
        secure=settings.is_production,
        samesite=settings.cookie_samesite,
    )


def clear_session_cookie(response: Response) -> None:
    """Logout is client-side only: the token itself stays valid until it expires."""
    response.set_cookie(
        key=settings.cookie_name,
        value="",
        max_age=0,
        httponly=True,
        secure=settings.is_production,
        samesite=settings.cookie_samesite,
    )
