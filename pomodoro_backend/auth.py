"""Session authentication: resolves the signed session cookie to a user ID"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import HTTPException, Request
from jose import jwt, JWTError

from pomodoro_backend.config import SESSION_ALGORITHM, SESSION_COOKIE_NAME, SESSION_SECRET

logger = logging.getLogger(__name__)

SESSION_MAX_AGE = timedelta(days=7)


def create_session_token(user_id: str, expires_in: timedelta = SESSION_MAX_AGE) -> str:
    """
    Sign a session token for a user.

    The sign-in flow that issues cookies lives outside this service; this
    helper produces tokens it accepts.

    Args:
        user_id: User ID stored in the 'sub' claim
        expires_in: Token lifetime

    Returns:
        Compact JWS string
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "iat": int(now.timestamp()),
        "exp": int((now + expires_in).timestamp()),
    }
    return jwt.encode(payload, SESSION_SECRET, algorithm=SESSION_ALGORITHM)


def decode_session_token(token: str) -> Optional[str]:
    """
    Verify a session token and return its user ID.

    Returns:
        User ID from the 'sub' claim, or None if the token is invalid or expired
    """
    try:
        payload = jwt.decode(
            token,
            SESSION_SECRET,
            algorithms=[SESSION_ALGORITHM],
            options={"verify_aud": False}
        )
    except jwt.ExpiredSignatureError:
        logger.warning("Session token has expired")
        return None
    except JWTError as e:
        logger.warning(f"Session token validation failed: {str(e)}")
        return None

    user_id = payload.get("sub")
    if not user_id:
        logger.warning("Session token payload missing 'sub' claim")
        return None
    return str(user_id)


def _extract_token(request: Request) -> Optional[str]:
    """Session token from the cookie, falling back to a Bearer header"""
    token = request.cookies.get(SESSION_COOKIE_NAME)
    if token:
        return token

    authorization = request.headers.get("Authorization")
    if authorization:
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer" and credentials:
            return credentials.strip()
        logger.warning("Invalid Authorization header format")
    return None


async def get_current_user_id_optional(request: Request) -> Optional[str]:
    """
    Authenticated user lookup - returns the user ID or None

    Useful for endpoints that work differently for authenticated vs anonymous users
    """
    token = _extract_token(request)
    if not token:
        return None
    return decode_session_token(token)


async def get_current_user_id(request: Request) -> str:
    """
    FastAPI dependency requiring an authenticated user

    Raises:
        HTTPException: 401 if no valid session is present
    """
    user_id = await get_current_user_id_optional(request)
    if not user_id:
        raise HTTPException(
            status_code=401,
            detail="User not authenticated"
        )
    return user_id
