"""
Session Token Handling

Bearer tokens are HS256 JWTs whose ``sub`` claim is the acting user id.
Issuing sessions is the auth provider's job; ``create_access_token`` is
kept for tooling and tests.
"""

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from quillnote.core.config import settings


def create_access_token(user_id: str, expires_minutes: int = 60) -> str:
    """Create a signed access token for ``user_id``."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "iat": now,
        "exp": now + timedelta(minutes=expires_minutes),
    }
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict | None:
    """Decode and validate a JWT token. Returns payload or None if invalid."""
    try:
        return jwt.decode(
            token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM]
        )
    except JWTError:
        return None
