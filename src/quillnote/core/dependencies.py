"""
FastAPI dependency injection functions.
"""

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from quillnote.core.database import get_db
from quillnote.core.exceptions import Unauthenticated
from quillnote.core.security import decode_access_token
from quillnote.services import ai
from quillnote.services.notes import NoteService, Summarizer

# auto_error=False: missing credentials raise Unauthenticated, not a bare 403
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    """
    Resolve the acting user id from the bearer token.

    Raises:
        Unauthenticated: Token missing, invalid, expired, or without ``sub``.
    """
    if credentials is None:
        raise Unauthenticated()

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise Unauthenticated(detail="Token is invalid or expired")

    user_id = payload.get("sub")
    if not user_id:
        raise Unauthenticated(detail="Token carries no user id")
    return user_id


def get_summarizer() -> Summarizer:
    """Summarization port used by the service (overridable in tests)."""
    return ai.summarize


def get_note_service(
    db: AsyncSession = Depends(get_db),
    summarizer: Summarizer = Depends(get_summarizer),
) -> NoteService:
    return NoteService(db, summarizer=summarizer)
