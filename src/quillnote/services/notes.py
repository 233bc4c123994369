"""
Note Service

Access-controlled wrapper around the note repository. Every read and write
checks that the acting user owns the record: existence first (NoteNotFound),
then ownership (NoteUnauthorized).

Concurrent writes to one note from two sessions are not detected; the last
write wins.
"""

import logging
import uuid
from collections.abc import Awaitable, Callable, Sequence
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from quillnote.core.exceptions import NoteNotFound, NoteUnauthorized, ValidationFailed
from quillnote.models import Note
from quillnote.repositories import notes as repo
from quillnote.schemas.notes import SummaryFormat, SummaryResponse

logger = logging.getLogger(__name__)

Summarizer = Callable[[str, SummaryFormat], Awaitable[str]]


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _require_title(title: str) -> None:
    if not title.strip():
        raise ValidationFailed("Title is required", detail="title")


class NoteService:
    """
    Ownership-checked note operations for one database session.

    Args:
        session: Request-scoped database session.
        summarizer: Summarization port ``(text, format) -> text``.
    """

    def __init__(self, session: AsyncSession, summarizer: Summarizer | None = None):
        self.session = session
        self.summarizer = summarizer

    async def _owned(self, acting_user_id: str, note_id: str) -> Note:
        note = await repo.get_by_id(self.session, note_id)
        if note is None:
            logger.info("Note %s not found (user=%s)", note_id, acting_user_id)
            raise NoteNotFound()
        if note.owner_id != acting_user_id:
            logger.warning(
                "User %s denied access to note %s owned by another user",
                acting_user_id,
                note_id,
            )
            raise NoteUnauthorized()
        return note

    async def list(
        self, acting_user_id: str, query: str | None = None
    ) -> Sequence[Note]:
        """Notes owned by the acting user, most recently updated first."""
        return await repo.list_by_owner(self.session, acting_user_id, query)

    async def get(self, acting_user_id: str, note_id: str) -> Note:
        return await self._owned(acting_user_id, note_id)

    async def create(self, acting_user_id: str, title: str, content: str = "") -> Note:
        """Insert a note owned by the acting user. Title must be non-blank."""
        _require_title(title)
        now = _now()
        note = await repo.create(
            self.session,
            {
                "id": str(uuid.uuid4()),
                "title": title,
                "content": content,
                "owner_id": acting_user_id,
                "created_at": now,
                "updated_at": now,
            },
        )
        logger.info("Note %s created (user=%s)", note.id, acting_user_id)
        return note

    async def update(
        self,
        acting_user_id: str,
        note_id: str,
        *,
        title: str | None = None,
        content: str | None = None,
    ) -> Note:
        """
        Sparse update: only fields passed as non-None are written.

        updated_at moves on every call, even when no value differs.
        """
        note = await self._owned(acting_user_id, note_id)
        fields: dict[str, object] = {"updated_at": _now()}
        if title is not None:
            _require_title(title)
            fields["title"] = title
        if content is not None:
            fields["content"] = content
        note = await repo.update_fields(self.session, note, fields)
        logger.info(
            "Note %s updated (fields=%s)",
            note_id,
            ",".join(sorted(k for k in fields if k != "updated_at")) or "-",
        )
        return note

    async def delete(self, acting_user_id: str, note_id: str) -> None:
        note = await self._owned(acting_user_id, note_id)
        await repo.delete(self.session, note)
        logger.info("Note %s deleted (user=%s)", note_id, acting_user_id)

    async def summarize(
        self,
        acting_user_id: str,
        note_id: str,
        format_kind: SummaryFormat,
    ) -> SummaryResponse:
        """
        Summarize the persisted content of an owned note.

        Raises:
            ValidationFailed: Stored content is blank (port is not called).
            SummarizationFailed: Raised by the port, passed through.
        """
        if self.summarizer is None:
            raise RuntimeError("NoteService was built without a summarizer")
        note = await self._owned(acting_user_id, note_id)
        if not note.content.strip():
            raise ValidationFailed("Note content is empty", detail="content")
        text = await self.summarizer(note.content, format_kind)
        return SummaryResponse(content=text, format=format_kind)
