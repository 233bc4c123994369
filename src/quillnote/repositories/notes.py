"""
Note Repository

Data access layer for Note rows. Knows nothing about ownership checks:
the service decides who may touch a note, this module only reads and
writes it. All methods expect an externally managed session.
"""

from collections.abc import Sequence
from typing import Any

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from quillnote.models import Note

# Columns a sparse update may set; id and owner_id are fixed at creation
MUTABLE_COLUMNS = frozenset({"title", "content", "updated_at"})


class NoteRepository:
    """Repository for Note rows."""

    async def insert(self, session: AsyncSession, values: dict[str, Any]) -> Note:
        """
        Insert a note and return it refreshed from the database.

        Args:
            session: Active database session.
            values: Complete column values, including id, owner_id and
                both timestamps.
        """
        note = Note(**values)
        session.add(note)
        await session.commit()
        await session.refresh(note)
        return note

    async def get(self, session: AsyncSession, note_id: str) -> Note | None:
        result = await session.execute(select(Note).where(Note.id == note_id))
        return result.scalars().first()

    async def list_by_owner(
        self,
        session: AsyncSession,
        owner_id: str,
        query: str | None = None,
    ) -> Sequence[Note]:
        """
        List an owner's notes, most recently updated first.

        Args:
            session: Database session.
            owner_id: Owning user id.
            query: Optional case-insensitive substring matched against
                title and content.
        """
        stmt = select(Note).where(Note.owner_id == owner_id)
        if query:
            pattern = f"%{query}%"
            stmt = stmt.where(
                or_(Note.title.ilike(pattern), Note.content.ilike(pattern))
            )
        stmt = stmt.order_by(Note.updated_at.desc())
        result = await session.execute(stmt)
        return result.scalars().all()

    async def update_fields(
        self,
        session: AsyncSession,
        note: Note,
        fields: dict[str, Any],
    ) -> Note:
        """
        Write a sparse set of column values.

        Only the keys present in ``fields`` are touched.

        Raises:
            ValueError: A key outside MUTABLE_COLUMNS was given.
        """
        unknown = set(fields) - MUTABLE_COLUMNS
        if unknown:
            raise ValueError(f"Not updatable on notes: {', '.join(sorted(unknown))}")
        for column, value in fields.items():
            setattr(note, column, value)
        await session.commit()
        await session.refresh(note)
        return note

    async def delete(self, session: AsyncSession, note: Note) -> None:
        await session.delete(note)
        await session.commit()


# Module-level instance for function-based API
note_repository = NoteRepository()


# ============================================================================
# Function-based API (delegates to repository instance)
# Provides a simpler import pattern: `from repositories import notes as repo`
# ============================================================================


async def create(session: AsyncSession, data: dict[str, Any]) -> Note:
    """Insert a new note."""
    return await note_repository.insert(session, data)


async def get_by_id(session: AsyncSession, note_id: str) -> Note | None:
    """Get a note by ID."""
    return await note_repository.get(session, note_id)


async def list_by_owner(
    session: AsyncSession,
    owner_id: str,
    query: str | None = None,
) -> Sequence[Note]:
    """List notes owned by ``owner_id``."""
    return await note_repository.list_by_owner(session, owner_id, query)


async def update_fields(
    session: AsyncSession,
    note: Note,
    fields: dict[str, Any],
) -> Note:
    """Apply a sparse set of column values."""
    return await note_repository.update_fields(session, note, fields)


async def delete(session: AsyncSession, note: Note) -> None:
    """Remove a note."""
    await note_repository.delete(session, note)
