"""
Note Model

Core entity: a free-form rich-text note owned by exactly one user.
"""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from quillnote.models.base import Base, TimestampMixin


class Note(Base, TimestampMixin):
    """
    Note entity.

    Attributes:
        id: Opaque uuid4 text, assigned at creation.
        title: Non-empty title (max 200 chars).
        content: Formatted markup, stored as an opaque string.
        owner_id: Owning user; never changes after creation.
    """

    __tablename__ = "notes"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    title: Mapped[str] = mapped_column(String(200))
    content: Mapped[str] = mapped_column(Text, default="")
    owner_id: Mapped[str] = mapped_column(String(64), index=True)

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, owner={self.owner_id}, title='{self.title[:20]}')>"
