"""Models package - re-exports all models for convenient imports."""

from quillnote.models.base import Base, TimestampMixin
from quillnote.models.note import Note

__all__ = [
    "Base",
    "TimestampMixin",
    "Note",
]
