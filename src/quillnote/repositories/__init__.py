"""Repositories package."""

from quillnote.repositories.notes import MUTABLE_COLUMNS, NoteRepository, note_repository

__all__ = [
    "MUTABLE_COLUMNS",
    "NoteRepository",
    "note_repository",
]
