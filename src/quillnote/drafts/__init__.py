"""Draft synchronization: debounced autosave of locally edited notes."""

from quillnote.drafts.gateway import HttpNoteGateway, LocalNoteGateway, NoteGateway
from quillnote.drafts.scheduler import CommitScheduler
from quillnote.drafts.session import DraftSession, DraftSessionClosed, SaveStatus

__all__ = [
    "CommitScheduler",
    "DraftSession",
    "DraftSessionClosed",
    "HttpNoteGateway",
    "LocalNoteGateway",
    "NoteGateway",
    "SaveStatus",
]
