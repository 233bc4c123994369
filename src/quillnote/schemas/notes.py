"""
Note Schemas

Pydantic models for Note API request/response validation.
NoteRead is also the snapshot type the draft client keeps as its baseline.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SummaryFormat(str, Enum):
    """Summary styles offered by the AI summary action."""

    EXECUTIVE = "executive"
    BULLET_POINTS = "bullet-points"
    ACTION_ITEMS = "action-items"


class NoteCreate(BaseModel):
    """Request schema for POST /notes."""

    title: str = Field(..., min_length=1, max_length=200, description="Note title")
    content: str = Field(default="", description="Formatted note content")


class NoteUpdate(BaseModel):
    """
    Request schema for PATCH /notes/{id}.

    Sparse: omitted fields are left unchanged on the stored note.
    """

    title: str | None = Field(None, min_length=1, max_length=200)
    content: str | None = None


class NoteRead(BaseModel):
    """Full Note representation."""

    id: str
    title: str
    content: str
    owner_id: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)  # Enables ORM model conversion


class DeleteResult(BaseModel):
    success: bool = True


class SummarizeRequest(BaseModel):
    """Request schema for POST /notes/{id}/summarize."""

    format: SummaryFormat = SummaryFormat.EXECUTIVE


class SummaryResponse(BaseModel):
    """Generated summary. Transient, never stored."""

    content: str
    format: SummaryFormat
