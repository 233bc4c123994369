"""
Notes API Router

RPC-style note operations over REST. Every endpoint requires a bearer
token; the acting user id comes from it, never from the payload.
"""

from fastapi import APIRouter, Depends, status

from quillnote.core.dependencies import get_current_user_id, get_note_service
from quillnote.schemas.notes import (
    DeleteResult,
    NoteCreate,
    NoteRead,
    NoteUpdate,
    SummarizeRequest,
    SummaryResponse,
)
from quillnote.services.notes import NoteService

router = APIRouter()


@router.get("/", response_model=list[NoteRead])
async def list_notes(
    q: str | None = None,
    user_id: str = Depends(get_current_user_id),
    service: NoteService = Depends(get_note_service),
):
    """List the caller's notes, most recently updated first."""
    return await service.list(user_id, query=q)


@router.post("/", response_model=NoteRead, status_code=status.HTTP_201_CREATED)
async def create_note(
    note: NoteCreate,
    user_id: str = Depends(get_current_user_id),
    service: NoteService = Depends(get_note_service),
):
    return await service.create(user_id, note.title, note.content)


@router.get("/{note_id}", response_model=NoteRead)
async def read_note(
    note_id: str,
    user_id: str = Depends(get_current_user_id),
    service: NoteService = Depends(get_note_service),
):
    """Retrieve a single note. 404 if missing, 403 if owned by someone else."""
    return await service.get(user_id, note_id)


@router.patch("/{note_id}", response_model=NoteRead)
async def update_note(
    note_id: str,
    changes: NoteUpdate,
    user_id: str = Depends(get_current_user_id),
    service: NoteService = Depends(get_note_service),
):
    """Sparse update: only fields present in the body are written."""
    data = changes.model_dump(exclude_unset=True)
    return await service.update(
        user_id,
        note_id,
        title=data.get("title"),
        content=data.get("content"),
    )


@router.delete("/{note_id}", response_model=DeleteResult)
async def delete_note(
    note_id: str,
    user_id: str = Depends(get_current_user_id),
    service: NoteService = Depends(get_note_service),
):
    await service.delete(user_id, note_id)
    return DeleteResult(success=True)


@router.post("/{note_id}/summarize", response_model=SummaryResponse)
async def summarize_note(
    note_id: str,
    request: SummarizeRequest,
    user_id: str = Depends(get_current_user_id),
    service: NoteService = Depends(get_note_service),
):
    """
    Generate an AI summary of the stored note content.

    Raises:
        SummarizationFailed (502): Upstream AI provider failure.
    """
    return await service.summarize(user_id, note_id, request.format)
