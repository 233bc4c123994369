"""
Note Gateways

The draft session reaches the note service through ``NoteGateway``.
Two adapters are provided:

    - LocalNoteGateway: in-process, one database session per call.
    - HttpNoteGateway: the HTTP API via httpx, errors mapped back to the
      NoteServiceError taxonomy.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from quillnote.core.exceptions import (
    ERROR_TYPES,
    GatewayError,
    NoteNotFound,
    NoteServiceError,
    NoteUnauthorized,
    SummarizationFailed,
    Unauthenticated,
    ValidationFailed,
)
from quillnote.schemas.notes import NoteRead, SummaryFormat, SummaryResponse
from quillnote.services.notes import NoteService, Summarizer

logger = logging.getLogger(__name__)

NOTES_PATH = "/api/v1/notes"

_STATUS_ERRORS: dict[int, type[NoteServiceError]] = {
    401: Unauthenticated,
    403: NoteUnauthorized,
    404: NoteNotFound,
    422: ValidationFailed,
    502: SummarizationFailed,
}


class NoteGateway(Protocol):
    """Note operations on behalf of one authenticated user."""

    async def list(self, query: str | None = None) -> list[NoteRead]: ...

    async def get(self, note_id: str) -> NoteRead: ...

    async def create(self, title: str, content: str) -> NoteRead: ...

    async def update(
        self,
        note_id: str,
        *,
        title: str | None = None,
        content: str | None = None,
    ) -> NoteRead: ...

    async def delete(self, note_id: str) -> None: ...

    async def summarize(
        self, note_id: str, format_kind: SummaryFormat
    ) -> SummaryResponse: ...


class LocalNoteGateway:
    """
    In-process gateway bound to an acting user.

    Args:
        session_factory: Async session maker; a fresh session per call.
        user_id: Acting user id.
        summarizer: Summarization port passed to the service.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        user_id: str,
        summarizer: Summarizer | None = None,
    ) -> None:
        self._session_factory = session_factory
        self.user_id = user_id
        self._summarizer = summarizer

    async def list(self, query: str | None = None) -> list[NoteRead]:
        async with self._session_factory() as session:
            notes = await NoteService(session).list(self.user_id, query)
            return [NoteRead.model_validate(n) for n in notes]

    async def get(self, note_id: str) -> NoteRead:
        async with self._session_factory() as session:
            note = await NoteService(session).get(self.user_id, note_id)
            return NoteRead.model_validate(note)

    async def create(self, title: str, content: str) -> NoteRead:
        async with self._session_factory() as session:
            note = await NoteService(session).create(self.user_id, title, content)
            return NoteRead.model_validate(note)

    async def update(
        self,
        note_id: str,
        *,
        title: str | None = None,
        content: str | None = None,
    ) -> NoteRead:
        async with self._session_factory() as session:
            note = await NoteService(session).update(
                self.user_id, note_id, title=title, content=content
            )
            return NoteRead.model_validate(note)

    async def delete(self, note_id: str) -> None:
        async with self._session_factory() as session:
            await NoteService(session).delete(self.user_id, note_id)

    async def summarize(
        self, note_id: str, format_kind: SummaryFormat
    ) -> SummaryResponse:
        async with self._session_factory() as session:
            service = NoteService(session, summarizer=self._summarizer)
            return await service.summarize(self.user_id, note_id, format_kind)


class HttpNoteGateway:
    """
    Gateway over the HTTP API.

    The client must carry the base URL and the bearer token, e.g.::

        client = httpx.AsyncClient(
            base_url="http://localhost:8000",
            headers={"Authorization": f"Bearer {token}"},
        )
        gateway = HttpNoteGateway(client)
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    @classmethod
    def connect(cls, base_url: str, token: str, timeout: float = 10.0) -> HttpNoteGateway:
        """Build a gateway with its own client (close it with ``aclose``)."""
        client = httpx.AsyncClient(
            base_url=base_url,
            headers={"Authorization": f"Bearer {token}"},
            timeout=timeout,
        )
        return cls(client)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TransportError as e:
            logger.warning("Notes API unreachable (%s %s): %s", method, path, e)
            raise GatewayError(detail=str(e)) from e

        if response.is_success:
            return response.json()
        raise self._error_from(response)

    @staticmethod
    def _error_from(response: httpx.Response) -> NoteServiceError:
        """Rebuild the typed error from an error response body."""
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        error_cls = ERROR_TYPES.get(str(body.get("type")))
        if error_cls is None:
            error_cls = _STATUS_ERRORS.get(response.status_code, NoteServiceError)
        message = body.get("error")
        detail = body.get("detail")
        return error_cls(
            message if isinstance(message, str) else None,
            detail=detail if isinstance(detail, str) else None,
        )

    async def list(self, query: str | None = None) -> list[NoteRead]:
        params = {"q": query} if query else None
        data = await self._request("GET", f"{NOTES_PATH}/", params=params)
        return [NoteRead.model_validate(item) for item in data]

    async def get(self, note_id: str) -> NoteRead:
        data = await self._request("GET", f"{NOTES_PATH}/{note_id}")
        return NoteRead.model_validate(data)

    async def create(self, title: str, content: str) -> NoteRead:
        data = await self._request(
            "POST", f"{NOTES_PATH}/", json={"title": title, "content": content}
        )
        return NoteRead.model_validate(data)

    async def update(
        self,
        note_id: str,
        *,
        title: str | None = None,
        content: str | None = None,
    ) -> NoteRead:
        payload: dict[str, str] = {}
        if title is not None:
            payload["title"] = title
        if content is not None:
            payload["content"] = content
        data = await self._request("PATCH", f"{NOTES_PATH}/{note_id}", json=payload)
        return NoteRead.model_validate(data)

    async def delete(self, note_id: str) -> None:
        await self._request("DELETE", f"{NOTES_PATH}/{note_id}")

    async def summarize(
        self, note_id: str, format_kind: SummaryFormat
    ) -> SummaryResponse:
        data = await self._request(
            "POST",
            f"{NOTES_PATH}/{note_id}/summarize",
            json={"format": SummaryFormat(format_kind).value},
        )
        return SummaryResponse.model_validate(data)
