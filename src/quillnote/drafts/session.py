"""
Draft Session

Client-side autosave state machine for one open note.

The session keeps the user's working title/content next to the last
persisted snapshot (the baseline), debounces commits through a
CommitScheduler and exposes a save status for the editor:

    clean            working values equal the baseline
    pendingDebounce  dirty, commit timer armed (or blocked by an empty title)
    saving           a commit is being sent
    error            the last commit failed; working values are kept
    saved            display-only overlay on clean right after a commit

All state lives on one asyncio event loop. At most one session edits a
given note at a time; nothing here detects or merges concurrent writers.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable, Coroutine
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from quillnote.core.config import settings
from quillnote.core.exceptions import NoteServiceError, ValidationFailed
from quillnote.drafts.gateway import NoteGateway
from quillnote.drafts.scheduler import CommitScheduler
from quillnote.schemas.notes import NoteRead, SummaryFormat, SummaryResponse

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("title", "content")
TITLE_REQUIRED = "Please enter a title for your note"


class SaveStatus(str, Enum):
    CLEAN = "clean"
    PENDING_DEBOUNCE = "pendingDebounce"
    SAVING = "saving"
    SAVED = "saved"
    ERROR = "error"


class DraftSessionClosed(RuntimeError):
    """Raised when a closed session is edited or saved."""


class DraftSession:
    """
    Editable draft of one note with debounced autosave.

    Use ``DraftSession.new(gateway)`` for a note that does not exist yet and
    ``await DraftSession.open(gateway, note_id)`` for an existing one.

    Args:
        gateway: Note operations for the acting user.
        baseline: Last persisted note, or None for a new note.
        autosave_delay: Debounce window in seconds (AUTOSAVE_DELAY_SECONDS).
        saved_display: How long ``status`` reports ``saved`` after a
            commit (SAVED_DISPLAY_SECONDS).
        clock: Monotonic clock for the saved display window.
    """

    def __init__(
        self,
        gateway: NoteGateway,
        baseline: NoteRead | None = None,
        *,
        autosave_delay: float | None = None,
        saved_display: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._gateway = gateway
        self.baseline = baseline
        self.working_title = baseline.title if baseline else ""
        self.working_content = baseline.content if baseline else ""
        self.last_saved_at: datetime | None = None
        self.last_error: NoteServiceError | None = None
        self.validation_error: str | None = None

        self._state = SaveStatus.CLEAN
        self._closed = False
        self._ever_dirty = False
        self._edited_in_flight = False
        self._saved_mark: float | None = None
        self._saved_display = (
            settings.SAVED_DISPLAY_SECONDS if saved_display is None else saved_display
        )
        self._clock = clock
        self._scheduler = CommitScheduler(
            self._on_timer_fire,
            settings.AUTOSAVE_DELAY_SECONDS if autosave_delay is None else autosave_delay,
        )
        # One commit at a time: a create must land before anything else is sent
        self._commit_lock = asyncio.Lock()
        self._tasks: set[asyncio.Task[Any]] = set()

    @classmethod
    def new(cls, gateway: NoteGateway, **kwargs: Any) -> DraftSession:
        """Start a session for a note that has not been created yet."""
        return cls(gateway, None, **kwargs)

    @classmethod
    async def open(cls, gateway: NoteGateway, note_id: str, **kwargs: Any) -> DraftSession:
        """
        Load a persisted note and start editing it.

        Raises:
            NoteNotFound, NoteUnauthorized: From the gateway.
        """
        baseline = await gateway.get(note_id)
        return cls(gateway, baseline, **kwargs)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @property
    def note_id(self) -> str | None:
        return self.baseline.id if self.baseline else None

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def dirty(self) -> bool:
        """Working values differ from the baseline (or a new note has text)."""
        if self.baseline is None:
            return bool(self.working_title or self.working_content)
        return bool(self.pending_changes())

    @property
    def status(self) -> SaveStatus:
        if (
            self._state is SaveStatus.CLEAN
            and self._saved_mark is not None
            and self._clock() - self._saved_mark < self._saved_display
        ):
            return SaveStatus.SAVED
        return self._state

    def pending_changes(self) -> dict[str, str]:
        """Fields whose working value differs from the baseline right now."""
        if self.baseline is None:
            return {"title": self.working_title, "content": self.working_content}
        changes: dict[str, str] = {}
        if self.working_title != self.baseline.title:
            changes["title"] = self.working_title
        if self.working_content != self.baseline.content:
            changes["content"] = self.working_content
        return changes

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def edit(self, field: str, value: str) -> None:
        """
        Change a working value and (re)start the debounce window.

        Editing back to the baseline value returns the session to clean and
        cancels the timer. While a commit is in flight the status stays
        ``saving``; the outcome handler settles it afterwards.
        """
        self._ensure_open()
        if field not in EDITABLE_FIELDS:
            raise ValueError(f"Unknown note field: {field!r}")
        setattr(self, f"working_{field}", value)
        self.validation_error = None
        in_flight = self._state is SaveStatus.SAVING
        if in_flight:
            self._edited_in_flight = True

        if not self.dirty:
            self._scheduler.cancel()
            if not in_flight:
                self._state = SaveStatus.CLEAN
            return

        self._ever_dirty = True
        self._saved_mark = None
        if not in_flight:
            self._state = SaveStatus.PENDING_DEBOUNCE
        if not self.working_title.strip():
            # Known to fail server-side: hold the commit until a title exists
            self.validation_error = TITLE_REQUIRED
            self._scheduler.cancel()
            return
        self._scheduler.arm()

    def set_title(self, value: str) -> None:
        self.edit("title", value)

    def set_content(self, value: str) -> None:
        self.edit("content", value)

    async def save(self) -> NoteRead | None:
        """
        Commit now, skipping the debounce window.

        Returns:
            The persisted note. With nothing to save this is the unchanged
            baseline (None for an untouched new note) and nothing is sent.

        Raises:
            ValidationFailed: Title is blank (nothing is sent).
            NoteServiceError: The commit failed; the session is in ``error``.
        """
        self._ensure_open()
        self._scheduler.cancel()
        if not self._ever_dirty and not self.dirty:
            return self.baseline
        if not self.working_title.strip():
            self.validation_error = TITLE_REQUIRED
            raise ValidationFailed(TITLE_REQUIRED, detail="title")
        return await self._commit()

    def close(self) -> None:
        """
        End the session. Unsent edits are discarded; a commit already in
        flight completes server-side but its outcome is ignored.
        """
        if self._closed:
            return
        self._closed = True
        self._scheduler.cancel()
        if self.dirty:
            logger.info(
                "Draft for note %s closed with unsaved changes (%s)",
                self.note_id or "<new>",
                ",".join(self.pending_changes()),
            )

    async def drain(self) -> None:
        """Wait for autosave commits that have already started."""
        while True:
            running = [task for task in self._tasks if not task.done()]
            if not running:
                return
            await asyncio.gather(*running, return_exceptions=True)

    async def summarize(self, format_kind: SummaryFormat) -> SummaryResponse:
        """
        Summarize the persisted note. Does not touch the save status.

        Raises:
            ValidationFailed: Note never saved, or content is blank.
            SummarizationFailed: From the provider; callers may simply retry.
        """
        self._ensure_open()
        if self.baseline is None:
            raise ValidationFailed("Please save the note first", detail="note")
        if not self.working_content.strip() or not self.baseline.content.strip():
            raise ValidationFailed("Note content is empty", detail="content")
        return await self._gateway.summarize(self.baseline.id, format_kind)

    # ------------------------------------------------------------------
    # Commit machinery
    # ------------------------------------------------------------------

    def _ensure_open(self) -> None:
        if self._closed:
            raise DraftSessionClosed("Draft session is closed")

    def _on_timer_fire(self) -> None:
        if self._closed or self._state is not SaveStatus.PENDING_DEBOUNCE:
            return
        self._state = SaveStatus.SAVING
        self._spawn(self._autosave())

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _autosave(self) -> None:
        try:
            await self._commit()
        except NoteServiceError as e:
            logger.warning(
                "Autosave failed for note %s: %s: %s",
                self.note_id or "<new>",
                type(e).__name__,
                e.message,
            )

    async def _commit(self) -> NoteRead | None:
        async with self._commit_lock:
            if self._closed:
                return None
            if not self.working_title.strip():
                self.validation_error = TITLE_REQUIRED
                self._state = SaveStatus.PENDING_DEBOUNCE
                return None

            # Payload is computed now, not at edit time
            self._edited_in_flight = False
            changes = self.pending_changes()
            if self.baseline is not None and not changes:
                self._scheduler.cancel()
                self._state = SaveStatus.CLEAN
                return self.baseline

            self._state = SaveStatus.SAVING
            try:
                if self.baseline is None:
                    note = await self._gateway.create(
                        changes["title"], changes["content"]
                    )
                else:
                    note = await self._gateway.update(self.baseline.id, **changes)
            except NoteServiceError as e:
                if self._closed:
                    logger.debug("Ignoring failed commit for closed draft: %s", e)
                else:
                    self._commit_failed(e)
                raise

            if self._closed:
                logger.debug("Ignoring commit result for closed draft %s", note.id)
                return note
            self._commit_succeeded(note)
            return note

    def _commit_succeeded(self, note: NoteRead) -> None:
        created = self.baseline is None
        self.baseline = note
        self.last_saved_at = datetime.now(timezone.utc)
        self.last_error = None
        logger.info("Draft %s note %s", "created" if created else "saved", note.id)

        if self.dirty:
            # Edited while the commit was in flight
            self._resume_pending()
            return
        self._scheduler.cancel()
        self._state = SaveStatus.CLEAN
        self._saved_mark = self._clock()

    def _commit_failed(self, error: NoteServiceError) -> None:
        self.last_error = error
        if not self.dirty:
            # Reverted to the baseline while the commit was in flight
            self._scheduler.cancel()
            self._state = SaveStatus.CLEAN
            return
        if self._edited_in_flight:
            self._resume_pending()
            return
        self._state = SaveStatus.ERROR

    def _resume_pending(self) -> None:
        self._state = SaveStatus.PENDING_DEBOUNCE
        if self.working_title.strip():
            if not self._scheduler.pending:
                self._scheduler.arm()
        else:
            self.validation_error = TITLE_REQUIRED
