"""
Note Errors

Error taxonomy shared by the note service, the HTTP layer and the draft
client. Every error is terminal for the call that raised it.
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse

NO_ACCESS_MESSAGE = "You can't access this note."


class NoteServiceError(Exception):
    """
    Base class for all note errors.

    Attributes:
        message: Short machine-stable description.
        detail: Optional extra context (provider error text, field name...).
        status_code: HTTP status used when the error crosses the API.
        user_message: Text safe to show in the editor UI.
    """

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Note operation failed"
    user_message: str = "Something went wrong with this note."

    def __init__(self, message: str | None = None, detail: str | None = None):
        self.message = message or self.default_message
        self.detail = detail
        super().__init__(self.message)


class NoteNotFound(NoteServiceError):
    """No record exists with the requested id."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Note not found"
    user_message = NO_ACCESS_MESSAGE


class NoteUnauthorized(NoteServiceError):
    """The record exists but belongs to another user."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Unauthorized"
    user_message = NO_ACCESS_MESSAGE


class ValidationFailed(NoteServiceError):
    status_code = status.HTTP_422_UNPROCESSABLE_CONTENT
    default_message = "Validation failed"
    user_message = "Please fix the highlighted fields."


class SummarizationFailed(NoteServiceError):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = (
        "Failed to generate summary. Please check your AI API configuration."
    )
    user_message = "Summary generation failed. Try regenerating."


class Unauthenticated(NoteServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"
    user_message = "Please sign in again."


class GatewayError(NoteServiceError):
    """Raised client-side when the notes API cannot be reached."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Notes service unreachable"
    user_message = "Can't reach the server. Your changes are kept locally."


ERROR_TYPES: dict[str, type[NoteServiceError]] = {
    cls.__name__: cls
    for cls in (
        NoteNotFound,
        NoteUnauthorized,
        ValidationFailed,
        SummarizationFailed,
        Unauthenticated,
        GatewayError,
    )
}


async def note_error_handler(request: Request, exc: NoteServiceError) -> JSONResponse:
    """Render a NoteServiceError with a consistent JSON body."""
    headers = (
        {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthenticated) else None
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.message,
            "detail": exc.detail,
            "type": type(exc).__name__,
        },
        headers=headers,
    )
