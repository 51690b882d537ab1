"""
Exception hierarchy for the mock interview backend.

Every error carries an HTTP status so the API layer can render it without
knowing where it was raised.
"""

from typing import Any, Dict, Optional

from fastapi import status


class InterviewPrepError(Exception):
    """Base exception for all application errors."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(InterviewPrepError):
    """Raised when request input is rejected before any pipeline work."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class AuthenticationError(InterviewPrepError):
    status_code = status.HTTP_401_UNAUTHORIZED


class AuthorizationError(InterviewPrepError):
    """
    Raised when a document or session is missing or owned by someone else.

    Both cases share one message so the caller cannot probe for other
    users' resources.
    """

    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, resource: str, resource_id: str) -> None:
        super().__init__(
            "Not authorized to access this resource",
            {"resource": resource, "resource_id": resource_id},
        )


class NotFoundError(InterviewPrepError):
    status_code = status.HTTP_404_NOT_FOUND


class ConcurrentUpdateError(InterviewPrepError):
    """Raised when a session changed between read and append."""

    status_code = status.HTTP_409_CONFLICT

    def __init__(self, chat_id: str) -> None:
        super().__init__(
            "Chat session was modified by another request, please retry",
            {"chat_id": chat_id},
        )


class InterviewCompleteError(InterviewPrepError):
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, chat_id: str) -> None:
        super().__init__(
            "All interview questions have been answered",
            {"chat_id": chat_id},
        )


class ExtractionError(InterviewPrepError):
    """Raised when a PDF cannot be read or yields no text."""

    status_code = status.HTTP_400_BAD_REQUEST


class EmbeddingError(InterviewPrepError):
    """Raised when the embedding backend fails, times out or returns a bad vector."""

    status_code = status.HTTP_502_BAD_GATEWAY


class StorageError(InterviewPrepError):
    status_code = status.HTTP_502_BAD_GATEWAY


class LanguageModelError(InterviewPrepError):
    """Raised when the language model is unavailable or returns nothing usable."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
