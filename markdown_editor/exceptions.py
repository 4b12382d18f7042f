"""Typed action errors.

Handlers raise these instead of returning failure envelopes; the
exception handlers in ``main`` translate them into ``{code, message}``
responses with the matching HTTP status.
"""

from fastapi import status


class ActionError(Exception):
    """Base class for errors surfaced to action callers."""

    code: str = "INTERNAL_SERVER_ERROR"
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class UnauthorizedError(ActionError):
    code = "UNAUTHORIZED"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "You must be signed in to perform this action."


class NotFoundError(ActionError):
    code = "NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found."


class ValidationError(ActionError):
    code = "BAD_REQUEST"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input."

    def __init__(self, message: str | None = None, issues: list[dict] | None = None):
        super().__init__(message)
        self.issues = issues or []

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["issues"] = self.issues
        return data


class ConflictError(ActionError):
    code = "CONFLICT"
    status_code = status.HTTP_409_CONFLICT
    default_message = "The request conflicts with a concurrent change. Please retry."
