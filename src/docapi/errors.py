from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from .paging.cursor import CursorState


class DocapiError(Exception):
    """Base exception for docapi errors."""


class InvalidFieldPathError(DocapiError, ValueError):
    """Raised when an escaped field path violates the path grammar."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"invalid field path {path!r}: {reason}")


class CursorStateError(DocapiError):
    """Raised when a cursor operation is not allowed in the current state."""

    def __init__(self, message: str, state: CursorState) -> None:
        self.state = state
        super().__init__(f"{message} (cursor state: {state.value})")


class ErrorDescriptor(BaseModel):
    """One entry of the ``errors`` array returned by the Data API."""

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    error_code: str | None = Field(default=None, alias="errorCode")
    message: str = ""
    family: str | None = None
    scope: str | None = None
    title: str | None = None


class DataAPIResponseError(DocapiError):
    """Raised when the server answers a command with an ``errors`` array."""

    def __init__(self, command: str, errors: list[ErrorDescriptor]) -> None:
        self.command = command
        self.errors = errors
        summary = "; ".join(
            f"[{error.error_code}] {error.message}" if error.error_code else error.message
            for error in errors
        )
        super().__init__(f"command {command!r} failed: {summary}")

    @classmethod
    def from_payload(
        cls, command: str, payload: list[dict[str, Any]]
    ) -> DataAPIResponseError:
        return cls(command, [ErrorDescriptor.model_validate(item) for item in payload])


__all__ = [
    "CursorStateError",
    "DataAPIResponseError",
    "DocapiError",
    "ErrorDescriptor",
    "InvalidFieldPathError",
]
