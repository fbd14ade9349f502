"""Custom exception types raised by the validator and the instantiation engine."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

__all__ = [
    "ContentWriteFailed",
    "DestinationConflict",
    "InstantiationError",
    "InstantiationErrorKind",
    "NameErrorKind",
    "PathWriteFailed",
    "PmvError",
    "ProjectNameError",
    "TemplateUnreadable",
]


class NameErrorKind(str, Enum):
    """Reasons a proposed project name can be rejected."""

    EMPTY_NAME = "EmptyName"
    INVALID_CHARACTERS = "InvalidCharacters"
    RESERVED_WORD = "ReservedWord"


class InstantiationErrorKind(str, Enum):
    """Failure categories of the instantiation engine."""

    DESTINATION_CONFLICT = "DestinationConflict"
    PATH_WRITE_FAILED = "PathWriteFailed"
    CONTENT_WRITE_FAILED = "ContentWriteFailed"
    TEMPLATE_UNREADABLE = "TemplateUnreadable"


class PmvError(Exception):
    """Base class for every error raised by pmv."""


class ProjectNameError(PmvError, ValueError):
    """Raised when a raw project name fails validation."""

    def __init__(self, kind: NameErrorKind, name: str, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.name = name
        self.message = message


class InstantiationError(PmvError):
    """Raised when a template cannot be materialised at its destination.

    Attributes
    ----------
    path:
        The offending path. For write failures this is the path the file or
        directory would have had inside the destination.
    cause:
        The underlying exception, if any.
    leftover:
        A directory that could not be cleaned up after the failure and may
        hold a partial, unusable tree. ``None`` when nothing was left behind.
    """

    kind: InstantiationErrorKind

    def __init__(self, path: Path, cause: BaseException | None = None) -> None:
        self.path = Path(path)
        self.cause = cause
        self.leftover: Path | None = None
        super().__init__(self._describe())

    def _describe(self) -> str:
        if self.cause is None:
            return str(self.path)
        return f"{self.path}: {self.cause}"


class DestinationConflict(InstantiationError):
    """The destination exists and is not an empty directory."""

    kind = InstantiationErrorKind.DESTINATION_CONFLICT

    def _describe(self) -> str:
        return f"{self.path} already exists and is not an empty directory"


class PathWriteFailed(InstantiationError):
    """A directory could not be created or the tree could not be moved into place."""

    kind = InstantiationErrorKind.PATH_WRITE_FAILED


class ContentWriteFailed(InstantiationError):
    """A file's contents could not be written."""

    kind = InstantiationErrorKind.CONTENT_WRITE_FAILED


class TemplateUnreadable(InstantiationError):
    """The template tree could not be enumerated or read."""

    kind = InstantiationErrorKind.TEMPLATE_UNREADABLE
