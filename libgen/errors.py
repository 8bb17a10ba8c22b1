"""Exceptions raised by the library generator.

Only ``FilesystemError`` is fatal.  ``ValidationError`` and
``ProfileLookupError`` are recovered inside the question flow by asking
again.
"""

from __future__ import annotations

from pathlib import Path


class LibgenError(Exception):
    """Base class for every error the CLI reports to the operator."""


class ValidationError(LibgenError):
    """An answer failed its validation rule.

    The message is shown to the user verbatim before the question is
    repeated.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ProfileLookupError(LibgenError, LookupError):
    """The remote GitHub profile could not be fetched."""

    def __init__(self, handle: str, reason: str) -> None:
        self.handle = handle
        self.reason = reason
        super().__init__(f"GitHub profile '{handle}': {reason}")


class FilesystemError(LibgenError):
    """A destination file or directory could not be read or written."""

    def __init__(self, path: str | Path, cause: BaseException | str) -> None:
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"{self.path}: {cause}")
