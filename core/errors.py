"""Errors raised by the photo set store.

Every error carries the offending path and, where there is one, the
underlying exception. The store raises them; presentation is up to the caller.
"""

from __future__ import annotations

from pathlib import Path


class PhotoSetError(Exception):
    """Base class for all photo set failures."""

    message = "Photo set error"

    def __init__(self, path: str | Path, error: BaseException | None = None) -> None:
        self.path = str(path)
        self.error = error
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.error is None:
            return f"{self.message}: {self.path}"
        return f"{self.message} {self.path}: {self.error}"


class ExpectedDirectory(PhotoSetError):
    message = "Expected directory"


class NoPhotosFound(PhotoSetError):
    message = "No photos found in"

    def __str__(self) -> str:
        return f"{self.message} {self.path}"


class CannotReadFile(PhotoSetError):
    message = "Cannot read file"


class CannotWriteFile(PhotoSetError):
    message = "Cannot write file"


class CannotDecodeImage(PhotoSetError):
    message = "Cannot decode image"


class CannotDecodeInfo(PhotoSetError):
    message = "Cannot decode info"
