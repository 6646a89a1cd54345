"""Error types raised by CodeMosaic operations."""

from pathlib import Path
from typing import Iterable, List, Optional


class MosaicError(Exception):
    """Base class for all CodeMosaic errors."""


class PolicyError(MosaicError):
    """Split policy is internally inconsistent. Raised before any I/O."""


class PartitionIOError(MosaicError):
    """Source could not be read or a part could not be written.

    Parts committed before the failure stay on disk and are listed in
    ``paths`` so the caller can offer cleanup.
    """

    def __init__(self, message: str, paths: Optional[Iterable[Path]] = None):
        super().__init__(message)
        self.paths: List[Path] = list(paths or [])


class PartitionCancelled(MosaicError):
    """Cancellation was requested while a split was running."""

    def __init__(self, message: str, paths: Optional[Iterable[Path]] = None):
        super().__init__(message)
        self.paths: List[Path] = list(paths or [])


class NoMatchingFilesError(MosaicError):
    """A folder scan matched no files."""


class UnsupportedFileTypeError(MosaicError):
    """File extension is not supported for statistics."""
