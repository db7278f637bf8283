"""Exception hierarchy for gitcas.

Every failure the object store can report derives from :class:`GitCasError`
so callers (the CLI in particular) can map them to exit codes in one place.
"""

from pathlib import Path
from typing import Optional, Union

PathLike = Union[str, Path]


class GitCasError(Exception):
    """Base class for all gitcas errors."""


class ObjectNotFoundError(GitCasError):
    """Raised when no object file exists for the requested id."""

    def __init__(self, object_id: str, path: Optional[PathLike] = None) -> None:
        self.object_id = object_id
        self.path = Path(path) if path is not None else None
        message = f"Object not found: {object_id}"
        if self.path is not None:
            message += f" (expected at {self.path})"
        super().__init__(message)


class CorruptStreamError(GitCasError):
    """Raised when stored bytes do not decompress to a complete stream."""

    def __init__(self, message: str, path: Optional[PathLike] = None) -> None:
        self.path = Path(path) if path is not None else None
        if self.path is not None:
            message = f"{message}: {self.path}"
        super().__init__(message)


class MalformedObjectError(GitCasError):
    """Raised when decompressed bytes are not a valid ``kind length\\0payload``."""


class FilesystemError(GitCasError):
    """Raised for I/O failures while reading, writing or walking the filesystem."""

    def __init__(self, message: str, path: Optional[PathLike] = None) -> None:
        self.path = Path(path) if path is not None else None
        if self.path is not None:
            message = f"{message}: {self.path}"
        super().__init__(message)


class RepositoryNotFoundError(GitCasError):
    """Raised when no .git directory can be found."""


class RepositoryExistsError(GitCasError):
    """Raised when initializing over an existing repository."""
