"""Loose-object storage for gitcas.

This module implements git's loose-object layout. Each object is stored
zlib-compressed under .git/objects/ in a directory named after the first two
hex characters of its id, with the remaining 38 characters as the filename.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Iterator

from gitcas.constants import HASH_LENGTH, OBJECTS_DIR
from gitcas.errors import (
    CorruptStreamError,
    FilesystemError,
    ObjectNotFoundError,
)
from gitcas.storage.compression import compress, decompress
from gitcas.storage.hasher import ObjectId

logger = logging.getLogger(__name__)


class ObjectStore:
    """Content-addressable storage for compressed objects.

    The store knows nothing about object kinds: it maps an ObjectId to a file
    and moves canonical bytes in and out of the compressed envelope.

    Storage layout:
        .git/objects/<hash[:2]>/<hash[2:]>

    Attributes:
        git_dir: Path to the .git directory (the store root)
        objects_dir: Path to the objects directory

    Example:
        >>> store = ObjectStore(Path(".git"))
        >>> store.write(oid, b"blob 2\\x00hi")
        >>> assert store.read(oid) == b"blob 2\\x00hi"
    """

    def __init__(self, git_dir: Path) -> None:
        """Initialize the object store.

        Args:
            git_dir: Path to the .git directory

        Raises:
            ValueError: If git_dir doesn't exist
        """
        self.git_dir = Path(git_dir)
        self.objects_dir = self.git_dir / OBJECTS_DIR

        if not self.git_dir.is_dir():
            raise ValueError(f"Git directory not found: {git_dir}")

    def locate(self, oid: ObjectId) -> Path:
        """Get the filesystem path for an object.

        Example:
            >>> store.locate(ObjectId.from_hex("4b825dc6..."))
            >>> # .git/objects/4b/825dc6...
        """
        hex_id = oid.hex
        return self.objects_dir / hex_id[:2] / hex_id[2:]

    def exists(self, oid: ObjectId) -> bool:
        """Check if an object exists in the store."""
        return self.locate(oid).is_file()

    def read(self, oid: ObjectId) -> bytes:
        """Read an object's canonical serialized form.

        Args:
            oid: Id of the object

        Returns:
            Decompressed header and payload

        Raises:
            ObjectNotFoundError: If no file exists for oid
            CorruptStreamError: If the file fails to decompress
            FilesystemError: If the file exists but cannot be read
        """
        path = self.locate(oid)
        try:
            with open(path, "rb") as f:
                data = f.read()
        except FileNotFoundError as e:
            raise ObjectNotFoundError(oid.hex, path) from e
        except OSError as e:
            raise FilesystemError(f"Failed to read object {oid.hex} ({e.strerror})", path) from e

        try:
            return decompress(data)
        except CorruptStreamError as e:
            raise CorruptStreamError(str(e), path) from e

    def write(self, oid: ObjectId, canonical: bytes) -> bool:
        """Write an object to the store.

        If an object with the same id already exists the write is skipped,
        since identical ids imply identical content. New objects are written
        to a temp file next to their final path and renamed into place.

        Args:
            oid: Id of the object (hash of canonical)
            canonical: Header and payload to compress and persist

        Returns:
            True if a new file was written, False if it already existed

        Raises:
            FilesystemError: If the write fails (permissions, disk full, etc.)
        """
        path = self.locate(oid)
        if path.is_file():
            logger.debug("Object %s already stored, skipping write", oid.hex)
            return False

        data = compress(canonical)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FilesystemError(
                f"Failed to create object directory ({e.strerror})", path.parent
            ) from e

        try:
            tmp_fd, tmp_path = tempfile.mkstemp(
                dir=path.parent,
                prefix=".tmp_",
                suffix=".obj",
            )
        except OSError as e:
            raise FilesystemError(
                f"Failed to create temporary object file ({e.strerror})", path.parent
            ) from e

        try:
            with os.fdopen(tmp_fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, path)
        except OSError as e:
            raise FilesystemError(
                f"Failed to write object {oid.hex} ({e.strerror})", path
            ) from e
        finally:
            # Only left behind when the rename didn't happen
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)

        logger.debug("Stored object %s (%d bytes compressed)", oid.hex, len(data))
        return True

    def iter_object_ids(self) -> Iterator[ObjectId]:
        """Yield the ids of all loose objects in the store."""
        if not self.objects_dir.is_dir():
            return
        for subdir in sorted(self.objects_dir.iterdir()):
            if not subdir.is_dir() or len(subdir.name) != 2:
                continue
            for obj_file in sorted(subdir.iterdir()):
                hex_id = subdir.name + obj_file.name
                if not obj_file.is_file() or len(hex_id) != HASH_LENGTH:
                    continue
                try:
                    yield ObjectId.from_hex(hex_id)
                except ValueError:
                    continue
