"""Recursive directory-to-tree builder.

Builds the tree object for a directory the way ``git write-tree`` would for a
fully staged working copy: regular files become blobs, subdirectories become
trees, everything else is left out.
"""

import logging
import os
from pathlib import Path
from typing import Iterable, List

from gitcas.constants import GIT_DIR, MODE_DIRECTORY, MODE_FILE
from gitcas.core.codec import ObjectCodec
from gitcas.core.objects import ObjectKind, TreeEntry, serialize_tree
from gitcas.errors import FilesystemError
from gitcas.storage.hasher import ObjectId

logger = logging.getLogger(__name__)


class TreeBuilder:
    """Builder that snapshots a directory into blob and tree objects.

    Children are stored before their parent, so once ``build`` returns every
    object reachable from the returned tree id is in the store.

    Attributes:
        codec: ObjectCodec used to store blobs and trees
        ignored_names: Entry names never included at any depth
        ignored_paths: Resolved directories never included (the store's
            control dir when it isn't named ``.git``)

    Example:
        >>> builder = TreeBuilder(codec, ignored_paths={git_dir})
        >>> tree_id = builder.build(Path("."))
    """

    def __init__(
        self,
        codec: ObjectCodec,
        ignored_names: Iterable[str] = (GIT_DIR,),
        ignored_paths: Iterable[Path] = (),
    ) -> None:
        self.codec = codec
        self.ignored_names = frozenset(ignored_names)
        self.ignored_paths = frozenset(Path(p).resolve() for p in ignored_paths)

    def build(self, directory: Path) -> ObjectId:
        """Store the tree for directory and return its id.

        Args:
            directory: Directory to snapshot

        Returns:
            Id of the tree object

        Raises:
            FilesystemError: If the directory or one of its files can't be read
        """
        directory = Path(directory)
        entries: List[TreeEntry] = []

        for entry in self._list_entries(directory):
            if entry.name in self.ignored_names:
                continue

            try:
                if entry.is_symlink():
                    logger.debug("Skipping symlink %s", entry.path)
                    continue
                if entry.is_dir(follow_symlinks=False):
                    if self._is_ignored_path(entry):
                        logger.debug("Skipping control directory %s", entry.path)
                        continue
                    child_id = self.build(Path(entry.path))
                    entries.append(TreeEntry(MODE_DIRECTORY, entry.name, child_id))
                elif entry.is_file(follow_symlinks=False):
                    child_id = self._store_file(Path(entry.path))
                    entries.append(TreeEntry(MODE_FILE, entry.name, child_id))
                else:
                    logger.debug("Skipping special file %s", entry.path)
            except OSError as e:
                raise FilesystemError(f"Failed to inspect entry ({e.strerror})", entry.path) from e

        return self.codec.encode(ObjectKind.TREE, serialize_tree(entries))

    def _list_entries(self, directory: Path) -> List[os.DirEntry]:
        """List the immediate children of directory in filesystem order."""
        try:
            with os.scandir(directory) as it:
                return list(it)
        except OSError as e:
            raise FilesystemError(f"Failed to list directory ({e.strerror})", directory) from e

    def _is_ignored_path(self, entry: os.DirEntry) -> bool:
        if not self.ignored_paths:
            return False
        return Path(entry.path).resolve() in self.ignored_paths

    def _store_file(self, path: Path) -> ObjectId:
        try:
            content = path.read_bytes()
        except OSError as e:
            raise FilesystemError(f"Failed to read file ({e.strerror})", path) from e
        return self.codec.encode(ObjectKind.BLOB, content)
