"""Object kinds and the binary tree format.

A tree payload is the concatenation, for each entry in ascending byte order
of name, of ``b"<mode> <name>\\0"`` followed by the 20 raw bytes of the
child's id.
"""

import enum
import os
from dataclasses import dataclass
from typing import Iterable, List

from gitcas.constants import HASH_RAW_LENGTH, MODE_DIRECTORY, MODE_FILE
from gitcas.errors import MalformedObjectError
from gitcas.storage.hasher import ObjectId


class ObjectKind(enum.Enum):
    """The three object kinds, valued by their on-disk header word."""

    BLOB = "blob"
    TREE = "tree"
    COMMIT = "commit"

    @property
    def header_word(self) -> bytes:
        return self.value.encode("ascii")

    @classmethod
    def from_header_word(cls, word: bytes) -> "ObjectKind":
        """Map a header word to its kind.

        Raises:
            MalformedObjectError: If word names no known kind
        """
        try:
            return cls(word.decode("ascii"))
        except (UnicodeDecodeError, ValueError) as e:
            raise MalformedObjectError(f"Unknown object kind: {word!r}") from e


@dataclass(frozen=True)
class TreeEntry:
    """One directory entry of a tree.

    Attributes:
        mode: MODE_FILE or MODE_DIRECTORY
        name: Base name of the file or directory
        object_id: Id of the child blob or tree
    """

    mode: str
    name: str
    object_id: ObjectId

    def __post_init__(self) -> None:
        if self.mode not in (MODE_FILE, MODE_DIRECTORY):
            raise ValueError(f"Unsupported tree entry mode: {self.mode!r}")
        if not self.name or "\0" in self.name or "/" in self.name:
            raise ValueError(f"Invalid tree entry name: {self.name!r}")

    @property
    def is_directory(self) -> bool:
        return self.mode == MODE_DIRECTORY

    @property
    def kind(self) -> ObjectKind:
        return ObjectKind.TREE if self.is_directory else ObjectKind.BLOB

    @property
    def sort_key(self) -> bytes:
        return os.fsencode(self.name)


def serialize_tree(entries: Iterable[TreeEntry]) -> bytes:
    """Serialize entries into a tree payload.

    Entries are sorted by the byte form of their names regardless of the order
    they are given in, so the same set of entries always yields the same bytes.

    Raises:
        ValueError: If two entries share a name
    """
    ordered = sorted(entries, key=lambda entry: entry.sort_key)
    parts: List[bytes] = []
    previous = None
    for entry in ordered:
        name = entry.sort_key
        if name == previous:
            raise ValueError(f"Duplicate tree entry name: {entry.name!r}")
        previous = name
        parts.append(entry.mode.encode("ascii") + b" " + name + b"\0" + entry.object_id.raw)
    return b"".join(parts)


def parse_tree(payload: bytes) -> List[TreeEntry]:
    """Parse a tree payload back into entries.

    Raises:
        MalformedObjectError: If an entry is truncated or badly formed
    """
    entries = []
    i = 0
    while i < len(payload):
        space_idx = payload.find(b" ", i)
        if space_idx == -1:
            raise MalformedObjectError(f"Tree entry at offset {i} has no mode separator")

        null_idx = payload.find(b"\0", space_idx)
        if null_idx == -1:
            raise MalformedObjectError(f"Tree entry at offset {i} has no name terminator")

        end = null_idx + 1 + HASH_RAW_LENGTH
        if end > len(payload):
            raise MalformedObjectError(f"Tree entry at offset {i} has a truncated object id")

        try:
            mode = payload[i:space_idx].decode("ascii")
            entry = TreeEntry(
                mode=mode,
                name=os.fsdecode(payload[space_idx + 1:null_idx]),
                object_id=ObjectId(payload[null_idx + 1:end]),
            )
        except (UnicodeDecodeError, ValueError) as e:
            raise MalformedObjectError(f"Invalid tree entry at offset {i}: {e}") from e

        entries.append(entry)
        i = end

    return entries
