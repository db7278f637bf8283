"""Commit object builder and parser.

A commit is a text header block (tree, parents, author, committer), a blank
line and a free-text message, stored like any other object.
"""

import os
import socket
import time
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from gitcas.constants import DEFAULT_USER_NAME
from gitcas.core.codec import ObjectCodec
from gitcas.core.objects import ObjectKind
from gitcas.errors import GitCasError, MalformedObjectError
from gitcas.storage.hasher import ObjectId


class CommitBuilderError(GitCasError):
    """Exception raised for invalid commit input."""


@dataclass(frozen=True)
class Identity:
    """Name and email recorded on author and committer lines."""

    name: str
    email: str

    def __post_init__(self) -> None:
        for value in (self.name, self.email):
            if any(c in value for c in "<>\n"):
                raise CommitBuilderError(f"Invalid character in identity: {value!r}")

    def format(self) -> str:
        return f"{self.name} <{self.email}>"

    @classmethod
    def from_env(cls, role: str = "AUTHOR") -> "Identity":
        """Resolve an identity from GIT_<role>_NAME / GIT_<role>_EMAIL.

        Falls back to the login name and ``<user>@<hostname>``.
        """
        username = os.getenv("USER") or os.getenv("USERNAME") or DEFAULT_USER_NAME
        name = os.getenv(f"GIT_{role}_NAME") or username
        email = os.getenv(f"GIT_{role}_EMAIL") or f"{username}@{socket.gethostname()}"
        return cls(name=name, email=email)


@dataclass
class CommitInfo:
    """Parsed commit payload."""

    tree_id: ObjectId
    parent_ids: List[ObjectId] = field(default_factory=list)
    author: str = ""
    committer: str = ""
    message: str = ""


def format_timezone(offset_seconds: int) -> str:
    """Format a UTC offset in seconds as git's ``+hhmm``/``-hhmm``."""
    sign = "-" if offset_seconds < 0 else "+"
    minutes = abs(offset_seconds) // 60
    return f"{sign}{minutes // 60:02d}{minutes % 60:02d}"


def local_timezone_offset(timestamp: int) -> int:
    """Return the local zone's UTC offset in seconds at timestamp."""
    local = time.localtime(timestamp)
    return local.tm_gmtoff


class CommitBuilder:
    """Builder for commit objects.

    Attributes:
        codec: ObjectCodec used to verify referenced objects and store commits
    """

    def __init__(self, codec: ObjectCodec) -> None:
        self.codec = codec

    def create_commit(
        self,
        tree_id: ObjectId,
        message: str,
        parent_ids: Sequence[ObjectId] = (),
        author: Optional[Identity] = None,
        committer: Optional[Identity] = None,
        timestamp: Optional[int] = None,
        timezone_offset: Optional[int] = None,
    ) -> ObjectId:
        """Create and store a commit object.

        Args:
            tree_id: Id of the root tree (must be a stored tree)
            message: Commit message; a trailing newline is added if missing
            parent_ids: Ids of parent commits (each must be a stored commit)
            author: Author identity (default: from environment)
            committer: Committer identity (default: from environment)
            timestamp: Unix time (default: now)
            timezone_offset: UTC offset in seconds (default: local zone)

        Returns:
            Commit id

        Raises:
            ObjectNotFoundError: If the tree or a parent doesn't exist
            MalformedObjectError: If the tree or a parent has the wrong kind
            CommitBuilderError: If the message is empty
        """
        if not message.strip():
            raise CommitBuilderError("Commit message is required")

        self.codec.read_expected(tree_id, ObjectKind.TREE)
        for parent_id in parent_ids:
            self.codec.read_expected(parent_id, ObjectKind.COMMIT)

        if author is None:
            author = Identity.from_env("AUTHOR")
        if committer is None:
            committer = Identity.from_env("COMMITTER")
        if timestamp is None:
            timestamp = int(time.time())
        if timezone_offset is None:
            timezone_offset = local_timezone_offset(timestamp)

        payload = self.format_commit(
            tree_id,
            message,
            parent_ids,
            f"{author.format()} {timestamp} {format_timezone(timezone_offset)}",
            f"{committer.format()} {timestamp} {format_timezone(timezone_offset)}",
        )
        return self.codec.encode(ObjectKind.COMMIT, payload)

    @staticmethod
    def format_commit(
        tree_id: ObjectId,
        message: str,
        parent_ids: Sequence[ObjectId],
        author_line: str,
        committer_line: str,
    ) -> bytes:
        """Render a commit payload from already formatted identity lines."""
        lines = [f"tree {tree_id.hex}"]
        lines.extend(f"parent {parent_id.hex}" for parent_id in parent_ids)
        lines.append(f"author {author_line}")
        lines.append(f"committer {committer_line}")
        lines.append("")
        lines.append(message if message.endswith("\n") else message + "\n")
        return "\n".join(lines).encode("utf-8")


def parse_commit(payload: bytes) -> CommitInfo:
    """Parse a commit payload.

    Raises:
        MalformedObjectError: If the header block is invalid or names no tree
    """
    try:
        content = payload.decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedObjectError(f"Commit is not valid UTF-8: {e}") from e

    header, sep, message = content.partition("\n\n")
    if not sep:
        raise MalformedObjectError("Commit has no blank line before the message")

    tree_id = None
    parent_ids = []
    author = ""
    committer = ""
    try:
        for line in header.split("\n"):
            key, _, value = line.partition(" ")
            if key == "tree":
                tree_id = ObjectId.from_hex(value)
            elif key == "parent":
                parent_ids.append(ObjectId.from_hex(value))
            elif key == "author":
                author = value
            elif key == "committer":
                committer = value
    except ValueError as e:
        raise MalformedObjectError(f"Invalid id in commit header: {e}") from e

    if tree_id is None:
        raise MalformedObjectError("Commit has no tree line")

    return CommitInfo(
        tree_id=tree_id,
        parent_ids=parent_ids,
        author=author,
        committer=committer,
        message=message,
    )
