"""Object codec: canonical serialization, hashing and typed reads.

Every object is stored as ``b"<kind> <len(payload)>\\0" + payload``. That exact
byte sequence is what gets hashed to produce the object's id and what gets
compressed into the object store, so re-serializing an object must reproduce
its id byte for byte.
"""

import logging
import re
from typing import List, Tuple

from gitcas.core.objects import ObjectKind, TreeEntry, parse_tree
from gitcas.errors import MalformedObjectError
from gitcas.storage.hasher import ObjectId, hash_bytes
from gitcas.storage.object_store import ObjectStore

logger = logging.getLogger(__name__)

_HEADER_RE = re.compile(rb"([a-z]+) ([0-9]+)")


def object_id_for(kind: ObjectKind, payload: bytes) -> ObjectId:
    """Compute the id an object would have, without storing it."""
    return hash_bytes(ObjectCodec.serialize(kind, payload))


class ObjectCodec:
    """Encoder and decoder for blob, tree and commit objects.

    Attributes:
        store: ObjectStore the codec reads from and writes to

    Example:
        >>> codec = ObjectCodec(ObjectStore(Path(".git")))
        >>> oid = codec.encode(ObjectKind.BLOB, b"hi")
        >>> codec.decode(oid)
        (<ObjectKind.BLOB: 'blob'>, b'hi')
    """

    def __init__(self, store: ObjectStore) -> None:
        self.store = store

    @staticmethod
    def serialize(kind: ObjectKind, payload: bytes) -> bytes:
        """Build the canonical serialized form of an object."""
        header = kind.header_word + b" " + str(len(payload)).encode("ascii")
        return header + b"\0" + payload

    def hash_object(self, kind: ObjectKind, payload: bytes, write: bool = True) -> ObjectId:
        """Compute an object's id, storing it when write is True.

        Args:
            kind: Object kind
            payload: Object payload (without header)
            write: Persist the object in the store

        Returns:
            Id of the object
        """
        if not write:
            return object_id_for(kind, payload)
        canonical = self.serialize(kind, payload)
        oid = hash_bytes(canonical)
        self.store.write(oid, canonical)
        logger.debug("Encoded %s %s (%d bytes)", kind.value, oid.hex, len(payload))
        return oid

    def encode(self, kind: ObjectKind, payload: bytes) -> ObjectId:
        """Store an object and return its id."""
        return self.hash_object(kind, payload, write=True)

    def decode(self, oid: ObjectId) -> Tuple[ObjectKind, bytes]:
        """Read an object and split it into kind and payload.

        Args:
            oid: Id of the object

        Returns:
            Tuple of (kind, payload)

        Raises:
            ObjectNotFoundError: If the object doesn't exist
            CorruptStreamError: If the object file fails to decompress
            MalformedObjectError: If the header is missing, unparseable, or
                declares a length other than the payload's
        """
        return self.parse(self.store.read(oid))

    @staticmethod
    def parse(canonical: bytes) -> Tuple[ObjectKind, bytes]:
        """Split a canonical serialized form into kind and payload.

        Raises:
            MalformedObjectError: If the header is invalid
        """
        null_idx = canonical.find(b"\0")
        if null_idx == -1:
            raise MalformedObjectError("Invalid object format (no header terminator)")

        header = canonical[:null_idx]
        payload = canonical[null_idx + 1:]

        match = _HEADER_RE.fullmatch(header)
        if match is None:
            raise MalformedObjectError(f"Invalid object header: {header[:64]!r}")

        kind = ObjectKind.from_header_word(match.group(1))
        declared = int(match.group(2))
        if declared != len(payload):
            raise MalformedObjectError(
                f"Object length mismatch: header declares {declared}, payload has {len(payload)}"
            )
        return kind, payload

    def object_info(self, oid: ObjectId) -> Tuple[ObjectKind, int]:
        """Return the kind and payload size of a stored object."""
        kind, payload = self.decode(oid)
        return kind, len(payload)

    def read_expected(self, oid: ObjectId, expected: ObjectKind) -> bytes:
        """Read an object's payload, requiring a specific kind.

        Raises:
            MalformedObjectError: If the object is of another kind
        """
        kind, payload = self.decode(oid)
        if kind is not expected:
            raise MalformedObjectError(
                f"Object {oid.hex} is a {kind.value}, expected {expected.value}"
            )
        return payload

    def read_blob(self, oid: ObjectId) -> bytes:
        """Return a blob's content, without its header."""
        return self.read_expected(oid, ObjectKind.BLOB)

    def read_tree(self, oid: ObjectId) -> List[TreeEntry]:
        """Return a tree's entries in stored order."""
        return parse_tree(self.read_expected(oid, ObjectKind.TREE))
