"""SHA-1 object ids.

An object's id is the SHA-1 digest of its canonical serialized form. The raw
20 bytes are what trees embed; the 40-character lowercase hex form is what
users see and what the object store uses to build paths.
"""

import hashlib
import string
from dataclasses import dataclass

from gitcas.constants import HASH_ALGORITHM, HASH_LENGTH, HASH_RAW_LENGTH

_HEX_DIGITS = frozenset(string.hexdigits.lower())


@dataclass(frozen=True)
class ObjectId:
    """A 20-byte SHA-1 digest identifying an object.

    Attributes:
        raw: The binary digest (exactly 20 bytes)

    Example:
        >>> oid = ObjectId.from_hex("4b825dc642cb6eb9a060e54bf8d69288fbee4904")
        >>> oid.hex
        '4b825dc642cb6eb9a060e54bf8d69288fbee4904'
    """

    raw: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.raw, bytes) or len(self.raw) != HASH_RAW_LENGTH:
            raise ValueError(
                f"Object id must be {HASH_RAW_LENGTH} raw bytes, got {self.raw!r}"
            )

    @classmethod
    def from_hex(cls, value: str) -> "ObjectId":
        """Parse a 40-character hex id.

        Raises:
            ValueError: If value is not exactly 40 hexadecimal characters
        """
        if not isinstance(value, str):
            raise ValueError(f"Hash must be string, got {type(value)}")
        if len(value) != HASH_LENGTH:
            raise ValueError(
                f"Hash must be {HASH_LENGTH} characters, got {len(value)}"
            )
        lowered = value.lower()
        if not set(lowered) <= _HEX_DIGITS:
            raise ValueError(f"Hash must be hexadecimal: {value!r}")
        return cls(bytes.fromhex(lowered))

    @property
    def hex(self) -> str:
        return self.raw.hex()

    def __str__(self) -> str:
        return self.hex


def hash_bytes(data: bytes) -> ObjectId:
    """Compute the SHA-1 digest of data.

    Args:
        data: Any byte sequence, including empty

    Returns:
        ObjectId of the digest
    """
    hasher = hashlib.new(HASH_ALGORITHM)
    hasher.update(data)
    return ObjectId(hasher.digest())
