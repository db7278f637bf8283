"""zlib envelope used for every stored object."""

import zlib

from gitcas.constants import DEFAULT_COMPRESSION_LEVEL
from gitcas.errors import CorruptStreamError


def compress(data: bytes, level: int = DEFAULT_COMPRESSION_LEVEL) -> bytes:
    """Wrap data in a zlib stream."""
    return zlib.compress(data, level)


def decompress(data: bytes) -> bytes:
    """Recover the exact bytes from a zlib stream.

    The decompressor object grows its output as needed, so objects of any size
    are returned whole. The stream must be complete and must not be followed
    by trailing bytes.

    Args:
        data: Compressed bytes as read from disk

    Returns:
        The decompressed bytes

    Raises:
        CorruptStreamError: If the stream is invalid, truncated, or has
            trailing garbage
    """
    decompressor = zlib.decompressobj()
    try:
        output = decompressor.decompress(data)
        output += decompressor.flush()
    except zlib.error as e:
        raise CorruptStreamError(f"Invalid zlib stream ({e})") from e

    if not decompressor.eof:
        raise CorruptStreamError("Truncated zlib stream")
    if decompressor.unused_data:
        raise CorruptStreamError(
            f"Unexpected {len(decompressor.unused_data)} trailing byte(s) after zlib stream"
        )
    return output
