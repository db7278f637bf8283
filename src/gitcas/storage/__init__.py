"""Storage layer for gitcas.

This module provides object ids, the zlib envelope and the loose-object store.
"""

from gitcas.storage.compression import compress, decompress
from gitcas.storage.hasher import ObjectId, hash_bytes
from gitcas.storage.object_store import ObjectStore

__all__ = [
    "ObjectId",
    "ObjectStore",
    "compress",
    "decompress",
    "hash_bytes",
]
