"""Unit tests for ObjectCodec."""

import hashlib
import zlib

import pytest

from gitcas.core.codec import ObjectCodec, object_id_for
from gitcas.core.objects import ObjectKind
from gitcas.errors import CorruptStreamError, MalformedObjectError, ObjectNotFoundError
from gitcas.storage.hasher import ObjectId, hash_bytes
from gitcas.storage.object_store import ObjectStore


def _store_raw(store: ObjectStore, canonical: bytes) -> ObjectId:
    """Write canonical bytes directly, bypassing the codec's header logic."""
    oid = hash_bytes(canonical)
    store.write(oid, canonical)
    return oid


class TestSerialize:
    """Test canonical form construction."""

    def test_blob_header(self) -> None:
        assert ObjectCodec.serialize(ObjectKind.BLOB, b"hi") == b"blob 2\x00hi"

    def test_empty_tree_header(self) -> None:
        assert ObjectCodec.serialize(ObjectKind.TREE, b"") == b"tree 0\x00"

    def test_length_is_byte_length(self) -> None:
        payload = "é".encode("utf-8")
        assert ObjectCodec.serialize(ObjectKind.BLOB, payload) == b"blob 2\x00" + payload


class TestEncode:
    """Test the write path."""

    def test_known_blob_id(self, codec: ObjectCodec) -> None:
        assert codec.encode(ObjectKind.BLOB, b"hello world").hex == (
            "95d09f2b10159347eece71399a7e2e907ea3df4f"
        )

    def test_id_is_sha1_of_canonical_form(self, codec: ObjectCodec) -> None:
        payload = b"header correctness"
        oid = codec.encode(ObjectKind.BLOB, payload)
        expected = hashlib.sha1(b"blob 18\x00" + payload).hexdigest()
        assert oid.hex == expected

    def test_empty_blob(self, codec: ObjectCodec) -> None:
        assert codec.encode(ObjectKind.BLOB, b"").hex == (
            "e69de29bb2d1d6434b8b29ae775ad8c2e48c5391"
        )

    def test_deterministic(self, codec: ObjectCodec) -> None:
        assert codec.encode(ObjectKind.BLOB, b"same") == codec.encode(ObjectKind.BLOB, b"same")

    def test_one_byte_change_changes_id(self, codec: ObjectCodec) -> None:
        assert codec.encode(ObjectKind.BLOB, b"abcd") != codec.encode(ObjectKind.BLOB, b"abce")

    def test_kind_is_part_of_id(self, codec: ObjectCodec) -> None:
        assert codec.encode(ObjectKind.BLOB, b"") != codec.encode(ObjectKind.TREE, b"")

    def test_stores_compressed_canonical_form(self, codec: ObjectCodec) -> None:
        oid = codec.encode(ObjectKind.BLOB, b"hi")
        data = codec.store.locate(oid).read_bytes()
        assert zlib.decompress(data) == b"blob 2\x00hi"

    def test_hash_object_without_write(self, codec: ObjectCodec) -> None:
        oid = codec.hash_object(ObjectKind.BLOB, b"not stored", write=False)
        assert not codec.store.exists(oid)
        assert oid == object_id_for(ObjectKind.BLOB, b"not stored")


class TestDecode:
    """Test the read path."""

    @pytest.mark.parametrize(
        "payload",
        [b"", b"hi", b"\x00\x01\x02\xff", b"line\r\nendings\n", bytes(range(256)) * 300],
    )
    def test_blob_roundtrip(self, codec: ObjectCodec, payload: bytes) -> None:
        oid = codec.encode(ObjectKind.BLOB, payload)
        assert codec.decode(oid) == (ObjectKind.BLOB, payload)

    def test_read_blob_returns_payload_without_header(self, codec: ObjectCodec) -> None:
        oid = codec.encode(ObjectKind.BLOB, b"some content")
        assert codec.read_blob(oid) == b"some content"

    def test_payload_with_embedded_nul(self, codec: ObjectCodec) -> None:
        """Test that only the first NUL ends the header."""
        payload = b"a\x00b\x00c"
        oid = codec.encode(ObjectKind.BLOB, payload)
        assert codec.read_blob(oid) == payload

    def test_object_info(self, codec: ObjectCodec) -> None:
        oid = codec.encode(ObjectKind.COMMIT, b"x" * 42)
        assert codec.object_info(oid) == (ObjectKind.COMMIT, 42)

    def test_not_found(self, codec: ObjectCodec) -> None:
        with pytest.raises(ObjectNotFoundError):
            codec.decode(ObjectId.from_hex("0" * 40))

    def test_truncated_file_is_corrupt(self, codec: ObjectCodec) -> None:
        oid = codec.encode(ObjectKind.BLOB, b"truncate me by one byte")
        path = codec.store.locate(oid)
        path.write_bytes(path.read_bytes()[:-1])

        with pytest.raises(CorruptStreamError):
            codec.decode(oid)

    def test_wrong_kind_for_read_blob(self, codec: ObjectCodec) -> None:
        oid = codec.encode(ObjectKind.TREE, b"")
        with pytest.raises(MalformedObjectError, match="is a tree, expected blob"):
            codec.read_blob(oid)

    def test_read_tree_of_empty_tree(self, codec: ObjectCodec) -> None:
        oid = codec.encode(ObjectKind.TREE, b"")
        assert codec.read_tree(oid) == []


class TestMalformedObjects:
    """Test header validation on decode."""

    def test_no_header_terminator(self, codec: ObjectCodec) -> None:
        oid = _store_raw(codec.store, b"blob 2 hi")
        with pytest.raises(MalformedObjectError, match="no header terminator"):
            codec.decode(oid)

    def test_non_numeric_length(self, codec: ObjectCodec) -> None:
        oid = _store_raw(codec.store, b"blob two\x00hi")
        with pytest.raises(MalformedObjectError, match="Invalid object header"):
            codec.decode(oid)

    def test_missing_length(self, codec: ObjectCodec) -> None:
        oid = _store_raw(codec.store, b"blob\x00hi")
        with pytest.raises(MalformedObjectError, match="Invalid object header"):
            codec.decode(oid)

    def test_length_too_large(self, codec: ObjectCodec) -> None:
        oid = _store_raw(codec.store, b"blob 3\x00hi")
        with pytest.raises(MalformedObjectError, match="length mismatch"):
            codec.decode(oid)

    def test_length_too_small(self, codec: ObjectCodec) -> None:
        oid = _store_raw(codec.store, b"blob 1\x00hi")
        with pytest.raises(MalformedObjectError, match="length mismatch"):
            codec.decode(oid)

    def test_unknown_kind(self, codec: ObjectCodec) -> None:
        oid = _store_raw(codec.store, b"tag 2\x00hi")
        with pytest.raises(MalformedObjectError, match="Unknown object kind"):
            codec.decode(oid)
