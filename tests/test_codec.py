"""
Tests for the canonical record codec.
"""
import json
import pytest

from didledger.codec import RECORD_FIELDS, decode_record, encode_record
from didledger.exceptions import DecodeError
from didledger.models import DIDRecord


@pytest.fixture
def record():
    return DIDRecord(did="did:x:1", name="Alice", credentials="cred-A", verified=False)


class TestEncodeRecord:
    """Tests for encode_record."""

    def test_canonical_form(self, record):
        """Fields appear in fixed order with no whitespace"""
        assert encode_record(record) == (
            b'{"did":"did:x:1","name":"Alice","credentials":"cred-A","verified":false}'
        )

    def test_verified_literal(self, record):
        encoded = encode_record(record.model_copy(update={"verified": True}))
        assert encoded.endswith(b'"verified":true}')

    def test_deterministic(self, record):
        copy = DIDRecord(did="did:x:1", name="Alice", credentials="cred-A")
        assert encode_record(record) == encode_record(copy)

    def test_escapes_structural_characters(self):
        """Quotes, braces, commas and colons inside values stay inside their strings"""
        tricky = DIDRecord(
            did='did:x:"1"',
            name='{"name":"Mallory"},',
            credentials='a\\b\n"c":d',
        )
        encoded = encode_record(tricky)
        parsed = json.loads(encoded)
        assert list(parsed) == list(RECORD_FIELDS)
        assert parsed["name"] == '{"name":"Mallory"},'
        assert decode_record(encoded) == tricky

    def test_non_ascii_is_escaped(self):
        record = DIDRecord(did="did:x:ü", name="Zoë 名前", credentials="")
        encoded = encode_record(record)
        assert encoded.isascii()
        assert decode_record(encoded) == record

    def test_empty_fields(self):
        record = DIDRecord(did="did:x:1", name="", credentials="")
        assert decode_record(encode_record(record)) == record


class TestDecodeRecord:
    """Tests for decode_record."""

    def test_decode_bytes(self, record):
        assert decode_record(encode_record(record)) == record

    def test_decode_str(self, record):
        assert decode_record(encode_record(record).decode("utf-8")) == record

    def test_field_order_irrelevant(self):
        data = b'{"verified":true,"credentials":"c","name":"n","did":"d"}'
        assert decode_record(data) == DIDRecord(did="d", name="n", credentials="c", verified=True)

    def test_unknown_fields_ignored(self):
        data = b'{"did":"d","name":"n","credentials":"c","verified":false,"extra":[1,2]}'
        record = decode_record(data)
        assert record == DIDRecord(did="d", name="n", credentials="c")
        assert not hasattr(record, "extra")

    @pytest.mark.parametrize("missing", RECORD_FIELDS)
    def test_missing_field(self, missing):
        obj = {"did": "d", "name": "n", "credentials": "c", "verified": False}
        del obj[missing]
        with pytest.raises(DecodeError) as exc_info:
            decode_record(json.dumps(obj).encode())
        assert missing in str(exc_info.value)

    @pytest.mark.parametrize("field,value", [
        ("verified", "true"),
        ("verified", 1),
        ("verified", None),
        ("did", 123),
        ("name", None),
        ("credentials", ["c"]),
    ])
    def test_wrong_type(self, field, value):
        obj = {"did": "d", "name": "n", "credentials": "c", "verified": False}
        obj[field] = value
        with pytest.raises(DecodeError):
            decode_record(json.dumps(obj).encode())

    @pytest.mark.parametrize("data", [
        b"",
        b"not json",
        b'{"did":"d"',
        b"[]",
        b'"did"',
        b"null",
        b"\xff\xfe",
    ])
    def test_malformed(self, data):
        with pytest.raises(DecodeError):
            decode_record(data)

    def test_deeply_nested(self):
        with pytest.raises(DecodeError):
            decode_record(b"[" * 200000)

    def test_empty_did(self):
        with pytest.raises(DecodeError):
            decode_record(b'{"did":"","name":"n","credentials":"c","verified":false}')

    def test_rejects_non_bytes(self):
        with pytest.raises(DecodeError):
            decode_record(42)

    def test_decode_error_is_value_error(self):
        """DecodeError can be handled as a ValueError"""
        with pytest.raises(ValueError):
            decode_record(b"{}")
