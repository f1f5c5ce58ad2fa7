"""
Canonical byte encoding of DID records.

Records are stored as compact JSON objects with a fixed field order, so the
same record always produces the same bytes and ledger diffs stay meaningful:

    {"did":"did:x:1","name":"Alice","credentials":"cred-A","verified":false}

Non-ASCII characters are written as ``\\uXXXX`` escapes, so stored values are
plain ASCII. Unknown fields are ignored on decode; missing or mistyped fields
are rejected.
"""
import json
import logging
from typing import Union

from pydantic import ValidationError

from .exceptions import DecodeError
from .models import DIDRecord

logger = logging.getLogger(__name__)

RECORD_FIELDS = ("did", "name", "credentials", "verified")


def encode_record(record: DIDRecord) -> bytes:
    """
    Encode a record to its canonical ledger representation.

    Args:
        record: Record to encode

    Returns:
        UTF-8 JSON bytes with fields in canonical order
    """
    ordered = {
        "did": record.did,
        "name": record.name,
        "credentials": record.credentials,
        "verified": record.verified,
    }
    return json.dumps(ordered, separators=(",", ":"), ensure_ascii=True).encode("utf-8")


def decode_record(data: Union[bytes, bytearray, str]) -> DIDRecord:
    """
    Decode a record from its ledger representation.

    Args:
        data: Bytes previously produced by encode_record

    Returns:
        The decoded record

    Raises:
        DecodeError: If the data is not a valid record
    """
    if isinstance(data, (bytes, bytearray)):
        try:
            text = bytes(data).decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"Record is not valid UTF-8: {e}") from e
    elif isinstance(data, str):
        text = data
    else:
        raise DecodeError(f"Record data must be bytes or str, got {type(data).__name__}")

    try:
        obj = json.loads(text)
    except (ValueError, RecursionError) as e:
        raise DecodeError(f"Record is not valid JSON: {e}") from e

    if not isinstance(obj, dict):
        raise DecodeError(f"Record must be a JSON object, got {type(obj).__name__}")

    missing_fields = [field for field in RECORD_FIELDS if field not in obj]
    if missing_fields:
        raise DecodeError(f"Record missing required fields: {', '.join(missing_fields)}")

    unknown_fields = sorted(set(obj) - set(RECORD_FIELDS))
    if unknown_fields:
        logger.debug(f"Ignoring unknown record fields: {', '.join(unknown_fields)}")

    try:
        return DIDRecord.model_validate(obj)
    except ValidationError as e:
        raise DecodeError(f"Record has invalid field values: {e}") from e
