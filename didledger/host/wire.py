"""
Message format for invoking the contract through the host.

Requests and responses are JSON objects carried as raw gRPC message bodies:

    request:  {"function": "CreateDID", "args": ["did:x:1", "Alice", "cred-A"]}
    success:  {"ok": true, "payload": null}
    record:   {"ok": true, "payload": {"did": ..., "name": ..., ...}}
    failure:  {"ok": false, "error": {"code": "NOT_FOUND", "message": "..."}}
"""
import json
from typing import Any, Dict, List, Optional, Tuple

from ..exceptions import DIDLedgerError, HostError, InvalidArgumentError, error_for_code
from ..models import DIDRecord

SERVICE_NAME = "didledger.IdentityContract"
INVOKE_METHOD_NAME = "Invoke"
INVOKE_METHOD = f"/{SERVICE_NAME}/{INVOKE_METHOD_NAME}"


def encode_message(message: Dict[str, Any]) -> bytes:
    """Serialize a message to compact JSON bytes"""
    return json.dumps(message, separators=(",", ":"), sort_keys=True).encode("utf-8")


def decode_message(data: bytes) -> Dict[str, Any]:
    """
    Parse a message received from the host.

    Raises:
        HostError: If the bytes are not a JSON object
    """
    try:
        message = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, ValueError, RecursionError) as e:
        raise HostError(f"Malformed host message: {e}") from e
    if not isinstance(message, dict):
        raise HostError(f"Host message must be a JSON object, got {type(message).__name__}")
    return message


def build_request(function: str, args: List[str]) -> Dict[str, Any]:
    return {"function": function, "args": list(args)}


def parse_request(data: bytes) -> Tuple[str, List[str]]:
    """
    Extract the function name and arguments from a raw request.

    Args:
        data: Raw request body

    Returns:
        Tuple of (function, args)

    Raises:
        InvalidArgumentError: If the request is malformed
    """
    try:
        request = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, ValueError, RecursionError) as e:
        raise InvalidArgumentError(f"Request is not valid JSON: {e}") from e

    if not isinstance(request, dict):
        raise InvalidArgumentError("Request must be a JSON object")

    function = request.get("function")
    if not isinstance(function, str) or not function:
        raise InvalidArgumentError("Request 'function' must be a non-empty string")

    args = request.get("args", [])
    if not isinstance(args, list) or not all(isinstance(arg, str) for arg in args):
        raise InvalidArgumentError("Request 'args' must be a list of strings")

    return function, args


def ok_response(record: Optional[DIDRecord] = None) -> Dict[str, Any]:
    return {"ok": True, "payload": record.model_dump() if record is not None else None}


def error_response(error: DIDLedgerError) -> Dict[str, Any]:
    return {"ok": False, "error": {"code": error.code.value, "message": error.message}}


def parse_response(response: Dict[str, Any]) -> Optional[DIDRecord]:
    """
    Interpret a host response.

    Args:
        response: Decoded response message

    Returns:
        The returned record, or None for operations without a payload

    Raises:
        DIDLedgerError: The typed error carried by a failure response
        HostError: If the response is malformed
    """
    if response.get("ok") is True:
        payload = response.get("payload")
        if payload is None:
            return None
        try:
            return DIDRecord.model_validate(payload)
        except ValueError as e:
            raise HostError(f"Malformed record in host response: {e}") from e

    error = response.get("error")
    if not isinstance(error, dict):
        raise HostError(f"Malformed host response: {response}")
    raise error_for_code(str(error.get("code")), str(error.get("message", "")))
