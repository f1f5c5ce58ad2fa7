"""
Exceptions for the DID ledger contract.
"""
from enum import Enum
from typing import Dict, Optional, Type


class ErrorCode(str, Enum):
    """
    Error codes surfaced to invoking clients.

    The string values travel on the wire in host error responses.
    """
    STORE_ERROR = "STORE_ERROR"
    MVCC_READ_CONFLICT = "MVCC_READ_CONFLICT"
    NOT_FOUND = "NOT_FOUND"
    ALREADY_EXISTS = "ALREADY_EXISTS"
    CORRUPT_RECORD = "CORRUPT_RECORD"
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    UNKNOWN_FUNCTION = "UNKNOWN_FUNCTION"
    HOST_ERROR = "HOST_ERROR"


class DIDLedgerError(Exception):
    """Base exception for all DID ledger errors."""
    code = ErrorCode.STORE_ERROR

    def __init__(self, message: str, code: Optional[ErrorCode] = None):
        if code is not None:
            self.code = code
        self.message = message
        super().__init__(message)


class StoreError(DIDLedgerError):
    """Raised when the underlying store read, write or delete fails."""
    code = ErrorCode.STORE_ERROR


class TransactionConflictError(StoreError):
    """Raised at commit when a key read by the transaction changed underneath it."""
    code = ErrorCode.MVCC_READ_CONFLICT


class TransactionClosedError(StoreError):
    """Raised when a transaction is used after commit or abort."""
    pass


class NotFoundError(DIDLedgerError):
    """Raised when the referenced DID does not exist."""
    code = ErrorCode.NOT_FOUND


class AlreadyExistsError(DIDLedgerError):
    """Raised when creating a DID that already exists."""
    code = ErrorCode.ALREADY_EXISTS


class CorruptRecordError(DIDLedgerError):
    """Raised when a stored record cannot be decoded."""
    code = ErrorCode.CORRUPT_RECORD


class InvalidArgumentError(DIDLedgerError):
    """Raised when the caller supplies an unacceptable argument."""
    code = ErrorCode.INVALID_ARGUMENT


class UnknownFunctionError(DIDLedgerError):
    """Raised when dispatching a function name the contract does not define."""
    code = ErrorCode.UNKNOWN_FUNCTION


class HostError(DIDLedgerError):
    """Raised when communication with the contract host fails."""
    code = ErrorCode.HOST_ERROR


class HostConnectionError(HostError):
    """Raised when the contract host cannot be reached."""
    pass


class HostTimeoutError(HostError):
    """Raised when an invocation exceeds its deadline."""
    pass


class DecodeError(ValueError):
    """Raised by the codec when bytes do not hold a valid DID record."""
    pass


_ERRORS_BY_CODE: Dict[ErrorCode, Type[DIDLedgerError]] = {
    ErrorCode.STORE_ERROR: StoreError,
    ErrorCode.MVCC_READ_CONFLICT: TransactionConflictError,
    ErrorCode.NOT_FOUND: NotFoundError,
    ErrorCode.ALREADY_EXISTS: AlreadyExistsError,
    ErrorCode.CORRUPT_RECORD: CorruptRecordError,
    ErrorCode.INVALID_ARGUMENT: InvalidArgumentError,
    ErrorCode.UNKNOWN_FUNCTION: UnknownFunctionError,
    ErrorCode.HOST_ERROR: HostError,
}


def error_for_code(code: str, message: str) -> DIDLedgerError:
    """
    Build the typed exception for a wire error code.

    Args:
        code: Error code string as carried in a host response
        message: Error message

    Returns:
        Exception instance matching the code, or HostError for unknown codes
    """
    try:
        error_code = ErrorCode(code)
    except ValueError:
        return HostError(f"Unrecognized error code {code!r}: {message}")
    return _ERRORS_BY_CODE[error_code](message)
