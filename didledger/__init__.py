"""
didledger - a registry of Decentralized Identifiers on a transactional ledger.
"""
from .contract import IdentityContract
from .models import DIDRecord
from .codec import encode_record, decode_record
from .exceptions import (
    ErrorCode, DIDLedgerError, StoreError, TransactionConflictError,
    TransactionClosedError, NotFoundError, AlreadyExistsError,
    CorruptRecordError, InvalidArgumentError, UnknownFunctionError,
    HostError, HostConnectionError, HostTimeoutError, DecodeError
)
from .ledger import TransactionContext, LedgerTransaction, MemoryLedger, FileLedger
from .version import __version__

__all__ = [
    "IdentityContract",
    "DIDRecord",
    "encode_record",
    "decode_record",
    "ErrorCode",
    "DIDLedgerError",
    "StoreError",
    "TransactionConflictError",
    "TransactionClosedError",
    "NotFoundError",
    "AlreadyExistsError",
    "CorruptRecordError",
    "InvalidArgumentError",
    "UnknownFunctionError",
    "HostError",
    "HostConnectionError",
    "HostTimeoutError",
    "DecodeError",
    "TransactionContext",
    "LedgerTransaction",
    "MemoryLedger",
    "FileLedger",
    "__version__",
]
