"""
IdentityContract - DID lifecycle operations against a transactional ledger.
"""
import logging
from typing import Any, Callable, List, Optional, Sequence

from .codec import decode_record, encode_record
from .exceptions import (
    AlreadyExistsError, CorruptRecordError, DecodeError, InvalidArgumentError,
    NotFoundError, StoreError, UnknownFunctionError
)
from .ledger.context import TransactionContext
from .models import DIDRecord
from ._rate_limited_log import rate_limited_log


def _short(did: str) -> str:
    """Truncate a DID for log output"""
    return did if len(did) <= 16 else f"{did[:16]}..."


class IdentityContract:
    """
    Contract managing the lifecycle of DID records.

    Every operation touches exactly one ledger key, the DID itself, within the
    transaction supplied by the host:

        (absent) --CreateDID--> (unverified) --VerifyDID--> (verified)

    UpdateCredentials is a self-loop in both live states and RevokeDID returns
    either live state to absent. The contract keeps no state between
    invocations and never retries on its own; store failures are raised to the
    host, which decides whether to retry the transaction.
    """

    # Operation names exposed to the host dispatcher: (method name, argument count)
    FUNCTIONS = {
        "CreateDID": ("create_did", 3),
        "UpdateCredentials": ("update_credentials", 2),
        "VerifyDID": ("verify_did", 1),
        "RevokeDID": ("revoke_did", 1),
        "GetDID": ("get_did", 1),
    }

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize the contract.

        Args:
            logger: Optional logger instance to use for debug/info logging
        """
        self.logger = logger or logging.getLogger(__name__)

    def functions(self) -> List[str]:
        """
        List the operation names this contract exposes.

        Returns:
            Operation names in registration order
        """
        return list(self.FUNCTIONS)

    def invoke(self, ctx: TransactionContext, function: str, args: Sequence[Any]) -> Optional[DIDRecord]:
        """
        Dispatch an operation by name.

        Args:
            ctx: Transactional context for this invocation
            function: Operation name, e.g. "CreateDID"
            args: Positional operation arguments (after ctx)

        Returns:
            The record for GetDID, None for the other operations

        Raises:
            UnknownFunctionError: If the function name is not registered
            InvalidArgumentError: If the argument count does not match
        """
        if function not in self.FUNCTIONS:
            raise UnknownFunctionError(f"Unknown function {function!r}")

        method_name, expected = self.FUNCTIONS[function]
        method: Callable[..., Optional[DIDRecord]] = getattr(self, method_name)
        if len(args) != expected:
            raise InvalidArgumentError(
                f"{function} expects {expected} argument(s), got {len(args)}"
            )
        return method(ctx, *args)

    def create_did(self, ctx: TransactionContext, did: str, name: str, credentials: str) -> None:
        """
        Create a new, unverified DID record.

        Args:
            ctx: Transactional context
            did: Decentralized identifier, also the ledger key
            name: Display name (may be empty)
            credentials: Opaque credentials blob (may be empty)

        Raises:
            InvalidArgumentError: If an argument is unacceptable
            AlreadyExistsError: If a record already exists for did
            StoreError: If the ledger read or write fails
        """
        self._require_did(did)
        self._require_str("name", name)
        self._require_str("credentials", credentials)

        if self._read(ctx, did, "CreateDID"):
            raise AlreadyExistsError(f"DID {did} already exists")

        record = DIDRecord(did=did, name=name, credentials=credentials, verified=False)
        self._write(ctx, record, "CreateDID")
        self.logger.info(f"Created DID {_short(did)}")

    def update_credentials(self, ctx: TransactionContext, did: str, new_credentials: str) -> None:
        """
        Replace the credentials of an existing DID.

        The verification flag is left unchanged. The record is rewritten even
        when the credentials are identical, so every call leaves an audit entry.

        Args:
            ctx: Transactional context
            did: Decentralized identifier
            new_credentials: Replacement credentials blob

        Raises:
            InvalidArgumentError: If an argument is unacceptable
            NotFoundError: If the DID does not exist
            CorruptRecordError: If the stored record cannot be decoded
            StoreError: If the ledger read or write fails
        """
        self._require_did(did)
        self._require_str("new_credentials", new_credentials)

        record = self._load(ctx, did, "UpdateCredentials")
        self._write(ctx, record.model_copy(update={"credentials": new_credentials}), "UpdateCredentials")
        self.logger.info(f"Updated credentials of DID {_short(did)}")

    def verify_did(self, ctx: TransactionContext, did: str) -> None:
        """
        Mark a DID as verified.

        Idempotent: an already verified record is rewritten unchanged.

        Args:
            ctx: Transactional context
            did: Decentralized identifier

        Raises:
            InvalidArgumentError: If did is unacceptable
            NotFoundError: If the DID does not exist
            CorruptRecordError: If the stored record cannot be decoded
            StoreError: If the ledger read or write fails
        """
        self._require_did(did)

        record = self._load(ctx, did, "VerifyDID")
        self._write(ctx, record.model_copy(update={"verified": True}), "VerifyDID")
        self.logger.info(f"Verified DID {_short(did)}")

    def revoke_did(self, ctx: TransactionContext, did: str) -> None:
        """
        Remove a DID from the ledger.

        A revoked DID may be created again later, starting unverified.

        Args:
            ctx: Transactional context
            did: Decentralized identifier

        Raises:
            InvalidArgumentError: If did is unacceptable
            NotFoundError: If the DID does not exist
            StoreError: If the ledger read or delete fails
        """
        self._require_did(did)

        if not self._read(ctx, did, "RevokeDID"):
            raise NotFoundError(f"DID {did} does not exist")

        try:
            ctx.delete(did)
        except Exception as e:
            self._log_store_failure("RevokeDID", e)
            raise StoreError(f"failed to delete DID {did}: {e}") from e
        self.logger.info(f"Revoked DID {_short(did)}")

    def get_did(self, ctx: TransactionContext, did: str) -> DIDRecord:
        """
        Retrieve the record of a DID.

        Args:
            ctx: Transactional context
            did: Decentralized identifier

        Returns:
            The stored record

        Raises:
            InvalidArgumentError: If did is unacceptable
            NotFoundError: If the DID does not exist
            CorruptRecordError: If the stored record cannot be decoded
            StoreError: If the ledger read fails
        """
        self._require_did(did)
        return self._load(ctx, did, "GetDID")

    @staticmethod
    def _require_did(did: Any) -> None:
        if not isinstance(did, str):
            raise InvalidArgumentError(f"did must be a string, got {type(did).__name__}")
        if not did:
            raise InvalidArgumentError("did must not be empty")

    @staticmethod
    def _require_str(field: str, value: Any) -> None:
        if not isinstance(value, str):
            raise InvalidArgumentError(f"{field} must be a string, got {type(value).__name__}")

    def _read(self, ctx: TransactionContext, did: str, operation: str) -> Optional[bytes]:
        """Read the raw value for did, wrapping store failures"""
        try:
            value = ctx.read(did)
        except Exception as e:
            self._log_store_failure(operation, e)
            raise StoreError(f"failed to read DID {did}: {e}") from e
        self.logger.debug(f"{operation}: read {len(value) if value else 0} bytes for {_short(did)}")
        return value

    def _load(self, ctx: TransactionContext, did: str, operation: str) -> DIDRecord:
        """Read and decode an existing record"""
        value = self._read(ctx, did, operation)
        if not value:
            raise NotFoundError(f"DID {did} does not exist")

        try:
            record = decode_record(value)
        except DecodeError as e:
            self.logger.error(f"{operation}: stored record for {_short(did)} is corrupt: {e}")
            raise CorruptRecordError(f"stored record for DID {did} is corrupt: {e}") from e

        if record.did != did:
            self.logger.error(f"{operation}: record stored under {_short(did)} names {_short(record.did)}")
            raise CorruptRecordError(f"record stored under DID {did} belongs to {record.did}")
        return record

    def _write(self, ctx: TransactionContext, record: DIDRecord, operation: str) -> None:
        """Encode and write a record under its own DID"""
        try:
            ctx.write(record.did, encode_record(record))
        except Exception as e:
            self._log_store_failure(operation, e)
            raise StoreError(f"failed to write DID {record.did}: {e}") from e

    def _log_store_failure(self, operation: str, error: Exception) -> None:
        rate_limited_log(
            f"Ledger store failure during {operation}: {type(error).__name__}: {error}",
            level="error",
            logger_instance=self.logger,
        )
