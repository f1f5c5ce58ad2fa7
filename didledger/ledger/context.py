"""
Transactional context abstraction for the ledger store.

The contract only ever talks to a TransactionContext. A production host
provides its own implementation; the development ledgers in this package
issue LedgerTransaction instances.
"""
import logging
import uuid
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Dict, Optional

from ..exceptions import StoreError, TransactionClosedError

if TYPE_CHECKING:
    from .base import Ledger

logger = logging.getLogger(__name__)


class TransactionContext(ABC):
    """
    Read/write/delete access to the ledger key-space within one transaction.

    Implementations must provide read-your-writes within the transaction.
    Failures are reported by raising an exception.
    """

    @abstractmethod
    def read(self, key: str) -> Optional[bytes]:
        """
        Read the value stored under a key.

        Args:
            key: Ledger key

        Returns:
            Stored bytes, or None if the key is absent
        """
        pass

    @abstractmethod
    def write(self, key: str, value: bytes) -> None:
        """
        Write a value under a key.

        Args:
            key: Ledger key
            value: Bytes to store
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """
        Delete a key.

        Args:
            key: Ledger key
        """
        pass


class LedgerTransaction(TransactionContext):
    """
    Transaction issued by a development Ledger.

    Writes and deletes are buffered until commit. Every read of committed state
    records the version it observed so the ledger can detect conflicting
    commits.
    """

    def __init__(self, ledger: "Ledger", tx_id: Optional[str] = None):
        self.ledger = ledger
        self.tx_id = tx_id or uuid.uuid4().hex
        # key -> version observed at first read (0 when absent)
        self.read_set: Dict[str, int] = {}
        # key -> staged value, None marks a delete
        self.write_set: Dict[str, Optional[bytes]] = {}
        self.closed = False

    def _ensure_open(self) -> None:
        if self.closed:
            raise TransactionClosedError(f"Transaction {self.tx_id[:8]} is already closed")

    @staticmethod
    def _check_key(key: str) -> None:
        if not isinstance(key, str):
            raise StoreError(f"Ledger key must be a string, got {type(key).__name__}")

    def read(self, key: str) -> Optional[bytes]:
        self._ensure_open()
        self._check_key(key)
        if key in self.write_set:
            return self.write_set[key]

        entry = self.ledger._read_entry(key)
        if key not in self.read_set:
            self.read_set[key] = entry.version if entry else 0
        return entry.value if entry else None

    def write(self, key: str, value: bytes) -> None:
        self._ensure_open()
        self._check_key(key)
        if not isinstance(value, (bytes, bytearray)):
            raise StoreError(f"Ledger value must be bytes, got {type(value).__name__}")
        self.write_set[key] = bytes(value)

    def delete(self, key: str) -> None:
        self._ensure_open()
        self._check_key(key)
        self.write_set[key] = None

    def commit(self) -> int:
        """
        Commit this transaction to its ledger.

        Returns:
            Ledger height after the commit
        """
        return self.ledger.commit(self)

    def abort(self) -> None:
        """Discard all buffered writes."""
        self.ledger.abort(self)
