"""
Shared commit logic for the development ledgers.
"""
import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, Iterator, Optional

from ..exceptions import TransactionConflictError
from .context import LedgerTransaction

logger = logging.getLogger(__name__)


@dataclass
class StateEntry:
    """
    A committed value and the ledger height at which it was written.
    """
    value: bytes
    version: int


@dataclass
class WorldState:
    """Committed key-value state plus the ledger height."""
    entries: Dict[str, StateEntry]
    height: int = 0


def validate_and_apply(state: WorldState, tx: LedgerTransaction) -> bool:
    """
    Validate a transaction's read set and apply its write set.

    Args:
        state: Mutable world state to apply to
        tx: Transaction to commit

    Returns:
        True if the state was modified

    Raises:
        TransactionConflictError: If a key read by tx changed since it was read
    """
    if not tx.write_set:
        return False

    for key, read_version in tx.read_set.items():
        entry = state.entries.get(key)
        current_version = entry.version if entry else 0
        if current_version != read_version:
            raise TransactionConflictError(
                f"Transaction {tx.tx_id[:8]} conflicts on key {key!r}: "
                f"read version {read_version}, committed version {current_version}"
            )

    state.height += 1
    for key, value in tx.write_set.items():
        if value is None:
            state.entries.pop(key, None)
        else:
            state.entries[key] = StateEntry(value=value, version=state.height)
    return True


class Ledger(ABC):
    """
    Abstract base class for ledgers that issue transactional contexts.

    Subclasses provide storage of the world state; this class provides the
    transaction lifecycle and serializable commit.
    """

    @abstractmethod
    def _read_entry(self, key: str) -> Optional[StateEntry]:
        """Return the committed entry for key, or None if absent."""
        pass

    @abstractmethod
    def _commit(self, tx: LedgerTransaction) -> int:
        """Atomically validate and apply tx, returning the new height."""
        pass

    @abstractmethod
    def snapshot(self) -> Dict[str, bytes]:
        """Return a copy of all committed key-value pairs."""
        pass

    @property
    @abstractmethod
    def height(self) -> int:
        """Number of committed transactions that wrote to the ledger."""
        pass

    def begin(self) -> LedgerTransaction:
        """
        Start a new transaction.

        Returns:
            Open transaction bound to this ledger
        """
        tx = LedgerTransaction(self)
        logger.debug(f"Began transaction {tx.tx_id[:8]}")
        return tx

    def commit(self, tx: LedgerTransaction) -> int:
        """
        Commit a transaction.

        The transaction is closed whether or not the commit succeeds.

        Args:
            tx: Transaction to commit

        Returns:
            Ledger height after the commit

        Raises:
            TransactionConflictError: If the read set is stale
            TransactionClosedError: If tx was already committed or aborted
        """
        tx._ensure_open()
        tx.closed = True
        try:
            height = self._commit(tx)
        except TransactionConflictError as e:
            logger.warning(f"Commit rejected: {e}")
            raise
        logger.debug(f"Committed transaction {tx.tx_id[:8]} at height {height}")
        return height

    def abort(self, tx: LedgerTransaction) -> None:
        """
        Abort a transaction, discarding its writes.

        Args:
            tx: Transaction to abort
        """
        if tx.closed:
            return
        tx.closed = True
        tx.write_set.clear()
        logger.debug(f"Aborted transaction {tx.tx_id[:8]}")

    @contextmanager
    def transaction(self) -> Iterator[LedgerTransaction]:
        """
        Run a block inside one transaction.

        Commits when the block exits normally and aborts when it raises.
        """
        tx = self.begin()
        try:
            yield tx
        except BaseException:
            self.abort(tx)
            raise
        self.commit(tx)

    def get_state(self, key: str) -> Optional[bytes]:
        """
        Read a committed value outside any transaction.

        Args:
            key: Ledger key

        Returns:
            Committed bytes, or None if absent
        """
        entry = self._read_entry(key)
        return entry.value if entry else None
