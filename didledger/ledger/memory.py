"""
In-process ledger for tests and development hosts.
"""
import logging
import threading
from typing import Dict, Optional

from .base import Ledger, StateEntry, WorldState, validate_and_apply
from .context import LedgerTransaction

logger = logging.getLogger(__name__)


class MemoryLedger(Ledger):
    """
    Ledger whose world state lives in process memory.

    Commits are serialized by a re-entrant lock, so concurrent transactions on
    the same key resolve with at most one winner.
    """

    def __init__(self, initial_state: Optional[Dict[str, bytes]] = None):
        """
        Initialize the ledger.

        Args:
            initial_state: Optional key-value pairs committed as the genesis state
        """
        self._lock = threading.RLock()
        self._state = WorldState(entries={})
        if initial_state:
            self._state.height = 1
            for key, value in initial_state.items():
                self._state.entries[key] = StateEntry(value=bytes(value), version=1)

    def _read_entry(self, key: str) -> Optional[StateEntry]:
        with self._lock:
            entry = self._state.entries.get(key)
            if entry is None:
                return None
            return StateEntry(value=entry.value, version=entry.version)

    def _commit(self, tx: LedgerTransaction) -> int:
        with self._lock:
            validate_and_apply(self._state, tx)
            return self._state.height

    def snapshot(self) -> Dict[str, bytes]:
        with self._lock:
            return {key: entry.value for key, entry in self._state.entries.items()}

    @property
    def height(self) -> int:
        with self._lock:
            return self._state.height
