"""
Ledger module for the DID ledger contract.

Defines the transactional context the contract runs against, plus two
development ledgers that provide it: an in-memory ledger for tests and a
file-backed ledger for local hosts.
"""
from .context import TransactionContext, LedgerTransaction
from .base import Ledger, StateEntry
from .memory import MemoryLedger
from .file_store import FileLedger

__all__ = [
    'TransactionContext',
    'LedgerTransaction',
    'Ledger',
    'StateEntry',
    'MemoryLedger',
    'FileLedger',
]
