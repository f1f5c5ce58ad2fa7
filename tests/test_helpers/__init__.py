"""
Shared test doubles and constants for the DID ledger tests.
"""
from typing import Dict, Optional

from didledger.ledger.context import TransactionContext

# Constants for testing
TEST_DID = "did:x:1"
TEST_NAME = "Alice"
TEST_CREDENTIALS = "cred-A"


class DictContext(TransactionContext):
    """
    Minimal in-memory TransactionContext double.

    Individual calls can be made to fail by setting fail_read, fail_write or
    fail_delete to an exception instance.
    """

    def __init__(self, state: Optional[Dict[str, bytes]] = None):
        self.state: Dict[str, bytes] = dict(state or {})
        self.fail_read: Optional[Exception] = None
        self.fail_write: Optional[Exception] = None
        self.fail_delete: Optional[Exception] = None
        self.writes = []
        self.deletes = []

    def read(self, key):
        if self.fail_read:
            raise self.fail_read
        return self.state.get(key)

    def write(self, key, value):
        if self.fail_write:
            raise self.fail_write
        self.writes.append((key, value))
        self.state[key] = value

    def delete(self, key):
        if self.fail_delete:
            raise self.fail_delete
        self.deletes.append(key)
        self.state.pop(key, None)
