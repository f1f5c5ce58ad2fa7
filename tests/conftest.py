"""
Pytest fixtures for the DID ledger tests.
"""
import pytest

from didledger.contract import IdentityContract
from didledger.ledger.memory import MemoryLedger
from didledger._rate_limited_log import reset_rate_limits

from test_helpers import DictContext


@pytest.fixture(autouse=True)
def _reset_rate_limits():
    """Keep rate-limited log suppression from leaking between tests"""
    reset_rate_limits()
    yield
    reset_rate_limits()


@pytest.fixture
def ledger():
    return MemoryLedger()


@pytest.fixture
def contract():
    return IdentityContract()


@pytest.fixture
def run(ledger, contract):
    """
    Run one contract operation in its own committed transaction.

    Usage: run("create_did", "did:x:1", "Alice", "cred-A")
    """
    def _run(operation, *args):
        with ledger.transaction() as tx:
            return getattr(contract, operation)(tx, *args)
    return _run


@pytest.fixture
def dict_ctx():
    return DictContext()
