"""
Pytest fixtures for contract host tests.

These fixtures provide a contract server bound to an ephemeral local port and
a client connected to it.
"""
import pytest

# Skip fixtures if grpc isn't available
try:
    import grpc  # noqa: F401
    grpc_available = True
except ImportError:
    grpc_available = False

from didledger.contract import IdentityContract
from didledger.host.config import HostConfig
from didledger.ledger.memory import MemoryLedger


@pytest.fixture
def host_ledger():
    return MemoryLedger()


# Only define fixtures if dependencies are available
if grpc_available:
    from didledger.host.client import ContractClient
    from didledger.host.server import ContractServer

    @pytest.fixture
    def contract_server(host_ledger):
        """A started server on 127.0.0.1 with an OS-assigned port"""
        server = ContractServer(
            IdentityContract(),
            host_ledger,
            HostConfig(listen_address="127.0.0.1:0", max_workers=2),
        )
        server.initialize()
        server.start()
        yield server
        server.stop(grace=None)

    @pytest.fixture
    def contract_client(contract_server):
        client = ContractClient(f"127.0.0.1:{contract_server.port}", timeout=5.0)
        yield client
        client.close()
