"""
Host module for the DID ledger contract.

This module serves the identity contract over gRPC for development and
integration use, and provides a matching client.

Note: This module requires additional dependencies that can be installed with:
    pip install didledger[host]
"""
from .config import HostConfig
from ._deps import ensure_grpc_installed

__all__ = ['HostConfig', 'ensure_grpc_installed', 'ContractServer', 'ContractClient']


def __getattr__(name):
    # Import grpc-backed classes on first use so the config stays importable without grpc
    if name == 'ContractServer':
        from .server import ContractServer
        return ContractServer
    if name == 'ContractClient':
        from .client import ContractClient
        return ContractClient
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
