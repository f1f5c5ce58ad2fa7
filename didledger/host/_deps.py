"""
Dependency management for the host module.

This standalone module keeps the grpc requirement out of the contract core.
"""
import logging

logger = logging.getLogger(__name__)


def ensure_grpc_installed() -> bool:
    """
    Check if grpc is installed.
    Raises ImportError with installation instructions if not found.
    """
    try:
        import grpc  # noqa: F401
        return True
    except ImportError:
        raise ImportError(
            "The contract host requires additional dependencies: grpcio. "
            "Please install with: pip install didledger[host]"
        )
