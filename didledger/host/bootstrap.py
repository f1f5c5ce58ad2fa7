"""
Process entry point for the identity contract host.

Initializes the contract, its ledger and the gRPC listener, then blocks
serving. If initialization fails the diagnostic is logged and the process
exits without entering service.
"""
import argparse
import dataclasses
import logging
from typing import List, Optional

from ..contract import IdentityContract
from ..exceptions import DIDLedgerError
from ..ledger import FileLedger, Ledger, MemoryLedger
from ..version import __version__
from ._deps import ensure_grpc_installed
from .config import LOG_LEVELS, HostConfig

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="didledger-host",
        description="Serve the DID identity management contract over gRPC.",
    )
    parser.add_argument("--listen", help="host:port to bind (env: DIDLEDGER_LISTEN_ADDRESS)")
    parser.add_argument("--state-file", help="persist world state to this file (env: DIDLEDGER_STATE_FILE)")
    parser.add_argument("--max-workers", type=int, help="gRPC worker threads (env: DIDLEDGER_MAX_WORKERS)")
    parser.add_argument("--log-level", choices=LOG_LEVELS, help="log level (env: DIDLEDGER_LOG_LEVEL)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def load_config(args: argparse.Namespace) -> HostConfig:
    """
    Merge command-line flags over the environment configuration.

    Raises:
        ValueError: If the resulting configuration is invalid
    """
    config = HostConfig.from_env()
    overrides = {
        "listen_address": args.listen,
        "state_file": args.state_file,
        "max_workers": args.max_workers,
        "log_level": args.log_level,
    }
    return dataclasses.replace(config, **{k: v for k, v in overrides.items() if v is not None})


def build_ledger(config: HostConfig) -> Ledger:
    """Use a file-backed ledger when a state file is configured"""
    if config.state_file:
        logger.info(f"Using file ledger at {config.state_file}")
        return FileLedger(config.state_file)
    logger.info("Using in-memory ledger; state is lost on exit")
    return MemoryLedger()


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the contract host.

    Args:
        argv: Command-line arguments (defaults to sys.argv)

    Returns:
        Process exit code
    """
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args)
    except ValueError as e:
        logging.basicConfig(level=logging.INFO)
        logger.error(f"Error creating identity management contract host: {e}")
        return 1

    logging.basicConfig(
        level=config.log_level_number,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        ensure_grpc_installed()
        from .server import ContractServer

        server = ContractServer(IdentityContract(), build_ledger(config), config)
        server.initialize()
    except (ImportError, DIDLedgerError, OSError) as e:
        logger.error(f"Error creating identity management contract host: {e}")
        return 1

    try:
        server.serve()
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
        server.stop(grace=5)
    except (DIDLedgerError, RuntimeError) as e:
        logger.error(f"Error starting identity management contract host: {e}")
        return 1
    return 0
