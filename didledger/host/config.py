"""
Configuration for the contract host.
"""
import os
import logging
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_LISTEN_ADDRESS = "127.0.0.1:7052"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class HostConfig:
    """
    Settings for serving the identity contract.

    Attributes:
        listen_address: host:port the gRPC listener binds to
        state_file: Path of a file-backed world state; None keeps state in memory
        max_workers: Number of gRPC worker threads
        log_level: Root log level name
    """
    listen_address: str = DEFAULT_LISTEN_ADDRESS
    state_file: Optional[str] = None
    max_workers: int = 4
    log_level: str = "INFO"

    def __post_init__(self):
        if not self.listen_address:
            raise ValueError("listen_address must not be empty")
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be at least 1 (got: {self.max_workers})")
        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)} (got: {self.log_level})")

    @property
    def log_level_number(self) -> int:
        return logging.getLevelName(self.log_level.upper())

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "HostConfig":
        """
        Build a configuration from DIDLEDGER_* environment variables.

        Args:
            environ: Mapping to read instead of os.environ

        Returns:
            HostConfig instance

        Raises:
            ValueError: If a variable holds an invalid value
        """
        env = os.environ if environ is None else environ
        max_workers = env.get("DIDLEDGER_MAX_WORKERS", "4")
        try:
            workers = int(max_workers)
        except ValueError:
            raise ValueError(f"DIDLEDGER_MAX_WORKERS must be an integer (got: {max_workers})")

        return cls(
            listen_address=env.get("DIDLEDGER_LISTEN_ADDRESS", DEFAULT_LISTEN_ADDRESS),
            state_file=env.get("DIDLEDGER_STATE_FILE") or None,
            max_workers=workers,
            log_level=env.get("DIDLEDGER_LOG_LEVEL", "INFO"),
        )
