"""
File-backed ledger world state for development hosts.
"""
import os
import json
import stat
import base64
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, Optional

import portalocker

from ..exceptions import StoreError
from .base import Ledger, StateEntry, WorldState, validate_and_apply
from .context import LedgerTransaction

logger = logging.getLogger(__name__)

DEFAULT_STATE_FILE = "~/.didledger/world_state.json"


class FileLedger(Ledger):
    """Thread-safe and process-safe ledger persisted to a JSON file"""

    def __init__(self, state_path: Optional[str] = None, lock_timeout: int = 10):
        """
        Initialize the file ledger.

        Args:
            state_path: Optional custom path for the world state file
            lock_timeout: Seconds to wait for the file lock
        """
        # Use DIDLEDGER_STATE_FILE env var or default to ~/.didledger/world_state.json
        if state_path:
            self.state_path = Path(state_path)
        else:
            self.state_path = Path(
                os.path.expanduser(os.environ.get("DIDLEDGER_STATE_FILE", DEFAULT_STATE_FILE))
            )
        self.lock_timeout = lock_timeout

        self._ensure_file()

    def _ensure_file(self) -> None:
        """Ensure the state directory and file exist with restricted permissions"""
        directory = self.state_path.parent
        if not directory.exists():
            directory.mkdir(parents=True, exist_ok=True)
            if os.name == 'posix':
                os.chmod(directory, stat.S_IRUSR | stat.S_IWUSR | stat.S_IXUSR)  # 0700

        with self._locked():
            if not self.state_path.exists() or self.state_path.stat().st_size == 0:
                self._save(WorldState(entries={}))

        if os.name == 'posix':
            os.chmod(self.state_path, stat.S_IRUSR | stat.S_IWUSR)  # 0600

    def _get_lock_path(self) -> str:
        return str(self.state_path) + '.lock'

    @contextmanager
    def _locked(self) -> Iterator[None]:
        try:
            lock = portalocker.Lock(self._get_lock_path(), timeout=self.lock_timeout)
            lock.acquire()
        except portalocker.LockException as e:
            raise StoreError(f"Could not lock world state {self.state_path}: {e}") from e
        try:
            yield
        finally:
            lock.release()

    def _load(self) -> WorldState:
        """Read the world state; caller must hold the lock"""
        try:
            with open(self.state_path, 'r') as f:
                data = json.load(f)
        except FileNotFoundError:
            return WorldState(entries={})
        except (OSError, ValueError) as e:
            raise StoreError(f"Failed to load world state {self.state_path}: {e}") from e

        try:
            entries = {
                key: StateEntry(
                    value=base64.b64decode(item["value"]),
                    version=int(item["version"]),
                )
                for key, item in data["keys"].items()
            }
            return WorldState(entries=entries, height=int(data["height"]))
        except (KeyError, TypeError, ValueError) as e:
            raise StoreError(f"Malformed world state {self.state_path}: {e}") from e

    def _save(self, state: WorldState) -> None:
        """Write the world state; caller must hold the lock"""
        data = {
            "height": state.height,
            "keys": {
                key: {
                    "value": base64.b64encode(entry.value).decode("ascii"),
                    "version": entry.version,
                }
                for key, entry in sorted(state.entries.items())
            },
        }
        tmp_path = self.state_path.with_name(self.state_path.name + ".tmp")
        try:
            with open(tmp_path, 'w') as f:
                json.dump(data, f, indent=2)
            if os.name == 'posix':
                os.chmod(tmp_path, stat.S_IRUSR | stat.S_IWUSR)  # 0600
            os.replace(tmp_path, self.state_path)
        except OSError as e:
            raise StoreError(f"Failed to write world state {self.state_path}: {e}") from e

    def _read_entry(self, key: str) -> Optional[StateEntry]:
        with self._locked():
            return self._load().entries.get(key)

    def _commit(self, tx: LedgerTransaction) -> int:
        with self._locked():
            state = self._load()
            if validate_and_apply(state, tx):
                self._save(state)
            return state.height

    def snapshot(self) -> Dict[str, bytes]:
        with self._locked():
            return {key: entry.value for key, entry in self._load().entries.items()}

    @property
    def height(self) -> int:
        with self._locked():
            return self._load().height

    def clear(self) -> None:
        """Reset the world state (for testing)"""
        with self._locked():
            self._save(WorldState(entries={}))
