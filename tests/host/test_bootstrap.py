"""
Tests for the contract host entry point.
"""
import logging
import pytest
from unittest.mock import patch

pytest.importorskip("grpc")

from didledger.exceptions import HostError
from didledger.host import bootstrap
from didledger.host.config import HostConfig
from didledger.ledger import FileLedger, MemoryLedger


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("DIDLEDGER_LISTEN_ADDRESS", "DIDLEDGER_STATE_FILE",
                 "DIDLEDGER_MAX_WORKERS", "DIDLEDGER_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


class TestLoadConfig:
    """Command-line flags override the environment."""

    def test_flags_override_env(self, monkeypatch):
        monkeypatch.setenv("DIDLEDGER_LISTEN_ADDRESS", "127.0.0.1:1111")
        monkeypatch.setenv("DIDLEDGER_MAX_WORKERS", "2")
        args = bootstrap.build_parser().parse_args(["--listen", "127.0.0.1:2222"])

        config = bootstrap.load_config(args)

        assert config.listen_address == "127.0.0.1:2222"
        assert config.max_workers == 2

    def test_build_ledger(self, tmp_path):
        assert isinstance(bootstrap.build_ledger(HostConfig()), MemoryLedger)
        file_config = HostConfig(state_file=str(tmp_path / "state.json"))
        assert isinstance(bootstrap.build_ledger(file_config), FileLedger)


class TestMain:
    """Tests for main()."""

    def test_serves_until_terminated(self):
        with patch("didledger.host.server.ContractServer.serve") as mock_serve:
            code = bootstrap.main(["--listen", "127.0.0.1:0"])

        assert code == 0
        mock_serve.assert_called_once()

    def test_initialization_failure_exits_without_serving(self, caplog):
        with patch("didledger.host.server.ContractServer.initialize",
                   side_effect=HostError("Failed to bind 127.0.0.1:7052")), \
             patch("didledger.host.server.ContractServer.serve") as mock_serve:
            with caplog.at_level(logging.ERROR):
                code = bootstrap.main([])

        assert code == 1
        mock_serve.assert_not_called()
        assert "Error creating identity management contract host" in caplog.text

    def test_invalid_config_exits(self, monkeypatch, caplog):
        monkeypatch.setenv("DIDLEDGER_MAX_WORKERS", "lots")
        with caplog.at_level(logging.ERROR):
            assert bootstrap.main([]) == 1
        assert "DIDLEDGER_MAX_WORKERS" in caplog.text

    def test_missing_grpc_exits(self, caplog):
        with patch("didledger.host.bootstrap.ensure_grpc_installed",
                   side_effect=ImportError("grpcio missing")):
            with caplog.at_level(logging.ERROR):
                assert bootstrap.main([]) == 1
        assert "grpcio missing" in caplog.text

    def test_run_failure(self, caplog):
        with patch("didledger.host.server.ContractServer.serve",
                   side_effect=RuntimeError("listener crashed")):
            with caplog.at_level(logging.ERROR):
                code = bootstrap.main(["--listen", "127.0.0.1:0"])

        assert code == 1
        assert "Error starting identity management contract host" in caplog.text

    def test_keyboard_interrupt_stops(self):
        with patch("didledger.host.server.ContractServer.serve", side_effect=KeyboardInterrupt), \
             patch("didledger.host.server.ContractServer.stop") as mock_stop:
            assert bootstrap.main(["--listen", "127.0.0.1:0"]) == 0
        mock_stop.assert_called_once_with(grace=5)
