"""
Unit tests for server configuration and the command line.
"""

import dataclasses
import socket

import pytest

from minihttp import __version__
from minihttp.config import ServerConfig
from minihttp.__main__ import build_parser, main


class TestServerConfig:
    """Tests for ServerConfig."""

    def test_defaults(self):
        """Test defaults match the classic server."""
        config = ServerConfig()

        assert config.host == "0.0.0.0"
        assert config.port == 4221
        assert config.backlog == 5
        assert config.buffer_size == 1024
        assert config.directory == ""
        assert config.max_workers is None
        assert config.confine_files is False

    def test_frozen(self):
        """Test that config cannot change after creation."""
        with pytest.raises(dataclasses.FrozenInstanceError):
            ServerConfig().port = 1

    def test_from_env(self, monkeypatch):
        """Test loading from MINIHTTP_* variables."""
        monkeypatch.setenv("MINIHTTP_HOST", "127.0.0.1")
        monkeypatch.setenv("MINIHTTP_PORT", "8080")
        monkeypatch.setenv("MINIHTTP_DIRECTORY", "/tmp/data")
        monkeypatch.setenv("MINIHTTP_WORKERS", "8")
        monkeypatch.setenv("MINIHTTP_LOG_LEVEL", "debug")

        config = ServerConfig.from_env()

        assert config.host == "127.0.0.1"
        assert config.port == 8080
        assert config.directory == "/tmp/data"
        assert config.max_workers == 8
        assert config.log_level == "DEBUG"

    def test_from_env_defaults(self, monkeypatch):
        """Test from_env without any variables set."""
        for name in ("HOST", "PORT", "DIRECTORY", "WORKERS", "LOG_LEVEL"):
            monkeypatch.delenv(f"MINIHTTP_{name}", raising=False)

        assert ServerConfig.from_env() == ServerConfig()

    def test_with_overrides_ignores_none(self):
        """Test that None leaves a field unchanged."""
        config = ServerConfig(port=9000).with_overrides(port=None, directory="/srv")

        assert config.port == 9000
        assert config.directory == "/srv"

    @pytest.mark.parametrize("changes", [
        {"port": -1},
        {"port": 70000},
        {"backlog": 0},
        {"buffer_size": 0},
        {"timeout": 0},
        {"max_workers": 0},
        {"log_level": "LOUD"},
        {"log_format": "xml"},
    ])
    def test_validate_rejects(self, changes):
        """Test validation of out-of-range values."""
        with pytest.raises(ValueError):
            ServerConfig(**changes).validate()

    def test_validate_accepts_defaults(self):
        """Test that the defaults are valid, including port 0."""
        ServerConfig().validate()
        ServerConfig(port=0, timeout=None, max_workers=1).validate()


class TestCommandLine:
    """Tests for the argparse entry point."""

    def test_parse_arguments(self):
        """Test flag parsing."""
        args = build_parser().parse_args([
            "--directory", "/tmp/x", "--port", "8080", "--workers", "2",
            "--confine-files", "--log-level", "debug",
        ])

        assert args.directory == "/tmp/x"
        assert args.port == 8080
        assert args.workers == 2
        assert args.confine_files is True
        assert args.log_level == "DEBUG"

    def test_unset_flags_are_none(self):
        """Test that absent flags do not override the environment."""
        args = build_parser().parse_args([])

        assert args.directory is None
        assert args.port is None
        assert args.confine_files is None

    def test_version(self, capsys):
        """Test --version output."""
        with pytest.raises(SystemExit) as exc:
            main(["--version"])

        assert exc.value.code == 0
        assert __version__ in capsys.readouterr().out

    def test_invalid_config_exits_2(self, capsys):
        """Test that a bad value is reported as a usage error."""
        with pytest.raises(SystemExit) as exc:
            main(["--port", "70000"])

        assert exc.value.code == 2
        assert "Invalid port" in capsys.readouterr().err

    def test_bind_failure_exits_1(self, capsys):
        """Test that a port already in use exits with status 1."""
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as blocker:
            blocker.bind(("127.0.0.1", 0))
            blocker.listen(1)
            port = blocker.getsockname()[1]

            with pytest.raises(SystemExit) as exc:
                main(["--host", "127.0.0.1", "--port", str(port), "--log-level", "CRITICAL"])

        assert exc.value.code == 1
        assert "Error:" in capsys.readouterr().err
