"""
Unit tests for server configuration and the command line.
"""

import pytest

from bytehttp.__main__ import build_parser, config_from_args
from bytehttp.config import ServerConfig


class TestServerConfig:
    """Tests for ServerConfig."""

    def test_defaults(self):
        """Test default values."""
        config = ServerConfig()

        assert (config.host, config.port) == ("0.0.0.0", 4221)
        assert config.buffer_size == 1024
        assert config.timeout is None
        assert config.strict_parsing is False
        assert config.threaded is False

    def test_get(self):
        """Test lookup of options by name."""
        config = ServerConfig(directory="/srv/files")

        assert config.get("directory") == "/srv/files"
        assert config.get("port") == "4221"

    def test_get_unknown_or_unset(self):
        """Test get() returns None for unknown and unset options."""
        config = ServerConfig()

        assert config.get("no_such_option") is None
        assert config.get("timeout") is None

    @pytest.mark.parametrize("kwargs", [
        {"port": -1},
        {"port": 70000},
        {"backlog": 0},
        {"buffer_size": 8},
        {"timeout": 0},
        {"directory": ""},
        {"log_level": "LOUD"},
        {"log_format": "xml"},
    ])
    def test_validate_rejects(self, kwargs):
        """Test invalid values fail validation."""
        with pytest.raises(ValueError):
            ServerConfig(**kwargs).validate()

    def test_validate_accepts_defaults(self):
        """Test the defaults are valid."""
        ServerConfig().validate()


class TestFromEnv:
    """Tests for ServerConfig.from_env()."""

    def test_reads_variables(self, monkeypatch):
        """Test BYTEHTTP_* variables are applied."""
        monkeypatch.setenv("BYTEHTTP_PORT", "8080")
        monkeypatch.setenv("BYTEHTTP_DIRECTORY", "/data")
        monkeypatch.setenv("BYTEHTTP_TIMEOUT", "2.5")
        monkeypatch.setenv("BYTEHTTP_STRICT", "true")
        monkeypatch.setenv("BYTEHTTP_THREADED", "1")

        config = ServerConfig.from_env()

        assert config.port == 8080
        assert config.directory == "/data"
        assert config.timeout == 2.5
        assert config.strict_parsing is True
        assert config.threaded is True

    def test_defaults_without_variables(self, monkeypatch):
        """Test missing variables fall back to defaults."""
        for name in ("PORT", "DIRECTORY", "TIMEOUT", "STRICT", "THREADED", "HOST"):
            monkeypatch.delenv(f"BYTEHTTP_{name}", raising=False)

        config = ServerConfig.from_env()

        assert config.port == 4221
        assert config.timeout is None
        assert config.strict_parsing is False


class TestCommandLine:
    """Tests for argument parsing."""

    def test_directory_flag(self, monkeypatch):
        """Test --directory sets the storage root."""
        monkeypatch.delenv("BYTEHTTP_DIRECTORY", raising=False)
        args = build_parser().parse_args(["--directory", "/tmp/files"])

        assert config_from_args(args).directory == "/tmp/files"

    def test_flags_override_environment(self, monkeypatch):
        """Test command-line values win over the environment."""
        monkeypatch.setenv("BYTEHTTP_PORT", "9000")
        args = build_parser().parse_args(["-p", "8000", "--strict", "-l", "debug"])

        config = config_from_args(args)

        assert config.port == 8000
        assert config.strict_parsing is True
        assert config.log_level == "DEBUG"

    def test_unset_flags_keep_environment(self, monkeypatch):
        """Test omitted flags do not reset environment values."""
        monkeypatch.setenv("BYTEHTTP_THREADED", "true")
        args = build_parser().parse_args([])

        assert config_from_args(args).threaded is True
