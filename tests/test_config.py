"""Tests for config module."""

import logging
from pathlib import Path
from unittest.mock import Mock

import pytest
import yaml

from myip.config import (
    TAOBAO_IP_URL,
    Config,
    MonitorConfig,
    ResolverConfig,
    get_config_path,
    load_config,
)


class TestConfigDefaults:
    """Test default configuration values."""

    def test_default_config_values(self):
        """Config has sensible defaults when no file exists."""
        config = Config()

        assert config.log_level == "INFO"
        assert config.log_file is None
        assert config.monitor == MonitorConfig(check_interval=1.0)
        assert config.resolver.url == TAOBAO_IP_URL
        assert config.resolver.address_path == ("data", "ip")
        assert config.resolver.code_field == "code"
        assert config.resolver.success_code == 0
        assert config.resolver.timeout == 10.0


class TestGetConfigPath:
    """Test config path resolution."""

    def test_get_config_path_default(self):
        """Default config path is ~/.config/myip/config.yaml."""
        path = get_config_path()
        assert path == Path.home() / ".config" / "myip" / "config.yaml"

    def test_get_config_path_custom(self):
        """Can override config path."""
        custom = Path("/custom/config.yaml")
        assert get_config_path(custom) == custom


class TestLoadConfig:
    """Test config loading."""

    def test_load_config_no_file_returns_defaults(self, tmp_path):
        """Config returns defaults when no file exists."""
        config = load_config(tmp_path / "nonexistent.yaml")

        assert config == Config()

    def test_load_config_empty_file_returns_defaults(self, tmp_path):
        """An empty file yields defaults."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("   \n")

        assert load_config(config_file) == Config()

    def test_load_config_invalid_yaml_returns_defaults(self, tmp_path):
        """Unparseable YAML yields defaults."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("log_level: [unclosed\n")

        assert load_config(config_file) == Config()

    def test_load_config_non_mapping_returns_defaults(self, tmp_path):
        """A YAML document that is not a mapping yields defaults."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("- just\n- a list\n")

        assert load_config(config_file) == Config()

    def test_load_config_from_file(self, tmp_path):
        """Config loads values from YAML file."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            yaml.dump(
                {
                    "log_level": "DEBUG",
                    "log_file": "/tmp/myip.log",
                    "monitor": {"check_interval": 5},
                    "resolver": {
                        "url": "https://api.example.com/ip",
                        "address_path": ["ip"],
                        "code_field": None,
                        "timeout": 2,
                    },
                }
            )
        )

        config = load_config(config_file)

        assert config.log_level == "DEBUG"
        assert config.log_file == "/tmp/myip.log"
        assert config.monitor.check_interval == 5.0
        assert config.resolver == ResolverConfig(
            url="https://api.example.com/ip",
            address_path=("ip",),
            code_field=None,
            success_code=0,
            timeout=2.0,
        )

    def test_partial_sections_use_defaults(self, tmp_path):
        """Missing keys inside a section fall back to defaults."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml.dump({"resolver": {"timeout": 4.0}}))

        config = load_config(config_file)

        assert config.resolver.url == TAOBAO_IP_URL
        assert config.resolver.timeout == 4.0
        assert config.monitor.check_interval == 1.0

    def test_uses_injected_file_reader(self):
        """An injected reader replaces disk access."""
        reader = Mock(return_value={"monitor": {"check_interval": 0.5}})

        config = load_config(Path("/nowhere/config.yaml"), file_reader=reader)

        reader.assert_called_once_with(Path("/nowhere/config.yaml"))
        assert config.monitor.check_interval == 0.5

    def test_dotted_address_path_is_split(self):
        """A dotted string path is split into keys."""
        reader = Mock(return_value={"resolver": {"address_path": "data.ip"}})

        config = load_config(None, file_reader=reader)

        assert config.resolver.address_path == ("data", "ip")

    def test_single_key_address_path_string(self):
        """A plain string is a one-key path."""
        reader = Mock(return_value={"resolver": {"address_path": "ip"}})

        config = load_config(None, file_reader=reader)

        assert config.resolver.address_path == ("ip",)

    @pytest.mark.parametrize("value", [42, [], ["data", 1], "", {"data": "ip"}])
    def test_invalid_address_path_uses_default(self, value, caplog):
        """Unusable address paths fall back to the default with a warning."""
        caplog.set_level(logging.WARNING, logger="myip")
        reader = Mock(return_value={"resolver": {"address_path": value}})

        config = load_config(None, file_reader=reader)

        assert config.resolver.address_path == ("data", "ip")
        assert "Invalid resolver.address_path" in caplog.text
