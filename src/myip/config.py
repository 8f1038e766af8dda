"""Configuration management for myip."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

import yaml

logger = logging.getLogger(__name__)


TAOBAO_IP_URL = "http://ip.taobao.com/service/getIpInfo.php?ip=myip"


@dataclass(frozen=True)
class ResolverConfig:
    """Request settings for an HTTP JSON resolver.

    Frozen so a resolver's endpoint never changes after construction.
    """

    url: str = TAOBAO_IP_URL
    address_path: tuple[str, ...] = ("data", "ip")  # keys leading to the IP string
    code_field: str | None = "code"  # None disables the status field check
    success_code: int = 0
    timeout: float = 10.0  # seconds


@dataclass
class MonitorConfig:
    """Refresh loop configuration."""

    check_interval: float = 1.0  # seconds


@dataclass
class Config:
    """Top-level configuration."""

    log_level: str = "INFO"
    log_file: str | None = None
    monitor: MonitorConfig = field(default_factory=MonitorConfig)
    resolver: ResolverConfig = field(default_factory=ResolverConfig)


def get_config_path(custom_path: Path | None = None) -> Path:
    """Get the configuration file path.

    Args:
        custom_path: Override path. If None, returns default.

    Returns:
        Path to config file.
    """
    if custom_path is not None:
        return custom_path
    return Path.home() / ".config" / "myip" / "config.yaml"


def _parse_address_path(value: Any) -> tuple[str, ...]:
    """Accept ["data", "ip"] or "data.ip"; anything else means the default."""
    if isinstance(value, str):
        parts = tuple(part for part in value.split(".") if part)
        if parts:
            return parts
    elif isinstance(value, (list, tuple)) and value:
        if all(isinstance(part, str) and part for part in value):
            return tuple(value)
    logger.warning(
        f"Invalid resolver.address_path {value!r}, "
        f"using {'.'.join(ResolverConfig.address_path)!r}"
    )
    return ResolverConfig.address_path


def _default_file_reader(path: Path) -> dict[str, Any] | None:
    """Default file reader that loads YAML from disk."""
    if not path.exists():
        return None
    try:
        content = path.read_text()
        if not content.strip():
            return None
        return yaml.safe_load(content)
    except yaml.YAMLError:
        return None


def load_config(
    path: Path | None = None,
    file_reader: Callable[[Path], dict[str, Any] | None] | None = None,
) -> Config:
    """Load configuration from file.

    Args:
        path: Path to config file. If None, uses default path.
        file_reader: Injectable file reader for testing.

    Returns:
        Config object with values from file or defaults.
    """
    config_path = get_config_path(path)
    reader = file_reader or _default_file_reader

    data = reader(config_path)

    if not isinstance(data, dict):
        return Config()

    monitor_data = data.get("monitor") or {}
    monitor_config = MonitorConfig(
        check_interval=float(
            monitor_data.get("check_interval", MonitorConfig.check_interval)
        ),
    )

    resolver_data = data.get("resolver") or {}
    resolver_config = ResolverConfig(
        url=resolver_data.get("url", ResolverConfig.url),
        address_path=_parse_address_path(
            resolver_data.get("address_path", ResolverConfig.address_path)
        ),
        code_field=resolver_data.get("code_field", ResolverConfig.code_field),
        success_code=resolver_data.get("success_code", ResolverConfig.success_code),
        timeout=float(resolver_data.get("timeout", ResolverConfig.timeout)),
    )

    return Config(
        log_level=data.get("log_level", Config.log_level),
        log_file=data.get("log_file", Config.log_file),
        monitor=monitor_config,
        resolver=resolver_config,
    )
