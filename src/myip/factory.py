"""Factory for wiring configuration into a resolver and a monitor.

Usage:
    async with create_monitor(load_config()) as monitor:
        monitor.start_loop(on_change)
        ...

or, to load config, set up logging and watch until stopped:
    await run(on_change, stop_event=stop)
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import aiohttp

from myip.address import Address
from myip.config import Config, load_config
from myip.ip_monitor import ChangeCallback, IpMonitor
from myip.logging import setup_logging
from myip.resolver import HttpJsonResolver, Resolver

logger = logging.getLogger(__name__)


def create_resolver(
    config: Config, http_session: Optional[aiohttp.ClientSession] = None
) -> HttpJsonResolver:
    """Create the HTTP resolver described by config.resolver."""
    return HttpJsonResolver(config.resolver, http_session=http_session)


def create_monitor(
    config: Config,
    resolver: Optional[Resolver] = None,
    http_session: Optional[aiohttp.ClientSession] = None,
) -> IpMonitor:
    """Create an IpMonitor using config.monitor settings.

    The monitor closes the resolver on close() / async context exit, which
    releases the HTTP session the configured resolver creates for itself.

    Args:
        config: Loaded configuration.
        resolver: Resolver to use instead of the configured HTTP one.
        http_session: Session handed to the configured HTTP resolver.

    Returns:
        Monitor ready for start_loop().
    """
    if resolver is None:
        resolver = create_resolver(config, http_session=http_session)
    return IpMonitor(resolver, check_interval=config.monitor.check_interval)


async def run(
    on_change: Optional[ChangeCallback] = None,
    config_path: Optional[Path] = None,
    stop_event: Optional[asyncio.Event] = None,
) -> Optional[Address]:
    """Load config, set up logging and watch the public IP until stopped.

    Args:
        on_change: Callback for every change, see IpMonitor.start_loop.
        config_path: Config file; defaults to ~/.config/myip/config.yaml.
        stop_event: Set to stop watching. Without one, runs until cancelled.

    Returns:
        The last cached address.
    """
    config = load_config(config_path)
    setup_logging(config)
    logger.debug(
        f"Watching {config.resolver.url} every {config.monitor.check_interval}s"
    )

    async with create_monitor(config) as monitor:
        monitor.start_loop(on_change)
        await (stop_event or asyncio.Event()).wait()
        return monitor.get_address()
