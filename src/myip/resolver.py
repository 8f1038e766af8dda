"""Public IP address resolvers.

Provides interchangeable strategies for discovering the host's public
IP address. The monitor depends only on the Resolver protocol.
"""

import asyncio
import logging
from typing import Any, Optional, Protocol

import aiohttp

from myip.address import Address, parse_address
from myip.config import TAOBAO_IP_URL, ResolverConfig
from myip.errors import DecodeError, ParseError, StatusError, TransportError

logger = logging.getLogger(__name__)


class Resolver(Protocol):
    """Protocol for public IP resolution.

    Implementations:
    - HttpJsonResolver: Queries a JSON HTTP endpoint
    - TaobaoResolver: HttpJsonResolver preset for Taobao's IP service
    - StaticResolver: Returns a configured address
    """

    async def resolve(self) -> Address:
        """Resolve the public IP address.

        Returns:
            The resolved address. Never None.

        Raises:
            ResolveError: If the address cannot be determined.
        """
        ...


class HttpJsonResolver:
    """Resolves the public IP from an HTTP endpoint returning JSON.

    Issues a GET to the configured URL, requires HTTP 200, decodes the
    body and walks ``address_path`` to the IP string.

    Example:
        resolver = HttpJsonResolver(ResolverConfig(url="https://example.com/ip"))
        async with resolver:
            ip = await resolver.resolve()
    """

    def __init__(
        self,
        config: ResolverConfig,
        http_session: Optional[aiohttp.ClientSession] = None,
    ):
        """Initialize resolver.

        Args:
            config: Endpoint and response shape settings.
            http_session: Optional aiohttp session carrying timeout, proxy
                or TLS settings. A private session is created when omitted.
        """
        self._config = config
        self._session = http_session
        self._owns_session = http_session is None

    async def __aenter__(self):
        """Enter async context, creating session if needed."""
        self._get_session()
        return self

    async def __aexit__(self, *args):
        """Exit async context, closing owned session."""
        await self.close()

    @property
    def config(self) -> ResolverConfig:
        """The request configuration."""
        return self._config

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession()
        return self._session

    async def resolve(self) -> Address:
        """Query the endpoint for the public IP.

        Returns:
            Parsed, normalized address.

        Raises:
            TransportError: On connection failure or timeout.
            StatusError: On a non-200 status or a failing code field.
            DecodeError: If the body is not JSON of the expected shape.
            ParseError: If the address field is not an IP literal.
        """
        session = self._get_session()
        try:
            async with session.get(
                self._config.url,
                timeout=aiohttp.ClientTimeout(total=self._config.timeout),
            ) as resp:
                if resp.status != 200:
                    raise StatusError(f"unexpected status: {resp.status}")
                try:
                    payload = await resp.json(content_type=None)
                except ValueError as e:
                    raise DecodeError(f"failed in decoding response: {e}")
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportError(f"request to {self._config.url} failed: {e!r}")

        self._check_code(payload)
        address = parse_address(self._extract(payload))
        logger.debug(f"Resolved public IP: {address}")
        return address

    def _check_code(self, payload: Any) -> None:
        """Reject payloads whose status field reports failure."""
        field = self._config.code_field
        if field is None or not isinstance(payload, dict) or field not in payload:
            return
        if payload[field] != self._config.success_code:
            raise StatusError(f"unexpected {field}: {payload[field]!r}")

    def _extract(self, payload: Any) -> str:
        """Walk the address path down to the IP string."""
        node = payload
        for key in self._config.address_path:
            if not isinstance(node, dict) or key not in node:
                path = ".".join(self._config.address_path)
                raise DecodeError(f"response has no {path!r} field")
            node = node[key]
        if not isinstance(node, str):
            raise DecodeError(f"address field is {type(node).__name__}, not str")
        return node

    async def close(self) -> None:
        """Close the HTTP session if owned."""
        if self._owns_session and self._session:
            await self._session.close()
            self._session = None


class TaobaoResolver(HttpJsonResolver):
    """Resolves the public IP via Taobao's IP info API.

    The endpoint answers ``{"code": 0, "data": {"ip": "..."}}``.
    """

    def __init__(self, http_session: Optional[aiohttp.ClientSession] = None):
        super().__init__(
            ResolverConfig(
                url=TAOBAO_IP_URL,
                address_path=("data", "ip"),
                code_field="code",
                success_code=0,
            ),
            http_session=http_session,
        )


class StaticResolver:
    """Returns a statically configured address.

    Useful when the public IP is known, and as a stand-in resolver.

    Example:
        resolver = StaticResolver("203.0.113.50")
        ip = await resolver.resolve()  # IPv4Address('203.0.113.50')
    """

    def __init__(self, ip: str):
        """Initialize with static IP.

        Args:
            ip: The IP literal to return.

        Raises:
            ValueError: If ip is not a valid IP literal.
        """
        try:
            self._address = parse_address(ip)
        except ParseError as e:
            raise ValueError(f"Invalid IP: {ip!r}") from e

    async def resolve(self) -> Address:
        """Return the configured address."""
        return self._address
