"""IP address parsing and comparison helpers."""

import ipaddress
from typing import Optional, Union

from myip.errors import ParseError

Address = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]


def normalize(address: Address) -> Address:
    """Collapse IPv4-mapped IPv6 addresses (::ffff:a.b.c.d) to IPv4."""
    if isinstance(address, ipaddress.IPv6Address) and address.ipv4_mapped:
        return address.ipv4_mapped
    return address


def parse_address(text: str) -> Address:
    """Parse an IP literal into a normalized address.

    Args:
        text: IPv4 or IPv6 literal, surrounding whitespace allowed.

    Returns:
        Parsed address.

    Raises:
        ParseError: If text is not a valid IP literal.
    """
    try:
        address = ipaddress.ip_address(text.strip())
    except ValueError:
        raise ParseError(f"failed to parse {text!r} as ip")
    return normalize(address)


def addresses_equal(a: Optional[Address], b: Optional[Address]) -> bool:
    """Compare two possibly-unset addresses naming the same host."""
    if a is None or b is None:
        return a is None and b is None
    return normalize(a) == normalize(b)
