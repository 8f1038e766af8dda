"""Base exceptions for myip."""


class MyIpError(Exception):
    """Base exception for all myip errors."""

    pass


class ResolveError(MyIpError):
    """Public IP resolution failed."""

    pass


class TransportError(ResolveError):
    """Endpoint unreachable, connection refused or timed out."""

    pass


class StatusError(ResolveError):
    """Endpoint answered with an unexpected status."""

    pass


class DecodeError(ResolveError):
    """Response body is not JSON or lacks the expected shape."""

    pass


class ParseError(ResolveError):
    """Extracted value is not a valid IP address literal."""

    pass
