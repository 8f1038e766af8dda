"""myip - watch the host's public IP address and report changes."""

__version__ = "0.1.0"
