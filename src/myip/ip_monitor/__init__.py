"""IP monitoring module for myip.

Caches the public IP, refreshes it periodically through a resolver and
notifies a registered callback when it changes.
"""

from .monitor import ChangeCallback, IpMonitor

__all__ = ["ChangeCallback", "IpMonitor"]
