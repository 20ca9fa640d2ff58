"""Internet reachability probes.

The clients ask a :class:`ConnectivityProbe` before every network attempt
and never remember the answer between calls. Two implementations ship:

* :class:`SocketProbe` -- opens (and immediately closes) a TCP connection
  to a well-known host. Any :class:`OSError` counts as offline.
* :class:`StaticProbe` -- always gives the same answer. Backs the CLI's
  ``--offline`` flag and ``ConnectivityConfig.assume_online``.

:func:`probe_from_config` picks one from a
:class:`~restbase.models.ConnectivityConfig`.
"""

from __future__ import annotations

import socket
from typing import Protocol

from restbase.models import ConnectivityConfig


class ConnectivityProbe(Protocol):
    """Anything that can say whether the internet is reachable right now."""

    def has_internet(self) -> bool: ...


class SocketProbe:
    """Reachability check by TCP connect.

    Args:
        host: Host to connect to. An IP address avoids depending on DNS,
            which is often the first thing to fail on a captive network.
        port: TCP port on *host*.
        timeout: Seconds to wait for the connection.
    """

    def __init__(self, host: str = "1.1.1.1", port: int = 53, timeout: float = 3.0) -> None:
        self.host = host
        self.port = port
        self.timeout = timeout

    def has_internet(self) -> bool:
        try:
            with socket.create_connection((self.host, self.port), timeout=self.timeout):
                return True
        except OSError:
            return False

    def __repr__(self) -> str:
        return f"SocketProbe(host={self.host!r}, port={self.port}, timeout={self.timeout})"


class StaticProbe:
    """Probe with a fixed answer."""

    def __init__(self, online: bool) -> None:
        self.online = online

    def has_internet(self) -> bool:
        return self.online

    def __repr__(self) -> str:
        return f"StaticProbe(online={self.online})"


def probe_from_config(config: ConnectivityConfig) -> ConnectivityProbe:
    """Build the probe described by *config*."""
    if config.assume_online:
        return StaticProbe(True)
    return SocketProbe(config.host, config.port, config.timeout)
