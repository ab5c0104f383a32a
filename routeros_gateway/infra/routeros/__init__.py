"""RouterOS integration module.

Provides the session client used to talk to MikroTik routers over the
RouterOS API (TCP 8728/8729):
- session: Dialer/RouterSession seam and the librouteros-backed implementation
- exceptions: Strongly-typed error handling
"""

from routeros_gateway.infra.routeros.exceptions import (
    RouterOSAuthenticationError,
    RouterOSCommandError,
    RouterOSConnectionError,
    RouterOSError,
    RouterOSFatalError,
    RouterOSNetworkError,
    RouterOSTimeoutError,
)
from routeros_gateway.infra.routeros.session import (
    Dialer,
    LibRouterOSDialer,
    Reply,
    RouterSession,
    Sentence,
)

__all__ = [
    # Session client
    "Dialer",
    "RouterSession",
    "LibRouterOSDialer",
    "Reply",
    "Sentence",
    # Exceptions
    "RouterOSError",
    "RouterOSConnectionError",
    "RouterOSNetworkError",
    "RouterOSTimeoutError",
    "RouterOSAuthenticationError",
    "RouterOSCommandError",
    "RouterOSFatalError",
]
