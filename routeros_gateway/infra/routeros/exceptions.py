"""RouterOS session exceptions.

Strongly-typed exceptions for the RouterOS API session client.
Maps low-level socket and librouteros errors to gateway-level exceptions.

Exception hierarchy:
- RouterOSError (base)
  - RouterOSConnectionError (dial failed)
    - RouterOSNetworkError
    - RouterOSTimeoutError
    - RouterOSAuthenticationError
  - RouterOSCommandError (router rejected the command, !trap)
    - RouterOSFatalError (router ended the session, !fatal)
"""


class RouterOSError(Exception):
    """Base exception for all RouterOS session errors."""

    pass


# Dial errors
class RouterOSConnectionError(RouterOSError):
    """Base exception for failures while opening a session."""

    pass


class RouterOSNetworkError(RouterOSConnectionError):
    """Raised for network connectivity issues (DNS, TCP connection, etc)."""

    pass


class RouterOSTimeoutError(RouterOSConnectionError):
    """Raised when the router does not answer in time while dialing."""

    pass


class RouterOSAuthenticationError(RouterOSConnectionError):
    """Raised when the router rejects the supplied credentials."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message)


# Command errors
class RouterOSCommandError(RouterOSError):
    """Raised when the router answers a command with !trap.

    Attributes:
        message: Router-supplied error message
        category: Router trap category (None when not supplied)
    """

    def __init__(self, message: str, category: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.category = category

    def __str__(self) -> str:
        if self.category is None:
            return self.message
        return f"{self.message} (category {self.category})"


class RouterOSFatalError(RouterOSCommandError):
    """Raised when the session is lost while a command is in flight."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
