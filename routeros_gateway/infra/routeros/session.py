"""RouterOS API session client built on librouteros.

Provides the dial/run/close seam the gateway talks to:
- Dialer.dial(address, user, password) -> RouterSession
- RouterSession.run(command) -> Reply
- RouterSession.run_args(words) -> Reply
- RouterSession.close()

Sessions are single-use and never pooled. The wire protocol (length-prefixed
words, login handshake) is handled entirely by librouteros; this module only
writes one sentence, reads sentences until !done, and keeps every reply word
so callers can decide which sentences are data records.

Design principles:
- Map socket and librouteros errors to RouterOSError subclasses
- Keep attribute values as strings, exactly as the router sent them
- Never log credentials
"""

import logging
import socket
from dataclasses import dataclass, field
from typing import Protocol

import librouteros
from librouteros.api import Api
from librouteros.exceptions import (
    ConnectionClosed,
    FatalError,
    LibRouterosError,
    MultiTrapError,
    TrapError,
)
from librouteros.login import plain, token

from routeros_gateway.config import Settings
from routeros_gateway.infra.routeros.exceptions import (
    RouterOSAuthenticationError,
    RouterOSCommandError,
    RouterOSConnectionError,
    RouterOSFatalError,
    RouterOSNetworkError,
    RouterOSTimeoutError,
)

logger = logging.getLogger(__name__)

# Reply words
REPLY_DATA = "!re"
REPLY_DONE = "!done"
REPLY_TRAP = "!trap"

LOGIN_METHODS = {
    "plain": plain,
    "token": token,
}


@dataclass
class Sentence:
    """One sentence of a router reply.

    Attributes:
        word: Reply word (!re, !done, !trap, !empty)
        attributes: Attribute words as a string map, None when the
            sentence carried no attribute words
        tag: API tag (.tag=...) if the sentence had one
    """

    word: str
    attributes: dict[str, str] | None = None
    tag: str | None = None


@dataclass
class Reply:
    """All sentences returned for one command, in arrival order."""

    sentences: list[Sentence] = field(default_factory=list)

    @property
    def done(self) -> Sentence | None:
        """The terminating !done sentence, if one was received."""
        for sentence in reversed(self.sentences):
            if sentence.word == REPLY_DONE:
                return sentence
        return None


class RouterSession(Protocol):
    """A live, authenticated connection to one router."""

    def run(self, command: str) -> Reply: ...

    def run_args(self, words: list[str]) -> Reply: ...

    def close(self) -> None: ...


class Dialer(Protocol):
    """Opens router sessions."""

    def dial(self, address: str, user: str, password: str) -> RouterSession: ...


def join_host_port(host: str, port: str) -> str:
    """Combine host and port into a dialable address.

    IPv6 literals are bracketed.

    Example:
        join_host_port("10.0.0.1", "8728")  -> "10.0.0.1:8728"
        join_host_port("fe80::1", "8728")   -> "[fe80::1]:8728"
    """
    if ":" in host and not host.startswith("["):
        return f"[{host}]:{port}"
    return f"{host}:{port}"


def split_host_port(address: str) -> tuple[str, int]:
    """Split an address built by join_host_port.

    Raises:
        RouterOSNetworkError: If the address has no valid port
    """
    host, sep, port = address.rpartition(":")
    if not sep or not host:
        raise RouterOSNetworkError(f"missing port in address {address!r}")

    host = host.strip("[]")
    try:
        port_number = int(port)
    except ValueError:
        raise RouterOSNetworkError(f"invalid port {port!r}") from None

    if not 0 < port_number < 65536:
        raise RouterOSNetworkError(f"invalid port {port!r}")

    return host, port_number


def parse_words(words: tuple[str, ...] | list[str]) -> tuple[dict[str, str] | None, str | None]:
    """Turn raw API words into an attribute map and tag.

    "=name=ether1" becomes {"name": "ether1"}; a value may itself contain "=".
    ".tag=x" sets the tag. Other API attribute words are ignored.
    """
    attributes: dict[str, str] = {}
    tag = None

    for word in words:
        if word.startswith("="):
            key, _, value = word[1:].partition("=")
            attributes[key] = value
        elif word.startswith(".tag="):
            tag = word[len(".tag=") :]

    return (attributes or None), tag


class LibRouterOSSession:
    """RouterSession backed by a connected librouteros Api."""

    def __init__(self, api: Api, address: str) -> None:
        self._api = api
        self.address = address
        self._closed = False

    def run(self, command: str) -> Reply:
        """Run a command with no arguments."""
        return self._communicate([command])

    def run_args(self, words: list[str]) -> Reply:
        """Run a command given as [command, "=key=value", ...]."""
        if not words:
            raise ValueError("words must start with a command")
        return self._communicate(words)

    def close(self) -> None:
        """Close the underlying socket. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._api.close()

    def _communicate(self, words: list[str]) -> Reply:
        """Write one sentence and read until !done.

        Raises:
            RouterOSCommandError: If the router answered with !trap
            RouterOSFatalError: If the session was lost mid-command
        """
        protocol = self._api.protocol
        reply = Reply()
        traps: list[dict[str, str]] = []

        try:
            protocol.writeSentence(words[0], *words[1:])

            reply_word = None
            while reply_word != REPLY_DONE:
                reply_word, raw_words = protocol.readSentence()
                attributes, tag = parse_words(raw_words)
                if reply_word == REPLY_TRAP:
                    traps.append(attributes or {})
                reply.sentences.append(Sentence(reply_word, attributes, tag))

        except FatalError as e:
            raise RouterOSFatalError(f"router closed the session: {e}") from e
        except ConnectionClosed as e:
            raise RouterOSFatalError("connection closed by router") from e
        except OSError as e:
            raise RouterOSFatalError(f"session lost: {type(e).__name__}: {e}") from e
        except (LibRouterosError, UnicodeDecodeError) as e:
            raise RouterOSFatalError(f"unreadable reply: {type(e).__name__}: {e}") from e

        if traps:
            trap = traps[0]
            category = trap.get("category")
            raise RouterOSCommandError(
                trap.get("message", "command failed"),
                category=int(category) if category and category.isdigit() else None,
            )

        return reply


class LibRouterOSDialer:
    """Dialer that logs into routers with librouteros.

    Example:
        dialer = LibRouterOSDialer(settings)
        session = dialer.dial("192.168.88.1:8728", "admin", "secret")
        try:
            reply = session.run("/system/identity/print")
        finally:
            session.close()
    """

    def __init__(self, settings: Settings) -> None:
        """Initialize dialer.

        Args:
            settings: Application settings (timeouts, login method, encoding)
        """
        self.timeout_seconds = settings.http_write_timeout_seconds
        self.login_method = LOGIN_METHODS[settings.routeros_login_method]
        self.encoding = settings.routeros_encoding

    def dial(self, address: str, user: str, password: str) -> LibRouterOSSession:
        """Connect and log in.

        Raises:
            RouterOSNetworkError: On DNS/TCP failures or a malformed address
            RouterOSTimeoutError: If the router does not answer in time
            RouterOSAuthenticationError: If the router rejects the credentials
            RouterOSConnectionError: On any other handshake failure
        """
        host, port = split_host_port(address)

        try:
            api = librouteros.connect(
                host=host,
                username=user,
                password=password,
                port=port,
                timeout=self.timeout_seconds,
                encoding=self.encoding,
                login_method=self.login_method,
            )
        except (TrapError, MultiTrapError) as e:
            raise RouterOSAuthenticationError(f"login rejected: {e}") from e
        except (socket.timeout, TimeoutError) as e:
            raise RouterOSTimeoutError(
                f"timed out after {self.timeout_seconds}s dialing {address}"
            ) from e
        except socket.gaierror as e:
            raise RouterOSNetworkError(f"cannot resolve {host}: {e}") from e
        except (ConnectionClosed, OSError) as e:
            raise RouterOSNetworkError(f"dial {address}: {e}") from e
        except (LibRouterosError, UnicodeDecodeError) as e:
            raise RouterOSConnectionError(f"dial {address}: {e}") from e

        logger.debug("RouterOS session opened", extra={"router": address})
        return LibRouterOSSession(api, address)
