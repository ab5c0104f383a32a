"""Gateway service: one router session per request.

Every operation follows the same shape: dial, (run one command), close. The
session is closed on every exit path once the dial has succeeded, and never
outlives the call that opened it.
"""

import json
import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager

from routeros_gateway.config import Settings
from routeros_gateway.domain.models import CommandRequest, ConnectionRequest, ReplyRow
from routeros_gateway.infra.observability import (
    record_routeros_request,
    set_span_error,
    trace_routeros_request,
)
from routeros_gateway.infra.routeros.exceptions import RouterOSError
from routeros_gateway.infra.routeros.session import (
    REPLY_DATA,
    Dialer,
    Reply,
    RouterSession,
)

logger = logging.getLogger(__name__)


def build_command_words(command: str, payload: dict[str, str]) -> list[str]:
    """Flatten a command and its payload into API words.

    The router treats "=key=value" words as a set of named arguments, so
    their order follows the payload's iteration order and carries no meaning.

    Example:
        build_command_words("/ip/address/add", {"address": "10.0.0.1/24"})
        -> ["/ip/address/add", "=address=10.0.0.1/24"]
    """
    return [command, *(f"={key}={value}" for key, value in payload.items())]


def extract_rows(reply: Reply) -> list[ReplyRow]:
    """Return the data records of a reply, in order.

    Only !re sentences with an attribute map count; !done, !trap and other
    control sentences are dropped.
    """
    return [
        sentence.attributes
        for sentence in reply.sentences
        if sentence.word == REPLY_DATA and sentence.attributes is not None
    ]


class GatewayService:
    """Runs gateway requests against routers through an injected dialer.

    Responsibilities:
    - Dial the router named in a request
    - Dispatch one command as a plain run or an argument run
    - Filter the reply down to data rows
    - Guarantee session closure

    Example:
        service = GatewayService(LibRouterOSDialer(settings), settings)
        rows = service.run_command(
            CommandRequest(host="192.168.88.1", user="admin", password="x",
                           command="/interface/print")
        )
    """

    def __init__(self, dialer: Dialer, settings: Settings) -> None:
        """Initialize gateway service.

        Args:
            dialer: Session factory (librouteros in production, fakes in tests)
            settings: Application settings
        """
        self.dialer = dialer
        self.settings = settings

    def connect(self, request: ConnectionRequest) -> None:
        """Prove the router is reachable and accepts the credentials.

        Raises:
            RouterOSConnectionError: If the dial fails
        """
        with self.session(request):
            pass

    def run_command(self, request: CommandRequest) -> list[ReplyRow]:
        """Run one command and return its data rows.

        Raises:
            RouterOSConnectionError: If the dial fails
            RouterOSError: If the command fails
        """
        with self.session(request) as session:
            reply = self._execute(session, request)
        return extract_rows(reply)

    @contextmanager
    def session(self, request: ConnectionRequest) -> Iterator[RouterSession]:
        """Dial the router and close the session when the block exits."""
        address = request.address(self.settings.routeros_default_port)
        session = self._dial(address, request)
        try:
            yield session
        finally:
            self._close(session, address)

    def _dial(self, address: str, request: ConnectionRequest) -> RouterSession:
        span = trace_routeros_request(address, "dial")
        start = time.monotonic()
        try:
            session = self.dialer.dial(address, request.user, request.password)
        except RouterOSError as e:
            record_routeros_request("dial", time.monotonic() - start, success=False)
            set_span_error(span, e)
            logger.warning(
                f"Dial failed: {e}",
                extra={"router": address, "error": type(e).__name__},
            )
            raise
        finally:
            span.end()

        record_routeros_request("dial", time.monotonic() - start, success=True)
        logger.debug("Dialed router", extra={"router": address})
        return session

    def _execute(self, session: RouterSession, request: CommandRequest) -> Reply:
        address = request.address(self.settings.routeros_default_port)
        span = trace_routeros_request(address, "command")
        start = time.monotonic()
        try:
            if request.payload:
                reply = session.run_args(build_command_words(request.command, request.payload))
            else:
                reply = session.run(request.command)
        except RouterOSError as e:
            record_routeros_request("command", time.monotonic() - start, success=False)
            set_span_error(span, e)
            logger.error(
                f"Command failed: {e}",
                extra={
                    "router": address,
                    "command": request.command,
                    "payload": json.dumps(request.payload or {}),
                    "error": type(e).__name__,
                },
            )
            raise
        finally:
            span.end()

        record_routeros_request("command", time.monotonic() - start, success=True)
        logger.info(
            "Command completed",
            extra={"router": address, "command": request.command},
        )
        return reply

    def _close(self, session: RouterSession, address: str) -> None:
        try:
            session.close()
        except (RouterOSError, OSError) as e:
            logger.warning(f"Error closing session: {e}", extra={"router": address})
