"""Main entry point for the RouterOS gateway.

This module provides the main entry point that:
1. Loads and validates configuration
2. Sets up logging and tracing
3. Binds the listening socket (the only process-fatal failure)
4. Serves the HTTP API with uvicorn until SIGTERM/SIGINT
"""

import logging
import socket
import sys

import uvicorn

from routeros_gateway import __version__
from routeros_gateway.api.http import create_http_app
from routeros_gateway.cli import load_config_from_cli
from routeros_gateway.config import Settings, set_settings
from routeros_gateway.infra.observability import setup_logging, setup_tracing
from routeros_gateway.infra.routeros.session import LibRouterOSDialer

logger = logging.getLogger(__name__)


def print_startup_banner(settings: Settings) -> None:  # pragma: no cover
    """Print startup banner with configuration information.

    Args:
        settings: Settings instance
    """
    logger.info("=" * 60)
    logger.info("RouterOS Gateway")
    logger.info(f"Version: {__version__}")
    logger.info("=" * 60)
    logger.info("Configuration:")
    logger.info(f"  Environment: {settings.environment}")
    logger.info(f"  Debug: {settings.debug}")
    logger.info(f"  Log Level: {settings.log_level}")
    logger.info(f"  Log Format: {settings.log_format}")
    logger.info("HTTP Server:")
    logger.info(f"  Listen: {settings.http_host}:{settings.http_port}")
    logger.info(f"  Read Timeout: {settings.http_read_timeout_seconds}s")
    logger.info(f"  Write Timeout: {settings.http_write_timeout_seconds}s")
    logger.info("RouterOS:")
    logger.info(f"  Default Port: {settings.routeros_default_port}")
    logger.info(f"  Login Method: {settings.routeros_login_method}")
    logger.info("=" * 60)


def bind_socket(host: str, port: int) -> socket.socket:
    """Bind the listening socket.

    Args:
        host: Bind address
        port: Bind port

    Returns:
        Bound socket, ready to hand to uvicorn

    Raises:
        OSError: If the address cannot be bound
    """
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port))
    except OSError:
        sock.close()
        raise
    sock.set_inheritable(True)
    return sock


def main() -> int:  # pragma: no cover
    """Main entry point for the RouterOS gateway.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    try:
        settings = load_config_from_cli()
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    set_settings(settings)
    setup_logging(settings.log_level, json_format=settings.log_format == "json")
    setup_tracing(
        environment=settings.environment,
        console_export=settings.tracing_console_export,
    )
    print_startup_banner(settings)

    try:
        sock = bind_socket(settings.http_host, settings.http_port)
    except OSError as e:
        logger.critical(
            f"Cannot bind {settings.http_host}:{settings.http_port}: {e}",
            exc_info=True,
        )
        return 1

    app = create_http_app(settings, LibRouterOSDialer(settings))
    config = uvicorn.Config(
        app,
        log_config=None,
        log_level=settings.log_level.lower(),
        server_header=False,
    )
    server = uvicorn.Server(config)

    logger.info(f"Serving on {settings.http_host}:{settings.http_port}")
    try:
        server.run(sockets=[sock])
    finally:
        sock.close()

    logger.info("Shutdown complete")
    return 0


if __name__ == "__main__":
    sys.exit(main())
