"""Command-line interface for the RouterOS gateway.

Flags override ROUTEROS_GATEWAY_* environment variables, which override the
optional --config file.
"""

import argparse
from pathlib import Path

from routeros_gateway import __version__
from routeros_gateway.config import Settings, load_settings_from_file


def create_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="routeros-gateway",
        description="RouterOS Gateway - JSON over HTTP front for the MikroTik RouterOS API",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--config", "-c", type=Path, help="Path to configuration file (YAML or TOML)"
    )
    parser.add_argument(
        "--environment", choices=["lab", "staging", "prod"], help="Deployment environment"
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug mode (/docs)")
    parser.add_argument("--version", "-v", action="version", version=f"%(prog)s {__version__}")

    server = parser.add_argument_group("HTTP server")
    server.add_argument("--host", help="Bind address")
    server.add_argument("--port", type=int, help="Listen port")
    server.add_argument(
        "--read-timeout", type=float, help="Seconds allowed to receive a request body"
    )
    server.add_argument(
        "--write-timeout", type=float, help="Seconds allowed for router I/O per request"
    )

    logs = parser.add_argument_group("logging")
    logs.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level",
    )
    logs.add_argument("--log-format", choices=["json", "text"], help="Log output format")

    return parser


# argparse dest -> Settings field
CLI_OVERRIDES = {
    "environment": "environment",
    "log_level": "log_level",
    "log_format": "log_format",
    "host": "http_host",
    "port": "http_port",
    "read_timeout": "http_read_timeout_seconds",
    "write_timeout": "http_write_timeout_seconds",
}


def load_config_from_cli(args: list[str] | None = None) -> Settings:
    """Build Settings from a config file, the environment and CLI flags.

    Later sources win: config file, then ROUTEROS_GATEWAY_* environment
    variables, then flags given on the command line.

    Args:
        args: Command-line arguments (defaults to sys.argv[1:])

    Example:
        settings = load_config_from_cli(["--config", "config/gateway.yaml", "--port", "9090"])
    """
    parsed_args = create_argument_parser().parse_args(args)

    if parsed_args.config:
        settings = load_settings_from_file(parsed_args.config)
    else:
        settings = Settings()

    overrides = {
        field: getattr(parsed_args, dest)
        for dest, field in CLI_OVERRIDES.items()
        if getattr(parsed_args, dest) is not None
    }
    if parsed_args.debug:
        overrides["debug"] = True

    if not overrides:
        return settings
    return Settings(**{**settings.model_dump(), **overrides})
