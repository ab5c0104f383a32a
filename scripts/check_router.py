"""Check that a router accepts a RouterOS API login, without the HTTP layer.

Purpose:
    Quick developer sanity check that the router is reachable from this host
    and the credentials are accepted, using the same dial path as POST /connect.

Usage:
    python scripts/check_router.py 192.168.88.1 --user admin --password secret
    python scripts/check_router.py 192.168.88.1 --command /system/identity/print

Exit codes:
    0 on success; 1 if the dial or command fails.
"""

import argparse
import json
import sys

from routeros_gateway.config import Settings
from routeros_gateway.domain.gateway import GatewayService
from routeros_gateway.domain.models import CommandRequest
from routeros_gateway.infra.routeros.exceptions import RouterOSError
from routeros_gateway.infra.routeros.session import LibRouterOSDialer


def main() -> int:
    parser = argparse.ArgumentParser(description="Check RouterOS API connectivity")
    parser.add_argument("host", help="Router address")
    parser.add_argument("--port", default="", help="API port (default from settings)")
    parser.add_argument("--user", default="admin", help="Router username")
    parser.add_argument("--password", default="", help="Router password")
    parser.add_argument("--command", help="Optional command to run after login")
    args = parser.parse_args()

    settings = Settings()
    service = GatewayService(LibRouterOSDialer(settings), settings)
    request = CommandRequest(
        host=args.host,
        port=args.port,
        user=args.user,
        password=args.password,
        command=args.command or "",
    )

    try:
        if args.command:
            print(json.dumps(service.run_command(request), indent=2))
        else:
            service.connect(request)
            print(f"Connected to {request.address(settings.routeros_default_port)}")
        return 0
    except RouterOSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
