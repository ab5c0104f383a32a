"""Domain models for the RouterOS gateway.

Pydantic models for the JSON request bodies accepted by the gateway. Both are
ephemeral: they live for the duration of one HTTP request.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from routeros_gateway.infra.routeros.session import join_host_port

# One data record returned by the router, e.g. one interface or one lease
ReplyRow = dict[str, str]


class ConnectionRequest(BaseModel):
    """Router coordinates and credentials.

    Missing fields decode as empty strings, so a body like ``{}`` is valid
    JSON for this shape and fails later at dial time rather than at decode.
    """

    model_config = ConfigDict(extra="ignore")

    host: str = ""
    port: str = ""
    user: str = ""
    password: str = Field(default="", repr=False)

    @field_validator("port", mode="before")
    @classmethod
    def coerce_port(cls, v: Any) -> Any:
        """Accept a JSON number for the port and keep it as a string."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    def address(self, default_port: int) -> str:
        """Dialable host:port, using default_port when the request has none."""
        return join_host_port(self.host, self.port or str(default_port))


class CommandRequest(ConnectionRequest):
    """Connection request plus one command and its named arguments.

    Example body:
        {
            "host": "192.168.88.1", "port": "8728",
            "user": "admin", "password": "secret",
            "command": "/interface/print",
            "payload": {"stats": ""}
        }
    """

    command: str = ""
    payload: dict[str, str] | None = None
