"""Shared pytest fixtures.

These fixtures live at `tests/` scope so they are available to every test
module.

Key goals:
- Provide a recording fake for the router session seam so handlers can be
  exercised without a live router.
- Keep the global settings singleton from leaking between tests.
"""

from __future__ import annotations

import pytest

from routeros_gateway.config import Settings, set_settings
from routeros_gateway.infra.routeros.exceptions import RouterOSError
from routeros_gateway.infra.routeros.session import Reply, Sentence


class FakeSession:
    """RouterSession double that records every call."""

    def __init__(self, reply: Reply | None = None, error: RouterOSError | None = None) -> None:
        self.reply = reply or Reply([Sentence("!done")])
        self.error = error
        self.run_calls: list[str] = []
        self.run_args_calls: list[list[str]] = []
        self.close_count = 0

    def run(self, command: str) -> Reply:
        self.run_calls.append(command)
        if self.error is not None:
            raise self.error
        return self.reply

    def run_args(self, words: list[str]) -> Reply:
        self.run_args_calls.append(list(words))
        if self.error is not None:
            raise self.error
        return self.reply

    def close(self) -> None:
        self.close_count += 1


class FakeDialer:
    """Dialer double returning one FakeSession, or raising a dial error."""

    def __init__(self) -> None:
        self.session = FakeSession()
        self.error: RouterOSError | None = None
        self.dial_calls: list[tuple[str, str, str]] = []

    def dial(self, address: str, user: str, password: str) -> FakeSession:
        self.dial_calls.append((address, user, password))
        if self.error is not None:
            raise self.error
        return self.session


@pytest.fixture(autouse=True)
def _reset_global_settings() -> None:
    """Ensure the settings singleton does not leak between tests."""
    set_settings(None)  # type: ignore[arg-type]
    yield
    set_settings(None)  # type: ignore[arg-type]


@pytest.fixture
def settings() -> Settings:
    return Settings(debug=True, log_format="text")


@pytest.fixture
def fake_dialer() -> FakeDialer:
    return FakeDialer()


@pytest.fixture
def connection_body() -> dict[str, str]:
    return {
        "host": "192.168.88.1",
        "port": "8728",
        "user": "admin",
        "password": "secret",
    }
