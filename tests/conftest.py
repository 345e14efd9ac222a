"""Shared test fixtures for vectorauth.

Provides isolation of the process-wide state (output manager, settings,
shared HTTP client), an HTTP mock installer built on
:class:`httpx.MockTransport`, a fake gRPC channel for the robot, and a
CLI runner. These fixtures are automatically discovered by pytest.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, Optional

import httpx
import pytest

from vectorauth import protocol
from vectorauth.config import reset_settings
from vectorauth.http import reset_http_client, set_http_client
from vectorauth.output import reset_output

SAMPLE_CERTIFICATE = (
    "-----BEGIN CERTIFICATE-----\n"
    "MIIBszCCAVmgAwIBAgIUQ2VydGlmaWNhdGUgZm9yIFZlY3Rvci1BQjEyMAoGCCqG\n"
    "-----END CERTIFICATE-----\n"
)


# ---------------------------------------------------------------------------
# Auto-reset global state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _isolate_globals(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Point settings at an empty temp directory and reset cached globals.

    Clears every VECTOR_AUTH_* variable so a developer's environment never
    leaks into a test, and forgets the output manager, settings and HTTP
    client afterwards.
    """
    monkeypatch.setattr("vectorauth.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    for var in [
        "VECTOR_AUTH_CERTIFICATE_URL",
        "VECTOR_AUTH_ACCOUNTS_URL",
        "VECTOR_AUTH_APP_KEY",
        "VECTOR_AUTH_DISCOVERY_TIMEOUT",
        "VECTOR_AUTH_CONNECT_TIMEOUT",
        "VECTOR_EMAIL",
    ]:
        monkeypatch.delenv(var, raising=False)
    reset_settings()
    yield
    reset_output()
    reset_settings()
    reset_http_client()


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_http() -> Callable[[Callable[[httpx.Request], httpx.Response]], list[httpx.Request]]:
    """Install a mock transport as the shared HTTP client.

    Call the fixture with a handler; it returns the list that collects
    every request the handler saw.
    """

    def _install(handler: Callable[[httpx.Request], httpx.Response]) -> list[httpx.Request]:
        seen: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return handler(request)

        set_http_client(httpx.AsyncClient(transport=httpx.MockTransport(_record)))
        return seen

    return _install


# ---------------------------------------------------------------------------
# gRPC
# ---------------------------------------------------------------------------


class FakeChannel:
    """Stand-in for :class:`grpc.aio.Channel` that answers UserAuthentication.

    Requests and responses go through the real serializers so the wire
    format is exercised.
    """

    def __init__(
        self,
        response: Optional[Any] = None,
        ready_error: Optional[BaseException] = None,
        call_error: Optional[BaseException] = None,
        never_ready: bool = False,
    ) -> None:
        self.response = response
        self.ready_error = ready_error
        self.call_error = call_error
        self.never_ready = never_ready
        self.target: Optional[str] = None
        self.options: list[tuple[str, Any]] = []
        self.methods: list[str] = []
        self.raw_requests: list[bytes] = []
        self.closed = False

    async def channel_ready(self) -> None:
        if self.never_ready:
            await asyncio.sleep(3600)
        if self.ready_error is not None:
            raise self.ready_error

    def unary_unary(self, method, request_serializer, response_deserializer):
        self.methods.append(method)

        async def _call(request):
            self.raw_requests.append(request_serializer(request))
            if self.call_error is not None:
                raise self.call_error
            return response_deserializer(self.response.SerializeToString())

        return _call

    async def close(self) -> None:
        self.closed = True


def authorized_response(guid: str = "token-guid-1234") -> Any:
    return protocol.UserAuthenticationResponse(
        code=protocol.AUTHORIZED,
        client_token_guid=guid.encode("utf-8"),
    )


@pytest.fixture
def fake_channel(monkeypatch: pytest.MonkeyPatch) -> Callable[..., FakeChannel]:
    """Patch gRPC channel creation to hand out a :class:`FakeChannel`.

    Call the fixture with :class:`FakeChannel` keyword arguments; the
    returned channel records the target and options it was opened with.
    """

    def _install(**kwargs: Any) -> FakeChannel:
        kwargs.setdefault("response", authorized_response())
        channel = FakeChannel(**kwargs)

        def _secure_channel(target, credentials, options=None):
            channel.target = target
            channel.options = list(options or [])
            return channel

        monkeypatch.setattr("vectorauth.device.grpc.aio.secure_channel", _secure_channel)
        monkeypatch.setattr(
            "vectorauth.device.grpc.ssl_channel_credentials",
            lambda root_certificates=None: ("ssl", root_certificates),
        )
        return channel

    return _install


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
