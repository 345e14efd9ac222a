"""Tests for vectorauth.certificates.get_certificate."""

from __future__ import annotations

import httpx
import pytest

from vectorauth.certificates import get_certificate
from vectorauth.config import set_settings
from vectorauth.exceptions import AuthenticationError, ErrorKind, InvalidArgumentError
from vectorauth.models import EndpointConfig, GlobalConfig

from conftest import SAMPLE_CERTIFICATE

CERT_URL = "https://session-certs.token.global.anki-services.com/vic/00e20115"


def _unexpected(request: httpx.Request) -> httpx.Response:
    raise AssertionError(f"unexpected request to {request.url}")


class TestGetCertificate:
    @pytest.mark.asyncio
    async def test_returns_body_text(self, mock_http) -> None:
        seen = mock_http(lambda request: httpx.Response(200, text=SAMPLE_CERTIFICATE))

        certificate = await get_certificate("00e20115")

        assert certificate == SAMPLE_CERTIFICATE
        assert len(seen) == 1
        assert seen[0].method == "GET"
        assert str(seen[0].url) == CERT_URL

    @pytest.mark.asyncio
    async def test_uses_configured_base_url(self, mock_http) -> None:
        set_settings(GlobalConfig(endpoints=EndpointConfig(certificate_url="https://certs.local/vic/")))
        seen = mock_http(lambda request: httpx.Response(200, text=SAMPLE_CERTIFICATE))

        await get_certificate("00e20115")

        assert str(seen[0].url) == "https://certs.local/vic/00e20115"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("serial", [None, ""])
    async def test_missing_serial_makes_no_request(self, mock_http, serial) -> None:
        seen = mock_http(_unexpected)

        with pytest.raises(InvalidArgumentError, match="must be provided") as exc_info:
            await get_certificate(serial)

        assert exc_info.value.kind is ErrorKind.INVALID_ARGUMENT
        assert seen == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("serial", ["0A1B2C3D", "0a1b2c3", "not-hex!"])
    async def test_malformed_serial_makes_no_request(self, mock_http, serial: str) -> None:
        seen = mock_http(_unexpected)

        with pytest.raises(InvalidArgumentError, match="not in the correct format"):
            await get_certificate(serial)

        assert seen == []

    @pytest.mark.asyncio
    async def test_forbidden_means_invalid_serial(self, mock_http) -> None:
        mock_http(lambda request: httpx.Response(403, text="Forbidden"))

        with pytest.raises(AuthenticationError) as exc_info:
            await get_certificate("00e20115")

        assert exc_info.value.kind is ErrorKind.SERIAL_NUMBER
        assert str(exc_info.value) == "Serial number is invalid."
        assert exc_info.value.cause is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [404, 500, 503])
    async def test_other_status_is_wrapped(self, mock_http, status: int) -> None:
        mock_http(lambda request: httpx.Response(status, text="nope"))

        with pytest.raises(AuthenticationError) as exc_info:
            await get_certificate("00e20115")

        assert exc_info.value.kind is ErrorKind.SERIAL_NUMBER
        assert isinstance(exc_info.value.cause, httpx.HTTPStatusError)
        assert str(status) in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_transport_error_is_wrapped(self, mock_http) -> None:
        def _refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        mock_http(_refuse)

        with pytest.raises(AuthenticationError) as exc_info:
            await get_certificate("00e20115")

        assert exc_info.value.kind is ErrorKind.SERIAL_NUMBER
        assert isinstance(exc_info.value.cause, httpx.ConnectError)
        assert "Connection refused" in str(exc_info.value)
