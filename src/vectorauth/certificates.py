"""Fetch the TLS certificate a robot presents, keyed by serial number."""

from __future__ import annotations

import httpx

from vectorauth.config import get_settings
from vectorauth.exceptions import AuthenticationError, ErrorKind, InvalidArgumentError
from vectorauth.http import get_http_client
from vectorauth.output import debug
from vectorauth.validation import serial_number_is_valid


async def get_certificate(serial_number: str) -> str:
    """Download the certificate for the robot with *serial_number*.

    Args:
        serial_number: Eight lowercase hex digits from the robot's underside.

    Returns:
        The certificate as PEM text.

    Raises:
        InvalidArgumentError: If the serial number is missing or malformed.
            No request is made in that case.
        AuthenticationError: With kind ``SERIAL_NUMBER`` if the service
            rejects the serial number (HTTP 403) or the request fails.
    """
    if not serial_number:
        raise InvalidArgumentError("Serial number must be provided.", "serial_number")
    if not serial_number_is_valid(serial_number):
        raise InvalidArgumentError("Serial number is not in the correct format.", "serial_number")

    url = f"{get_settings().endpoints.certificate_url.rstrip('/')}/{serial_number}"
    debug(f"Fetching certificate from {url}")

    try:
        response = await get_http_client().get(url)
    except httpx.HTTPError as exc:
        raise AuthenticationError(ErrorKind.SERIAL_NUMBER, str(exc)) from exc

    if response.status_code == httpx.codes.FORBIDDEN:
        raise AuthenticationError(ErrorKind.SERIAL_NUMBER, "Serial number is invalid.")

    try:
        response.raise_for_status()
        certificate = response.text
    except httpx.HTTPError as exc:
        raise AuthenticationError(ErrorKind.SERIAL_NUMBER, str(exc)) from exc

    debug(f"Received certificate ({len(certificate)} bytes)")
    return certificate
