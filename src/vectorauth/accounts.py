"""Exchange a user's email and password for an accounts API session token."""

from __future__ import annotations

from typing import Any

import httpx

from vectorauth import __version__
from vectorauth.config import get_settings
from vectorauth.exceptions import AuthenticationError, ErrorKind, InvalidArgumentError
from vectorauth.http import get_http_client
from vectorauth.output import debug

USER_AGENT = f"Vector-sdk/{__version__}.py"


def _extract_session_token(data: Any) -> str:
    """Pull ``session.session_token`` out of the decoded response body."""
    try:
        token = data["session"]["session_token"]
    except (KeyError, TypeError) as exc:
        raise ValueError("response has no session.session_token") from exc
    if not isinstance(token, str):
        raise ValueError("session.session_token is not a string")
    return token


async def get_session_token(email: str, password: str) -> str:
    """Log in to the accounts API and return the session token.

    The token is short-lived and only good for one
    :func:`~vectorauth.device.get_token_guid` exchange, so it is never stored.

    Args:
        email: The account's email address.
        password: The account's password.

    Returns:
        The ``session.session_token`` string from the response.

    Raises:
        InvalidArgumentError: If either value is blank.
        AuthenticationError: With kind ``LOGIN``; the message is
            ``"Invalid email address or password."`` on HTTP 403 and
            ``"Invalid response from Anki accounts API"`` for any other failure.
    """
    if email is None or not email.strip():
        raise InvalidArgumentError("Email must be provided.", "email")
    if password is None or not password.strip():
        raise InvalidArgumentError("Password must be provided.", "password")

    endpoints = get_settings().endpoints
    headers = {
        "Anki-App-Key": endpoints.app_key,
        "User-Agent": USER_AGENT,
    }
    debug(f"Requesting session token from {endpoints.accounts_url}")

    try:
        response = await get_http_client().post(
            endpoints.accounts_url,
            headers=headers,
            data={"username": email, "password": password},
        )
    except httpx.HTTPError as exc:
        raise AuthenticationError(
            ErrorKind.LOGIN, "Invalid response from Anki accounts API"
        ) from exc

    if response.status_code == httpx.codes.FORBIDDEN:
        raise AuthenticationError(ErrorKind.LOGIN, "Invalid email address or password.")

    try:
        response.raise_for_status()
        token = _extract_session_token(response.json())
    except (httpx.HTTPError, ValueError) as exc:
        raise AuthenticationError(
            ErrorKind.LOGIN, "Invalid response from Anki accounts API"
        ) from exc

    debug("Received session token")
    return token
