"""Robot commands -- log in, refresh, discover, and check configurations.

Every command prints its result to stdout and diagnostics to stderr, so
the configuration can be redirected straight into a file the caller owns.

Typical workflow::

    vector-auth login 00e20115 A1B2 -e me@example.com > vector.json
    vector-auth validate vector.json
    vector-auth refresh vector.json -e me@example.com > vector.new.json
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Awaitable, Optional, TypeVar

import typer

from vectorauth.exceptions import VectorError
from vectorauth.exit_codes import EXIT_ADDRESS_NOT_FOUND, EXIT_GENERIC_FAILURE
from vectorauth.output import debug, error, format_response, info, success, suggest, warning

T = TypeVar("T")


def _run(awaitable: Awaitable[T]) -> T:
    """Run *awaitable* on a fresh event loop.

    Discovery sweeps still running in the background are awaited before the
    loop closes, then the shared HTTP client is closed.
    """
    from vectorauth.discovery import wait_for_sweeps
    from vectorauth.http import close_http_client

    async def _main() -> Any:
        try:
            return await awaitable
        finally:
            await wait_for_sweeps()
            await close_http_client()

    return asyncio.run(_main())


def _fail(exc: VectorError) -> typer.Exit:
    error(str(exc))
    if exc.cause is not None:
        debug(f"Caused by: {exc.cause!r}")
    return typer.Exit(code=exc.exit_code)


def _password(source: str) -> str:
    from vectorauth.config import resolve_credential

    return resolve_credential(source)


def login_command(
    serial_number: str = typer.Argument(help="Serial number, e.g. 00e20115."),
    robot_name: str = typer.Argument(help="Robot name, e.g. Vector-A1B2 or A1B2."),
    email: str = typer.Option(
        ..., "--email", "-e", envvar="VECTOR_EMAIL", help="Account email address."
    ),
    password_source: str = typer.Option(
        "prompt",
        "--password-source",
        "-s",
        help="Password source: env:VAR, file:/path, prompt.",
    ),
    ip_address: Optional[str] = typer.Option(
        None, "--ip", help="Robot address to use if it cannot be discovered."
    ),
) -> None:
    """Log in to a robot and print its configuration.

    Example::

        vector-auth login 00e20115 A1B2 -e me@example.com -s env:VECTOR_PASSWORD
    """
    from vectorauth.authentication import login

    try:
        password = _password(password_source)
        configuration = _run(login(serial_number, robot_name, email, password, ip_address))
    except VectorError as exc:
        raise _fail(exc) from None

    format_response(configuration.model_dump(mode="json"))
    success(f"Logged in to {configuration.robot_name} at {configuration.ip_address}.")
    suggest("Store this configuration; vector-auth does not keep a copy.")


def refresh_command(
    config_file: Path = typer.Argument(help="Stored robot configuration (JSON)."),
    email: str = typer.Option(
        ..., "--email", "-e", envvar="VECTOR_EMAIL", help="Account email address."
    ),
    password_source: str = typer.Option(
        "prompt",
        "--password-source",
        "-s",
        help="Password source: env:VAR, file:/path, prompt.",
    ),
    ip_address: Optional[str] = typer.Option(
        None, "--ip", help="Robot address to use if it cannot be discovered."
    ),
) -> None:
    """Log in again for a stored configuration and print the updated copy."""
    from vectorauth.authentication import refresh
    from vectorauth.config import load_robot_configuration

    try:
        configuration = load_robot_configuration(config_file)
        password = _password(password_source)
        _run(refresh(configuration, email, password, ip_address))
    except VectorError as exc:
        raise _fail(exc) from None

    format_response(configuration.model_dump(mode="json"))
    success(f"Refreshed {configuration.robot_name} at {configuration.ip_address}.")


def find_command(
    robot_name: str = typer.Argument(help="Robot name, e.g. Vector-A1B2 or A1B2."),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", "-t", min=0.1, help="Seconds to search (default from settings)."
    ),
) -> None:
    """Find a robot on the local network and print its address."""
    from vectorauth.discovery import find_robot_address
    from vectorauth.validation import standardize_robot_name

    name = standardize_robot_name(robot_name)
    try:
        address = _run(find_robot_address(name, timeout))
    except VectorError as exc:
        raise _fail(exc) from None

    if address is None:
        warning(f"{name} was not found on the local network.")
        suggest("Make sure the robot is on the same network, or pass --ip to login.")
        raise typer.Exit(code=EXIT_ADDRESS_NOT_FOUND)
    format_response(str(address))


def certificate_command(
    serial_number: str = typer.Argument(help="Serial number, e.g. 00e20115."),
) -> None:
    """Download and print a robot's certificate."""
    from vectorauth.certificates import get_certificate

    try:
        certificate = _run(get_certificate(serial_number.lower()))
    except VectorError as exc:
        raise _fail(exc) from None
    format_response(certificate)


def validate_command(
    config_file: Path = typer.Argument(help="Stored robot configuration (JSON)."),
) -> None:
    """Check a stored configuration and list every problem found."""
    from vectorauth.config import load_robot_configuration
    from vectorauth.validation import try_validate

    try:
        configuration = load_robot_configuration(config_file)
    except VectorError as exc:
        raise _fail(exc) from None

    errors = try_validate(configuration)
    if not errors:
        success(f"{config_file} is a valid configuration for {configuration.robot_name}.")
        return
    for message in errors:
        error(message)
    info(f"{len(errors)} problem(s) found in {config_file}.")
    raise typer.Exit(code=EXIT_GENERIC_FAILURE)
