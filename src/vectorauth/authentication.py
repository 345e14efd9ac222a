"""Log in to a Vector robot and build a :class:`RobotConfiguration`.

:func:`login` is the usual entry point: give it the serial number, the
robot name, and the owner's account credentials, and it

1. finds the robot on the local network (or uses the address given),
2. downloads the robot's certificate,
3. logs in to the accounts API for a session token,
4. trades the session token for a client token GUID on the robot itself,

returning a configuration the caller stores for later sessions.
:func:`refresh` repeats the login for a stored configuration, reusing its
certificate. The steps run one after another and nothing is retried; the
first failure propagates as a :class:`~vectorauth.exceptions.VectorError`.

Example::

    config = await login("00e20115", "a1b2", "me@example.com", password)
    validate(config)
"""

from __future__ import annotations

import ipaddress
from typing import Optional, Union

from vectorauth.accounts import get_session_token
from vectorauth.certificates import get_certificate
from vectorauth.device import IPAddress, get_token_guid
from vectorauth.discovery import find_robot_address
from vectorauth.exceptions import AuthenticationError, ErrorKind, InvalidArgumentError
from vectorauth.models import RobotConfiguration
from vectorauth.output import debug
from vectorauth.validation import standardize_robot_name

_NO_ADDRESS = "IP address could not be determined; please provide IP address."


def _as_address(value: Optional[Union[IPAddress, str]]) -> Optional[IPAddress]:
    if value is None or not isinstance(value, str):
        return value
    try:
        return ipaddress.ip_address(value)
    except ValueError as exc:
        raise InvalidArgumentError(str(exc), "ip_address") from exc


async def _locate(robot_name: str, fallback: Optional[IPAddress]) -> IPAddress:
    address = await find_robot_address(robot_name)
    if address is None:
        debug(f"{robot_name} not found on the network; using the given address")
        address = fallback
    if address is None:
        raise AuthenticationError(ErrorKind.ADDRESS, _NO_ADDRESS)
    return address


async def login(
    serial_number: str,
    robot_name: str,
    email: str,
    password: str,
    ip_address: Optional[Union[IPAddress, str]] = None,
) -> RobotConfiguration:
    """Perform a complete login and return a filled in configuration.

    Args:
        serial_number: The robot serial number; lower-cased before use.
        robot_name: The robot name, long (``Vector-A1B2``) or short (``A1B2``).
        email: Account email address.
        password: Account password.
        ip_address: Address to use when the robot cannot be discovered.

    Returns:
        A new :class:`~vectorauth.models.RobotConfiguration`.

    Raises:
        InvalidArgumentError: If an input is missing or malformed.
        AuthenticationError: If any step of the login fails, including
            kind ``ADDRESS`` when no address is available.
    """
    fallback = _as_address(ip_address)
    robot_name = standardize_robot_name(robot_name)
    serial_number = serial_number.lower() if serial_number is not None else None

    address = await _locate(robot_name, fallback)
    configuration = RobotConfiguration(
        robot_name=robot_name,
        serial_number=serial_number,
        ip_address=address,
        certificate=await get_certificate(serial_number),
    )
    session_token = await get_session_token(email, password)
    configuration.guid = await get_token_guid(
        session_token, configuration.certificate, robot_name, address
    )
    return configuration


async def refresh(
    configuration: RobotConfiguration,
    email: str,
    password: str,
    ip_address: Optional[Union[IPAddress, str]] = None,
) -> None:
    """Log in again for an existing configuration, updating it in place.

    The certificate is downloaded only if the configuration has none. The
    address, session token and client token GUID are always renewed.

    Raises:
        InvalidArgumentError: If an input is missing or malformed.
        AuthenticationError: If any step of the login fails.
    """
    fallback = _as_address(ip_address)
    configuration.ip_address = await _locate(configuration.robot_name, fallback)
    if not configuration.certificate:
        configuration.certificate = await get_certificate(configuration.serial_number)
    session_token = await get_session_token(email, password)
    configuration.guid = await get_token_guid(
        session_token,
        configuration.certificate,
        configuration.robot_name,
        configuration.ip_address,
    )


async def find_configured_address(configuration: RobotConfiguration) -> Optional[IPAddress]:
    """Return the robot's current address, or the stored one if it cannot be found."""
    address = await find_robot_address(configuration.robot_name)
    return address if address is not None else configuration.ip_address
