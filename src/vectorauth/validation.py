"""Robot name and serial number rules, and configuration validation.

Robot names look like ``Vector-A1B2``: the literal prefix ``Vector-``
followed by four uppercase letters or digits. Serial numbers are exactly
eight lowercase hex digits, e.g. ``00e20115``. Both checks are plain
length and charset tests so they can be used standalone.
"""

from __future__ import annotations

import string
from typing import Optional

from vectorauth.exceptions import ConfigurationError
from vectorauth.models import RobotConfiguration

ROBOT_NAME_PREFIX = "Vector-"
ROBOT_NAME_SUFFIX_LENGTH = 4
SERIAL_NUMBER_LENGTH = 8

_ROBOT_NAME_SUFFIX_CHARS = frozenset(string.ascii_uppercase + string.digits)
_SERIAL_NUMBER_CHARS = frozenset("0123456789abcdef")


def robot_name_is_valid(robot_name: Optional[str]) -> bool:
    """Return True if *robot_name* is exactly ``Vector-`` plus four of ``[A-Z0-9]``."""
    if not robot_name:
        return False
    if len(robot_name) != len(ROBOT_NAME_PREFIX) + ROBOT_NAME_SUFFIX_LENGTH:
        return False
    if not robot_name.startswith(ROBOT_NAME_PREFIX):
        return False
    suffix = robot_name[len(ROBOT_NAME_PREFIX):]
    return all(ch in _ROBOT_NAME_SUFFIX_CHARS for ch in suffix)


def serial_number_is_valid(serial_number: Optional[str]) -> bool:
    """Return True if *serial_number* is exactly eight lowercase hex digits."""
    if not serial_number:
        return False
    if len(serial_number) != SERIAL_NUMBER_LENGTH:
        return False
    return all(ch in _SERIAL_NUMBER_CHARS for ch in serial_number)


def standardize_robot_name(robot_name: Optional[str]) -> Optional[str]:
    """Turn a user-typed robot name into its canonical display form.

    The name is uppercased. A four character name is taken to be the bare
    suffix and gets the ``Vector-`` prefix; anything else only has each
    ``VECTOR-`` occurrence rewritten to ``Vector-``. Names that are not
    recognisable are returned uppercased but otherwise unchanged, so
    callers still need :func:`robot_name_is_valid`.

    Example::

        standardize_robot_name("a1b2")         # "Vector-A1B2"
        standardize_robot_name("vector-a1b2")  # "Vector-A1B2"
        standardize_robot_name("xvector-ab12y")  # "XVector-AB12Y"
    """
    if robot_name is None:
        return None
    robot_name = robot_name.upper()
    if len(robot_name) == ROBOT_NAME_SUFFIX_LENGTH:
        return ROBOT_NAME_PREFIX + robot_name
    return robot_name.replace(ROBOT_NAME_PREFIX.upper(), ROBOT_NAME_PREFIX)


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def try_validate(configuration: RobotConfiguration) -> list[str]:
    """Check a robot configuration and describe every problem found.

    Checks run in a fixed order and all of them run: presence of the robot
    name, serial number, certificate and GUID, then the format of the robot
    name and the serial number when those are present.

    Args:
        configuration: The configuration to check.

    Returns:
        A list of human-readable error strings. An empty list means the
        configuration is valid.
    """
    errors: list[str] = []
    if _is_blank(configuration.robot_name):
        errors.append("Robot name is missing")
    if _is_blank(configuration.serial_number):
        errors.append("Serial number is missing")
    if _is_blank(configuration.certificate):
        errors.append("SSL certificate is missing")
    if _is_blank(configuration.guid):
        errors.append("GUID token is missing")
    # A missing field is reported once, as missing, not again as malformed.
    if not _is_blank(configuration.robot_name) and not robot_name_is_valid(configuration.robot_name):
        errors.append("Invalid robot name. Please match the format exactly. Example: Vector-A1B2")
    if not _is_blank(configuration.serial_number) and not serial_number_is_valid(
        configuration.serial_number
    ):
        errors.append("Serial number is not the correct format.")
    return errors


def validate(configuration: RobotConfiguration) -> RobotConfiguration:
    """Return *configuration* unchanged if it is valid.

    Raises:
        ConfigurationError: Carrying the first message from :func:`try_validate`.
    """
    errors = try_validate(configuration)
    if errors:
        raise ConfigurationError(errors[0])
    return configuration
