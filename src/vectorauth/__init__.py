"""vectorauth -- log in to Anki Vector robots and build connection configurations.

A Vector robot only accepts SDK connections from clients holding a token
it issued. Getting one takes three network steps: download the robot's
TLS certificate, log in to the accounts API, and trade that session for
a client token over a pinned gRPC channel to the robot itself, which is
found on the local network via mDNS. This package runs those steps and
hands back a :class:`~vectorauth.models.RobotConfiguration`.

Typical use::

    from vectorauth import login

    config = await login("00e20115", "A1B2", "me@example.com", password)

or from a shell::

    vector-auth login 00e20115 A1B2 --email me@example.com > vector.json

Modules:
    authentication: The login pipeline (:func:`login`, :func:`refresh`).
    validation: Robot name and serial number rules, configuration checks.
    discovery: mDNS lookup of the robot address.
    certificates, accounts, device: The individual pipeline steps.
    config: Settings and credential sources.
    exceptions: Error hierarchy with kinds and exit codes.
    output: stdout/stderr formatting with Rich.
    app: Typer command line entry point.
"""

__version__ = "0.3.0"

from vectorauth.accounts import get_session_token  # noqa: E402
from vectorauth.authentication import find_configured_address, login, refresh  # noqa: E402
from vectorauth.certificates import get_certificate  # noqa: E402
from vectorauth.device import get_token_guid  # noqa: E402
from vectorauth.discovery import find_robot_address  # noqa: E402
from vectorauth.exceptions import (  # noqa: E402
    AuthenticationError,
    ConfigurationError,
    ErrorKind,
    InvalidArgumentError,
    VectorError,
)
from vectorauth.models import RobotConfiguration  # noqa: E402
from vectorauth.validation import (  # noqa: E402
    robot_name_is_valid,
    serial_number_is_valid,
    standardize_robot_name,
    try_validate,
    validate,
)

__all__ = [
    "AuthenticationError",
    "ConfigurationError",
    "ErrorKind",
    "InvalidArgumentError",
    "RobotConfiguration",
    "VectorError",
    "find_configured_address",
    "find_robot_address",
    "get_certificate",
    "get_session_token",
    "get_token_guid",
    "login",
    "refresh",
    "robot_name_is_valid",
    "serial_number_is_valid",
    "standardize_robot_name",
    "try_validate",
    "validate",
]
