"""Exception hierarchy for vectorauth.

All exceptions inherit from :class:`VectorError`, which carries an
``exit_code`` attribute mapped to a constant from
:mod:`vectorauth.exit_codes` and a ``kind`` drawn from :class:`ErrorKind`.
Callers branch on ``exc.kind`` instead of matching message text; the
command line entry point in :func:`vectorauth.app.main` exits with
``exc.exit_code``.

Lower-level failures (HTTP errors, JSON errors, gRPC errors) are chained
with ``raise ... from exc`` and are available as :attr:`VectorError.cause`.

Subclass hierarchy::

    VectorError              (exit 1)   kind=None
    +-- InvalidArgumentError (exit 2)   kind=INVALID_ARGUMENT
    +-- AuthenticationError  (exit 3/4/6) kind=SERIAL_NUMBER|LOGIN|CONNECTION|ADDRESS
    +-- ConfigurationError   (exit 1)   kind=CONFIGURATION
"""

from __future__ import annotations

import enum
from typing import Optional

from vectorauth.exit_codes import (
    EXIT_ADDRESS_NOT_FOUND,
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_ARGUMENT,
)


class ErrorKind(str, enum.Enum):
    """The category of a :class:`VectorError`."""

    INVALID_ARGUMENT = "invalid_argument"
    SERIAL_NUMBER = "serial_number"
    LOGIN = "login"
    CONNECTION = "connection"
    ADDRESS = "address"
    CONFIGURATION = "configuration"


class VectorError(Exception):
    """Base exception for all vectorauth errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE
    kind: Optional[ErrorKind] = None

    def __init__(self, message: str, exit_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if exit_code is not None:
            self.exit_code = exit_code

    @property
    def cause(self) -> Optional[BaseException]:
        """The lower-level exception this error wraps, if any."""
        return self.__cause__


class InvalidArgumentError(VectorError, ValueError):
    """Raised before any network call when an input is missing or malformed.

    Args:
        message: Description of the problem.
        argument: Name of the offending parameter.
    """

    exit_code = EXIT_INVALID_ARGUMENT
    kind = ErrorKind.INVALID_ARGUMENT

    def __init__(self, message: str, argument: Optional[str] = None):
        super().__init__(message)
        self.argument = argument


_AUTH_KINDS = {
    ErrorKind.SERIAL_NUMBER: EXIT_AUTH_FAILURE,
    ErrorKind.LOGIN: EXIT_AUTH_FAILURE,
    ErrorKind.CONNECTION: EXIT_CONNECTION_ERROR,
    ErrorKind.ADDRESS: EXIT_ADDRESS_NOT_FOUND,
}


class AuthenticationError(VectorError):
    """Raised when a step of the login pipeline fails.

    The ``kind`` says which step: the certificate service rejected the
    serial number (``SERIAL_NUMBER``), the accounts API or the robot
    refused the login (``LOGIN``), the robot could not be reached
    (``CONNECTION``), or no robot address was known (``ADDRESS``).

    Args:
        kind: One of the four authentication kinds.
        message: Human-readable error description.
    """

    exit_code = EXIT_AUTH_FAILURE

    def __init__(self, kind: ErrorKind, message: str):
        if kind not in _AUTH_KINDS:
            raise ValueError(f"{kind!r} is not an authentication failure kind")
        super().__init__(message, exit_code=_AUTH_KINDS[kind])
        self.kind = kind


class ConfigurationError(VectorError):
    """Raised when a robot configuration or the settings file is invalid."""

    exit_code = EXIT_GENERIC_FAILURE
    kind = ErrorKind.CONFIGURATION
