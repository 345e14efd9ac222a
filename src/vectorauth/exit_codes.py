"""Numeric process exit codes for the ``vector-auth`` command line.

Each constant maps to one error category and is referenced by the
corresponding :class:`~vectorauth.exceptions.VectorError` subclass, so
shell scripts can tell a rejected password from an unreachable robot
without parsing stderr.

Example::

    $ vector-auth login 00e20115 A1B2 -e me@example.com
    $ echo $?
    3   # EXIT_AUTH_FAILURE -- credentials or serial number were rejected
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred, or a configuration failed validation."""

EXIT_INVALID_ARGUMENT = 2
"""A required argument was missing or malformed (robot name, serial, email)."""

EXIT_AUTH_FAILURE = 3
"""The certificate service, accounts API, or robot rejected the request."""

EXIT_ADDRESS_NOT_FOUND = 4
"""The robot could not be found on the local network and no address was given."""

EXIT_CONNECTION_ERROR = 6
"""A secure channel to the robot could not be established."""
