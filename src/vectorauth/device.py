"""Exchange a session token for a client token GUID issued by the robot.

The robot serves gRPC over TLS on port 443 using a certificate issued for
its canonical name (``Vector-A1B2``), while we reach it by IP address. The
channel therefore trusts exactly the certificate fetched by
:func:`~vectorauth.certificates.get_certificate` and overrides the TLS
target name with the robot name.
"""

from __future__ import annotations

import asyncio
import ipaddress
import socket
from typing import Optional, Union

import grpc

from vectorauth import protocol
from vectorauth.config import get_settings
from vectorauth.exceptions import AuthenticationError, ErrorKind, InvalidArgumentError
from vectorauth.output import debug
from vectorauth.validation import robot_name_is_valid

ROBOT_PORT = 443

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]


def _target(ip_address: IPAddress) -> str:
    if ip_address.version == 6:
        return f"[{ip_address}]:{ROBOT_PORT}"
    return f"{ip_address}:{ROBOT_PORT}"


async def get_token_guid(
    session_token: str,
    certificate: str,
    robot_name: str,
    ip_address: Optional[Union[IPAddress, str]],
    timeout: Optional[float] = None,
) -> str:
    """Ask the robot for a client token using an accounts session token.

    Args:
        session_token: Token from :func:`~vectorauth.accounts.get_session_token`.
        certificate: PEM certificate the robot presents.
        robot_name: Canonical robot name, used as the TLS target name.
        ip_address: The robot's address.
        timeout: Seconds to wait for the channel; defaults to the
            ``timeouts.connect`` setting (15 s).

    Returns:
        The client token GUID.

    Raises:
        InvalidArgumentError: If any argument is missing or the robot name
            is malformed.
        AuthenticationError: With kind ``CONNECTION`` if the channel cannot
            be established in time or the call fails, or kind ``LOGIN`` if
            the robot does not authorize the session.
    """
    if not session_token:
        raise InvalidArgumentError("Session ID must be provided.", "session_token")
    if not certificate:
        raise InvalidArgumentError("SSL certificate must be provided.", "certificate")
    if not robot_name:
        raise InvalidArgumentError("Robot name must be provided.", "robot_name")
    if not robot_name_is_valid(robot_name):
        raise InvalidArgumentError("Robot name is not in the correct format.", "robot_name")
    if ip_address is None:
        raise InvalidArgumentError("IP address must be provided.", "ip_address")
    if isinstance(ip_address, str):
        try:
            ip_address = ipaddress.ip_address(ip_address)
        except ValueError as exc:
            raise InvalidArgumentError(str(exc), "ip_address") from exc

    if timeout is None:
        timeout = get_settings().timeouts.connect

    target = _target(ip_address)
    credentials = grpc.ssl_channel_credentials(root_certificates=certificate.encode("utf-8"))
    channel = grpc.aio.secure_channel(
        target,
        credentials,
        options=[("grpc.ssl_target_name_override", robot_name)],
    )
    debug(f"Connecting to {robot_name} at {target}")

    try:
        try:
            await asyncio.wait_for(channel.channel_ready(), timeout)
        except (asyncio.TimeoutError, grpc.RpcError) as exc:
            raise AuthenticationError(
                ErrorKind.CONNECTION, "Unable to establish a connection to Vector."
            ) from exc

        user_authentication = channel.unary_unary(
            protocol.USER_AUTHENTICATION_METHOD,
            request_serializer=protocol.UserAuthenticationRequest.SerializeToString,
            response_deserializer=protocol.UserAuthenticationResponse.FromString,
        )
        request = protocol.UserAuthenticationRequest(
            user_session_id=session_token.encode("utf-8"),
            client_name=socket.gethostname().encode("utf-8"),
        )
        try:
            response = await user_authentication(request)
        except grpc.RpcError as exc:
            raise AuthenticationError(
                ErrorKind.CONNECTION, "User authentication request to Vector failed."
            ) from exc

        if response.code != protocol.AUTHORIZED:
            raise AuthenticationError(
                ErrorKind.LOGIN,
                "Failed to authorize request. "
                "Please be sure to first set up Vector using the companion app.",
            )
        debug(f"{robot_name} authorized this client")
        return response.client_token_guid.decode("utf-8", errors="replace")
    finally:
        await channel.close()
