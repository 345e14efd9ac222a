"""Pydantic models shared across vectorauth.

Two groups live here:

**Robot configuration** -- :class:`RobotConfiguration`, the bundle produced
by :func:`vectorauth.authentication.login` and consumed by whatever later
opens a session with the robot.

**Settings** -- :class:`EndpointConfig`, :class:`TimeoutConfig` and
:class:`GlobalConfig`, read from the user's config directory by
:mod:`vectorauth.config`.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, IPvAnyAddress


DEFAULT_CERTIFICATE_URL = "https://session-certs.token.global.anki-services.com/vic"
DEFAULT_ACCOUNTS_URL = "https://accounts.api.anki.com/1/sessions"
DEFAULT_APP_KEY = "aung2ieCho3aiph7Een3Ei"


class RobotConfiguration(BaseModel):
    """Everything needed to open an authenticated session with one robot.

    Instances are filled in step by step during login and are mutable
    until returned; afterwards callers treat them as opaque values and
    store them however they like.

    Example::

        config = await login("00e20115", "A1B2", email, password)
        config.model_dump(mode="json")
        # {"robot_name": "Vector-A1B2", "serial_number": "00e20115",
        #  "ip_address": "192.168.1.50", "certificate": "-----BEGIN ...",
        #  "guid": "..."}
    """

    robot_name: Optional[str] = Field(
        default=None, description="Canonical robot name, e.g. Vector-A1B2"
    )
    serial_number: Optional[str] = Field(
        default=None, description="Eight lowercase hex digits"
    )
    ip_address: Optional[IPvAnyAddress] = Field(
        default=None, description="Robot address on the local network"
    )
    certificate: Optional[str] = Field(
        default=None, description="PEM certificate the robot presents"
    )
    guid: Optional[str] = Field(
        default=None, description="Client token issued by the robot"
    )


# --- Settings ---


class EndpointConfig(BaseModel):
    """Remote services used during login."""

    certificate_url: str = Field(
        default=DEFAULT_CERTIFICATE_URL,
        description="Base URL of the certificate service; the serial number is appended",
    )
    accounts_url: str = Field(
        default=DEFAULT_ACCOUNTS_URL,
        description="Session endpoint of the accounts API",
    )
    app_key: str = Field(
        default=DEFAULT_APP_KEY, description="Value of the Anki-App-Key header"
    )


class TimeoutConfig(BaseModel):
    """Timeouts in seconds."""

    discovery: float = Field(default=10.0, gt=0, description="mDNS sweep duration")
    connect: float = Field(
        default=15.0, gt=0, description="Deadline for the secure channel to the robot"
    )


class GlobalConfig(BaseModel):
    """Top-level settings document (``config.json`` in the config directory)."""

    endpoints: EndpointConfig = Field(default_factory=EndpointConfig)
    timeouts: TimeoutConfig = Field(default_factory=TimeoutConfig)
