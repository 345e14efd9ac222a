"""Find a robot's address on the local network via mDNS.

Robots advertise ``_ankivector._tcp.local.`` with their name as the service
instance name (``Vector-A1B2._ankivector._tcp.local.``).

A lookup starts a sweep that browses for the full timeout. The caller is
released as soon as the wanted robot answers, but the sweep itself is
never cancelled: it runs to its end in the background and then closes its
zeroconf instance. Running sweeps are held in ``_background_sweeps``;
code that owns the event loop (the command line does) awaits
:func:`wait_for_sweeps` before closing it.
"""

from __future__ import annotations

import asyncio
import functools
import ipaddress
from dataclasses import dataclass
from typing import Callable, Optional, Union

from zeroconf import ServiceStateChange
from zeroconf.asyncio import AsyncServiceBrowser, AsyncServiceInfo, AsyncZeroconf

from vectorauth.config import get_settings
from vectorauth.exceptions import InvalidArgumentError
from vectorauth.output import debug, warning
from vectorauth.validation import robot_name_is_valid

VECTOR_SERVICE_TYPE = "_ankivector._tcp.local."
RESOLVE_TIMEOUT_MS = 3000

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]


@dataclass
class DiscoveredHost:
    """One resolved mDNS answer."""

    display_name: str
    address: str
    port: int = 0


def _display_name(name: str, service_type: str) -> str:
    suffix = f".{service_type}"
    if name.endswith(suffix):
        return name[: -len(suffix)]
    return name


async def _resolve(
    aiozc: AsyncZeroconf,
    service_type: str,
    name: str,
    on_host: Callable[[DiscoveredHost], None],
) -> None:
    info = AsyncServiceInfo(service_type, name)
    if not await info.async_request(aiozc.zeroconf, RESOLVE_TIMEOUT_MS):
        debug(f"No answer resolving {name}")
        return
    addresses = info.parsed_addresses()
    if not addresses:
        return
    on_host(
        DiscoveredHost(
            display_name=_display_name(name, service_type),
            address=addresses[0],
            port=info.port or 0,
        )
    )


async def browse(
    service_type: str,
    timeout: float,
    on_host: Callable[[DiscoveredHost], None],
) -> None:
    """Browse for *service_type* for *timeout* seconds.

    Every service that appears (or changes) is resolved and reported to
    *on_host*. When the timeout elapses the browser is stopped first and
    announcements arriving after that are ignored; resolutions already
    under way are awaited, and only then is zeroconf closed, so *on_host*
    is never called after this returns. If the sweep is cancelled, the
    outstanding resolutions are cancelled with it.
    """
    aiozc = AsyncZeroconf()
    pending: set[asyncio.Task] = set()
    browsing = True

    def _on_change(
        zeroconf, service_type: str, name: str, state_change: ServiceStateChange
    ) -> None:
        if not browsing:
            return
        if state_change not in (ServiceStateChange.Added, ServiceStateChange.Updated):
            return
        task = asyncio.ensure_future(_resolve(aiozc, service_type, name, on_host))
        pending.add(task)
        task.add_done_callback(pending.discard)

    browser = AsyncServiceBrowser(aiozc.zeroconf, [service_type], handlers=[_on_change])
    try:
        await asyncio.sleep(timeout)
    except asyncio.CancelledError:
        for task in pending:
            task.cancel()
        raise
    finally:
        browsing = False
        await browser.async_cancel()
        while pending:
            await asyncio.gather(*list(pending), return_exceptions=True)
        await aiozc.async_close()


_background_sweeps: set[asyncio.Task] = set()


def _sweep_finished(result: asyncio.Future, sweep: asyncio.Task) -> None:
    _background_sweeps.discard(sweep)
    if not sweep.cancelled() and sweep.exception() is not None:
        warning(f"Robot discovery failed: {sweep.exception()}")
    if not result.done():
        result.set_result(None)


async def find_robot_address(
    robot_name: str,
    timeout: Optional[float] = None,
) -> Optional[IPAddress]:
    """Look for *robot_name* on the local network.

    Args:
        robot_name: Canonical robot name, e.g. ``Vector-A1B2``. Compared
            case-insensitively with the advertised names.
        timeout: How long the sweep runs, in seconds. Defaults to the
            ``timeouts.discovery`` setting (10 s).

    Returns:
        The address of the first matching answer, as soon as it arrives,
        or ``None`` if the sweep ends without one.

    Raises:
        InvalidArgumentError: If the robot name is missing or malformed.
    """
    if not robot_name:
        raise InvalidArgumentError("Robot name must be provided.", "robot_name")
    if not robot_name_is_valid(robot_name):
        raise InvalidArgumentError("Robot name is not in the correct format.", "robot_name")
    if timeout is None:
        timeout = get_settings().timeouts.discovery

    target = robot_name.lower()
    result: asyncio.Future = asyncio.get_running_loop().create_future()

    def _on_host(host: DiscoveredHost) -> None:
        if result.done() or host.display_name.lower() != target:
            return
        try:
            address = ipaddress.ip_address(host.address)
        except ValueError:
            debug(f"Ignoring unparsable address {host.address!r} for {host.display_name}")
            return
        debug(f"Found {host.display_name} at {address}")
        result.set_result(address)

    debug(f"Searching for {robot_name} ({VECTOR_SERVICE_TYPE}, {timeout:g}s)")
    sweep = asyncio.ensure_future(browse(VECTOR_SERVICE_TYPE, timeout, _on_host))
    _background_sweeps.add(sweep)
    sweep.add_done_callback(functools.partial(_sweep_finished, result))

    return await result


async def wait_for_sweeps() -> None:
    """Wait until every sweep started by :func:`find_robot_address` has ended.

    Each sweep ends on its own after its timeout, so this is bounded by the
    longest one still running. Event loops that are about to close call
    this so the sweeps finish instead of being cancelled.
    """
    while _background_sweeps:
        await asyncio.gather(*list(_background_sweeps), return_exceptions=True)
