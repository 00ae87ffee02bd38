"""Screen and keyboard backlight.

Values are read from sysfs; changes go through logind's
``Session.SetBrightness`` so no root access is needed.
"""

import asyncio
import logging
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Tuple

from ..errors import DbusError, DeviceReadError, ErrorCode
from ..updates import Brightness, UpdateChannel
from . import dbus
from .battery import read_attribute

logger = logging.getLogger(__name__)

SYSFS_CLASS = Path("/sys/class")
LOGIND_SERVICE = "org.freedesktop.login1"
LOGIND_SESSION = "/org/freedesktop/login1/session/auto"

STEP_PCT = 5


class Backlight(Enum):
    """Backlight device as (sysfs subsystem, device name)."""
    SCREEN = ("backlight", "intel_backlight")
    KEYBOARD = ("leds", "smc::kbd_backlight")

    @property
    def subsystem(self) -> str:
        return self.value[0]

    @property
    def device(self) -> str:
        return self.value[1]

    def path(self, sysfs_root: Path = SYSFS_CLASS) -> Path:
        return sysfs_root / self.subsystem / self.device


def to_percent(raw: int, maximum: int) -> int:
    if maximum <= 0:
        return 0
    return raw * 100 // maximum


def step(raw: int, maximum: int, delta_pct: int) -> int:
    """Raw value ``delta_pct`` percent of ``maximum`` away, kept within [0, maximum]."""
    new_raw = raw + maximum * delta_pct // 100
    return max(0, min(maximum, new_raw))


def read_backlight(target: Backlight, sysfs_root: Path = SYSFS_CLASS) -> Tuple[int, int]:
    """
    Read (brightness, max_brightness) of a backlight.

    Raises:
        DeviceReadError: If either file is missing or not a number
    """
    device_dir = target.path(sysfs_root)
    values = []
    for name in ("brightness", "max_brightness"):
        path = device_dir / name
        text = read_attribute(path)
        try:
            values.append(int(text))
        except ValueError:
            raise DeviceReadError(str(path), f"not a number: {text!r}", ErrorCode.DEVICE_VALUE_INVALID) from None
    return values[0], values[1]


def read_percent(target: Backlight = Backlight.SCREEN, sysfs_root: Path = SYSFS_CLASS) -> int:
    return to_percent(*read_backlight(target, sysfs_root))


def set_backlight(target: Backlight, value: int, bus_factory: Callable = dbus.system_bus) -> None:
    """
    Apply a raw brightness value through logind.

    Raises:
        DbusError: If the call fails
    """
    try:
        session = bus_factory().get(LOGIND_SERVICE, LOGIND_SESSION)
        session.SetBrightness(target.subsystem, target.device, value)
    except Exception as e:
        raise DbusError("SetBrightness", str(e)) from e


async def brighten(
    target: Backlight,
    delta_pct: int,
    sysfs_root: Path = SYSFS_CLASS,
    bus_factory: Callable = dbus.system_bus
) -> int:
    """
    Change a backlight by ``delta_pct`` percent of its range.

    Returns:
        New brightness percentage

    Raises:
        DeviceReadError: If the current value cannot be read
        DbusError: If logind rejects the change
    """
    raw, maximum = read_backlight(target, sysfs_root)
    new_raw = step(raw, maximum, delta_pct)
    logger.debug(f"{target.name} brightness {raw} -> {new_raw} (max {maximum})")
    await asyncio.to_thread(set_backlight, target, new_raw, bus_factory)
    return to_percent(new_raw, maximum)


async def watch_brightness(
    channel: UpdateChannel,
    sysfs_root: Path = SYSFS_CLASS,
    interval: float = 5.0
) -> None:
    """Poll the screen backlight."""
    last: Optional[int] = None
    while True:
        try:
            percent = read_percent(Backlight.SCREEN, sysfs_root)
        except DeviceReadError as e:
            logger.debug(f"Brightness unavailable: {e.message}")
        else:
            if percent != last:
                channel.send_with_redraw(Brightness(percent))
                last = percent
        await asyncio.sleep(interval)
