"""Battery producer reading the sysfs power supply."""

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..errors import DeviceReadError, ErrorCode
from ..updates import BatteryCapacity, BatteryStatus, UpdateChannel

logger = logging.getLogger(__name__)

BAT0 = Path("/sys/class/power_supply/BAT0")


@dataclass
class BatteryState:
    """Current battery state as reported by the kernel."""

    status: str     # Charging, Discharging, Full, Not charging, Unknown
    capacity: str   # Charge level (0-100) as text


def read_attribute(path: Path) -> str:
    """
    Read one sysfs attribute.

    Raises:
        DeviceReadError: If the file is missing or unreadable
    """
    try:
        return path.read_text().strip()
    except FileNotFoundError as e:
        raise DeviceReadError(str(path), "no such file", ErrorCode.FILE_NOT_FOUND) from e
    except OSError as e:
        raise DeviceReadError(str(path), e.strerror or str(e)) from e


def read_battery(device: Path = BAT0) -> Optional[BatteryState]:
    """
    Read status and capacity of a battery.

    Returns:
        BatteryState, or None if the battery cannot be read
    """
    try:
        return BatteryState(
            status=read_attribute(device / "status"),
            capacity=read_attribute(device / "capacity"),
        )
    except DeviceReadError as e:
        logger.debug(f"Battery unavailable: {e.message}")
        return None


async def watch_battery(
    channel: UpdateChannel,
    device: Path = BAT0,
    interval: float = 5.0
) -> None:
    """Poll the battery; publish nothing while it is unreadable."""
    while True:
        battery = read_battery(device)
        if battery is not None:
            channel.send(BatteryStatus(battery.status))
            channel.send_with_redraw(BatteryCapacity(battery.capacity))
        await asyncio.sleep(interval)
