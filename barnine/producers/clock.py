"""Wall clock producer."""

import asyncio
import logging
from datetime import datetime
from typing import Callable

from ..updates import Time, UpdateChannel

logger = logging.getLogger(__name__)

TIME_FORMAT = "%b %d %A %l:%M:%S %p"


def format_time(now: datetime, time_format: str = TIME_FORMAT) -> str:
    return now.strftime(time_format)


async def watch_time(
    channel: UpdateChannel,
    interval: float = 1.0,
    time_format: str = TIME_FORMAT,
    now: Callable[[], datetime] = datetime.now
) -> None:
    """Publish the formatted local time once per tick."""
    logger.debug("Clock producer started")
    while True:
        channel.send_with_redraw(Time(format_time(now(), time_format)))
        await asyncio.sleep(interval)
