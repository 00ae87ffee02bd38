"""Update events and the channel that carries them to the bar.

Every producer sends ``Update`` values into one ``UpdateChannel``; the bar is
its only consumer. A ``None`` payload clears the corresponding field.
"""

import asyncio
from dataclasses import dataclass
from typing import Optional, Union

from .errors import ChannelClosedError
from .models import BarConfig
from .nine import Direction


# Grid commands

@dataclass(frozen=True)
class Move:
    """Relative grid move."""
    direction: Direction


@dataclass(frozen=True)
class JumpTo:
    """Absolute grid jump, by sway workspace number."""
    workspace: int


NineCmd = Union[Move, JumpTo]


# Updates

@dataclass(frozen=True)
class BatteryCapacity:
    value: Optional[str]


@dataclass(frozen=True)
class BatteryStatus:
    value: Optional[str]


@dataclass(frozen=True)
class Brightness:
    value: Optional[int]


@dataclass(frozen=True)
class Volume:
    """Raw PulseAudio volume (65536 is 100%)."""
    value: Optional[int]


@dataclass(frozen=True)
class Mute:
    value: Optional[bool]


@dataclass(frozen=True)
class Time:
    value: Optional[str]


@dataclass(frozen=True)
class WindowName:
    value: Optional[str]


@dataclass(frozen=True)
class ConfigUpdate:
    config: BarConfig


@dataclass(frozen=True)
class GridCommand:
    command: NineCmd


@dataclass(frozen=True)
class Redraw:
    pass


Update = Union[
    BatteryCapacity,
    BatteryStatus,
    Brightness,
    Volume,
    Mute,
    Time,
    WindowName,
    ConfigUpdate,
    GridCommand,
    Redraw,
]

REDRAW = Redraw()

_CLOSED = object()


class UpdateChannel:
    """Unbounded multi-producer, single-consumer FIFO of updates."""

    def __init__(self):
        self._queue: asyncio.Queue = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, update: Update) -> None:
        """Enqueue an update.

        Raises:
            ChannelClosedError: If the channel was closed
        """
        if self._closed:
            raise ChannelClosedError()
        self._queue.put_nowait(update)

    def send_with_redraw(self, update: Update) -> None:
        self.send(update)
        self.send(REDRAW)

    def close(self) -> None:
        """Stop accepting updates; queued ones are still delivered."""
        if self._closed:
            return
        self._closed = True
        self._queue.put_nowait(_CLOSED)

    async def recv(self) -> Optional[Update]:
        """Next update in arrival order, or None once closed and drained."""
        item = await self._queue.get()
        if item is _CLOSED:
            # Leave the marker for any later recv() call
            self._queue.put_nowait(_CLOSED)
            return None
        return item

    def qsize(self) -> int:
        return self._queue.qsize() - (1 if self._closed else 0)
