"""Status line aggregation engine.

Owns the bar state snapshot, drains the update channel in arrival order and
writes one i3bar protocol line per Redraw.

Protocol: https://i3wm.org/docs/i3bar-protocol.html
"""

import json
import logging
import sys
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional, TextIO

from .errors import BarError, InvalidGridCommandError
from .models import BarConfig, Header
from .nine import Position
from .render import Renderer
from .updates import (
    BatteryCapacity,
    BatteryStatus,
    Brightness,
    ConfigUpdate,
    GridCommand,
    JumpTo,
    Move,
    Mute,
    Redraw,
    Time,
    Update,
    UpdateChannel,
    Volume,
    WindowName,
)

logger = logging.getLogger(__name__)

WorkspaceSwitcher = Callable[[int], Awaitable[None]]


@dataclass
class BarState:
    """Best-known value per data category."""

    battery_status: Optional[str] = None
    battery_capacity: Optional[str] = None
    brightness: Optional[int] = None
    volume: Optional[int] = None
    mute: Optional[bool] = None
    window_name: Optional[str] = None
    time: Optional[str] = None
    config: BarConfig = field(default_factory=BarConfig)
    position: Position = field(default_factory=Position.default)


def write_header(writer: TextIO = sys.stdout) -> None:
    """Print the protocol header and open the infinite array."""
    writer.write(json.dumps(Header().to_json()) + "\n")
    writer.write("[\n")
    writer.flush()


class Bar:
    """The single consumer of the update channel."""

    def __init__(
        self,
        state: Optional[BarState] = None,
        writer: Optional[TextIO] = None,
        workspace_switcher: Optional[WorkspaceSwitcher] = None
    ):
        """
        Initialize the bar.

        Args:
            state: Starting snapshot (empty by default)
            writer: Where status lines go (defaults to stdout)
            workspace_switcher: Async callback making sway follow relative grid moves
        """
        self.state = state or BarState()
        self.writer = writer or sys.stdout
        self.workspace_switcher = workspace_switcher
        self.renderer = Renderer()
        self.redraw_count = 0

    def to_json(self) -> str:
        return self.renderer.to_json(self.state)

    def apply_update(self, update: Update) -> bool:
        """
        Apply one update to the snapshot.

        Returns:
            True if the update moved the grid relatively (sway should follow)

        Raises:
            InvalidGridIdError: If a jump names an unmapped workspace
            InvalidGridCommandError: If the grid command has an unknown shape
        """
        state = self.state

        match update:
            case BatteryCapacity(value):
                state.battery_capacity = value
            case BatteryStatus(value):
                state.battery_status = value
            case Brightness(value):
                state.brightness = value
            case Volume(value):
                state.volume = value
            case Mute(value):
                state.mute = value
            case Time(value):
                state.time = value
            case WindowName(value):
                state.window_name = value
            case ConfigUpdate(config):
                state.config = config
                logger.info(f"Configuration replaced: {len(config.bar)} widgets")
            case GridCommand(Move(direction)):
                state.position = state.position.move(direction)
                return True
            case GridCommand(JumpTo(workspace)):
                state.position = Position.from_workspace(workspace)
            case GridCommand(command):
                raise InvalidGridCommandError(command)
            case Redraw():
                # Output is written by run(); the snapshot is unchanged
                pass
            case _:
                logger.warning(f"Ignoring unknown update: {update!r}")

        return False

    def redraw(self) -> None:
        """Write the current snapshot as one protocol line."""
        self.writer.write(self.to_json() + ",\n")
        self.writer.flush()
        self.redraw_count += 1

    async def run(self, channel: UpdateChannel) -> None:
        """Process updates until the channel is closed and drained."""
        logger.info("Bar event loop started")

        while True:
            update = await channel.recv()
            if update is None:
                break

            if isinstance(update, Redraw):
                self.redraw()
                continue

            try:
                moved = self.apply_update(update)
            except BarError as e:
                logger.error(f"Dropping {update!r}: {e.message}")
                continue

            if moved and self.workspace_switcher is not None:
                await self._follow_position()

        logger.info("Bar event loop finished")

    async def _follow_position(self) -> None:
        workspace = self.state.position.workspace
        try:
            await self.workspace_switcher(workspace)
        except Exception as e:
            logger.error(f"Failed to switch to workspace {workspace}: {e}")
