"""
Control socket for barnine.

A unix socket accepting one short text command per connection (as sent by
``barninec`` from sway key bindings). Recognized commands perform their side
effect, then publish the matching update and a redraw.
"""

import asyncio
import logging
import os
from pathlib import Path
from typing import Awaitable, Callable, Dict, Optional, Tuple

from .errors import ChannelClosedError, DbusError, DeviceReadError
from .nine import Direction
from .producers import brightness, volume
from .producers.brightness import Backlight
from .updates import Brightness, GridCommand, Move, Mute, REDRAW, UpdateChannel, Volume

logger = logging.getLogger(__name__)

SOCKET_NAME = "barnine.sock"
MAX_COMMAND_BYTES = 64

BRIGHTNESS_COMMANDS: Dict[str, Tuple[Backlight, int]] = {
    "brightness_up": (Backlight.SCREEN, brightness.STEP_PCT),
    "brightness_down": (Backlight.SCREEN, -brightness.STEP_PCT),
    "kbd_up": (Backlight.KEYBOARD, brightness.STEP_PCT),
    "kbd_down": (Backlight.KEYBOARD, -brightness.STEP_PCT),
}

VOLUME_COMMANDS: Dict[str, int] = {
    "volume_up": volume.STEP_PCT,
    "volume_down": -volume.STEP_PCT,
}

MOVE_COMMANDS: Dict[str, Direction] = {
    "move_left": Direction.LEFT,
    "move_right": Direction.RIGHT,
    "move_up": Direction.UP,
    "move_down": Direction.DOWN,
}

TOGGLE_MUTE = "toggle_mute"

COMMANDS = (
    list(BRIGHTNESS_COMMANDS) + list(VOLUME_COMMANDS) + [TOGGLE_MUTE] + list(MOVE_COMMANDS)
)


def socket_path() -> Path:
    """Control socket in the user's runtime directory."""
    runtime_dir = os.environ.get("XDG_RUNTIME_DIR", "/tmp")
    return Path(runtime_dir) / SOCKET_NAME


class ControlServer:
    """Unix socket server turning text commands into updates."""

    def __init__(
        self,
        channel: UpdateChannel,
        path: Optional[Path] = None,
        brighten: Callable[[Backlight, int], Awaitable[int]] = brightness.brighten,
        change_volume: Callable[[int], Awaitable[int]] = volume.change_volume,
        toggle_mute: Callable[[], Awaitable[bool]] = volume.toggle_mute
    ):
        """
        Initialize control server.

        Args:
            channel: Update channel to publish on
            path: Socket path (defaults to $XDG_RUNTIME_DIR/barnine.sock)
            brighten: Applies a backlight step, returns the new percentage
            change_volume: Applies a volume step, returns the new raw volume
            toggle_mute: Flips mute, returns the new state
        """
        self.channel = channel
        self.path = path or socket_path()
        self.brighten = brighten
        self.change_volume = change_volume
        self.toggle_mute = toggle_mute

        self.server: Optional[asyncio.AbstractServer] = None
        self._stopped = asyncio.Event()
        self._fatal: Optional[BaseException] = None

    async def start(self):
        """Start listening."""
        self.path.parent.mkdir(parents=True, exist_ok=True)

        # Remove stale socket from a previous run
        if self.path.exists() or self.path.is_symlink():
            self.path.unlink()

        self.server = await asyncio.start_unix_server(
            self._handle_client,
            path=str(self.path)
        )

        logger.info(f"Control socket listening on {self.path}")

    async def stop(self):
        """Stop listening and remove the socket."""
        if self.server:
            self.server.close()
            await self.server.wait_closed()
            self.server = None

        if self.path.exists():
            self.path.unlink()

        self._stopped.set()
        logger.info("Control socket stopped")

    async def run(self):
        """Producer loop: serve until stopped or the channel closes."""
        await self.start()
        try:
            await self._stopped.wait()
        finally:
            await self.stop()

        if self._fatal is not None:
            raise self._fatal

    async def _handle_client(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
        """
        Handle one client connection carrying a single command.

        Args:
            reader: Stream reader
            writer: Stream writer
        """
        try:
            data = await reader.read(MAX_COMMAND_BYTES)
            try:
                command = data.decode("utf-8").strip()
            except UnicodeDecodeError:
                logger.debug("Ignoring non UTF-8 command")
                return
            await self.handle_command(command)

        except ChannelClosedError as e:
            logger.error(f"Control socket shutting down: {e.message}")
            self._fatal = e
            self._stopped.set()
        except Exception as e:
            logger.error(f"Client handler error: {e}")
        finally:
            writer.close()
            await writer.wait_closed()

    async def handle_command(self, command: str) -> bool:
        """
        Run one command.

        Returns:
            True if the command was recognized and applied
        """
        logger.debug(f"Received command: {command!r}")

        try:
            if command in BRIGHTNESS_COMMANDS:
                target, delta = BRIGHTNESS_COMMANDS[command]
                percent = await self.brighten(target, delta)
                if target is Backlight.SCREEN:
                    self.channel.send(Brightness(percent))
                self.channel.send(REDRAW)

            elif command in VOLUME_COMMANDS:
                new_volume = await self.change_volume(VOLUME_COMMANDS[command])
                self.channel.send_with_redraw(Volume(new_volume))

            elif command == TOGGLE_MUTE:
                muted = await self.toggle_mute()
                self.channel.send_with_redraw(Mute(muted))

            elif command in MOVE_COMMANDS:
                self.channel.send_with_redraw(GridCommand(Move(MOVE_COMMANDS[command])))

            else:
                logger.debug(f"Ignoring unknown command: {command!r}")
                return False

        except (DeviceReadError, DbusError) as e:
            logger.error(f"Command {command} failed: {e.message}")
            return False

        return True
