"""Sway IPC producer and workspace switcher.

Publishes the focused window's title and follows workspace focus changes on
the nine grid. The switcher makes sway follow relative grid moves.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from i3ipc import Event
from i3ipc.aio import Connection

from ..errors import SwayIPCError
from ..nine import WORKSPACE_TO_POSITION
from ..updates import GridCommand, JumpTo, UpdateChannel, WindowName

logger = logging.getLogger(__name__)

ConnectionFactory = Callable[[], Awaitable[Connection]]

MAX_RECONNECT_DELAY = 5.0


async def connect_sway() -> Connection:
    return await Connection(auto_reconnect=True).connect()


class SwayWatcher:
    """Subscribes to window and workspace events."""

    def __init__(
        self,
        channel: UpdateChannel,
        connection_factory: ConnectionFactory = connect_sway,
        reconnect_delay: float = 0.1
    ):
        """
        Initialize sway watcher.

        Args:
            channel: Update channel to publish on
            connection_factory: Returns a connected i3ipc.aio Connection
            reconnect_delay: First wait between connection attempts (doubles up to 5s)
        """
        self.channel = channel
        self.connection_factory = connection_factory
        self.reconnect_delay = reconnect_delay
        self.sway: Optional[Connection] = None

    async def on_window(self, sway, event) -> None:
        """Handle window::focus and window::title events."""
        container = getattr(event, "container", None)
        name = getattr(container, "name", None)
        logger.debug(f"Window {event.change}: {name!r}")
        self.channel.send_with_redraw(WindowName(name))

    async def on_workspace_focus(self, sway, event) -> None:
        """Track absolute workspace changes made outside barnine."""
        current = getattr(event, "current", None)
        num = getattr(current, "num", None)
        if num not in WORKSPACE_TO_POSITION:
            logger.debug(f"Workspace {num} is outside the nine grid")
            return
        self.channel.send_with_redraw(GridCommand(JumpTo(num)))

    async def subscribe(self, sway: Connection) -> None:
        sway.on(Event.WINDOW_FOCUS, self.on_window)
        sway.on(Event.WINDOW_TITLE, self.on_window)
        sway.on(Event.WORKSPACE_FOCUS, self.on_workspace_focus)
        logger.info("Subscribed to Sway events")

    async def connect_with_retry(self, max_attempts: Optional[int] = None) -> Connection:
        """Connect to Sway with exponential backoff retry.

        Args:
            max_attempts: Maximum connection attempts (None retries forever)

        Returns:
            Connected i3ipc.aio Connection

        Raises:
            SwayIPCError: If connection fails after max attempts
        """
        attempt = 0
        delay = self.reconnect_delay

        while max_attempts is None or attempt < max_attempts:
            try:
                sway = await self.connection_factory()
                logger.info("Connected to Sway IPC")
                return sway
            except Exception as e:
                attempt += 1
                logger.warning(f"Sway connection attempt {attempt} failed: {e}")

                if max_attempts is None or attempt < max_attempts:
                    logger.debug(f"Waiting {delay:.1f}s before retry...")
                    await asyncio.sleep(delay)
                    delay = min(delay * 2, MAX_RECONNECT_DELAY)

        raise SwayIPCError("connect", f"no connection after {max_attempts} attempts")

    async def run(self) -> None:
        """Producer loop: runs for as long as the IPC connection does."""
        self.sway = await self.connect_with_retry()
        await self.subscribe(self.sway)
        try:
            await self.sway.main()
        except asyncio.CancelledError:
            logger.info("Sway event loop cancelled")
            raise


class SwayWorkspaceSwitcher:
    """Runs ``workspace number N`` on sway."""

    def __init__(self, connection_factory: ConnectionFactory = connect_sway):
        self.connection_factory = connection_factory
        self.sway: Optional[Connection] = None

    async def __call__(self, workspace: int) -> None:
        """
        Switch sway to ``workspace``.

        Raises:
            SwayIPCError: If sway rejects the command
        """
        if self.sway is None:
            self.sway = await self.connection_factory()

        command = f"workspace number {workspace}"
        replies = await self.sway.command(command)
        for reply in replies or []:
            if not reply.success:
                raise SwayIPCError(command, reply.error or "unknown error")
        logger.debug(f"Switched to workspace {workspace}")
