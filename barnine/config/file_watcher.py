"""
File watcher for barnine.toml.

Monitors the configuration file and publishes a fresh configuration on every
change. Broken edits are logged and the running configuration is kept.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional

from watchdog.observers import Observer
from watchdog.events import FileSystemEventHandler, FileSystemEvent

from ..errors import ConfigLoadError
from ..updates import ConfigUpdate, UpdateChannel
from .loader import ConfigLoader

logger = logging.getLogger(__name__)


class ConfigFileHandler(FileSystemEventHandler):
    """Forwards events for one file from the observer thread to the event loop."""

    def __init__(self, config_file: Path, loop: asyncio.AbstractEventLoop, triggers: asyncio.Queue):
        """
        Initialize file handler.

        Args:
            config_file: The watched configuration file
            loop: Event loop owning ``triggers``
            triggers: Queue receiving changed paths
        """
        super().__init__()
        self.config_file = config_file
        self.loop = loop
        self.triggers = triggers

    def _matches(self, path) -> bool:
        if not path:
            return False
        if isinstance(path, bytes):
            path = path.decode()
        return Path(path) == self.config_file

    def _notify(self, path) -> None:
        logger.debug(f"Config file changed: {path}")
        self.loop.call_soon_threadsafe(self.triggers.put_nowait, str(path))

    def on_modified(self, event: FileSystemEvent):
        """Handle file modification event."""
        if not event.is_directory and self._matches(event.src_path):
            self._notify(event.src_path)

    def on_created(self, event: FileSystemEvent):
        """Handle file creation (first write, or editors replacing the file)."""
        if not event.is_directory and self._matches(event.src_path):
            self._notify(event.src_path)

    def on_moved(self, event: FileSystemEvent):
        """Handle atomic save via rename onto the config file."""
        if not event.is_directory and self._matches(getattr(event, "dest_path", None)):
            self._notify(event.dest_path)


class ConfigWatcher:
    """Config producer: initial load, then reload on every file change."""

    def __init__(
        self,
        channel: UpdateChannel,
        loader: Optional[ConfigLoader] = None,
        debounce_ms: int = 200
    ):
        """
        Initialize config watcher.

        Args:
            channel: Update channel to publish configurations on
            loader: Configuration loader (default path if omitted)
            debounce_ms: Quiet period collapsing bursts of file events
        """
        self.channel = channel
        self.loader = loader or ConfigLoader()
        self.debounce_ms = debounce_ms

        self.observer: Optional[Observer] = None
        self.triggers: Optional[asyncio.Queue] = None
        self.reload_count = 0

    @property
    def config_file(self) -> Path:
        return Path(self.loader.config_file).absolute()

    def reload(self) -> bool:
        """
        Load the file and publish it.

        Returns:
            True if a new configuration was sent
        """
        try:
            config = self.loader.load()
        except ConfigLoadError as e:
            logger.error(f"{e.message} - keeping previous configuration")
            return False

        if config is None:
            logger.warning(f"Config file not found: {self.config_file}")
            return False

        self.channel.send_with_redraw(ConfigUpdate(config))
        self.reload_count += 1
        logger.info(f"Configuration loaded from {self.config_file}")
        return True

    def start(self) -> None:
        """Start the watchdog observer on the config file's directory."""
        if self.observer is not None:
            logger.warning("File watcher already running")
            return

        self.triggers = asyncio.Queue()
        handler = ConfigFileHandler(self.config_file, asyncio.get_running_loop(), self.triggers)

        watch_dir = self.config_file.parent
        watch_dir.mkdir(parents=True, exist_ok=True)

        self.observer = Observer()
        self.observer.schedule(handler, path=str(watch_dir), recursive=False)
        self.observer.start()
        logger.info(f"Watching {self.config_file}")

    def stop(self) -> None:
        """Stop the observer."""
        if self.observer is None:
            return

        self.observer.stop()
        self.observer.join()
        self.observer = None
        logger.info("File watcher stopped")

    async def run(self) -> None:
        """Producer loop."""
        self.reload()
        self.start()

        try:
            while True:
                await self.triggers.get()
                await asyncio.sleep(self.debounce_ms / 1000.0)
                while not self.triggers.empty():
                    self.triggers.get_nowait()
                self.reload()
        finally:
            self.stop()
