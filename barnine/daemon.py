"""
barnine daemon

Prints the i3bar protocol header, starts every producer under the supervisor
and runs the bar until terminated. Stdout carries the status line; logs go to
a file.
"""
# Module can be run with: python -m barnine

import argparse
import asyncio
import logging
import os
import signal
import sys
from pathlib import Path
from typing import List, Optional

from .bar import Bar, write_header
from .config import ConfigLoader, ConfigWatcher
from .config.loader import APP_NAME, dev_dir
from .ipc_server import ControlServer
from .producers.battery import watch_battery
from .producers.brightness import watch_brightness
from .producers.clock import watch_time
from .producers.sway import SwayWatcher, SwayWorkspaceSwitcher
from .producers.volume import watch_volume
from .supervisor import Supervisor
from .updates import UpdateChannel

logger = logging.getLogger(__name__)


def get_log_file(app_name: str = APP_NAME) -> Path:
    """
    Resolve the log file path.

    Order: $BARNINE_DEV_DIR, $XDG_CACHE_HOME/barnine, ~/.cache/barnine, /tmp/barnine.
    """
    override = dev_dir(app_name)
    if override is not None:
        log_dir = override
    elif os.environ.get("XDG_CACHE_HOME"):
        log_dir = Path(os.environ["XDG_CACHE_HOME"]) / app_name
    elif os.environ.get("HOME"):
        log_dir = Path(os.environ["HOME"]) / ".cache" / app_name
    else:
        log_dir = Path("/tmp") / app_name
    return log_dir / f"{app_name}.log"


def setup_logging(log_file: Optional[Path] = None) -> None:
    """Setup logging to a file (stdout belongs to swaybar)."""
    log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
    log_file = log_file or get_log_file()
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    handler = logging.FileHandler(log_file)
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    logger.info(f"Logging configured: level={log_level} file={log_file}")


class BarnineDaemon:
    """Wires the channel, the producers and the bar together."""

    def __init__(self, config_file: Optional[Path] = None, use_sway: bool = True):
        """
        Initialize daemon.

        Args:
            config_file: barnine.toml override
            use_sway: Start the sway producer and workspace switcher
        """
        self.channel = UpdateChannel()
        self.supervisor = Supervisor()
        self.loader = ConfigLoader(config_file)
        self.use_sway = use_sway

        switcher = SwayWorkspaceSwitcher() if use_sway else None
        self.bar = Bar(workspace_switcher=switcher)

    def start_producers(self) -> None:
        spawn = self.supervisor.spawn
        spawn("config", ConfigWatcher(self.channel, self.loader).run())
        spawn("clock", watch_time(self.channel))
        spawn("battery", watch_battery(self.channel))
        spawn("brightness", watch_brightness(self.channel))
        spawn("volume", watch_volume(self.channel))
        spawn("control", ControlServer(self.channel).run())

        if self.use_sway:
            spawn("sway", SwayWatcher(self.channel).run())

    async def run(self) -> None:
        """Run until the bar loop ends or a shutdown signal arrives."""
        write_header(self.bar.writer)

        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, self.shutdown)

        self.start_producers()
        try:
            await self.bar.run(self.channel)
        finally:
            await self.supervisor.cancel_all()

    def shutdown(self) -> None:
        logger.info("Received shutdown signal")
        self.channel.close()


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="barnine",
        description="Status line generator for swaybar"
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Configuration file (default: ~/.config/barnine/barnine.toml)"
    )
    parser.add_argument(
        "--no-sway",
        action="store_true",
        help="Do not connect to sway (no window titles, no workspace following)"
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the barnine daemon."""
    args = parse_args(argv)
    setup_logging()
    logger.info("Starting barnine...")

    daemon = BarnineDaemon(config_file=args.config, use_sway=not args.no_sway)

    try:
        asyncio.run(daemon.run())
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
