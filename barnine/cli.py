#!/usr/bin/env python3
"""
barninec

Sends one control command to the running barnine daemon, e.g. from a sway
key binding:

    bindsym XF86MonBrightnessUp exec barninec brightness_up
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

from .ipc_server import COMMANDS, socket_path


class BarnineClient:
    """Client for the barnine control socket."""

    def __init__(self, path: Optional[Path] = None):
        """
        Initialize client.

        Args:
            path: Control socket path (defaults to $XDG_RUNTIME_DIR/barnine.sock)
        """
        self.socket_path = path or socket_path()

    async def send_command(self, command: str) -> None:
        """
        Send a command to the daemon.

        Raises:
            ConnectionError: If the daemon is not running
        """
        if not self.socket_path.exists():
            raise ConnectionError(f"Daemon not running (socket not found: {self.socket_path})")

        reader, writer = await asyncio.open_unix_connection(str(self.socket_path))
        try:
            writer.write(command.encode())
            await writer.drain()
        finally:
            writer.close()
            await writer.wait_closed()


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for barninec."""
    parser = argparse.ArgumentParser(
        prog="barninec",
        description="Send a command to the barnine status bar"
    )
    parser.add_argument("command", choices=COMMANDS, help="Command to send")
    parser.add_argument("--socket", type=Path, help="Control socket path")
    args = parser.parse_args(argv)

    client = BarnineClient(args.socket)
    try:
        asyncio.run(client.send_command(args.command))
    except (ConnectionError, OSError) as e:
        print(f"barninec: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
