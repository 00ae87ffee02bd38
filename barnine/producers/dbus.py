"""D-Bus connections via pydbus.

pydbus is imported on first use so the rest of barnine (and its tests) does
not need the GLib bindings it sits on.
"""

import logging

logger = logging.getLogger(__name__)


def system_bus():
    """Connection to the system bus (logind)."""
    from pydbus import SystemBus
    return SystemBus()


def session_bus():
    """Connection to the session bus (PulseAudio server lookup)."""
    from pydbus import SessionBus
    return SessionBus()


def connect(address: str):
    """Peer-to-peer connection to a D-Bus address."""
    from pydbus import connect as dbus_connect
    logger.debug(f"Connecting to D-Bus peer at {address}")
    return dbus_connect(address)
