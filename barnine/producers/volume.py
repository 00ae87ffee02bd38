"""Speaker volume via the PulseAudio D-Bus interface.

PulseAudio (and pipewire-pulse) expose a peer-to-peer D-Bus server whose
address is looked up on the session bus. Volumes are raw values where
65536 is 100%.
"""

import asyncio
import logging
from typing import Callable, Optional, Tuple

from ..errors import DbusError, ErrorCode
from ..render import VOLUME_SCALE
from ..updates import Mute, Volume, UpdateChannel, REDRAW
from . import dbus

logger = logging.getLogger(__name__)

PULSE_LOOKUP_SERVICE = "org.PulseAudio1"
PULSE_LOOKUP_PATH = "/org/pulseaudio/server_lookup1"
PULSE_CORE_PATH = "/org/pulseaudio/core1"

STEP_PCT = 2


def raw_delta(delta_pct: int) -> int:
    """Raw volume change for a percentage step, truncated toward zero."""
    return int(delta_pct * VOLUME_SCALE / 100)


class PulseAudio:
    """Blocking access to the first PulseAudio sink."""

    def __init__(
        self,
        session_factory: Callable = dbus.session_bus,
        connect: Callable = dbus.connect
    ):
        """
        Initialize PulseAudio client.

        Args:
            session_factory: Returns a session bus connection
            connect: Opens a peer connection to a D-Bus address
        """
        self.session_factory = session_factory
        self.connect = connect

    def _sink(self):
        try:
            lookup = self.session_factory().get(PULSE_LOOKUP_SERVICE, PULSE_LOOKUP_PATH)
            pulse = self.connect(lookup.Address)
            sinks = pulse.get(None, PULSE_CORE_PATH).Sinks
        except Exception as e:
            raise DbusError("PulseAudio connect", str(e)) from e

        if not sinks:
            raise DbusError("PulseAudio sinks", "No sink found", ErrorCode.NO_AUDIO_SINK)

        try:
            return pulse.get(None, sinks[0])
        except Exception as e:
            raise DbusError("PulseAudio sink", str(e)) from e

    def state(self) -> Tuple[int, bool]:
        """(raw volume of the first channel, muted)."""
        sink = self._sink()
        try:
            return int(sink.Volume[0]), bool(sink.Mute)
        except Exception as e:
            raise DbusError("PulseAudio read", str(e)) from e

    def set_volume(self, raw: int) -> None:
        sink = self._sink()
        try:
            sink.Volume = [raw]
        except Exception as e:
            raise DbusError("PulseAudio set volume", str(e)) from e

    def change_volume(self, delta_pct: int) -> int:
        """
        Step the volume, never below zero.

        Returns:
            New raw volume
        """
        current, _ = self.state()
        new_volume = max(0, current + raw_delta(delta_pct))
        logger.debug(f"Volume {current} -> {new_volume}")
        self.set_volume(new_volume)
        return new_volume

    def toggle_mute(self) -> bool:
        """
        Flip the mute flag.

        Returns:
            New mute state
        """
        sink = self._sink()
        try:
            muted = not bool(sink.Mute)
            sink.Mute = muted
        except Exception as e:
            raise DbusError("PulseAudio toggle mute", str(e)) from e
        return muted


async def change_volume(delta_pct: int, pulse: Optional[PulseAudio] = None) -> int:
    pulse = pulse or PulseAudio()
    return await asyncio.to_thread(pulse.change_volume, delta_pct)


async def toggle_mute(pulse: Optional[PulseAudio] = None) -> bool:
    pulse = pulse or PulseAudio()
    return await asyncio.to_thread(pulse.toggle_mute)


async def watch_volume(
    channel: UpdateChannel,
    pulse: Optional[PulseAudio] = None,
    interval: float = 5.0
) -> None:
    """Poll volume and mute state; an unreachable server publishes nothing."""
    pulse = pulse or PulseAudio()
    while True:
        try:
            volume, muted = await asyncio.to_thread(pulse.state)
        except DbusError as e:
            logger.debug(f"Volume unavailable: {e.message}")
        else:
            channel.send(Volume(volume))
            channel.send(Mute(muted))
            channel.send(REDRAW)
        await asyncio.sleep(interval)
