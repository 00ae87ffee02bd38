"""Pytest configuration and fixtures for barnine tests."""

import io
import json
import tempfile
from pathlib import Path
from typing import Generator, List

import pytest

from barnine.bar import Bar, BarState
from barnine.config import ConfigLoader
from barnine.updates import UpdateChannel


FULL_CONFIG = """
[default]

[[bar]]
widget = "brightness"

[[bar]]
widget = "battery"

[[bar]]
widget = "window_name"

[[bar]]
widget = "volume"

[[bar]]
widget = "time"
"""


@pytest.fixture
def channel() -> UpdateChannel:
    """Fresh update channel."""
    return UpdateChannel()


@pytest.fixture
def loader() -> ConfigLoader:
    return ConfigLoader(Path("barnine.toml"))


@pytest.fixture
def full_config(loader):
    """Configuration with brightness, battery, window_name, volume, time."""
    return loader.loads(FULL_CONFIG)


@pytest.fixture
def config_file(tmp_path) -> Path:
    """barnine.toml on disk holding FULL_CONFIG."""
    path = tmp_path / "barnine.toml"
    path.write_text(FULL_CONFIG)
    return path


@pytest.fixture
def make_config(loader):
    """Build a configuration from TOML text."""
    return loader.loads


@pytest.fixture
def output() -> io.StringIO:
    """Captures status lines written by the bar."""
    return io.StringIO()


@pytest.fixture
def bar(output) -> Bar:
    return Bar(state=BarState(), writer=output)


@pytest.fixture
def short_tmp() -> Generator[Path, None, None]:
    """Temporary directory with a short path (unix socket paths are limited)."""
    with tempfile.TemporaryDirectory(prefix="bn", dir="/tmp") as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sysfs(tmp_path) -> Path:
    """Fake /sys/class with a battery, a screen and a keyboard backlight."""
    root = tmp_path / "class"

    battery = root / "power_supply" / "BAT0"
    battery.mkdir(parents=True)
    (battery / "status").write_text("Discharging\n")
    (battery / "capacity").write_text("73\n")

    screen = root / "backlight" / "intel_backlight"
    screen.mkdir(parents=True)
    (screen / "brightness").write_text("600\n")
    (screen / "max_brightness").write_text("1200\n")

    keyboard = root / "leds" / "smc::kbd_backlight"
    keyboard.mkdir(parents=True)
    (keyboard / "brightness").write_text("0\n")
    (keyboard / "max_brightness").write_text("255\n")

    return root


def parse_lines(text: str) -> List[list]:
    """Decode status lines (each a JSON array followed by a comma)."""
    lines = []
    for line in text.splitlines():
        assert line.endswith(","), f"status line without trailing comma: {line!r}"
        lines.append(json.loads(line[:-1]))
    return lines


@pytest.fixture
def status_lines(output):
    """Parsed status lines written so far."""
    return lambda: parse_lines(output.getvalue())
