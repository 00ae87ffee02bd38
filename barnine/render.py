"""Rendering pipeline: bar state + configuration -> i3bar blocks."""

import json
import logging
from typing import Dict, List, Optional, Tuple, TYPE_CHECKING

from .models import BarConfig, Block, WidgetKind, WidgetSpec

if TYPE_CHECKING:
    from .bar import BarState

logger = logging.getLogger(__name__)

ICON_BRIGHTNESS = "🔅"
ICON_PLUGGED = "🔌"
ICON_BATTERY = "🔋"
BATTERY_UNKNOWN = "n/a "
ICON_MUTED = "🔇"
ICON_UNMUTED = "🔈"
TRUNCATION_MARKER = "*"

DEFAULT_CHAR_WIDTH = 100
VOLUME_SCALE = 65536


def truncate(text: str, max_chars: int) -> str:
    """First ``max_chars`` code points of ``text``."""
    return text[:max_chars]


def battery_icon(status: Optional[str]) -> str:
    if status in ("Full", "Charging"):
        return ICON_PLUGGED
    if status == "Discharging":
        return ICON_BATTERY
    return BATTERY_UNKNOWN


def volume_percent(raw: int) -> int:
    return raw * 100 // VOLUME_SCALE


class Renderer:
    """Turns a bar state snapshot into blocks.

    Widgets whose value is missing keep the text from their last render;
    that memory belongs to one configuration and is dropped with it.
    """

    def __init__(self):
        self._config: Optional[BarConfig] = None
        self._last_text: Dict[int, Tuple[str, Optional[str]]] = {}

    def render(self, state: "BarState") -> List[Block]:
        config = state.config
        if config is not self._config:
            self._config = config
            self._last_text = {}

        blocks = []
        for index, spec in enumerate(config.bar):
            if spec.widget is WidgetKind.UNKNOWN:
                continue

            text = self._widget_text(spec, state)
            if text is None:
                text = self._last_text.get(index, (spec.full_text or "", None))
            self._last_text[index] = text

            full_text, short_text = text
            blocks.append(Block.from_spec(spec, config.default, full_text, short_text))

        return blocks

    def to_json(self, state: "BarState") -> str:
        """Render to a single JSON array."""
        return json.dumps(
            [block.to_json() for block in self.render(state)],
            ensure_ascii=False,
            separators=(",", ":")
        )

    def _widget_text(self, spec: WidgetSpec, state: "BarState") -> Optional[Tuple[str, Optional[str]]]:
        """(full_text, short_text) for a widget, or None when its value is absent."""
        kind = spec.widget

        if kind is WidgetKind.TIME:
            if state.time is None:
                return None
            return state.time, None

        if kind is WidgetKind.BRIGHTNESS:
            if state.brightness is None:
                return None
            return f"{state.brightness:>2}{ICON_BRIGHTNESS}", None

        if kind is WidgetKind.BATTERY:
            if state.battery_capacity is None:
                return None
            return f"{state.battery_capacity}{battery_icon(state.battery_status)}", None

        if kind is WidgetKind.WINDOW_NAME:
            if state.window_name is None:
                return None
            width = spec.char_width if spec.char_width is not None else DEFAULT_CHAR_WIDTH
            short_text = truncate(state.window_name, width) + TRUNCATION_MARKER
            return state.window_name, short_text

        if kind is WidgetKind.VOLUME:
            if state.volume is None:
                return None
            icon = ICON_MUTED if state.mute else ICON_UNMUTED
            return f"{volume_percent(state.volume):>2}{icon}", None

        if kind is WidgetKind.GRID:
            return state.position.glyph(), None

        logger.debug(f"No renderer for widget kind {kind}")
        return None
