"""Unit tests for the rendering pipeline."""

import json

import pytest

from barnine.bar import BarState
from barnine.models import ATTRIBUTE_FIELDS, BarConfig, DefaultSpec, WidgetSpec
from barnine.nine import Position
from barnine.render import (
    ICON_BATTERY,
    ICON_BRIGHTNESS,
    ICON_MUTED,
    ICON_PLUGGED,
    ICON_UNMUTED,
    Renderer,
    truncate,
    volume_percent,
)


def render_one(state: BarState, **spec):
    state.config = BarConfig(bar=[WidgetSpec(**spec)])
    blocks = Renderer().render(state)
    assert len(blocks) == 1
    return blocks[0]


# Sample values for every display attribute
ATTRIBUTE_SAMPLES = {
    "background": ("#000000", "#ffffff"),
    "separator_block_width": (0, 9),
    "min_width": (100, "sample"),
    "align": ("left", "right"),
    "color": ("#111111", "#222222"),
    "border": ("#333333", "#444444"),
    "border_top": (1, 2),
    "border_bottom": (3, 4),
    "border_left": (5, 6),
    "border_right": (7, 8),
    "name": ("widget", "default"),
    "instance": ("a", "b"),
    "urgent": (True, False),
    "separator": (False, True),
    "markup": ("pango", "none"),
}


def test_samples_cover_every_attribute():
    assert set(ATTRIBUTE_SAMPLES) == set(ATTRIBUTE_FIELDS)


class TestScenarios:
    """End-to-end render scenarios."""

    def test_empty_state_and_config(self):
        assert Renderer().to_json(BarState()) == "[]"

    def test_full_bar(self, full_config):
        state = BarState(
            battery_status="Full",
            battery_capacity="99",
            brightness=1000,
            window_name="Window",
            time="12:01",
            volume=22000,
            mute=False,
            config=full_config,
        )
        blocks = json.loads(Renderer().to_json(state))

        assert len(blocks) == 5
        assert blocks[0]["full_text"] == f"1000{ICON_BRIGHTNESS}"
        assert blocks[1]["full_text"] == f"99{ICON_PLUGGED}"
        assert blocks[2]["full_text"] == "Window"
        assert blocks[2]["short_text"] == "Window*"
        assert blocks[3]["full_text"] == f"33{ICON_UNMUTED}"
        assert blocks[4]["full_text"] == "12:01"

    def test_render_is_idempotent(self, full_config):
        state = BarState(time="12:01", volume=1000, config=full_config)
        renderer = Renderer()
        assert renderer.to_json(state) == renderer.to_json(state)

    def test_output_is_compact_utf8(self, full_config):
        state = BarState(brightness=50, config=full_config)
        text = Renderer().to_json(state)
        assert ICON_BRIGHTNESS in text
        assert "\n" not in text


class TestWidgets:
    """Per-widget formatting."""

    @pytest.mark.parametrize("value, text", [(5, f" 5{ICON_BRIGHTNESS}"), (42, f"42{ICON_BRIGHTNESS}"), (100, f"100{ICON_BRIGHTNESS}")])
    def test_brightness_right_aligned(self, value, text):
        assert render_one(BarState(brightness=value), widget="brightness").full_text == text

    @pytest.mark.parametrize("status, icon", [
        ("Full", ICON_PLUGGED),
        ("Charging", ICON_PLUGGED),
        ("Discharging", ICON_BATTERY),
        ("Not charging", "n/a "),
        (None, "n/a "),
    ])
    def test_battery_icon(self, status, icon):
        block = render_one(BarState(battery_capacity="50", battery_status=status), widget="battery")
        assert block.full_text == f"50{icon}"

    @pytest.mark.parametrize("raw, muted, text", [
        (22000, False, f"33{ICON_UNMUTED}"),
        (65536, True, f"100{ICON_MUTED}"),
        (0, None, f" 0{ICON_UNMUTED}"),
        (3000, True, f" 4{ICON_MUTED}"),
    ])
    def test_volume(self, raw, muted, text):
        assert render_one(BarState(volume=raw, mute=muted), widget="volume").full_text == text

    def test_volume_percent_rounds_down(self):
        assert volume_percent(22000) == 33
        assert volume_percent(65535) == 99

    def test_time_verbatim(self):
        assert render_one(BarState(time="Jan 01 Monday  9:00:00 AM"), widget="time").full_text == "Jan 01 Monday  9:00:00 AM"

    def test_grid_always_present(self):
        state = BarState(position=Position.MIDDLE_RIGHT)
        assert render_one(state, widget="grid").full_text == "__M"
        assert render_one(BarState(), widget="nine").full_text == "T__"

    def test_unknown_widget_skipped(self):
        state = BarState(time="12:00")
        state.config = BarConfig(bar=[
            WidgetSpec(widget="weather"),
            WidgetSpec(widget="time"),
        ])
        blocks = Renderer().render(state)
        assert [b.full_text for b in blocks] == ["12:00"]


class TestWindowName:
    """Window title and its truncated short text."""

    def test_short_title_gets_marker(self):
        block = render_one(BarState(window_name="vim"), widget="window_name")
        assert block.full_text == "vim"
        assert block.short_text == "vim*"

    def test_truncated_to_char_width(self):
        block = render_one(BarState(window_name="abcdefghij"), widget="window_name", char_width=4)
        assert block.full_text == "abcdefghij"
        assert block.short_text == "abcd*"

    def test_default_width_is_100(self):
        block = render_one(BarState(window_name="x" * 150), widget="window_name")
        assert block.short_text == "x" * 100 + "*"

    def test_truncation_counts_code_points(self):
        title = "語" * 10  # 3 bytes per character in UTF-8
        block = render_one(BarState(window_name=title), widget="window_name", char_width=4)
        assert block.short_text == "語語語語*"
        assert len(block.short_text) == 5

    def test_truncate_helper(self):
        assert truncate("héllo", 2) == "hé"
        assert truncate("abc", 10) == "abc"
        assert truncate("abc", 0) == ""


class TestAbsentValues:
    """Widgets without a value keep their layout slot."""

    def test_placeholder_before_first_value(self):
        block = render_one(BarState(), widget="time", full_text="--:--")
        assert block.full_text == "--:--"

    def test_empty_without_placeholder(self):
        block = render_one(BarState(), widget="battery")
        assert block.full_text == ""
        assert block.short_text is None

    def test_previous_text_retained_after_clear(self, make_config):
        state = BarState(time="12:00", config=make_config('[[bar]]\nwidget = "time"\n'))
        renderer = Renderer()
        assert renderer.render(state)[0].full_text == "12:00"

        state.time = None
        assert renderer.render(state)[0].full_text == "12:00"

    def test_window_short_text_retained(self, make_config):
        state = BarState(window_name="abc", config=make_config('[[bar]]\nwidget = "window_name"\n'))
        renderer = Renderer()
        renderer.render(state)
        state.window_name = None
        block = renderer.render(state)[0]
        assert (block.full_text, block.short_text) == ("abc", "abc*")

    def test_new_config_forgets_previous_text(self, make_config):
        text = '[[bar]]\nwidget = "time"\n'
        state = BarState(time="12:00", config=make_config(text))
        renderer = Renderer()
        renderer.render(state)

        state.time = None
        state.config = make_config(text)
        assert renderer.render(state)[0].full_text == ""


class TestAttributeInheritance:
    """Widget attributes win over defaults, field by field."""

    @pytest.mark.parametrize("field", sorted(ATTRIBUTE_SAMPLES))
    def test_widget_value_wins(self, field):
        widget_value, default_value = ATTRIBUTE_SAMPLES[field]
        state = BarState(time="t")
        state.config = BarConfig(
            default=DefaultSpec(**{field: default_value}),
            bar=[WidgetSpec(widget="time", **{field: widget_value})],
        )
        data = Renderer().render(state)[0].to_json()
        assert data[field] == widget_value

    @pytest.mark.parametrize("field", sorted(ATTRIBUTE_SAMPLES))
    def test_default_fills_unset(self, field):
        _, default_value = ATTRIBUTE_SAMPLES[field]
        state = BarState(time="t")
        state.config = BarConfig(
            default=DefaultSpec(**{field: default_value}),
            bar=[WidgetSpec(widget="time")],
        )
        data = Renderer().render(state)[0].to_json()
        assert data[field] == default_value

    @pytest.mark.parametrize("field", sorted(ATTRIBUTE_SAMPLES))
    def test_omitted_when_neither_sets(self, field):
        state = BarState(time="t")
        state.config = BarConfig(bar=[WidgetSpec(widget="time")])
        data = Renderer().render(state)[0].to_json()
        assert field not in data

    def test_defaults_apply_to_every_widget(self, make_config):
        config = make_config(
            '[default]\nbackground = "#000000"\nseparator = false\n'
            '[[bar]]\nwidget = "time"\n'
            '[[bar]]\nwidget = "grid"\nbackground = "#880000"\n'
        )
        blocks = Renderer().render(BarState(time="t", config=config))
        assert [b.background for b in blocks] == ["#000000", "#880000"]
        assert [b.separator for b in blocks] == [False, False]

    def test_default_spec_not_mutated(self, make_config):
        config = make_config('[default]\ncolor = "#ffffff"\n[[bar]]\nwidget = "time"\ncolor = "#000000"\n')
        Renderer().render(BarState(time="t", config=config))
        assert config.default.color == "#ffffff"
        assert config.bar[0].color == "#000000"
