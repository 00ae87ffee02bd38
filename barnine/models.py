"""
Pydantic data models for barnine.

Widget configuration (parsed from barnine.toml) and the i3bar protocol
blocks rendered from it.

See: https://i3wm.org/docs/i3bar-protocol.html
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


# Enumerations

class Align(str, Enum):
    """Text alignment inside a block."""
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class WidgetKind(str, Enum):
    """Which part of the bar state a widget renders."""
    TIME = "time"
    BATTERY = "battery"
    BRIGHTNESS = "brightness"
    VOLUME = "volume"
    WINDOW_NAME = "window_name"
    GRID = "grid"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Any) -> "WidgetKind":
        """Parse a kind tag; unrecognized tags become UNKNOWN."""
        if isinstance(value, cls):
            return value
        if value == "nine":
            return cls.GRID
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


# Display attributes

class BlockAttributes(BaseModel):
    """Optional display attributes shared by widgets, defaults and blocks."""

    model_config = ConfigDict(extra="ignore")

    background: Optional[str] = Field(None, description="Background color")
    separator_block_width: Optional[int] = Field(None, ge=0, description="Separator width (pixels)")
    min_width: Optional[Union[int, str]] = Field(None, description="Minimum width (pixels or sample text)")
    align: Optional[Align] = Field(None, description="Text alignment")
    color: Optional[str] = Field(None, description="Text color (#RRGGBB)")
    border: Optional[str] = Field(None, description="Border color")
    border_top: Optional[int] = Field(None, ge=0)
    border_bottom: Optional[int] = Field(None, ge=0)
    border_left: Optional[int] = Field(None, ge=0)
    border_right: Optional[int] = Field(None, ge=0)
    name: Optional[str] = Field(None, description="Block identifier for click events")
    instance: Optional[str] = Field(None, description="Block instance identifier")
    urgent: Optional[bool] = None
    separator: Optional[bool] = None
    markup: Optional[str] = Field(None, description="Markup type (none, pango)")

    def attributes(self) -> Dict[str, Any]:
        """Display attributes that are explicitly set."""
        return {
            field: getattr(self, field)
            for field in ATTRIBUTE_FIELDS
            if getattr(self, field) is not None
        }


ATTRIBUTE_FIELDS = tuple(BlockAttributes.model_fields)


class DefaultSpec(BlockAttributes):
    """Fallback attributes for every widget (the ``[default]`` table)."""


class WidgetSpec(BlockAttributes):
    """One ``[[bar]]`` entry."""

    widget: WidgetKind = Field(
        WidgetKind.UNKNOWN,
        validation_alias=AliasChoices("widget", "kind"),
        description="Widget kind"
    )
    char_width: Optional[int] = Field(None, ge=0, description="Window name truncation width")
    full_text: Optional[str] = Field(None, description="Text shown until a value arrives")

    @field_validator("widget", mode="before")
    @classmethod
    def parse_widget(cls, v: Any) -> WidgetKind:
        """Keep unknown widget kinds loadable for forward compatibility."""
        return WidgetKind.parse(v)


class BarConfig(BaseModel):
    """Complete bar configuration; replaced wholesale on every reload."""

    model_config = ConfigDict(extra="ignore")

    default: DefaultSpec = Field(default_factory=DefaultSpec)
    bar: List[WidgetSpec] = Field(default_factory=list)


# Protocol output

class Block(BlockAttributes):
    """A single rendered status block in the i3bar protocol format."""

    full_text: str = ""
    short_text: Optional[str] = None

    @classmethod
    def from_spec(
        cls,
        spec: WidgetSpec,
        default: DefaultSpec,
        full_text: str,
        short_text: Optional[str] = None
    ) -> "Block":
        """Build a block, filling unset widget attributes from the default."""
        attributes = default.attributes()
        attributes.update(spec.attributes())
        return cls(full_text=full_text, short_text=short_text, **attributes)

    def to_json(self) -> dict:
        """Convert to i3bar protocol JSON format, omitting unset fields."""
        data = self.model_dump(mode="json", exclude_none=True)
        return {"full_text": data.pop("full_text"), **data}


class Header(BaseModel):
    """i3bar protocol header line."""

    version: int = 1
    click_events: bool = False

    def to_json(self) -> dict:
        return self.model_dump()
