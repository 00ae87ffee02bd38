"""
Configuration loader for barnine.

Loads barnine.toml:

    [default]
    background = "#000000"

    [[bar]]
    widget = "window_name"
    char_width = 60

    [[bar]]
    widget = "time"
    align = "right"
"""

import os
import tomllib
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from ..errors import ConfigLoadError, ErrorCode
from ..models import BarConfig

APP_NAME = "barnine"


def dev_dir(app_name: str = APP_NAME) -> Optional[Path]:
    """Directory from the BARNINE_DEV_DIR override, if set."""
    value = os.environ.get(f"{app_name.upper()}_DEV_DIR")
    return Path(value) if value else None


def get_config_file(app_name: str = APP_NAME) -> Path:
    """
    Resolve the configuration file path.

    Order: $BARNINE_DEV_DIR/barnine.toml, $XDG_CONFIG_HOME/barnine/barnine.toml,
    ~/.config/barnine/barnine.toml, /tmp/barnine.toml.
    """
    file_name = f"{app_name}.toml"

    override = dev_dir(app_name)
    if override is not None:
        return override / file_name

    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config) / app_name / file_name

    home = os.environ.get("HOME")
    if home:
        return Path(home) / ".config" / app_name / file_name

    return Path("/tmp") / file_name


class ConfigLoader:
    """Loads and validates the bar configuration file."""

    def __init__(self, config_file: Optional[Path] = None):
        """
        Initialize configuration loader.

        Args:
            config_file: Path to barnine.toml (resolved from the environment if omitted)
        """
        self.config_file = config_file or get_config_file()

    def load(self) -> Optional[BarConfig]:
        """
        Load configuration from the TOML file.

        Returns:
            BarConfig, or None if the file does not exist

        Raises:
            ConfigLoadError: If the file cannot be read, is not valid TOML,
                or does not match the configuration schema
        """
        if not self.config_file.is_file():
            return None

        try:
            with open(self.config_file, "rb") as f:
                data = tomllib.load(f)
        except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
            raise ConfigLoadError(str(self.config_file), str(e), ErrorCode.CONFIG_SYNTAX_ERROR) from e
        except OSError as e:
            raise ConfigLoadError(str(self.config_file), str(e)) from e

        return self.parse(data)

    def loads(self, text: str) -> BarConfig:
        """Parse configuration from a TOML string."""
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as e:
            raise ConfigLoadError(str(self.config_file), str(e), ErrorCode.CONFIG_SYNTAX_ERROR) from e
        return self.parse(data)

    def parse(self, data: dict) -> BarConfig:
        try:
            return BarConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigLoadError(str(self.config_file), str(e), ErrorCode.CONFIG_SCHEMA_ERROR) from e
