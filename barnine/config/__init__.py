"""
Configuration subsystem for barnine.

Modules:
- loader: Locate and parse barnine.toml
- file_watcher: Reload the configuration when the file changes
"""

from .loader import ConfigLoader, get_config_file
from .file_watcher import ConfigWatcher

__all__ = [
    "ConfigLoader",
    "ConfigWatcher",
    "get_config_file",
]
