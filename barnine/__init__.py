"""
barnine

Status line aggregator for swaybar.
Merges battery, brightness, volume, window title, clock and workspace grid
updates into one i3bar protocol status line.
"""

__version__ = "1.0.0"
__author__ = "NixOS Configuration Team"
