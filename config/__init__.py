# PATH: config/__init__.py
"""
Configuration loading utilities for XARB.
"""

from pathlib import Path

from config.settings import (
    ChainSettings,
    Settings,
    load_settings,
    settings_from_dict,
)

CONFIG_DIR = Path(__file__).parent

__all__ = [
    "CONFIG_DIR",
    "ChainSettings",
    "Settings",
    "load_settings",
    "settings_from_dict",
]
