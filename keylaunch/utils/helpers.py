"""
Helper utilities for the keylaunch launcher.

Provides common functions used across modules and the panel:
- Settings loading and per-module config lookup
- Fire-and-forget command execution
- Drag-and-drop payload construction
- Default stylesheet setup and search-entry debouncing
"""

import os
import subprocess
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import toml
from loguru import logger

DEFAULT_ACTIVATION_KEYS = ["j", "k", "l", ";", "a", "s", "d", "f"]

DEFAULT_STYLE_PATH = Path(__file__).resolve().parent.parent / "style.css"

# Default settings
DEFAULTS = {
    "launcher": {
        "close_after_activation": True,
        "placeholder": "Search...",
        "orientation": "vertical",
        "width": 600,
        "halign": "",
        "valign": "",
        "margins": {"top": 0, "bottom": 0, "start": 0, "end": 0},
    },
    "search": {
        "max_results": 0,
        "min_prefixed_length": 2,
        "delay": 0,
        "hide_icons": False,
        "margin_spinner": 8,
    },
    "list": {
        "always_show": False,
        "ignore_mouse": False,
        "icon_size": 32,
        "height": 0,
        "fixed_height": False,
        "margin_top": 0,
    },
    "activation": {
        "keys": DEFAULT_ACTIVATION_KEYS,
        "disabled": False,
    },
    "modules": {
        "applications": {},
        "calculator": {"prefix": "="},
        "commands": {"prefix": "!"},
        "switcher": {"prefix": "/"},
        "websearch": {},
    },
}


def config_dir() -> Path:
    """Return the XDG config directory for keylaunch."""
    base = os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config"
    return Path(base) / "keylaunch"


def data_dir() -> Path:
    """Return the XDG data directory for keylaunch."""
    base = os.environ.get("XDG_DATA_HOME") or Path.home() / ".local" / "share"
    return Path(base) / "keylaunch"


def settings_path() -> Path:
    override = os.environ.get("KEYLAUNCH_SETTINGS")
    if override:
        return Path(override)
    return config_dir() / "settings.toml"


def load_settings(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load launcher settings from TOML file.

    Args:
        path: Settings file; defaults to settings_path()

    Returns:
        Dictionary containing settings with defaults applied.

    A [modules] table in the file replaces the default module list as a
    whole, so its key order is the configured module order.
    """
    path = path or settings_path()

    if not path.exists():
        logger.info(f"Settings file not found at {path}, using defaults")
        return _deep_merge(DEFAULTS, {})

    try:
        loaded = toml.load(path)
    except (OSError, toml.TomlDecodeError) as e:
        logger.warning(f"Could not load settings from {path}: {e}")
        return _deep_merge(DEFAULTS, {})

    settings = _deep_merge(DEFAULTS, loaded)
    if "modules" in loaded:
        settings["modules"] = dict(loaded["modules"])
    return settings


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Deep merge two dictionaries.

    Args:
        base: Base dictionary with defaults
        override: Dictionary with overrides

    Returns:
        Merged dictionary (override takes precedence)
    """
    result = {}

    for key, value in base.items():
        result[key] = _deep_merge(value, {}) if isinstance(value, dict) else value

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def module_config(settings: Dict[str, Any], name: str) -> Optional[Dict[str, Any]]:
    """
    Find a module's settings block.

    Returns:
        The block, or None if the module is not configured at all.
        A present block with enabled = false is still returned.
    """
    block = settings.get("modules", {}).get(name)
    if block is None:
        return None
    if not isinstance(block, dict):
        logger.warning(f"Ignoring malformed settings block for module '{name}'")
        return None
    return block


def run_exec(exec_str: str) -> None:
    """Launch a command line detached from the launcher."""
    if not exec_str:
        return

    try:
        subprocess.Popen(
            exec_str,
            shell=True,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except OSError:
        logger.exception(f"Failed to execute: {exec_str}")


def uri_list(path: str) -> bytes:
    """Build a single-file text/uri-list payload for a drag."""
    uri = Path(path).expanduser().resolve().as_uri()
    return f"{uri}\n".encode()


def ensure_user_style(path: Path) -> Path:
    """
    Make sure a user stylesheet exists, writing the default one if absent.

    Returns:
        The stylesheet to apply: path, or the packaged default when it
        could not be written.
    """
    if path.exists():
        return path

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(DEFAULT_STYLE_PATH.read_text())
        path.chmod(0o600)
    except OSError as e:
        logger.warning(f"Could not write default stylesheet to {path}: {e}")
        return DEFAULT_STYLE_PATH

    logger.info(f"Wrote default stylesheet to {path}")
    return path


class Debouncer:
    """
    Collapse a burst of calls into one call after `delay` ms of quiet.

    The timer functions are injected (GLib.timeout_add / GLib.source_remove
    in the panel). A delay of 0 calls straight through.
    """

    def __init__(self, delay: int, callback: Callable[[], None],
                 timeout_add: Callable, source_remove: Callable):
        self.delay = delay
        self.callback = callback
        self._timeout_add = timeout_add
        self._source_remove = source_remove
        self._source = None

    @property
    def pending(self) -> bool:
        return self._source is not None

    def __call__(self) -> None:
        if self.delay <= 0:
            self.callback()
            return
        self.cancel()
        self._source = self._timeout_add(self.delay, self._fire)

    def cancel(self) -> None:
        if self._source is not None:
            self._source_remove(self._source)
            self._source = None

    def _fire(self) -> bool:
        self._source = None
        self.callback()
        return False
