# keylaunch Utilities Package
"""
Shared utility functions and helpers for the keylaunch launcher.
"""

from .helpers import Debouncer, ensure_user_style, load_settings, module_config, run_exec
from .layout import Layout

__all__ = [
    "Debouncer",
    "Layout",
    "ensure_user_style",
    "load_settings",
    "module_config",
    "run_exec",
]
