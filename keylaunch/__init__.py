# keylaunch Package
"""
Keystroke-driven application launcher for Ignis/Wayland.

As you type, configured search modules (applications, calculator, custom
commands, web search, module switcher) produce entries that are merged,
ranked and shown in a keyboard- and mouse-navigable list.
"""

__version__ = "0.1.0-dev"
