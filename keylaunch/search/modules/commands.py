"""
Custom Commands Module - User-defined command aliases.

Reads command definitions from a TOML file (commands.toml next to
settings.toml unless the block names another `file`) and matches
queries starting with the module prefix ("!" by default).

Example commands.toml:
    [commands.lock]
    description = "Lock screen"
    exec = "hyprlock"
    icon = "system-lock-screen"

    [commands.suspend]
    description = "Suspend system"
    exec = "systemctl suspend"
    icon = "system-suspend"

Usage: !lock, !suspend, etc.
"""

from pathlib import Path
from typing import Optional

import toml
from loguru import logger

from keylaunch.search.module import CancelToken, Entry, SearchModule
from keylaunch.utils.helpers import config_dir


def load_commands(path: Path) -> dict:
    """Load and validate commands from a TOML file."""
    if not path.exists():
        return {}

    try:
        data = toml.load(path)
    except (OSError, toml.TomlDecodeError):
        logger.exception(f"Failed to load commands from {path}")
        return {}

    commands = data.get("commands", {})
    for name, cmd in list(commands.items()):
        if not isinstance(cmd, dict) or "exec" not in cmd:
            logger.warning(f"Skipping malformed command '{name}': missing 'exec' field")
            del commands[name]
    return commands


class CustomCommandsModule(SearchModule):
    """Run user-defined commands by alias."""

    name = "commands"

    def __init__(self, commands: Optional[dict] = None, **kwargs):
        super().__init__(**kwargs)
        self.commands = commands or {}

    @classmethod
    def options(cls, config: dict) -> dict:
        options = super().options(config)
        path = Path(config.get("file", config_dir() / "commands.toml")).expanduser()
        options["commands"] = load_commands(path)
        return options

    def entries(self, token: CancelToken, term: str) -> list[Entry]:
        if not term or not self.accepts(term):
            return []

        q = self.strip_prefix(term).strip().lower()
        if not q:
            return []

        results = []
        for name, cmd in self.commands.items():
            if token.cancelled:
                break
            if q in name.lower() or q in cmd.get("description", "").lower():
                results.append(self._command_to_entry(name, cmd))
        return results

    def _command_to_entry(self, name: str, cmd: dict) -> Entry:
        return Entry(
            label=f"{self.prefix}{name}",
            sub=cmd.get("description", ""),
            exec=cmd["exec"],
            css_class="commands",
            icon=cmd.get("icon", "utilities-terminal"),
        )
