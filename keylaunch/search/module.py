"""
Search module contract - Entries, ranking hints and the provider base class.

Each module declares a name (used to find its settings block), an optional
activation prefix and whether it is switcher-exclusive. Given a term it
returns an ordered list of Entry values; it never raises for a term it
does not handle, it just returns nothing.
"""

import enum
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

DEFAULT_MIN_LENGTH = 2


class Matching(enum.IntEnum):
    """Ranking hint. Sorting by value puts NORMAL before ALWAYS_BOTTOM."""
    NORMAL = 0
    ALWAYS_BOTTOM = 1


@dataclass(frozen=True)
class Entry:
    """A single result row produced by a module."""
    label: str
    sub: str = ""
    exec: str = ""
    css_class: str = ""  # theming tag, names the owning module
    icon: str = ""
    image: str = ""
    icon_is_image: bool = False
    hide_text: bool = False
    drag_drop: bool = False
    drag_drop_data: str = ""
    matching: Matching = Matching.NORMAL


class CancelToken:
    """Advisory cancellation flag handed to every module call."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


class SearchModule(ABC):
    """Base class for all search modules."""

    name = ""
    # Overrides search.min_prefixed_length when set
    default_min_length: Optional[int] = None

    def __init__(self, prefix: str = "", switcher_exclusive: bool = False,
                 min_length: int = DEFAULT_MIN_LENGTH):
        self.prefix = prefix
        self.switcher_exclusive = switcher_exclusive
        self.min_length = min_length

    @classmethod
    def setup(cls, config: Optional[dict]) -> Optional["SearchModule"]:
        """
        Build a configured instance from this module's settings block.

        Args:
            config: The module's block, or None if it is not configured

        Returns:
            A module instance, or None when absent or disabled.
        """
        if config is None or not config.get("enabled", True):
            return None
        return cls(**cls.options(config))

    @classmethod
    def options(cls, config: dict) -> dict:
        """Extract constructor keyword arguments from a settings block."""
        return {
            "prefix": config.get("prefix", ""),
            "switcher_exclusive": bool(config.get("switcher_exclusive", False)),
            "min_length": int(config.get("min_length", cls._fallback_min_length())),
        }

    @classmethod
    def _fallback_min_length(cls) -> int:
        if cls.default_min_length is None:
            return DEFAULT_MIN_LENGTH
        return cls.default_min_length

    def accepts(self, term: str) -> bool:
        """Return True if this module should run for the term."""
        if not self.prefix:
            return True
        if not term.startswith(self.prefix):
            return False
        return len(term) - len(self.prefix) >= self.min_length

    def strip_prefix(self, term: str) -> str:
        if self.prefix and term.startswith(self.prefix):
            return term[len(self.prefix):]
        return term

    def with_prefix(self, term: str) -> str:
        """Address the term to this module, as when it is pinned."""
        if term.startswith(self.prefix):
            return term
        return self.prefix + term

    def attach(self, registry) -> None:
        """Called once after every configured module has been set up."""

    @abstractmethod
    def entries(self, token: CancelToken, term: str) -> list[Entry]:
        """Return entries for the term (empty if it does not apply)."""
        ...

    def __repr__(self):
        return f"<{type(self).__name__} name={self.name!r} prefix={self.prefix!r}>"
