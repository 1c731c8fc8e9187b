"""
Result List - The displayed entries, selection and quick-activation labels.

Keeps the single-selection state that keyboard and mouse share and pushes
every change to a RenderSurface. The GTK panel is one surface; tests use a
recording fake.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence

from keylaunch.errors import RenderInvariantError
from keylaunch.search.module import Entry
from keylaunch.utils.helpers import DEFAULT_ACTIVATION_KEYS


@dataclass(frozen=True)
class Row:
    """One displayed row: the entry plus what the list derived for it."""
    index: int
    entry: Entry
    activation_label: Optional[str] = None

    @property
    def css_classes(self) -> list[str]:
        return ["item", self.entry.css_class] if self.entry.css_class else ["item"]

    @property
    def two_line(self) -> bool:
        return bool(self.entry.sub)


class RenderSurface(ABC):
    """What the result list needs from whatever draws it."""

    @abstractmethod
    def replace_rows(self, rows: Sequence[Row]) -> None:
        ...

    @abstractmethod
    def set_selected(self, index: Optional[int]) -> None:
        ...

    @abstractmethod
    def set_list_visible(self, visible: bool) -> None:
        ...

    @abstractmethod
    def set_chrome_class(self, css_class: str) -> None:
        """Theme the top-level window after the selected entry."""
        ...

    @abstractmethod
    def set_busy(self, busy: bool) -> None:
        ...


class ResultList:
    """
    Displayed sequence plus selection state.

    Only the UI thread calls into this class.
    """

    def __init__(self, surface: RenderSurface,
                 activation_keys: Sequence[str] = DEFAULT_ACTIVATION_KEYS,
                 activation_enabled: bool = True,
                 always_show: bool = False,
                 ignore_mouse: bool = False):
        self.surface = surface
        self.activation_keys = list(activation_keys)
        self.activation_enabled = activation_enabled
        self.always_show = always_show
        self.ignore_mouse = ignore_mouse

        self._entries: tuple[Entry, ...] = ()
        self._selected: Optional[int] = None
        self._quick_mode = False

    @classmethod
    def from_settings(cls, surface: RenderSurface, settings: dict) -> "ResultList":
        activation = settings.get("activation", {})
        list_settings = settings.get("list", {})
        return cls(
            surface,
            activation_keys=activation.get("keys", DEFAULT_ACTIVATION_KEYS),
            activation_enabled=not activation.get("disabled", False),
            always_show=list_settings.get("always_show", False),
            ignore_mouse=list_settings.get("ignore_mouse", False),
        )

    @property
    def entries(self) -> tuple[Entry, ...]:
        return self._entries

    @property
    def selected(self) -> Optional[int]:
        return self._selected

    @property
    def selected_entry(self) -> Optional[Entry]:
        if self._selected is None:
            return None
        return self._entries[self._selected]

    @property
    def visible(self) -> bool:
        return bool(self._entries) or self.always_show

    @property
    def quick_mode(self) -> bool:
        return self._quick_mode

    def replace(self, entries: Sequence[Entry]) -> None:
        """Swap in a new displayed sequence and select its first row."""
        self._entries = tuple(entries)
        self._selected = 0 if self._entries else None

        self.surface.replace_rows(self.rows())
        self.surface.set_list_visible(self.visible)
        self._sync_selection()

    def rows(self) -> list[Row]:
        return [
            Row(index=i, entry=entry, activation_label=self.activation_label(i))
            for i, entry in enumerate(self._entries)
        ]

    def activation_label(self, index: int) -> Optional[str]:
        """The quick-activation key bound to a row position, if any."""
        if not self.activation_enabled or index >= len(self.activation_keys):
            return None
        return self.activation_keys[index]

    def entry_for_key(self, key: str) -> Optional[Entry]:
        """Resolve a quick-activation key without touching the selection."""
        if not self.activation_enabled or key not in self.activation_keys:
            return None
        index = self.activation_keys.index(key)
        if index >= len(self._entries):
            return None
        return self._entries[index]

    def select(self, index: int) -> None:
        if not 0 <= index < len(self._entries):
            raise RenderInvariantError(
                f"Cannot select row {index} of {len(self._entries)}"
            )
        if index == self._selected:
            return
        self._selected = index
        self._sync_selection()

    def move(self, delta: int) -> None:
        """Move the selection by delta rows, stopping at either end."""
        if not self._entries:
            return
        current = self._selected if self._selected is not None else 0
        self.select(max(0, min(len(self._entries) - 1, current + delta)))

    def hover(self, index: int) -> None:
        """Pointer entered a row."""
        if self.ignore_mouse:
            return
        self.select(index)

    def begin_quick_activation(self) -> None:
        self._quick_mode = True

    def end_quick_activation(self) -> None:
        if not self._quick_mode:
            return
        self._quick_mode = False
        self._sync_selection()

    def _sync_selection(self) -> None:
        self.surface.set_selected(self._selected)

        # Chrome theming follows the selection, but not mid quick-activation
        if self._quick_mode:
            return
        entry = self.selected_entry
        self.surface.set_chrome_class(entry.css_class if entry else "")
