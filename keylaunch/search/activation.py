"""
Activation Controller - Turns a selection plus a gesture into an action.

Activation runs the entry's exec line, records it in the usage history and
hides the launcher unless asked to stay open. A drag exports the entry's
file instead and never counts as an activation.
"""

from typing import Callable, Optional

from loguru import logger

from keylaunch.errors import RenderInvariantError
from keylaunch.search.module import Entry
from keylaunch.search.modules.switcher import SWITCHER_CLASS
from keylaunch.search.results import ResultList
from keylaunch.search.session import Session
from keylaunch.utils.helpers import run_exec, uri_list


class ActivationController:
    """Executes entries chosen from the result list."""

    def __init__(self, results: ResultList, session: Session,
                 execute: Callable[[str], None] = run_exec,
                 history=None,
                 close_after_activation: bool = True):
        self.results = results
        self.session = session
        self.execute = execute
        self.history = history
        self.close_after_activation = close_after_activation
        self._dragging = False

    @property
    def dragging(self) -> bool:
        return self._dragging

    def activate_selected(self, keep_open: bool = False) -> bool:
        """Activate key pressed."""
        entry = self.results.selected_entry
        if entry is None:
            return False
        return self.activate(entry, keep_open)

    def quick_activate(self, key: str, keep_open: bool = False) -> bool:
        """Activate the row bound to a quick-activation key."""
        entry = self.results.entry_for_key(key)
        if entry is None:
            return False
        return self.activate(entry, keep_open)

    def click(self, index: int, keep_open: bool = False) -> bool:
        """Primary click on a row (release, for drag-enabled rows)."""
        if self._dragging:
            logger.debug("Ignoring click during drag")
            return False
        return self.activate(self._row(index), keep_open)

    def activate(self, entry: Entry, keep_open: bool = False) -> bool:
        """
        Run an entry.

        Returns:
            True if something happened, False for entries with no action.
        """
        if entry.css_class == SWITCHER_CLASS:
            self.session.pin(entry.exec)
            return True

        if not entry.exec:
            return False

        self.execute(entry.exec)
        if self.history is not None:
            self.history.record(entry.exec)

        if self.close_after_activation and not keep_open and not self._dragging:
            self.session.hide()
        return True

    def begin_drag(self, index: int) -> Optional[bytes]:
        """
        Start dragging a row.

        Returns:
            The text/uri-list payload, or None if the row is not draggable.
        """
        entry = self._row(index)
        if not entry.drag_drop or not entry.drag_drop_data:
            return None
        self._dragging = True
        return uri_list(entry.drag_drop_data)

    def end_drag(self) -> None:
        self._dragging = False

    def _row(self, index: int) -> Entry:
        entries = self.results.entries
        if not 0 <= index < len(entries):
            raise RenderInvariantError(f"No displayed row {index}")
        return entries[index]
