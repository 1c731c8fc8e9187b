"""
Search Session - Show/hide lifecycle of the launcher window.

A SessionState is created on show() and dropped on hide(), so the term and
any pinned module never leak into the next session. Only the startup
measurement survives across sessions.
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional

from loguru import logger

from keylaunch.search.orchestrator import QueryOrchestrator


@dataclass
class SessionState:
    """State of one shown session."""
    shown_at: float
    term: str = ""
    pinned: Optional[str] = None  # single-process mode


class WindowControl(ABC):
    """The window operations a session drives."""

    @abstractmethod
    def set_visible(self, visible: bool) -> None:
        ...

    @abstractmethod
    def clear_search(self) -> None:
        ...


class Session:
    """Owns the current SessionState and routes terms to the orchestrator."""

    def __init__(self, orchestrator: QueryOrchestrator, window: WindowControl,
                 clock: Callable[[], float] = time.monotonic):
        self.orchestrator = orchestrator
        self.window = window
        self.clock = clock
        self.state: Optional[SessionState] = None
        self.measured = False

    @property
    def visible(self) -> bool:
        return self.state is not None

    @property
    def pinned(self) -> Optional[str]:
        return self.state.pinned if self.state else None

    def show(self) -> None:
        """Show the launcher with an empty term; no-op while visible."""
        if self.state is not None:
            return

        self.state = SessionState(shown_at=self.clock())
        self.window.clear_search()
        self.orchestrator.search("")
        self.window.set_visible(True)

    def hide(self) -> None:
        if self.state is None:
            return

        self.state = None
        self.orchestrator.cancel()
        self.window.set_visible(False)
        self.window.clear_search()

    def toggle(self) -> None:
        if self.visible:
            self.hide()
        else:
            self.show()

    def mark_measured(self) -> None:
        """Log time-to-focus for the first session only."""
        if self.measured or self.state is None:
            return
        self.measured = True
        elapsed_ms = (self.clock() - self.state.shown_at) * 1000
        logger.info(f"startup time: {elapsed_ms:.1f}ms")

    def search(self, term: str) -> Optional[int]:
        """Dispatch a new term; ignored while hidden."""
        if self.state is None:
            return None
        self.state.term = term
        return self.orchestrator.search(term, self.state.pinned)

    def pin(self, name: str) -> None:
        """Restrict dispatch to one module until unpinned or hidden."""
        if self.state is None:
            return
        if name not in self.orchestrator.registry:
            logger.warning(f"Cannot pin unknown module '{name}'")
            return

        logger.debug(f"Pinning module '{name}'")
        self.state.pinned = name
        self.window.clear_search()
        self.search("")

    def unpin(self) -> None:
        if self.state is None or self.state.pinned is None:
            return
        self.state.pinned = None
        self.search(self.state.term)
