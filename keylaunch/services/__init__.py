# keylaunch Services Package
"""
Backend services for the keylaunch launcher.

Services handle data persistence used to bias module ranking.
"""

from .history import HistoryStore

__all__ = ["HistoryStore"]
