# keylaunch Panels Package
"""
GTK panel implementations.

The search panel draws the result list and forwards input to the core.
"""

from .search import SearchPanel

__all__ = ["SearchPanel"]
