"""
Search modules - Pluggable result providers.

Each module checks whether a term is addressed to it and returns entries.
"""

from .applications import ApplicationsModule
from .calculator import CalculatorModule
from .commands import CustomCommandsModule
from .switcher import SwitcherModule
from .websearch import WebSearchModule

AVAILABLE_MODULES = [
    ApplicationsModule,
    CalculatorModule,
    CustomCommandsModule,
    SwitcherModule,
    WebSearchModule,
]

__all__ = [
    "AVAILABLE_MODULES",
    "ApplicationsModule",
    "CalculatorModule",
    "CustomCommandsModule",
    "SwitcherModule",
    "WebSearchModule",
]
