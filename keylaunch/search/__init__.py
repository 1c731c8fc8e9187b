"""
Search package - Module contract, query orchestration and the result list.

Terms are fanned out to configured modules (applications, calculator,
web search, ...), merged by rank, and shown in a selectable list.
"""

from .activation import ActivationController
from .module import CancelToken, Entry, Matching, SearchModule
from .orchestrator import QueryOrchestrator, merge_results
from .registry import ModuleRegistry
from .results import RenderSurface, ResultList, Row
from .session import Session, SessionState, WindowControl

__all__ = [
    "ActivationController",
    "CancelToken",
    "Entry",
    "Matching",
    "ModuleRegistry",
    "QueryOrchestrator",
    "RenderSurface",
    "ResultList",
    "Row",
    "SearchModule",
    "Session",
    "SessionState",
    "WindowControl",
    "merge_results",
]
