"""
Launcher error types.

Ordinary query failures never surface as exceptions; they are absorbed at
the orchestrator boundary. Only structural problems raise.
"""


class LauncherError(Exception):
    """Base class for launcher errors."""


class RenderInvariantError(LauncherError):
    """The rendering surface was driven into an inconsistent state.

    Not recoverable: the shell terminates rather than keep showing a
    half-updated list.
    """
