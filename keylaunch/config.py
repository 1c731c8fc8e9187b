"""
keylaunch - Main Ignis Configuration

This file is the entry point for Ignis. It loads settings, sets up the
configured search modules and creates the launcher window.

Usage:
  ignis init -c /path/to/keylaunch/config.py
  ignis toggle-window keylaunch
"""

from gi.repository import GLib
from ignis.app import IgnisApp
from loguru import logger

from keylaunch.panels.search import SearchPanel
from keylaunch.search import (
    ActivationController,
    ModuleRegistry,
    QueryOrchestrator,
    ResultList,
    Session,
)
from keylaunch.search.modules import AVAILABLE_MODULES, ApplicationsModule
from keylaunch.services.history import HistoryStore
from keylaunch.utils.helpers import config_dir, ensure_user_style, load_settings


def create_launcher(settings: dict) -> SearchPanel:
    """Wire settings → modules → orchestrator → result list → session."""
    history = HistoryStore()
    registry = ModuleRegistry.from_settings(settings, AVAILABLE_MODULES, history=history)

    panel = SearchPanel(settings)
    panel.create_window()

    results = ResultList.from_settings(panel, settings)
    orchestrator = QueryOrchestrator(
        registry,
        on_results=lambda generation, entries: results.replace(entries),
        schedule=GLib.idle_add,
        on_busy=panel.set_busy,
        max_results=settings["search"]["max_results"],
    )
    session = Session(orchestrator, panel)
    activation = ActivationController(
        results,
        session,
        history=history,
        close_after_activation=settings["launcher"]["close_after_activation"],
    )
    panel.bind(session, results, activation)

    for module in registry:
        if isinstance(module, ApplicationsModule):
            panel.on_show.append(module.refresh)

    return panel


# Get Ignis app instance
app = IgnisApp.get_default()

# The default stylesheet is written on first run and then left to the user
style_path = ensure_user_style(config_dir() / "style.css")
try:
    app.apply_css(str(style_path))
except Exception as e:
    logger.warning(f"Could not load {style_path}: {e}")

launcher = create_launcher(load_settings())

logger.info("keylaunch initialized successfully")
