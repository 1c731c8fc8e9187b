"""
Shared test fixtures for the keylaunch test suite.

Provides temporary database, settings and commands files that use real
file I/O, plus headless stand-ins for the GTK side: a recording render
surface, a window, a queue playing the UI thread and an executor whose
module calls complete only when a test says so.
"""

import sqlite3
from concurrent.futures import Future
from types import SimpleNamespace

import pytest
import toml

from keylaunch.search import (
    ActivationController,
    Entry,
    ModuleRegistry,
    QueryOrchestrator,
    RenderSurface,
    ResultList,
    SearchModule,
    Session,
    WindowControl,
)


class FakeSurface(RenderSurface):
    """Records everything the result list pushes."""

    def __init__(self):
        self.rows = []
        self.selected = None
        self.list_visible = None
        self.chrome_class = None
        self.busy = False
        self.chrome_history = []

    def replace_rows(self, rows):
        self.rows = list(rows)

    def set_selected(self, index):
        self.selected = index

    def set_list_visible(self, visible):
        self.list_visible = visible

    def set_chrome_class(self, css_class):
        self.chrome_class = css_class
        self.chrome_history.append(css_class)

    def set_busy(self, busy):
        self.busy = busy


class FakeWindow(WindowControl):
    def __init__(self):
        self.visible = False
        self.clears = 0

    def set_visible(self, visible):
        self.visible = visible

    def clear_search(self):
        self.clears += 1


class UiQueue:
    """Plays the UI thread: callbacks run only when drained."""

    def __init__(self):
        self.calls = []

    def __call__(self, fn, *args):
        self.calls.append((fn, args))
        return 0

    def drain(self):
        while self.calls:
            fn, args = self.calls.pop(0)
            fn(*args)


class ManualExecutor:
    """Executor whose submitted calls run only when the test runs them."""

    def __init__(self):
        self.pending = []

    def submit(self, fn, *args):
        future = Future()
        self.pending.append((future, fn, args))
        return future

    def run(self, index=0):
        future, fn, args = self.pending.pop(index)
        if future.set_running_or_notify_cancel():
            try:
                future.set_result(fn(*args))
            except Exception as e:
                future.set_exception(e)

    def run_all(self):
        while self.pending:
            self.run()

    def shutdown(self, wait=True, cancel_futures=False):
        for future, _fn, _args in self.pending:
            future.cancel()
        self.pending = []


class StubModule(SearchModule):
    """Module returning canned entries (or raising)."""

    def __init__(self, name, entries=(), error=None, **kwargs):
        super().__init__(**kwargs)
        self.name = name
        self._entries = list(entries)
        self.error = error
        self.terms = []
        self.tokens = []

    def entries(self, token, term):
        self.terms.append(term)
        self.tokens.append(token)
        if self.error is not None:
            raise self.error
        if not self.accepts(term):
            return []
        return list(self._entries)


@pytest.fixture
def make_module():
    """Factory for stub modules."""
    def factory(name, labels=(), **kwargs):
        entries = kwargs.pop("entries", None)
        if entries is None:
            entries = [Entry(label=label, exec=f"run {label}", css_class=name) for label in labels]
        return StubModule(name, entries=entries, **kwargs)
    return factory


@pytest.fixture
def surface():
    return FakeSurface()


@pytest.fixture
def window():
    return FakeWindow()


@pytest.fixture
def ui_queue():
    return UiQueue()


@pytest.fixture
def manual_executor():
    return ManualExecutor()


@pytest.fixture
def make_launcher(surface, window, ui_queue, manual_executor):
    """Wire the whole core around the given modules, headless."""
    def factory(*modules, always_show=False, close_after_activation=True,
                history=None, max_results=0):
        registry = ModuleRegistry(history=history)
        for module in modules:
            registry.register(module)
        for module in registry:
            module.attach(registry)

        results = ResultList(surface, always_show=always_show)
        published = []

        def on_results(generation, entries):
            published.append(generation)
            results.replace(entries)

        orchestrator = QueryOrchestrator(
            registry,
            on_results=on_results,
            schedule=ui_queue,
            on_busy=surface.set_busy,
            max_results=max_results,
            executor=manual_executor,
        )
        session = Session(orchestrator, window)
        executed = []
        activation = ActivationController(
            results,
            session,
            execute=executed.append,
            history=history,
            close_after_activation=close_after_activation,
        )
        return SimpleNamespace(
            registry=registry,
            results=results,
            orchestrator=orchestrator,
            session=session,
            activation=activation,
            executed=executed,
            published=published,
            surface=surface,
            window=window,
            ui=ui_queue,
            executor=manual_executor,
        )
    return factory


@pytest.fixture
def tmp_db(tmp_path):
    """Create a real SQLite database with HistoryStore-compatible schema."""
    db_path = tmp_path / "history.db"
    conn = sqlite3.connect(str(db_path))
    conn.execute("""
        CREATE TABLE IF NOT EXISTS history (
            key TEXT PRIMARY KEY,
            launch_count INTEGER DEFAULT 0,
            last_launch INTEGER,
            created_at INTEGER
        )
    """)
    conn.commit()
    conn.close()
    return db_path


@pytest.fixture
def tmp_settings(tmp_path):
    """Create a real settings TOML file with all sections."""
    settings_path = tmp_path / "settings.toml"
    data = {
        "launcher": {"close_after_activation": False},
        "search": {"max_results": 40, "min_prefixed_length": 3},
        "list": {"always_show": True},
        "activation": {"keys": ["1", "2", "3"]},
        "modules": {
            "websearch": {"prefix": "g ", "engine": "DuckDuckGo",
                          "url": "https://duckduckgo.com/?q={query}"},
            "calculator": {"prefix": "=", "enabled": False},
        },
    }
    settings_path.write_text(toml.dumps(data))
    return settings_path


@pytest.fixture
def tmp_commands(tmp_path):
    """Create a real commands TOML file with test entries."""
    commands_path = tmp_path / "commands.toml"
    data = {
        "commands": {
            "lock": {
                "description": "Lock screen",
                "exec": "hyprlock",
                "icon": "system-lock-screen",
            },
            "suspend": {
                "description": "Suspend system",
                "exec": "systemctl suspend",
                "icon": "system-suspend",
            },
        }
    }
    commands_path.write_text(toml.dumps(data))
    return commands_path
