"""
Applications Module - Fuzzy search over installed desktop applications.

Uses rapidfuzz weighted ratio against app names for typo-tolerant search,
nudged by usage frecency so frequently launched apps win close calls.

The app list is snapshotted into plain entries on the UI thread (setup and
refresh()) because module calls run on worker threads and GObject state is
not thread-safe.
"""

import re
from typing import Callable, Optional, Sequence

from rapidfuzz import fuzz, process, utils

from keylaunch.search.module import CancelToken, Entry, SearchModule

# Desktop entry field codes (%f, %U, ...) that must not reach the shell
FIELD_CODES = re.compile(r"\s*%[fFuUdDnNickvm]")

# Frecency can add at most this many points to a 0-100 fuzzy score
MAX_BIAS = 20.0


def installed_apps() -> list:
    """Applications known to Ignis."""
    from ignis.services.applications import ApplicationsService
    return list(ApplicationsService.get_default().apps)


class ApplicationsModule(SearchModule):
    """Search installed applications with fuzzy matching."""

    name = "applications"

    def __init__(self, max_results: int = 30, fuzzy_threshold: int = 50,
                 apps: Optional[Callable[[], Sequence]] = None, **kwargs):
        super().__init__(**kwargs)
        self.max_results = max_results
        self.fuzzy_threshold = fuzzy_threshold
        self._load_apps = apps or installed_apps
        self._apps: list[tuple[str, Entry]] = []
        self.history = None
        self.refresh()

    @classmethod
    def options(cls, config: dict) -> dict:
        options = super().options(config)
        options["max_results"] = int(config.get("max_results", 30))
        options["fuzzy_threshold"] = int(config.get("fuzzy_threshold", 50))
        return options

    def attach(self, registry) -> None:
        self.history = registry.history

    def refresh(self) -> None:
        """Re-read the installed application list. Call on the UI thread."""
        self._apps = [(app.name, self._app_to_entry(app)) for app in self._load_apps()]

    def entries(self, token: CancelToken, term: str) -> list[Entry]:
        if not term or not self.accepts(term):
            return []

        query = self.strip_prefix(term).strip()
        if not query:
            return []

        apps = self._apps
        choices = {i: name for i, (name, _entry) in enumerate(apps)}
        matches = process.extract(
            query,
            choices,
            scorer=fuzz.WRatio,
            processor=utils.default_process,
            limit=None,
            score_cutoff=self.fuzzy_threshold,
        )
        if token.cancelled:
            return []

        bias = self.history.scores() if self.history is not None else {}

        # matches: list of (matched_string, score, key)
        ranked = []
        for position, (_name, score, key) in enumerate(matches):
            entry = apps[key][1]
            boost = min(bias.get(entry.exec, 0.0) / 50.0, MAX_BIAS)
            ranked.append((-(score + boost), position, entry))

        ranked.sort(key=lambda item: item[:2])
        return [entry for _key, _position, entry in ranked[:self.max_results]]

    def _app_to_entry(self, app) -> Entry:
        exec_str = FIELD_CODES.sub("", getattr(app, "exec_string", "") or "").strip()
        return Entry(
            label=app.name,
            sub=app.description or "",
            exec=exec_str,
            css_class="applications",
            icon=app.icon or "",
        )
