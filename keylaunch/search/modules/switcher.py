"""
Switcher Module - Pick one module to search exclusively.

Lists the other configured modules by name. Activating one pins it, so
the rest of the session only queries that module.
"""

from keylaunch.search.module import CancelToken, Entry, SearchModule

SWITCHER_CLASS = "switcher"


class SwitcherModule(SearchModule):
    """List modules that can be pinned."""

    name = "switcher"
    default_min_length = 0

    def __init__(self, **kwargs):
        kwargs.setdefault("min_length", self.default_min_length)
        super().__init__(**kwargs)
        self.targets: list[str] = []

    def attach(self, registry) -> None:
        self.targets = [name for name in registry.names() if name != self.name]

    def entries(self, token: CancelToken, term: str) -> list[Entry]:
        if not self.accepts(term):
            return []

        q = self.strip_prefix(term).strip().lower()
        return [
            Entry(
                label=name,
                sub="Switch to module",
                exec=name,
                css_class=SWITCHER_CLASS,
                icon="view-list-symbolic",
            )
            for name in self.targets
            if q in name.lower()
        ]
