"""
Web Search Module - Offer a web search for the typed term.

The entry always sorts below organic matches, so it is only the top row
when nothing else matched. Engine name and URL template come from the
[modules.websearch] settings block:

    [modules.websearch]
    prefix = "g "
    engine = "Google"
    url = "https://www.google.com/search?q={query}"
"""

import shlex
import urllib.parse

from keylaunch.search.module import CancelToken, Entry, Matching, SearchModule

DEFAULT_ENGINE = "Google"
DEFAULT_URL = "https://www.google.com/search?q={query}"


class WebSearchModule(SearchModule):
    """Open a web search for the term in the browser."""

    name = "websearch"

    def __init__(self, engine: str = DEFAULT_ENGINE, url: str = DEFAULT_URL, **kwargs):
        super().__init__(**kwargs)
        self.engine = engine
        self.url = url

    @classmethod
    def options(cls, config: dict) -> dict:
        options = super().options(config)
        options["engine"] = config.get("engine", DEFAULT_ENGINE)
        options["url"] = config.get("url", DEFAULT_URL)
        return options

    def entries(self, token: CancelToken, term: str) -> list[Entry]:
        if not term or not self.accepts(term):
            return []

        query = self.strip_prefix(term)
        if not query.strip():
            return []

        url = self.url.replace("{query}", urllib.parse.quote_plus(query))
        return [Entry(
            label=f"Search with {self.engine}",
            sub="Websearch",
            exec=f"xdg-open {shlex.quote(url)}",
            css_class="websearch",
            icon="web-browser",
            matching=Matching.ALWAYS_BOTTOM,
        )]
