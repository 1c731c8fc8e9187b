"""
Tests for the WebSearchModule.

Tests URL construction, prefix handling and ranking hint.
"""

from keylaunch.search import CancelToken, Matching
from keylaunch.search.modules import WebSearchModule


def _results(module, term):
    return module.entries(CancelToken(), term)


class TestWebSearchMatching:
    """Test which terms produce a search entry."""

    def test_unprefixed_matches_any_term(self):
        module = WebSearchModule()
        assert len(_results(module, "firefox")) == 1

    def test_empty_term(self):
        assert _results(WebSearchModule(), "") == []

    def test_prefix_required(self):
        module = WebSearchModule(prefix="g ")
        assert _results(module, "cats") == []

    def test_prefix_only_gives_nothing(self):
        module = WebSearchModule(prefix="g ")
        assert _results(module, "g ") == []

    def test_too_short_after_prefix(self):
        module = WebSearchModule(prefix="g ", min_length=2)
        assert _results(module, "g c") == []

    def test_whitespace_only_query(self):
        module = WebSearchModule(prefix="g ", min_length=2)
        assert _results(module, "g    ") == []


class TestWebSearchResults:
    """Test entry construction."""

    def test_google_url_construction(self):
        results = _results(WebSearchModule(prefix="g "), "g cats")
        assert len(results) == 1
        assert results[0].label == "Search with Google"
        assert "https://www.google.com/search?q=cats" in results[0].exec
        assert results[0].exec.startswith("xdg-open ")

    def test_term_is_url_escaped(self):
        results = _results(WebSearchModule(), "cats & dogs?")
        assert "q=cats+%26+dogs%3F" in results[0].exec

    def test_always_bottom(self):
        results = _results(WebSearchModule(), "cats")
        assert results[0].matching is Matching.ALWAYS_BOTTOM
        assert results[0].css_class == "websearch"

    def test_custom_engine(self):
        module = WebSearchModule.setup({
            "prefix": "d ",
            "engine": "DuckDuckGo",
            "url": "https://duckduckgo.com/?q={query}",
        })
        results = _results(module, "d python")
        assert results[0].label == "Search with DuckDuckGo"
        assert "https://duckduckgo.com/?q=python" in results[0].exec

    def test_other_braces_in_url_left_alone(self):
        module = WebSearchModule(url="https://example.org/{lang}/search?q={query}")
        results = _results(module, "cats")
        assert "https://example.org/{lang}/search?q=cats" in results[0].exec
