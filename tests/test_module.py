"""
Tests for the module contract: entries, eligibility and setup.
"""

import dataclasses

import pytest

from keylaunch.search import CancelToken, Entry, Matching
from keylaunch.search.modules import WebSearchModule


class TestEntry:
    def test_entry_is_immutable(self):
        entry = Entry(label="Firefox")
        with pytest.raises(dataclasses.FrozenInstanceError):
            entry.label = "Chromium"

    def test_defaults(self):
        entry = Entry(label="Firefox")
        assert entry.matching is Matching.NORMAL
        assert entry.sub == ""
        assert entry.drag_drop is False

    def test_normal_sorts_before_always_bottom(self):
        assert Matching.NORMAL < Matching.ALWAYS_BOTTOM


class TestCancelToken:
    def test_starts_uncancelled(self):
        assert CancelToken().cancelled is False

    def test_cancel_sets_flag(self):
        token = CancelToken()
        token.cancel()
        assert token.cancelled is True


class TestEligibility:
    """A prefixed module needs the prefix plus min_length more characters."""

    def test_unprefixed_accepts_anything(self, make_module):
        module = make_module("apps")
        assert module.accepts("x") is True
        assert module.accepts("g cats") is True

    @pytest.mark.parametrize("term, expected", [
        ("g ", False),
        ("g c", False),
        ("g ca", True),
        ("g cats", True),
        ("cats", False),
        ("xg cats", False),
    ])
    def test_prefixed_with_min_length_two(self, make_module, term, expected):
        module = make_module("web", prefix="g ", min_length=2)
        assert module.accepts(term) is expected

    def test_min_length_zero_accepts_bare_prefix(self, make_module):
        module = make_module("switch", prefix="/", min_length=0)
        assert module.accepts("/") is True

    def test_strip_prefix(self, make_module):
        module = make_module("web", prefix="g ")
        assert module.strip_prefix("g cats") == "cats"
        assert module.strip_prefix("cats") == "cats"

    def test_with_prefix_adds_missing_prefix(self, make_module):
        module = make_module("web", prefix="g ")
        assert module.with_prefix("cats") == "g cats"
        assert module.with_prefix("g cats") == "g cats"


class TestSetup:
    def test_absent_block_disables(self):
        assert WebSearchModule.setup(None) is None

    def test_disabled_block_disables(self):
        assert WebSearchModule.setup({"enabled": False, "prefix": "g "}) is None

    def test_reads_common_options(self):
        module = WebSearchModule.setup({"prefix": "g ", "switcher_exclusive": True, "min_length": 3})
        assert module.prefix == "g "
        assert module.switcher_exclusive is True
        assert module.min_length == 3

    def test_empty_block_uses_defaults(self):
        module = WebSearchModule.setup({})
        assert module.prefix == ""
        assert module.switcher_exclusive is False
        assert module.min_length == 2
