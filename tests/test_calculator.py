"""
Tests for the calculator search module.

Uses real simpleeval (no mocking). Tests math evaluation, error handling,
and safety (no access to builtins/os).
"""

from keylaunch.search import CancelToken
from keylaunch.search.modules import CalculatorModule
from keylaunch.search.modules.calculator import format_result


def _calc(term, **kwargs):
    module = CalculatorModule(prefix="=", min_length=kwargs.pop("min_length", 1), **kwargs)
    return module.entries(CancelToken(), term)


class TestCalculatorMatching:
    """Test prefix matching for the = trigger."""

    def test_no_match_without_prefix(self):
        assert _calc("2+2") == []

    def test_no_match_bare_equals(self):
        assert _calc("=") == []

    def test_no_match_empty(self):
        assert _calc("") == []

    def test_respects_min_length(self):
        assert _calc("=7", min_length=2) == []


class TestCalculatorResults:
    """Test math expression evaluation."""

    def test_basic_addition(self):
        results = _calc("= 2 + 3")
        assert len(results) == 1
        assert results[0].label == "5"
        assert results[0].sub == "= 2 + 3"

    def test_float_result(self):
        results = _calc("= 1 / 3")
        assert results[0].label.startswith("0.333")

    def test_whole_float_drops_fraction(self):
        assert _calc("= 10 / 2")[0].label == "5"

    def test_functions_and_names(self):
        assert _calc("= sqrt(16)")[0].label == "4"
        assert _calc("= pi")[0].label.startswith("3.14159")

    def test_exec_copies_result(self):
        assert _calc("= 6 * 7")[0].exec == "wl-copy 42"


class TestCalculatorErrors:
    """Bad input yields no entry rather than an exception."""

    def test_invalid_expression(self):
        assert _calc("= ][invalid") == []

    def test_division_by_zero(self):
        assert _calc("= 1/0") == []

    def test_overflow(self):
        assert _calc("= 10**10000") == []

    def test_no_builtins(self):
        assert _calc("= __import__('os')") == []

    def test_result_too_long_to_display(self):
        assert _calc("=9**5000") == []


class TestFormatResult:
    def test_int_passthrough(self):
        assert format_result(3) == "3"

    def test_fraction_kept(self):
        assert format_result(2.5) == "2.5"
