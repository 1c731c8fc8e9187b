"""
Calculator Module - Inline math evaluation in search.

Triggers on its prefix ("=" by default). Uses simpleeval for safe
expression evaluation (no access to builtins, filesystem, or imports).
Activating the result copies it with wl-copy.
"""

import math
import shlex

from loguru import logger
from simpleeval import InvalidExpression, simple_eval

from keylaunch.search.module import CancelToken, Entry, SearchModule

FUNCTIONS = {
    "sqrt": math.sqrt,
    "abs": abs,
    "round": round,
    "sin": math.sin,
    "cos": math.cos,
    "tan": math.tan,
    "log": math.log,
    "log10": math.log10,
    "pow": pow,
    "min": min,
    "max": max,
}

NAMES = {
    "pi": math.pi,
    "e": math.e,
}


def format_result(result) -> str:
    """Drop the fraction from whole floats."""
    if isinstance(result, float) and result.is_integer():
        return str(int(result))
    return str(result)


class CalculatorModule(SearchModule):
    """Evaluate math expressions."""

    name = "calculator"

    def entries(self, token: CancelToken, term: str) -> list[Entry]:
        if not term or not self.accepts(term):
            return []

        expr = self.strip_prefix(term).strip()
        if not expr:
            return []

        try:
            result = simple_eval(expr, functions=FUNCTIONS, names=NAMES)
            # str() of huge ints raises ValueError past the digit limit
            display = format_result(result)
        except InvalidExpression:
            return []
        except (SyntaxError, TypeError, ValueError, ZeroDivisionError, OverflowError) as e:
            logger.debug(f"Could not evaluate {expr!r}: {e}")
            return []

        return [Entry(
            label=display,
            sub=f"= {expr}",
            exec=f"wl-copy {shlex.quote(display)}",
            css_class="calculator",
            icon="accessories-calculator",
        )]
