# src/caserunner/dumper.py

"""
One-line rendering of values for diagnostic messages.
"""

from collections.abc import Mapping
from typing import Any

from rich.pretty import pretty_repr

# Wide enough that rich never wraps onto a second line.
ONE_LINE_WIDTH = 100_000
MAX_STRING = 200


def render_one_line(value: Any) -> str:
    """Render ``value`` as a single line of text."""
    return pretty_repr(value, max_width=ONE_LINE_WIDTH, max_string=MAX_STRING)


def render_args(params: Mapping[str, Any] | tuple | list) -> str:
    """Render a data set as a call argument list, e.g. ``(1, 2)`` or ``(a=1, b=2)``."""
    if isinstance(params, Mapping):
        parts = [f"{key}={render_one_line(value)}" for key, value in params.items()]
    else:
        parts = [render_one_line(value) for value in params]
    return "(" + ", ".join(parts) + ")"


# 🔼⚙️
