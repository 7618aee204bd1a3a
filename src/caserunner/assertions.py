# src/caserunner/assertions.py

"""
Assertion helpers, including the expected-exception checker used by the
test method executor.
"""

import builtins
import importlib
import re
from collections.abc import Callable, Mapping
from typing import Any

import structlog

from caserunner.dumper import render_one_line
from caserunner.environment import RunContext
from caserunner.exceptions import AssertionFailure, TestCaseError

log = structlog.get_logger("assertions")

# Message pattern placeholders.
PLACEHOLDERS = {
    "%%": "%",
    "%a%": r"[^\r\n]+",
    "%a?%": r"[^\r\n]*",
    "%A%": r".+",
    "%A?%": r".*",
    "%s%": r"[\t ]+",
    "%s?%": r"[\t ]*",
    "%S%": r"\S+",
    "%S?%": r"\S*",
    "%c%": r"[^\r\n]",
    "%d%": r"[0-9]+",
    "%d?%": r"[0-9]*",
    "%i%": r"[+-]?[0-9]+",
    "%f%": r"[+-]?\.?\d+\.?\d*(?:[Ee][+-]?\d+)?",
    "%h%": r"[0-9a-fA-F]+",
    "%w%": r"[0-9a-zA-Z_]+",
}
_PLACEHOLDER_PATTERN = re.compile(r"%(?:[aAsSdcifhw]\??)?%")


def _count(context: RunContext | None) -> None:
    if context is not None:
        context.count_assertion()


def pattern_to_regex(pattern: str) -> re.Pattern:
    """Translate a message pattern with ``%x%`` placeholders into a compiled regex."""
    parts = []
    position = 0
    for match in _PLACEHOLDER_PATTERN.finditer(pattern):
        parts.append(re.escape(pattern[position:match.start()]))
        placeholder = match.group(0)
        if placeholder in PLACEHOLDERS:
            parts.append(PLACEHOLDERS[placeholder])
        else:
            parts.append(re.escape(placeholder))
        position = match.end()
    parts.append(re.escape(pattern[position:]))
    return re.compile("".join(parts), re.DOTALL)


def is_matching(pattern: str, actual: str) -> bool:
    """Check ``actual`` against ``pattern``; surrounding whitespace is ignored."""
    return pattern_to_regex(pattern.strip()).fullmatch(actual.strip()) is not None


def resolve_exception_class(
    kind: type[BaseException] | str,
    namespace: Mapping[str, Any] | None = None,
) -> type[BaseException]:
    """
    Resolve an exception class from a class object or a name.

    Names are looked up in ``namespace`` (usually the test case's module
    globals), then in builtins, and dotted names are imported.
    """
    if isinstance(kind, type):
        if issubclass(kind, BaseException):
            return kind
        raise TestCaseError(f"Class {kind.__qualname__} is not an exception class.")

    resolved = None
    if namespace is not None and kind in namespace:
        resolved = namespace[kind]
    elif hasattr(builtins, kind):
        resolved = getattr(builtins, kind)
    elif "." in kind:
        module_name, _, attr = kind.rpartition(".")
        try:
            resolved = getattr(importlib.import_module(module_name), attr, None)
        except ImportError as e:
            raise TestCaseError(f"Cannot import exception class '{kind}': {e}") from e

    if not (isinstance(resolved, type) and issubclass(resolved, BaseException)):
        raise TestCaseError(f"Unknown exception class '{kind}'.")
    return resolved


def _lookup_expected(
    kind: type[BaseException] | str,
    namespace: Mapping[str, Any] | None,
) -> type[BaseException] | None:
    try:
        return resolve_exception_class(kind, namespace)
    except TestCaseError as e:
        if not isinstance(kind, str):
            raise
        # An unresolvable name can never match, so every outcome is a mismatch.
        log.debug("Expected exception class is unknown", exception=kind, error=str(e))
        return None


def expect(
    fn: Callable[[], Any],
    kind: type[BaseException] | str,
    pattern: str | None = None,
    context: RunContext | None = None,
    namespace: Mapping[str, Any] | None = None,
) -> BaseException:
    """
    Call ``fn`` and check that it raises ``kind`` with a message matching ``pattern``.

    ``kind`` given by a name that cannot be resolved matches nothing.

    Returns:
        The raised exception when it matches.

    Raises:
        AssertionFailure: nothing was raised, the wrong class was raised, or
            the message does not match.
    """
    _count(context)
    expected = _lookup_expected(kind, namespace)
    name = expected.__qualname__ if expected is not None else kind

    try:
        fn()
    except Exception as e:
        if expected is None or not isinstance(e, expected):
            message = f" ({e})" if str(e) else ""
            raise AssertionFailure(
                f"{name} was expected but got {type(e).__qualname__}{message}",
                expected=expected or kind,
                actual=e,
            ) from e
        if pattern and not is_matching(pattern, str(e)):
            raise AssertionFailure(
                f"{name} with a message matching {pattern!r} was expected but got {str(e)!r}",
                expected=pattern,
                actual=str(e),
            ) from e
        log.debug("Expected exception was raised", exception=name)
        return e

    raise AssertionFailure(f"{name} was expected, but none was thrown.", expected=expected or kind)


def equal(expected: Any, actual: Any, context: RunContext | None = None) -> None:
    """Assert ``actual == expected``."""
    _count(context)
    if actual != expected:
        raise AssertionFailure(
            f"{render_one_line(actual)} should be {render_one_line(expected)}",
            expected=expected,
            actual=actual,
        )


def true(value: Any, context: RunContext | None = None) -> None:
    """Assert that ``value`` is exactly ``True``."""
    _count(context)
    if value is not True:
        raise AssertionFailure(f"{render_one_line(value)} should be True", expected=True, actual=value)


# 🔼⚙️
