# src/caserunner/annotations.py

"""
Reads per-method test declarations.

A test method declares its data providers and expected exception either
with decorators::

    @data_provider("provide_sums")
    @throws(ValueError, "bad %a%")
    def test_add(self, a, b): ...

or with docstring tags::

    def testAdd(self, a, b):
        \"\"\"
        @dataProvider provide_sums
        @throws ValueError bad %a%
        \"\"\"

Both sources are merged into a single :class:`MethodInfo`.
"""

import inspect
import re
from collections.abc import Callable
from typing import Any

from attrs import define, field

INFO_ATTRIBUTE = "__caserunner_info__"
DATA_PROVIDER = "dataprovider"
THROWS = "throws"

_TAG_PATTERN = re.compile(r"^[ \t*]*@(\w+)(?:[ \t]+(.*?))?[ \t]*$", re.MULTILINE)


@define(frozen=True, slots=True)
class MethodInfo:
    """Declarations attached to a single test method."""

    data_provider: tuple[str, ...] = field(default=())
    # Raw @throws declarations; more than one is a declaration error.
    throws: tuple[Any, ...] = field(default=())

    @property
    def expects_exception(self) -> bool:
        return bool(self.throws)


def _normalize_tag(name: str) -> str:
    return name.replace("_", "").lower()


def parse_doc_comment(doc: str | None) -> dict[str, str | list[str]]:
    """
    Parse ``@tag value`` lines of a docstring.

    Tag names are lowercased (``@dataProvider`` becomes ``dataprovider``).
    A tag without a value maps to ``""``; a repeated tag becomes a list.
    """
    options: dict[str, str | list[str]] = {}
    if not doc:
        return options

    for match in _TAG_PATTERN.finditer(doc):
        name = _normalize_tag(match.group(1))
        value = (match.group(2) or "").strip()
        if name not in options:
            options[name] = value
        elif isinstance(options[name], list):
            options[name].append(value)
        else:
            options[name] = [options[name], value]
    return options


def _as_list(value: str | list[str] | None) -> list[str]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _declarations(func: Callable) -> dict[str, list]:
    declarations = getattr(func, INFO_ATTRIBUTE, None)
    if declarations is None:
        declarations = {DATA_PROVIDER: [], THROWS: []}
        setattr(func, INFO_ATTRIBUTE, declarations)
    return declarations


def data_provider(*names: str) -> Callable[[Callable], Callable]:
    """
    Declare one or more data providers for a test method.

    Each name is either a method of the test case or a data file reference
    (``"sums.ini, > 1"``). Stacked decorators keep top-to-bottom order.
    """
    def decorator(func: Callable) -> Callable:
        declarations = _declarations(func)
        # Decorators apply bottom-up; prepend so the topmost runs first.
        declarations[DATA_PROVIDER][:0] = list(names)
        return func

    return decorator


def throws(kind: type[BaseException] | str, pattern: str | None = None) -> Callable[[Callable], Callable]:
    """Declare that a test method must raise ``kind`` with a message matching ``pattern``."""
    def decorator(func: Callable) -> Callable:
        _declarations(func)[THROWS].append((kind, pattern))
        return func

    return decorator


def get_method_info(func: Callable) -> MethodInfo:
    """Collect docstring tags and decorator declarations for ``func``."""
    func = getattr(func, "__func__", func)
    tags = parse_doc_comment(inspect.getdoc(func))
    declarations = getattr(func, INFO_ATTRIBUTE, {})

    providers = _as_list(tags.get(DATA_PROVIDER)) + list(declarations.get(DATA_PROVIDER, []))
    expected = _as_list(tags.get(THROWS)) + list(declarations.get(THROWS, []))
    return MethodInfo(data_provider=tuple(providers), throws=tuple(expected))


def split_throws(declaration: Any) -> tuple[Any, str | None]:
    """
    Split a single @throws declaration into ``(kind, message_pattern)``.

    Docstring values are split on the first whitespace run:
    ``"ValueError bad input"`` gives ``("ValueError", "bad input")``.
    """
    if isinstance(declaration, tuple):
        kind, pattern = declaration
        return kind, pattern
    parts = re.split(r"\s+", declaration.strip(), maxsplit=1)
    return parts[0], (parts[1] if len(parts) > 1 else None)


def is_empty_throws(declaration: Any) -> bool:
    if isinstance(declaration, tuple):
        kind = declaration[0]
        return kind is None or (isinstance(kind, str) and not kind.strip())
    return not declaration.strip()


# 🔼⚙️
