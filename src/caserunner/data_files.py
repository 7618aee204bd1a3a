# src/caserunner/data_files.py

"""
Loads test data sets from external data files.

A data provider reference has the form ``[?] <file> [,] [query]``:

* ``file`` is resolved relative to the directory of the file that defines
  the test case (``.ini``, ``.toml`` and ``.json`` are understood);
* a leading ``?`` marks the file as optional, a missing optional file
  yields no data sets;
* ``query`` filters the named sections of the file, e.g. ``"mysql >= 5.6"``
  keeps ``[mysql 5.7]`` but drops ``[mysql 5.5]`` and ``[postgresql 9.6]``.
"""

import configparser
import json
import operator
import re
import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Any

import structlog

from caserunner.exceptions import DataProviderError

log = structlog.get_logger("data_files")

_ANNOTATION_PATTERN = re.compile(r"^(\??)\s*([^,\s]+)\s*,?\s*(\S.*)?$")
_QUERY_PART_PATTERN = re.compile(r"\s*,?\s*(<=|=<|==|!=|<>|>=|=>|<|>|=)?\s*([^\s,]+)")
_VERSION_PATTERN = re.compile(r"[0-9.]+")

OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    "<": operator.lt,
    "<=": operator.le,
    "=<": operator.le,
    "=": operator.eq,
    "==": operator.eq,
    "!=": operator.ne,
    "<>": operator.ne,
    ">=": operator.ge,
    "=>": operator.ge,
    ">": operator.gt,
}


def parse_annotation(annotation: str, file: str | Path) -> tuple[Path, str | None, bool]:
    """
    Split a data provider reference into ``(path, query, optional)``.

    ``path`` is resolved against the directory containing ``file``.
    """
    match = _ANNOTATION_PATTERN.match(annotation.strip())
    if not match:
        raise DataProviderError(f"Invalid @dataProvider value '{annotation}'.")
    optional, name, query = match.groups()
    return Path(file).parent / name, query, bool(optional)


def _parse_value(value: str) -> Any:
    """Convert an INI string value to int, float, bool or None where it looks like one."""
    value = value.strip()
    lowered = value.lower()
    if lowered in ("none", "null"):
        return None
    if lowered in ("true", "yes", "on"):
        return True
    if lowered in ("false", "no", "off"):
        return False
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        return value


def _read_ini(path: Path) -> dict[str, dict[str, Any]]:
    parser = configparser.ConfigParser(interpolation=None)
    parser.optionxform = str  # keep parameter names case-sensitive
    try:
        with path.open(encoding="utf-8") as fh:
            parser.read_file(fh)
    except configparser.Error as e:
        raise DataProviderError(f"Cannot parse data-provider file '{path}'.", path=str(path), details=e) from e
    return {
        section: {key: _parse_value(value) for key, value in parser.items(section)}
        for section in parser.sections()
    }


def _read_toml(path: Path) -> dict[str, dict[str, Any]]:
    try:
        with path.open("rb") as fh:
            data = tomllib.load(fh)
    except tomllib.TOMLDecodeError as e:
        raise DataProviderError(f"Cannot parse data-provider file '{path}'.", path=str(path), details=e) from e
    return {name: table for name, table in data.items() if isinstance(table, dict)}


def _read_json(path: Path) -> dict[str, dict[str, Any]]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise DataProviderError(f"Cannot parse data-provider file '{path}'.", path=str(path), details=e) from e
    if isinstance(data, list):
        data = {str(index): row for index, row in enumerate(data)}
    if not isinstance(data, dict):
        raise DataProviderError(f"Cannot parse data-provider file '{path}'.", path=str(path))
    return data


READERS: dict[str, Callable[[Path], dict[str, dict[str, Any]]]] = {
    ".ini": _read_ini,
    ".toml": _read_toml,
    ".json": _read_json,
}


def load(path: str | Path, query: str | None = None, optional: bool = False) -> list[dict[str, Any]]:
    """
    Load the data sets stored in ``path`` whose section names satisfy ``query``.

    Returns:
        A list of name-keyed data sets, in file order.
    """
    path = Path(path)
    if not path.is_file():
        if optional:
            log.debug("Optional data-provider file is missing", path=str(path), emoji_key="data")
            return []
        raise DataProviderError(f"Missing data-provider file '{path}'.", path=str(path))

    reader = READERS.get(path.suffix.lower())
    if reader is None:
        raise DataProviderError(
            f"Unsupported data-provider file '{path}'. Supported types: {sorted(READERS)}",
            path=str(path),
        )

    sections = reader(path)
    rows = [row for name, row in sections.items() if test_query(name, query)]
    log.debug(
        "Loaded data-provider file",
        path=str(path),
        query=query,
        sections=len(sections),
        selected=len(rows),
        emoji_key="data",
    )
    return rows


def _version(value: str) -> tuple[int, ...]:
    return tuple(int(part) for part in value.split(".") if part)


def _compare(left: str, op: str, right: str) -> bool:
    if _VERSION_PATTERN.fullmatch(left) and _VERSION_PATTERN.fullmatch(right):
        return OPERATORS[op](_version(left), _version(right))
    return OPERATORS[op](left, right)


def test_query(name: str, query: str | None) -> bool:
    """
    Check a section name against a query.

    The name is split into whitespace-separated tokens and each query part
    (``[operator] operand``) is compared with the token at the same position.
    """
    if not query:
        return True

    tokens = name.split()
    position = 0
    while position < len(query):
        match = _QUERY_PART_PATTERN.match(query, position)
        if not match:
            break
        position = match.end()
        op = match.group(1) or "="
        token = tokens.pop(0) if tokens else ""
        if not _compare(token, op, match.group(2)):
            return False
    return True


# Not a pytest test function.
test_query.__test__ = False


# 🔼⚙️
