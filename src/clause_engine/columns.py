"""
Cell and header helpers shared by the loader and the engine.

Two small tools live here:
    - Column Resolver: finds a logical column in a header row whose labels
      drift between spreadsheets ("PC_ID", "pc id", "PC  Id").
    - List Parser: splits a delimited cell ("1, 2;3|4") into tokens, with
      numeric variants used for clause and tag identifiers.

Nothing here raises on bad data. Unknown columns come back as -1 and
malformed tokens are dropped one by one.
"""

import math
import re
from typing import Any, Iterable, List, Optional, Sequence, Union

Number = Union[int, float]

NOT_FOUND = -1

_SPLIT_RE = re.compile(r"[,;|]+")
_WHITESPACE_RE = re.compile(r"\s+")


def canon(value: Any) -> str:
    """
    Canonical form used for every name comparison.

    Lowercases, treats underscores as spaces, collapses whitespace runs
    and trims. None becomes the empty string.

    Examples:
        canon("  Object_Name ") -> "object name"
        canon("No   Display")   -> "no display"
    """
    if value is None:
        return ""
    text = str(value).replace("_", " ")
    return _WHITESPACE_RE.sub(" ", text).strip().lower()


def _clean_header(label: Any) -> str:
    if label is None:
        return ""
    text = str(label).replace("_", " ")
    return _WHITESPACE_RE.sub(" ", text).strip()


def find_column(headers: Sequence[Any], pattern: str) -> int:
    """
    Locate a column by whole-label regular expression.

    Args:
        headers: Raw header row
        pattern: Regex matched against the cleaned label, e.g. r"pc\\s*id"

    Returns:
        Zero-based index of the first matching column, or NOT_FOUND (-1)
    """
    rx = re.compile(pattern, re.IGNORECASE)
    for index, label in enumerate(headers):
        if rx.fullmatch(_clean_header(label)):
            return index
    return NOT_FOUND


def find_column_or(headers: Sequence[Any], pattern: str, fallback: int) -> int:
    """Like find_column, but returns `fallback` when nothing matches."""
    index = find_column(headers, pattern)
    return fallback if index == NOT_FOUND else index


def to_number(value: Any) -> Optional[Number]:
    """
    Coerce a cell or token to a number.

    Integral values come back as int so that "3", 3 and 3.0 all compare
    and hash the same. Non-numeric and non-finite input returns None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        token = str(value).strip()
        if not token:
            return None
        try:
            number = float(token)
        except ValueError:
            return None
    if not math.isfinite(number):
        return None
    if number.is_integer():
        return int(number)
    return number


def parse_list(cell: Any) -> List[str]:
    """Split a delimited cell on runs of , ; | into trimmed, non-empty tokens."""
    if cell is None:
        return []
    tokens = _SPLIT_RE.split(str(cell))
    return [token.strip() for token in tokens if token.strip()]


def unique_numbers(values: Iterable[Any]) -> List[Number]:
    """Coerce to numbers, drop failures, de-duplicate keeping first-seen order."""
    seen = set()
    ordered: List[Number] = []
    for value in values:
        number = to_number(value)
        if number is None or number in seen:
            continue
        seen.add(number)
        ordered.append(number)
    return ordered


def parse_ids(cell: Any) -> List[Number]:
    """Numeric list parser: ordered, de-duplicated identifiers from one cell."""
    return unique_numbers(parse_list(cell))


def sorted_ids(values: Iterable[Any]) -> List[Number]:
    """Numeric set: de-duplicated identifiers sorted ascending."""
    return sorted(unique_numbers(values))
