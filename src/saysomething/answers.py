"""
Helpers for raw answer values.

Answers arrive JSON-like: str, int, float, bool, None or a list of those.
The validator and the aggregator both read answers through these helpers
so that "empty", "integer" and "selected options" mean the same thing
on the way in and on the way out.
"""

import math
import re
from types import MappingProxyType
from typing import Any, List, Mapping, Optional


# ASCII digits only, and short enough that int() never hits the digit limit.
_LEADING_INT_RE = re.compile(r"^\s*([+-]?[0-9]{1,20})(?![0-9])")


def is_empty_answer(value: Any) -> bool:
    """True for None, the empty string and empty sequences."""
    if value is None:
        return True
    if isinstance(value, (str, list, tuple)):
        return len(value) == 0
    return False


def parse_int_answer(value: Any) -> Optional[int]:
    """
    Parse an answer as an integer, or return None when it is not one.

    Strings are read by their leading integer ("3", " 4 ", "3.7" -> 3),
    finite floats are truncated toward zero. Booleans, sequences and
    anything else are not integers.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isfinite(value):
            return int(value)
        return None
    if isinstance(value, str):
        match = _LEADING_INT_RE.match(value)
        if match:
            return int(match.group(1))
    return None


def as_option_ids(value: Any) -> List[Any]:
    """Return a choice answer as a list; scalars become a singleton."""
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


def freeze_answers(data: Mapping[str, Any]) -> Mapping[str, Any]:
    """
    Deep-copy an answer set into a read-only form.

    Lists become tuples and mappings become read-only proxies, so neither
    the submitter's objects nor a reader of the stored copy can change it.
    """
    return _freeze(data)


def thaw_answers(value: Any) -> Any:
    """Plain dict/list copy of a frozen answer set, for JSON and YAML output."""
    if isinstance(value, Mapping):
        return {k: thaw_answers(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [thaw_answers(v) for v in value]
    return value
