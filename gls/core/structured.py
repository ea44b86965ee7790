"""Shape checks for decoded TOML/JSON.

``json.loads`` and ``tomllib.loads`` give back ``object``. Config loading and
release metadata parsing narrow it here once, then work with concrete types.
"""

from __future__ import annotations

from typing import Mapping, TypeGuard

StrDict = dict[str, object]


def is_str_dict(obj: object) -> TypeGuard[StrDict]:
    return isinstance(obj, dict) and all(isinstance(key, str) for key in obj)


def as_str_dict(obj: object) -> StrDict | None:
    return obj if is_str_dict(obj) else None


def get_str(table: Mapping[str, object], key: str) -> str | None:
    """``table[key]`` stripped; None when absent, blank or not a string."""
    match table.get(key):
        case str(text) if text.strip():
            return text.strip()
        case _:
            return None


def get_float(table: Mapping[str, object], key: str) -> float | None:
    """``table[key]`` as a float when it is a positive int or float.

    Booleans are rejected even though ``bool`` subclasses ``int``.
    """
    value = table.get(key)
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)) and value > 0:
        return float(value)
    return None


def get_table(table: Mapping[str, object], key: str) -> StrDict | None:
    return as_str_dict(table.get(key))
