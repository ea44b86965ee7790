"""Long option bookkeeping.

``set_long_options`` records the ``--name`` / ``--name=value`` tokens of a
run; ``list_long_options`` returns their names in first-seen order. Each
load of this module starts with an empty table.
"""

from __future__ import annotations

from collections.abc import Sequence

REQUIRES: tuple[str, ...] = ()

_options: list[str] = []


def set_long_options(args: Sequence[str]) -> bool:
    """Record long options from ``args``; False if one has an empty name."""
    names: list[str] = []
    for arg in args:
        if arg == "--" or not arg.startswith("--"):
            continue
        name = arg.split("=", 1)[0]
        if name == "--":
            return False
        if name not in names:
            names.append(name)
    _options[:] = names
    return True


def list_long_options() -> list[str]:
    return list(_options)
