"""
Naming utilities for generated code.

Converts snake_case database identifiers into class names and applies a
small singularization heuristic to table names.
"""

import re


def to_pascal_case(identifier: str) -> str:
    """
    Convert a snake_case identifier to PascalCase.

    Each non-empty underscore-separated segment gets its first character
    upper-cased; the remainder of the segment is kept as is. Consecutive
    underscores contribute nothing.

    Args:
        identifier: snake_case name (e.g. ``order_line_items``)

    Returns:
        PascalCase name (e.g. ``OrderLineItems``)
    """
    return "".join(
        segment[0].upper() + segment[1:] for segment in identifier.split("_") if segment
    )


def to_snake_case(name: str) -> str:
    """Convert PascalCase or camelCase to snake_case."""
    name = name.replace("-", "_")
    name = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", name)
    name = re.sub(r"_+", "_", name.lower())
    return name.strip("_")


def singularize(word: str) -> str:
    """
    Return a best-effort singular form of ``word``.

    Rules, in order:
      - ``...ies`` becomes ``...y`` (``categories`` -> ``category``)
      - ``...s`` but not ``...ss`` drops the ``s`` (``users`` -> ``user``)
      - anything else is returned unchanged (``staff``, ``address``)

    Irregular plurals (``people``, ``children``) are not handled. Generated
    names depend on this exact behaviour, so it must stay stable.
    """
    if word.endswith("ies"):
        return word[:-3] + "y"
    if word.endswith("s") and not word.endswith("ss"):
        return word[:-1]
    return word
