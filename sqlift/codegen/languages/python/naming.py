"""
Python-specific naming utilities and sanitization.

Column names become dataclass fields and function parameters, and enum
labels become enum members, so both must be valid, non-reserved Python
identifiers.
"""

import keyword
import re
from typing import List, Set, Tuple

from ....naming import to_snake_case

# Python reserved keywords
PYTHON_RESERVED_WORDS = set(keyword.kwlist)

# Names the generated functions and methods already use for their own parameters
GENERATED_CODE_NAMES = {
    "conn",
    "self",
    "cls",
    "row",
    "limit",
    "offset",
}

_INVALID_CHARS_RE = re.compile(r"[^0-9a-zA-Z_]")


def sanitize_identifier(name: str, reserved: Set[str] = None) -> str:
    """
    Turn a database identifier into a safe Python identifier.

    Invalid characters become underscores, a leading digit gets an
    underscore prefix, and reserved names get an underscore suffix.

    Args:
        name: Original column or label name
        reserved: Extra names to avoid (defaults to names used by generated code)

    Returns:
        Sanitized identifier
    """
    reserved = GENERATED_CODE_NAMES if reserved is None else reserved

    cleaned = _INVALID_CHARS_RE.sub("_", name)
    if not cleaned:
        cleaned = "field"
    if cleaned[0].isdigit():
        cleaned = f"_{cleaned}"

    if cleaned in PYTHON_RESERVED_WORDS or cleaned in reserved:
        cleaned = f"{cleaned}_"

    return cleaned


def enum_member_name(label: str) -> str:
    """Convert an enum label to an UPPER_SNAKE member name."""
    snake = to_snake_case(_INVALID_CHARS_RE.sub("_", label.strip()))
    if not snake:
        return "EMPTY"
    member = snake.upper()
    if member[0].isdigit():
        member = f"_{member}"
    return member


def enum_members(values: List[str]) -> List[Tuple[str, str]]:
    """
    Build ``(member_name, label)`` pairs for an enum, in declared order.

    Labels that sanitize to the same member name get a numeric suffix.
    """
    members = []
    used: Set[str] = set()

    for value in values:
        base = enum_member_name(value)
        name = base
        counter = 1
        while name in used:
            name = f"{base}_{counter}"
            counter += 1
        used.add(name)
        members.append((name, value))

    return members
