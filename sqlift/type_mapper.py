"""
Mapping of database type strings to :class:`~sqlift.schema.DataType`.

The input is the type text a catalog reports for a column, for example
PostgreSQL's ``format_type()`` output (``character varying(255)``,
``timestamp with time zone``, ``integer[]``).
"""

import re
from typing import Optional

from .schema import DataType, TypeKind

# Exact spellings, compared lower-cased
EXACT_TYPES = {
    "smallint": TypeKind.SMALLINT,
    "int2": TypeKind.SMALLINT,
    "integer": TypeKind.INTEGER,
    "int": TypeKind.INTEGER,
    "int4": TypeKind.INTEGER,
    "bigint": TypeKind.BIGINT,
    "int8": TypeKind.BIGINT,
    "boolean": TypeKind.BOOLEAN,
    "bool": TypeKind.BOOLEAN,
    "text": TypeKind.TEXT,
    "real": TypeKind.REAL,
    "float4": TypeKind.REAL,
    "double precision": TypeKind.DOUBLE_PRECISION,
    "float8": TypeKind.DOUBLE_PRECISION,
    "date": TypeKind.DATE,
    "uuid": TypeKind.UUID,
    "json": TypeKind.JSON,
    "jsonb": TypeKind.JSON_BINARY,
    "bytea": TypeKind.BINARY,
    "timetz": TypeKind.TIME_TZ,
    "timestamptz": TypeKind.TIMESTAMP_TZ,
}

VARCHAR_PREFIXES = ("character varying", "varchar")
CHAR_PREFIXES = ("character(", "char(")
CHAR_NAMES = {"character", "char", "bpchar"}
NUMERIC_PREFIXES = ("numeric", "decimal")

ARRAY_SUFFIX = "[]"
TZ_MARKER = "with time zone"

_PARAMS_RE = re.compile(r"\(([^)]*)\)")
_DIGITS_RE = re.compile(r"[0-9]+")


def parse_data_type(raw: str) -> DataType:
    """
    Parse a database type string into a DataType.

    Never fails: anything unrecognized is treated as a named custom type and
    returned as ``DataType.enum(raw)`` with its original spelling.

    Args:
        raw: Type text as reported by the catalog

    Returns:
        Parsed DataType
    """
    original = raw.strip()
    lowered = original.lower()

    if lowered.endswith(ARRAY_SUFFIX):
        return DataType.array(parse_data_type(original[: -len(ARRAY_SUFFIX)]))

    if lowered.startswith(VARCHAR_PREFIXES):
        return DataType.varchar(extract_length(lowered))

    if lowered.startswith(CHAR_PREFIXES):
        return DataType.char(extract_length(lowered))
    if lowered in CHAR_NAMES:
        return DataType.char()

    if lowered.startswith(NUMERIC_PREFIXES):
        return DataType(TypeKind.NUMERIC)

    if lowered.startswith("timestamp"):
        if TZ_MARKER in lowered or "timestamptz" in lowered:
            return DataType(TypeKind.TIMESTAMP_TZ)
        return DataType(TypeKind.TIMESTAMP)

    if lowered == "time" or lowered.startswith(("time ", "time(")):
        if TZ_MARKER in lowered:
            return DataType(TypeKind.TIME_TZ)
        return DataType(TypeKind.TIME)

    kind = EXACT_TYPES.get(lowered)
    if kind is not None:
        return DataType(kind)

    return DataType.enum(original)


def extract_length(type_str: str) -> Optional[int]:
    """
    Extract the first numeric parameter of a type.

    ``varchar(255)`` gives 255, ``numeric(10,2)`` gives 10. Missing or
    non-numeric parameters give None.
    """
    match = _PARAMS_RE.search(type_str)
    if not match:
        return None

    first = match.group(1).split(",")[0].strip()
    if not _DIGITS_RE.fullmatch(first):
        return None
    return int(first)
