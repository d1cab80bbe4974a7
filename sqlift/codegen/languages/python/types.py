"""
Python type mapping and import collection.

Maps IR data types to Python annotations and works out which imports a
generated module needs for them.
"""

from typing import Iterable, List, Optional, Set

from ....naming import to_pascal_case
from ....schema import Column, DataType, Schema, TypeKind

# Python type mappings
PYTHON_TYPE_MAP = {
    TypeKind.SMALLINT: "int",
    TypeKind.INTEGER: "int",
    TypeKind.BIGINT: "int",
    TypeKind.BOOLEAN: "bool",
    TypeKind.TEXT: "str",
    TypeKind.VARCHAR: "str",
    TypeKind.CHAR: "str",
    TypeKind.REAL: "float",
    TypeKind.DOUBLE_PRECISION: "float",
    TypeKind.NUMERIC: "Decimal",
    TypeKind.TIMESTAMP: "datetime",
    TypeKind.TIMESTAMP_TZ: "datetime",
    TypeKind.DATE: "date",
    TypeKind.TIME: "time",
    TypeKind.TIME_TZ: "time",
    TypeKind.UUID: "UUID",
    TypeKind.JSON: "dict[str, Any]",
    TypeKind.JSON_BINARY: "dict[str, Any]",
    TypeKind.BINARY: "bytes",
}

# Unresolved enum names are plain text
FALLBACK_TYPE = "str"

# Types that require imports
PYTHON_IMPORT_MAP = {
    TypeKind.NUMERIC: "from decimal import Decimal",
    TypeKind.TIMESTAMP: "from datetime import datetime",
    TypeKind.TIMESTAMP_TZ: "from datetime import datetime",
    TypeKind.DATE: "from datetime import date",
    TypeKind.TIME: "from datetime import time",
    TypeKind.TIME_TZ: "from datetime import time",
    TypeKind.UUID: "from uuid import UUID",
    TypeKind.JSON: "from typing import Any",
    TypeKind.JSON_BINARY: "from typing import Any",
}

ENUM_MODULE = "enums"

JSON_KINDS = {TypeKind.JSON, TypeKind.JSON_BINARY}


def resolve_enum_class(data_type: DataType, schema: Schema) -> Optional[str]:
    """Return the enum class name for an enum type known to ``schema``."""
    if data_type.kind != TypeKind.ENUM:
        return None
    if schema.get_enum(data_type.enum_name) is None:
        return None
    return to_pascal_case(data_type.enum_name)


def python_type(data_type: DataType, is_nullable: bool, schema: Schema) -> str:
    """
    Get the Python annotation for a data type.

    Args:
        data_type: Column data type
        is_nullable: Wrap the result as ``X | None``
        schema: Schema used to resolve enum names

    Returns:
        Annotation string (e.g. ``list[int]``, ``OrderStatus | None``)
    """
    if data_type.kind == TypeKind.ARRAY:
        base_type = f"list[{python_type(data_type.element, False, schema)}]"
    elif data_type.kind == TypeKind.ENUM:
        base_type = resolve_enum_class(data_type, schema) or FALLBACK_TYPE
    else:
        base_type = PYTHON_TYPE_MAP[data_type.kind]

    if is_nullable:
        return f"{base_type} | None"
    return base_type


def collect_type_imports(
    data_type: DataType,
    schema: Schema,
    imports: Set[str],
    include_enums: bool = True,
):
    """
    Add the imports needed by ``data_type`` to ``imports``.

    Arrays are walked down to their element type. Enums only contribute an
    import when they resolve against ``schema``.
    """
    if data_type.kind == TypeKind.ARRAY:
        collect_type_imports(data_type.element, schema, imports, include_enums)
        return

    if data_type.kind == TypeKind.ENUM:
        enum_class = resolve_enum_class(data_type, schema)
        if enum_class and include_enums:
            imports.add(f"from .{ENUM_MODULE} import {enum_class}")
        return

    import_stmt = PYTHON_IMPORT_MAP.get(data_type.kind)
    if import_stmt:
        imports.add(import_stmt)


def collect_column_imports(
    columns: Iterable[Column], schema: Schema, include_enums: bool = True
) -> List[str]:
    """Sorted, de-duplicated imports needed by a set of columns."""
    imports: Set[str] = set()
    for column in columns:
        collect_type_imports(column.data_type, schema, imports, include_enums)
    return sorted(imports)


def collect_schema_imports(schema: Schema, include_enums: bool = True) -> List[str]:
    """Sorted, de-duplicated imports needed by every table in the schema."""
    return collect_column_imports(
        (column for table in schema.tables for column in table.columns),
        schema,
        include_enums,
    )


def split_imports(imports: List[str]):
    """Split import statements into (standard library, package-local)."""
    stdlib = [stmt for stmt in imports if not stmt.startswith("from .")]
    local = [stmt for stmt in imports if stmt.startswith("from .")]
    return stdlib, local


def is_json(data_type: DataType) -> bool:
    return data_type.kind in JSON_KINDS


def contains_json(data_type: DataType) -> bool:
    """True for JSON columns and arrays of JSON at any depth."""
    return is_json(data_type.innermost())
