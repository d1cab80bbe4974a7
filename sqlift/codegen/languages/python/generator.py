"""
Python code generator implementation.

Generates dataclass records and psycopg 3 data access functions (or
repository classes) from an introspected schema, using Jinja2 templates.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

from ....logging_config import get_logger
from ....schema import Column, EnumType, Schema, Table, TypeKind
from ...core.config import CodeGenConfig, FunctionStyle
from ...core.generator import ENUMS_ARTIFACT, FLAT_ARTIFACT, CodeGenerator
from .naming import enum_members, sanitize_identifier
from .types import (
    collect_column_imports,
    collect_schema_imports,
    contains_json,
    python_type,
    resolve_enum_class,
    split_imports,
)

logger = get_logger(__name__)

STYLE_TEMPLATES = {
    FunctionStyle.STANDALONE: "standalone.py.j2",
    FunctionStyle.CLASS: "repository.py.j2",
}

INDEX_MODULE = "__init__"


class PythonGenerator(CodeGenerator):
    """Code generator for typed Python data access modules."""

    @property
    def language_name(self) -> str:
        """Return the language name."""
        return "python"

    @property
    def file_extension(self) -> str:
        """Return Python file extension."""
        return ".py"

    @property
    def index_module_name(self) -> str:
        return INDEX_MODULE

    def get_template_directory(self) -> Path:
        """Return the Python templates directory."""
        return Path(__file__).parent / "templates"

    def template_for_style(self, style: FunctionStyle) -> str:
        return STYLE_TEMPLATES[style]

    # Rendering

    def render_enums(self, schema: Schema) -> str:
        context = {
            "schema_name": schema.name,
            "enums": [self.build_enum_context(e) for e in schema.enums],
        }
        return self.render_artifact(ENUMS_ARTIFACT, "enums.py.j2", context)

    def render_table(self, table: Table, schema: Schema, config: CodeGenConfig) -> str:
        template_name = self.template_for_style(config.function_style)
        context = self.build_table_context(table, schema)
        logger.debug(
            "Rendering %s with %s (%d columns, imports %s)",
            table.name,
            template_name,
            len(table.columns),
            context["imports"],
        )
        return self.render_artifact(
            table.name, template_name, dict(context, table=context)
        )

    def render_index(self, schema: Schema, config: CodeGenConfig) -> str:
        class_style = config.function_style == FunctionStyle.CLASS
        tables = []
        for table in schema.tables:
            singular_class_name = table.singular_class_name()
            tables.append(
                {
                    "module_name": table.name,
                    "record_name": f"{singular_class_name}Record",
                    "repository_name": f"{singular_class_name}Repository",
                }
            )

        exports = []
        for entry in tables:
            exports.append(entry["record_name"])
            if class_style:
                exports.append(entry["repository_name"])
        enum_names = [e.class_name() for e in schema.enums]
        exports.extend(enum_names)

        context = {
            "schema_name": schema.name,
            "tables": tables,
            "enums": enum_names,
            "has_enums": bool(schema.enums),
            "class_style": class_style,
            "exports": exports,
        }
        return self.render_artifact(INDEX_MODULE, "init.py.j2", context)

    def render_flat(self, schema: Schema, config: CodeGenConfig) -> str:
        tables = [self.build_table_context(t, schema) for t in schema.tables]

        # Enums are defined in the same file, so no enum imports
        imports = set(collect_schema_imports(schema, include_enums=False))
        if schema.enums:
            imports.add("from enum import Enum")

        context = {
            "schema_name": schema.name,
            "enums": [self.build_enum_context(e) for e in schema.enums],
            "tables": tables,
            "imports": sorted(imports),
            "uses_json": any(t["uses_json"] for t in tables),
            "function_style": config.function_style.value,
        }
        return self.render_artifact(FLAT_ARTIFACT, "flat.py.j2", context)

    # Context building

    def build_enum_context(self, enum_type: EnumType) -> Dict[str, Any]:
        return {
            "name": enum_type.class_name(),
            "db_name": enum_type.name,
            "members": [
                {"name": member, "value": value, "literal": repr(value)}
                for member, value in enum_members(enum_type.values)
            ],
        }

    def build_table_context(self, table: Table, schema: Schema) -> Dict[str, Any]:
        """
        Build the template context for one table.

        The same context serves every function style; only the template
        differs.
        """
        by_name = {
            column.name: self.build_column_context(column, index, schema)
            for index, column in enumerate(table.columns)
        }
        for name in table.primary_key:
            if name in by_name:
                by_name[name]["is_pk"] = True

        def contexts(columns: List[Column]) -> List[Dict[str, Any]]:
            return [by_name[column.name] for column in columns]

        columns_ctx = contexts(table.columns)
        pk_ctx = contexts(table.primary_key_columns())
        insert_ctx = contexts(table.insert_columns())
        non_pk_ctx = contexts(table.non_pk_columns())
        update_ctx = contexts(update_columns(table))
        upsert_ctx = contexts(upsert_columns(table))

        has_pk = bool(table.primary_key)
        has_auto_generated_pk = table.has_auto_generated_pk()
        singular_class_name = table.singular_class_name()

        imports = collect_column_imports(table.columns, schema)
        stdlib_imports, local_imports = split_imports(imports)

        can_upsert = bool(pk_ctx) and not has_auto_generated_pk
        upsert_updates = any(not c["is_pk"] for c in upsert_ctx)

        return {
            "table_name": table.name,
            "schema_name": schema.name,
            "qualified_name": qualified_name(schema.name, table.name),
            "class_name": table.class_name(),
            "singular_class_name": singular_class_name,
            "record_name": f"{singular_class_name}Record",
            "repository_name": f"{singular_class_name}Repository",
            "singular_ident": sanitize_identifier(table.singular_name(), reserved=set()),
            "plural_ident": sanitize_identifier(table.name, reserved=set()),
            "columns": columns_ctx,
            "pk_columns": pk_ctx,
            "insert_columns": insert_ctx,
            "non_pk_columns": non_pk_ctx,
            "update_columns": update_ctx,
            "upsert_columns": upsert_ctx,
            "has_pk": has_pk,
            "has_auto_generated_pk": has_auto_generated_pk,
            "can_get": bool(pk_ctx),
            "can_update": bool(pk_ctx) and bool(update_ctx),
            "can_upsert": can_upsert,
            "upsert_updates": upsert_updates,
            "imports": imports,
            "stdlib_imports": stdlib_imports,
            "local_imports": local_imports,
            "uses_json": any(c["uses_json"] for c in columns_ctx),
            "pk_params": parameter_list(pk_ctx),
            "pk_args": argument_tuple(pk_ctx),
            "insert_params": parameter_list(insert_ctx, optional_defaults=True),
            "insert_args": argument_tuple(insert_ctx),
            "update_params": parameter_list(pk_ctx + update_ctx),
            "update_args": argument_tuple(update_ctx + pk_ctx),
            "upsert_params": parameter_list(upsert_ctx, optional_defaults=True),
            "upsert_args": argument_tuple(upsert_ctx),
            "sql": build_statements(table, schema),
        }

    def build_column_context(
        self, column: Column, index: int, schema: Schema
    ) -> Dict[str, Any]:
        data_type = column.data_type
        attr = sanitize_identifier(column.name)
        enum_class = resolve_enum_class(data_type, schema)
        element_enum_class = (
            resolve_enum_class(data_type.element, schema) if data_type.is_array else None
        )

        return {
            "name": column.name,
            "attr": attr,
            "python_type": python_type(data_type, column.is_nullable, schema),
            "base_type": python_type(data_type, False, schema),
            "is_nullable": column.is_nullable,
            "has_default": column.has_default,
            "is_auto_generated": column.is_auto_generated,
            "is_pk": False,
            "enum_class": enum_class,
            "uses_json": contains_json(data_type),
            "param": _param_expression(
                attr, column, enum_class, element_enum_class
            ),
            "row_expr": _row_expression(
                f"row[{index}]", column, enum_class, element_enum_class
            ),
        }

    def validate_schema(self, schema: Schema) -> List[str]:
        """Validate schema for Python generation."""
        warnings = super().validate_schema(schema)

        for table in schema.tables:
            for column in table.columns:
                attr = sanitize_identifier(column.name)
                if attr != column.name:
                    warnings.append(
                        f"Column {table.name}.{column.name} renamed to {attr}"
                    )
                if column.data_type.array_depth() > 1 and (
                    column.data_type.innermost().kind == TypeKind.ENUM
                ):
                    warnings.append(
                        f"Column {table.name}.{column.name} is a nested enum array - "
                        "values are returned as strings"
                    )

        record_owners: Dict[str, str] = {}
        for table in schema.tables:
            record_name = f"{table.singular_class_name()}Record"
            owner = record_owners.setdefault(record_name, table.name)
            if owner != table.name:
                warnings.append(
                    f"Tables '{owner}' and '{table.name}' both generate {record_name} - "
                    "the later definition shadows the earlier one"
                )

        return warnings


# Helpers


def update_columns(table: Table) -> List[Column]:
    """Non-key columns an update may assign; identity and generated columns are skipped."""
    return [col for col in table.non_pk_columns() if not col.is_auto_generated]


def upsert_columns(table: Table) -> List[Column]:
    """Columns an upsert writes: everything not assigned by the database."""
    candidates = [col for col in table.columns if not col.is_auto_generated]
    return sorted(candidates, key=lambda col: col.is_nullable)


def quote_identifier(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


def qualified_name(schema_name: str, table_name: str) -> str:
    return f"{quote_identifier(schema_name)}.{quote_identifier(table_name)}"


def parameter_list(
    columns: List[Dict[str, Any]], optional_defaults: bool = False
) -> str:
    """Render ``name: type`` parameters, optionally defaulting nullables to None."""
    params = []
    for column in columns:
        param = f"{column['attr']}: {column['python_type']}"
        if optional_defaults and column["is_nullable"]:
            param += " = None"
        params.append(param)
    return ", ".join(params)


def argument_tuple(columns: List[Dict[str, Any]]) -> str:
    """Render the tuple of driver arguments for a statement."""
    values = [column["param"] for column in columns]
    if len(values) == 1:
        return f"({values[0]},)"
    return f"({', '.join(values)})"


def enum_array_type(column: Column, schema: Schema) -> Optional[str]:
    """
    SQL array type of a column holding an array of enum values, else None.

    The driver does not know custom enum types, so such columns are read as
    ``text[]`` and written with an explicit cast back to this type.
    """
    data_type = column.data_type
    inner = data_type.innermost()
    if not data_type.is_array or inner.kind != TypeKind.ENUM:
        return None

    if schema.get_enum(inner.enum_name) is not None:
        type_name = qualified_name(schema.name, inner.enum_name)
    else:
        type_name = inner.enum_name
    return type_name + "[]" * data_type.array_depth()


def build_statements(table: Table, schema: Schema) -> Dict[str, str]:
    """Build the SQL for every generated operation as Python string literals."""
    target = qualified_name(schema.name, table.name)
    casts = {column.name: enum_array_type(column, schema) for column in table.columns}

    def select_expr(column: Column) -> str:
        name = quote_identifier(column.name)
        if casts[column.name]:
            return f"{name}::text[] AS {name}"
        return name

    def placeholder(column: Column) -> str:
        cast = casts[column.name]
        return f"%s::{cast}" if cast else "%s"

    all_columns = ", ".join(select_expr(c) for c in table.columns) or "*"
    pk_columns = table.primary_key_columns()

    where = " AND ".join(f"{quote_identifier(c.name)} = %s" for c in pk_columns)
    order_by = ", ".join(quote_identifier(c.name) for c in pk_columns)

    statements = {}

    page = f"SELECT {all_columns} FROM {target}"
    if order_by:
        page += f" ORDER BY {order_by}"
    statements["select_page"] = page + " LIMIT %s OFFSET %s"

    insert_columns = table.insert_columns()
    if insert_columns:
        names = ", ".join(quote_identifier(c.name) for c in insert_columns)
        placeholders = ", ".join(placeholder(c) for c in insert_columns)
        statements["insert"] = (
            f"INSERT INTO {target} ({names}) VALUES ({placeholders}) "
            f"RETURNING {all_columns}"
        )
    else:
        statements["insert"] = f"INSERT INTO {target} DEFAULT VALUES RETURNING {all_columns}"

    if pk_columns:
        statements["select_one"] = f"SELECT {all_columns} FROM {target} WHERE {where}"
        statements["delete"] = f"DELETE FROM {target} WHERE {where}"

        update_cols = update_columns(table)
        if update_cols:
            assignments = ", ".join(
                f"{quote_identifier(c.name)} = {placeholder(c)}" for c in update_cols
            )
            statements["update"] = (
                f"UPDATE {target} SET {assignments} WHERE {where} "
                f"RETURNING {all_columns}"
            )

        upsert = upsert_columns(table)
        names = ", ".join(quote_identifier(c.name) for c in upsert)
        placeholders = ", ".join(placeholder(c) for c in upsert)
        conflict = ", ".join(quote_identifier(c.name) for c in pk_columns)
        updates = [
            f"{quote_identifier(c.name)} = EXCLUDED.{quote_identifier(c.name)}"
            for c in upsert
            if c.name not in table.primary_key
        ]
        action = f"DO UPDATE SET {', '.join(updates)}" if updates else "DO NOTHING"
        statements["upsert"] = (
            f"INSERT INTO {target} ({names}) VALUES ({placeholders}) "
            f"ON CONFLICT ({conflict}) {action} RETURNING {all_columns}"
        )

    return {key: repr(sql) for key, sql in statements.items()}


def _param_expression(attr, column, enum_class, element_enum_class) -> str:
    """Expression adapting a Python value for the driver."""
    if enum_class:
        expr = f"{attr}.value"
    elif element_enum_class:
        expr = f"[item.value for item in {attr}]"
    elif contains_json(column.data_type):
        expr = _json_expression(attr, column.data_type.array_depth())
    else:
        return attr

    if column.is_nullable:
        return f"{expr} if {attr} is not None else None"
    return expr


def _json_expression(value: str, depth: int, level: int = 0) -> str:
    """Wrap a JSON value, or every element of a (nested) JSON array, in Json()."""
    if depth == 0:
        return f"Json({value})"
    item = "item" if level == 0 else f"item{level}"
    inner = _json_expression(item, depth - 1, level + 1)
    return f"[{inner} for {item} in {value}]"


def _row_expression(value, column, enum_class, element_enum_class) -> str:
    """Expression converting a fetched value to the record's field type."""
    if enum_class:
        expr = f"{enum_class}({value})"
    elif element_enum_class:
        expr = f"[{element_enum_class}(item) for item in {value}]"
    else:
        return value

    if column.is_nullable:
        return f"{expr} if {value} is not None else None"
    return expr


# Factory functions
def create_python_generator() -> PythonGenerator:
    """Create a Python generator with its own template engine."""
    return PythonGenerator()
