"""
PostgreSQL introspection through SQLAlchemy.

Reads pg_catalog directly so that column types come back in
``format_type()`` spelling, which :func:`~sqlift.type_mapper.parse_data_type`
understands.
"""

import re
from typing import Any, Dict, List, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from ..config import DbConfig
from ..errors import DatabaseConnectionError, IntrospectionError
from ..logging_config import get_logger
from ..schema import Column, EnumType, Schema, Table
from ..type_mapper import parse_data_type
from .base import Introspector, TableFilter

logger = get_logger(__name__)

ARRAY_SUFFIX = "[]"

# Optional qualifier, then the type name; either may be double-quoted
_IDENT = r'"(?:[^"]|"")*"|[^".]+'
_QUALIFIED_TYPE_RE = re.compile(rf"(?:({_IDENT})\.)?({_IDENT})")

TABLES_SQL = """
    SELECT c.relname AS table_name
    FROM pg_class c
    JOIN pg_namespace n ON n.oid = c.relnamespace
    WHERE c.relkind = 'r'
        AND n.nspname = :schema
    ORDER BY c.relname
"""

COLUMNS_SQL = """
    SELECT
        a.attname AS column_name,
        format_type(a.atttypid, a.atttypmod) AS data_type,
        NOT a.attnotnull AS is_nullable,
        pg_get_expr(d.adbin, d.adrelid) AS default_value,
        a.attidentity <> '' AS is_identity,
        a.attgenerated <> '' AS is_generated
    FROM pg_attribute a
    JOIN pg_class c ON c.oid = a.attrelid
    JOIN pg_namespace n ON n.oid = c.relnamespace
    LEFT JOIN pg_attrdef d ON d.adrelid = c.oid AND d.adnum = a.attnum
    WHERE c.relname = :table
        AND n.nspname = :schema
        AND a.attnum > 0
        AND NOT a.attisdropped
    ORDER BY a.attnum
"""

PRIMARY_KEY_SQL = """
    SELECT a.attname AS column_name
    FROM pg_constraint con
    JOIN pg_class c ON c.oid = con.conrelid
    JOIN pg_namespace n ON n.oid = c.relnamespace
    JOIN pg_attribute a ON a.attrelid = c.oid AND a.attnum = ANY(con.conkey)
    WHERE con.contype = 'p'
        AND c.relname = :table
        AND n.nspname = :schema
    ORDER BY array_position(con.conkey, a.attnum)
"""

ENUMS_SQL = """
    SELECT
        t.typname AS enum_name,
        e.enumlabel AS enum_value
    FROM pg_type t
    JOIN pg_enum e ON e.enumtypid = t.oid
    JOIN pg_namespace n ON n.oid = t.typnamespace
    WHERE n.nspname = :schema
    ORDER BY t.typname, e.enumsortorder
"""


def create_db_engine(config: DbConfig) -> Engine:
    """
    Build a SQLAlchemy engine and verify that it can connect.

    Raises:
        DatabaseConnectionError: If the engine cannot be created or connected
    """
    logger.info("Connecting to PostgreSQL at %s", config.redacted_url())
    try:
        engine = create_engine(config.sqlalchemy_url(), pool_pre_ping=True)
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error("Connection to %s failed: %s", config.redacted_url(), e)
        raise DatabaseConnectionError(
            f"Failed to connect to PostgreSQL at {config.redacted_url()}: {e}"
        ) from e

    logger.info("Connected to database")
    return engine


def is_auto_generated_column(default_value: Optional[str]) -> bool:
    """
    Check if a column default means the database assigns the value.

    Serial columns default to ``nextval('..._seq'::regclass)``; identity
    columns report ``GENERATED ... AS IDENTITY``.
    """
    if default_value is None:
        return False
    lowered = default_value.lower()
    return "nextval(" in lowered or "generated" in lowered


class PostgresIntrospector(Introspector):
    """Introspector for PostgreSQL schemas."""

    def __init__(self, engine: Engine):
        self.engine = engine

    @property
    def database_name(self) -> str:
        return "postgres"

    def introspect(
        self, schema_name: str, table_filter: Optional[TableFilter] = None
    ) -> Schema:
        table_filter = table_filter or TableFilter()
        logger.info("Starting introspection of schema '%s'", schema_name)

        try:
            with self.engine.connect() as conn:
                enums = self._query_enums(conn, schema_name)
                logger.debug("Found %d enum types", len(enums))

                all_tables = self._query_tables(conn, schema_name)
                logger.debug("Found %d tables", len(all_tables))

                table_names = table_filter.apply(all_tables)
                if table_filter.is_active:
                    logger.debug("%d tables left after filtering", len(table_names))

                tables = [
                    self._introspect_table(conn, schema_name, table_name)
                    for table_name in table_names
                ]
        except SQLAlchemyError as e:
            logger.error("Introspection of schema '%s' failed: %s", schema_name, e)
            raise IntrospectionError(schema_name, str(e)) from e

        logger.info(
            "Introspection of '%s' complete: %d tables, %d enums",
            schema_name,
            len(tables),
            len(enums),
        )
        return Schema(name=schema_name, tables=tables, enums=enums)

    def _introspect_table(
        self, conn: Connection, schema_name: str, table_name: str
    ) -> Table:
        logger.debug("Introspecting table %s", table_name)
        columns = self._query_columns(conn, schema_name, table_name)
        primary_key = self._query_primary_key(conn, schema_name, table_name)
        logger.debug(
            "Table %s: %d columns, primary key %s",
            table_name,
            len(columns),
            primary_key,
        )
        return Table(name=table_name, columns=columns, primary_key=primary_key)

    def _fetch(
        self, conn: Connection, sql: str, params: Dict[str, Any]
    ) -> List[Dict[str, Any]]:
        result = conn.execute(text(sql), params)
        return [dict(row) for row in result.mappings().all()]

    def _query_tables(self, conn: Connection, schema_name: str) -> List[str]:
        rows = self._fetch(conn, TABLES_SQL, {"schema": schema_name})
        return [row["table_name"] for row in rows]

    def _query_columns(
        self, conn: Connection, schema_name: str, table_name: str
    ) -> List[Column]:
        rows = self._fetch(
            conn, COLUMNS_SQL, {"schema": schema_name, "table": table_name}
        )

        columns = []
        for row in rows:
            default_value = row["default_value"]
            is_identity = bool(row.get("is_identity"))
            is_generated = bool(row.get("is_generated"))

            data_type = parse_data_type(
                _normalize_type_name(row["data_type"], schema_name)
            )
            column = Column(
                name=row["column_name"],
                data_type=data_type,
                is_nullable=bool(row["is_nullable"]),
                has_default=default_value is not None or is_identity or is_generated,
                is_auto_generated=(
                    is_identity
                    or is_generated
                    or is_auto_generated_column(default_value)
                ),
            )
            logger.debug(
                "Column %s.%s: %s -> %s",
                table_name,
                column.name,
                row["data_type"],
                data_type,
            )
            columns.append(column)

        return columns

    def _query_primary_key(
        self, conn: Connection, schema_name: str, table_name: str
    ) -> List[str]:
        rows = self._fetch(
            conn, PRIMARY_KEY_SQL, {"schema": schema_name, "table": table_name}
        )
        return [row["column_name"] for row in rows]

    def _query_enums(self, conn: Connection, schema_name: str) -> List[EnumType]:
        rows = self._fetch(conn, ENUMS_SQL, {"schema": schema_name})

        # Rows arrive ordered by type name, then declared sort order
        grouped: Dict[str, List[str]] = {}
        for row in rows:
            grouped.setdefault(row["enum_name"], []).append(row["enum_value"])

        return [EnumType(name=name, values=values) for name, values in grouped.items()]


def _normalize_type_name(type_name: str, schema_name: str) -> str:
    """
    Undo the quoting and ``schema.`` qualifier format_type adds to custom types.

    ``"Sales"."OrderStatus"[]`` in schema ``Sales`` becomes ``OrderStatus[]``.
    Qualifiers naming another schema are kept (unquoted). Built-in type text
    such as ``numeric(10,2)`` passes through unchanged.
    """
    base = type_name
    suffix = ""
    while base.endswith(ARRAY_SUFFIX):
        base = base[: -len(ARRAY_SUFFIX)]
        suffix += ARRAY_SUFFIX

    if '"' not in base and "." not in base:
        return type_name

    match = _QUALIFIED_TYPE_RE.fullmatch(base)
    if not match:
        return type_name

    qualifier, name = match.group(1), _unquote(match.group(2))
    if qualifier is not None and _unquote(qualifier) != schema_name:
        name = f"{_unquote(qualifier)}.{name}"
    return name + suffix


def _unquote(identifier: str) -> str:
    if len(identifier) >= 2 and identifier[0] == identifier[-1] == '"':
        return identifier[1:-1].replace('""', '"')
    return identifier
