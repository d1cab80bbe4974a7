"""
Core schema representation shared by introspection and code generation.

Introspectors produce a :class:`Schema`; generators consume it read-only.
The model is independent of any SQL dialect and of any target language.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .naming import singularize, to_pascal_case


class TypeKind(Enum):
    """Semantic column types understood by every generator."""

    SMALLINT = "smallint"
    INTEGER = "integer"
    BIGINT = "bigint"
    BOOLEAN = "boolean"
    TEXT = "text"
    VARCHAR = "varchar"
    CHAR = "char"
    REAL = "real"
    DOUBLE_PRECISION = "double_precision"
    NUMERIC = "numeric"
    TIMESTAMP = "timestamp"
    TIMESTAMP_TZ = "timestamptz"
    DATE = "date"
    TIME = "time"
    TIME_TZ = "timetz"
    UUID = "uuid"
    JSON = "json"
    JSON_BINARY = "jsonb"
    BINARY = "binary"
    ARRAY = "array"
    ENUM = "enum"


@dataclass(frozen=True)
class DataType:
    """
    Immutable semantic type of a column.

    Only ``VARCHAR``/``CHAR`` carry ``length``, only ``ARRAY`` carries
    ``element`` and only ``ENUM`` carries ``enum_name``. An enum is referenced
    by name and resolved against ``Schema.enums`` when code is generated.
    """

    kind: TypeKind
    length: Optional[int] = None
    element: Optional["DataType"] = None
    enum_name: Optional[str] = None

    @classmethod
    def varchar(cls, length: Optional[int] = None) -> "DataType":
        return cls(TypeKind.VARCHAR, length=length)

    @classmethod
    def char(cls, length: Optional[int] = None) -> "DataType":
        return cls(TypeKind.CHAR, length=length)

    @classmethod
    def array(cls, element: "DataType") -> "DataType":
        return cls(TypeKind.ARRAY, element=element)

    @classmethod
    def enum(cls, name: str) -> "DataType":
        return cls(TypeKind.ENUM, enum_name=name)

    @property
    def is_array(self) -> bool:
        return self.kind == TypeKind.ARRAY

    @property
    def is_enum(self) -> bool:
        return self.kind == TypeKind.ENUM

    def innermost(self) -> "DataType":
        """Return the element type after unwrapping every array level."""
        current = self
        while current.kind == TypeKind.ARRAY:
            current = current.element
        return current

    def array_depth(self) -> int:
        depth = 0
        current = self
        while current.kind == TypeKind.ARRAY:
            depth += 1
            current = current.element
        return depth

    def __str__(self) -> str:
        if self.kind == TypeKind.ARRAY:
            return f"{self.element}[]"
        if self.kind == TypeKind.ENUM:
            return f"enum({self.enum_name})"
        if self.length is not None:
            return f"{self.kind.value}({self.length})"
        return self.kind.value


@dataclass(frozen=True)
class Column:
    """A table column."""

    name: str
    data_type: DataType
    is_nullable: bool = False
    # Any server-side default (DEFAULT value, now(), nextval(...))
    has_default: bool = False
    # Value assigned by the database (serial, identity)
    is_auto_generated: bool = False


@dataclass(frozen=True)
class EnumType:
    """A custom enum type defined in the database."""

    name: str
    values: List[str] = field(default_factory=list)

    def class_name(self) -> str:
        return to_pascal_case(self.name)


@dataclass(frozen=True)
class Table:
    """
    A database table.

    ``primary_key`` lists column names in key order. Every name is expected
    to reference an entry of ``columns``; this is not validated, and the
    accessors below skip names that do not resolve.
    """

    name: str
    columns: List[Column] = field(default_factory=list)
    primary_key: List[str] = field(default_factory=list)

    def class_name(self) -> str:
        """PascalCase class name derived from the table name."""
        return to_pascal_case(self.name)

    def singular_class_name(self) -> str:
        """Singular PascalCase name (``order_items`` -> ``OrderItem``)."""
        return singularize(self.class_name())

    def singular_name(self) -> str:
        """Singular snake_case name (``categories`` -> ``category``)."""
        return singularize(self.name)

    def get_column(self, name: str) -> Optional[Column]:
        for column in self.columns:
            if column.name == name:
                return column
        return None

    def primary_key_columns(self) -> List[Column]:
        """Primary key columns in declared key order."""
        resolved = []
        for pk_name in self.primary_key:
            column = self.get_column(pk_name)
            if column is not None:
                resolved.append(column)
        return resolved

    def insert_columns(self) -> List[Column]:
        """
        Columns the caller supplies on insert.

        Auto-generated columns and columns with a server default are left
        out. Required (non-nullable) columns come before nullable ones; the
        original column order is kept within each group.
        """
        candidates = [
            col
            for col in self.columns
            if not col.is_auto_generated and not col.has_default
        ]
        return sorted(candidates, key=lambda col: col.is_nullable)

    def non_pk_columns(self) -> List[Column]:
        """Columns outside the primary key (the SET list of an update)."""
        return [col for col in self.columns if col.name not in self.primary_key]

    def has_auto_generated_pk(self) -> bool:
        """
        True if any primary key column is assigned by the database.

        Such tables get no upsert: the caller cannot know the key value
        before the row exists.
        """
        return any(col.is_auto_generated for col in self.primary_key_columns())


@dataclass(frozen=True)
class Schema:
    """A complete introspected database schema."""

    name: str
    tables: List[Table] = field(default_factory=list)
    enums: List[EnumType] = field(default_factory=list)

    def get_enum(self, name: str) -> Optional[EnumType]:
        for enum_type in self.enums:
            if enum_type.name == name:
                return enum_type
        return None

    def get_table(self, name: str) -> Optional[Table]:
        for table in self.tables:
            if table.name == name:
                return table
        return None
