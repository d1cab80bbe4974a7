import pytest

from sqlift.schema import Column, DataType, EnumType, Schema, Table, TypeKind


@pytest.fixture
def users_table():
    return Table(
        name="users",
        columns=[
            Column("id", DataType(TypeKind.INTEGER), is_auto_generated=True),
            Column("email", DataType(TypeKind.TEXT)),
            Column("bio", DataType(TypeKind.TEXT), is_nullable=True),
        ],
        primary_key=["id"],
    )


@pytest.fixture
def users_schema(users_table):
    return Schema(name="public", tables=[users_table], enums=[])


@pytest.fixture
def order_status():
    return EnumType(name="order_status", values=["pending", "completed"])


@pytest.fixture
def orders_table():
    return Table(
        name="orders",
        columns=[
            Column("id", DataType(TypeKind.UUID), has_default=True),
            Column("status", DataType.enum("order_status")),
            Column("total", DataType(TypeKind.NUMERIC)),
            Column("history", DataType.array(DataType.enum("order_status")), is_nullable=True),
            Column("metadata", DataType(TypeKind.JSON_BINARY), is_nullable=True),
            Column("placed_at", DataType(TypeKind.TIMESTAMP_TZ), has_default=True),
        ],
        primary_key=["id"],
    )


@pytest.fixture
def orders_schema(order_status, orders_table, users_table):
    return Schema(
        name="public", tables=[users_table, orders_table], enums=[order_status]
    )


@pytest.fixture
def documents_schema():
    table = Table(
        name="documents",
        columns=[
            Column("id", DataType(TypeKind.INTEGER), is_auto_generated=True),
            Column("items", DataType.array(DataType(TypeKind.JSON_BINARY))),
            Column(
                "notes",
                DataType.array(DataType.array(DataType(TypeKind.JSON))),
                is_nullable=True,
            ),
        ],
        primary_key=["id"],
    )
    return Schema(name="public", tables=[table], enums=[])


class FakeResult:
    def __init__(self, rows):
        self._rows = rows

    def mappings(self):
        return self

    def all(self):
        return list(self._rows)


class FakeConnection:
    """Answers catalog queries from canned rows, recording each call."""

    def __init__(self, catalog, fail_on=None):
        self.catalog = catalog
        self.fail_on = fail_on
        self.calls = []

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return False

    def execute(self, statement, params=None):
        sql = str(statement)
        params = params or {}
        self.calls.append((sql, dict(params)))

        if "pg_enum" in sql:
            key = "enums"
        elif "pg_constraint" in sql:
            key = "primary_keys"
        elif "pg_attribute" in sql:
            key = "columns"
        else:
            key = "tables"

        if self.fail_on == key:
            from sqlalchemy.exc import OperationalError

            raise OperationalError(sql, params, Exception("permission denied"))

        rows = self.catalog.get(key, [])
        if key in ("columns", "primary_keys"):
            rows = dict(rows).get(params["table"], [])
        return FakeResult(rows)


class FakeEngine:
    def __init__(self, catalog, fail_on=None):
        self.connection = FakeConnection(catalog, fail_on)
        self.disposed = False

    def connect(self):
        return self.connection

    def dispose(self):
        self.disposed = True


@pytest.fixture
def make_engine():
    def factory(catalog, fail_on=None):
        return FakeEngine(catalog, fail_on)

    return factory
