import pytest

from sqlift.schema import DataType, TypeKind
from sqlift.type_mapper import extract_length, parse_data_type


class TestExactTypes:
    @pytest.mark.parametrize(
        "raw, kind",
        [
            ("smallint", TypeKind.SMALLINT),
            ("int2", TypeKind.SMALLINT),
            ("integer", TypeKind.INTEGER),
            ("int4", TypeKind.INTEGER),
            ("bigint", TypeKind.BIGINT),
            ("int8", TypeKind.BIGINT),
            ("boolean", TypeKind.BOOLEAN),
            ("text", TypeKind.TEXT),
            ("real", TypeKind.REAL),
            ("double precision", TypeKind.DOUBLE_PRECISION),
            ("date", TypeKind.DATE),
            ("uuid", TypeKind.UUID),
            ("json", TypeKind.JSON),
            ("jsonb", TypeKind.JSON_BINARY),
            ("bytea", TypeKind.BINARY),
        ],
    )
    def test_exact_match(self, raw, kind):
        assert parse_data_type(raw) == DataType(kind)

    @pytest.mark.parametrize("raw", ["integer", "double precision", "jsonb", "uuid"])
    def test_case_insensitive(self, raw):
        expected = parse_data_type(raw)
        assert parse_data_type(raw.upper()) == expected
        assert parse_data_type(raw.title()) == expected

    def test_surrounding_whitespace_ignored(self):
        assert parse_data_type("  bigint ") == DataType(TypeKind.BIGINT)


class TestParameterizedTypes:
    def test_varchar_with_length(self):
        assert parse_data_type("character varying(255)") == DataType.varchar(255)
        assert parse_data_type("varchar(40)") == DataType.varchar(40)

    def test_varchar_without_length(self):
        assert parse_data_type("character varying") == DataType.varchar(None)

    def test_char(self):
        assert parse_data_type("character(3)") == DataType.char(3)
        assert parse_data_type("bpchar") == DataType.char(None)
        assert parse_data_type("char") == DataType.char(None)

    def test_numeric_ignores_precision(self):
        assert parse_data_type("numeric(10,2)") == DataType(TypeKind.NUMERIC)
        assert parse_data_type("decimal") == DataType(TypeKind.NUMERIC)

    @pytest.mark.parametrize(
        "raw, kind",
        [
            ("timestamp without time zone", TypeKind.TIMESTAMP),
            ("timestamp(3) without time zone", TypeKind.TIMESTAMP),
            ("timestamp with time zone", TypeKind.TIMESTAMP_TZ),
            ("timestamptz", TypeKind.TIMESTAMP_TZ),
            ("time without time zone", TypeKind.TIME),
            ("time", TypeKind.TIME),
            ("time with time zone", TypeKind.TIME_TZ),
            ("timetz", TypeKind.TIME_TZ),
        ],
    )
    def test_temporal(self, raw, kind):
        assert parse_data_type(raw) == DataType(kind)


class TestArrays:
    def test_single_dimension(self):
        assert parse_data_type("integer[]") == DataType.array(DataType(TypeKind.INTEGER))

    def test_nested_depth(self):
        parsed = parse_data_type("integer[][]")
        assert parsed == DataType.array(DataType.array(DataType(TypeKind.INTEGER)))
        assert parsed.array_depth() == 2
        assert parsed.innermost() == DataType(TypeKind.INTEGER)

    def test_array_of_parameterized_type(self):
        assert parse_data_type("character varying(20)[]") == DataType.array(
            DataType.varchar(20)
        )

    def test_array_of_custom_type_keeps_spelling(self):
        assert parse_data_type("Mood[]") == DataType.array(DataType.enum("Mood"))


class TestFallback:
    def test_unknown_type_becomes_named_type(self):
        assert parse_data_type("order_status") == DataType.enum("order_status")

    def test_original_casing_preserved(self):
        assert parse_data_type(" MyType ").enum_name == "MyType"


class TestExtractLength:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("varchar(255)", 255),
            ("numeric(10,2)", 10),
            ("numeric( 12 , 4)", 12),
            ("varchar", None),
            ("varchar()", None),
            ("varchar(n)", None),
        ],
    )
    def test_extract_length(self, raw, expected):
        assert extract_length(raw) == expected
