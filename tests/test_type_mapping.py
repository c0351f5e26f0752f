import pytest

from proto2gql.type_mapping import (
    SCALAR_TYPES,
    WELL_KNOWN_TYPES,
    get_well_known_type,
    to_graphql_type,
)


class TestScalarTypes:
    @pytest.mark.parametrize("proto_type", ["double", "float"])
    def test_floating_point(self, proto_type):
        assert to_graphql_type(proto_type) == "Float"

    @pytest.mark.parametrize("proto_type", [
        "int32", "int64", "uint32", "uint64", "sint32", "sint64",
        "fixed32", "fixed64", "sfixed32", "sfixed64",
    ])
    def test_integers(self, proto_type):
        assert to_graphql_type(proto_type) == "Int"

    def test_bool_string_bytes(self):
        assert to_graphql_type("bool") == "Boolean"
        assert to_graphql_type("string") == "String"
        assert to_graphql_type("bytes") == "String"

    def test_map_is_json(self):
        assert to_graphql_type("map") == "JSON"

    def test_unknown_names_pass_through(self):
        assert to_graphql_type("User") == "User"
        assert to_graphql_type("google.protobuf.StringValue") == "google.protobuf.StringValue"

    def test_table_is_closed(self):
        assert len(SCALAR_TYPES) == 16


class TestWellKnownTypes:
    def test_string_value(self):
        wkt = get_well_known_type("google.protobuf.StringValue")
        assert wkt.type_name == "StringValue"
        assert wkt.declaration() == "type StringValue { value: String }"

    def test_empty(self):
        assert WELL_KNOWN_TYPES["google.protobuf.Empty"].declaration() == "type Empty {}"

    def test_all_wrappers_present(self):
        for name in (
            "StringValue", "DoubleValue", "Int32Value", "Int64Value",
            "UInt32Value", "UInt64Value", "BoolValue", "BytesValue",
            "FloatValue", "Empty", "Any", "Timestamp",
        ):
            wkt = get_well_known_type(f"google.protobuf.{name}")
            assert wkt is not None, name
            assert wkt.type_name == name

    def test_short_name_is_not_well_known(self):
        assert get_well_known_type("StringValue") is None
