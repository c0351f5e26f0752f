"""Static protobuf -> GraphQL type tables."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

# Proto scalar type -> GraphQL scalar. JSON is not built in; the consuming
# schema must declare `scalar JSON`.
SCALAR_TYPES: Dict[str, str] = {
    "double": "Float",
    "float": "Float",
    "int32": "Int",
    "int64": "Int",
    "uint32": "Int",
    "uint64": "Int",
    "sint32": "Int",
    "sint64": "Int",
    "fixed32": "Int",
    "fixed64": "Int",
    "sfixed32": "Int",
    "sfixed64": "Int",
    "bool": "Boolean",
    "string": "String",
    "bytes": "String",
    "map": "JSON",
}

MAP_TYPE = SCALAR_TYPES["map"]


@dataclass(frozen=True)
class WellKnownType:
    type_name: str
    body: str

    def declaration(self) -> str:
        return f"type {self.type_name} {self.body}"


WELL_KNOWN_TYPES: Dict[str, WellKnownType] = {
    "google.protobuf.StringValue": WellKnownType("StringValue", "{ value: String }"),
    "google.protobuf.DoubleValue": WellKnownType("DoubleValue", "{ value: Float }"),
    "google.protobuf.FloatValue": WellKnownType("FloatValue", "{ value: Float }"),
    "google.protobuf.Int32Value": WellKnownType("Int32Value", "{ value: Int }"),
    "google.protobuf.Int64Value": WellKnownType("Int64Value", "{ value: Int }"),
    "google.protobuf.UInt32Value": WellKnownType("UInt32Value", "{ value: Int }"),
    "google.protobuf.UInt64Value": WellKnownType("UInt64Value", "{ value: Int }"),
    "google.protobuf.BoolValue": WellKnownType("BoolValue", "{ value: Boolean }"),
    "google.protobuf.BytesValue": WellKnownType("BytesValue", "{ value: String }"),
    "google.protobuf.Empty": WellKnownType("Empty", "{}"),
    "google.protobuf.Any": WellKnownType("Any", "{ type_url: String, value: String }"),
    "google.protobuf.Timestamp": WellKnownType("Timestamp", "{ seconds: Int, nanos: Int }"),
    "google.protobuf.Duration": WellKnownType("Duration", "{ seconds: Int, nanos: Int }"),
    "google.protobuf.FieldMask": WellKnownType("FieldMask", "{ paths: [String] }"),
}


def to_graphql_type(type_name: str) -> str:
    """Map a proto scalar to its GraphQL scalar; other names pass through."""
    return SCALAR_TYPES.get(type_name, type_name)


def get_well_known_type(type_name: str) -> Optional[WellKnownType]:
    return WELL_KNOWN_TYPES.get(type_name)
