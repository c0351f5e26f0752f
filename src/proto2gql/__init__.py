"""Convert proto3 schemas into GraphQL SDL."""

from proto2gql.converter import protobuf_to_graphql
from proto2gql.errors import (
    DuplicateTypeError,
    NoProtoFilesError,
    Proto2GqlError,
    ProtocError,
    UnsupportedSyntaxError,
)

__all__ = [
    "protobuf_to_graphql",
    "DuplicateTypeError",
    "NoProtoFilesError",
    "Proto2GqlError",
    "ProtocError",
    "UnsupportedSyntaxError",
]
