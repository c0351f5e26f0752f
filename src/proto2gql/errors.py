from __future__ import annotations


class Proto2GqlError(Exception):
    """Base class for conversion errors."""


class UnsupportedSyntaxError(Proto2GqlError):
    """Raised when a schema does not declare proto3 syntax."""

    def __init__(self, syntax: str):
        self.syntax = syntax
        super().__init__("Invalid Protobuf version detected, currently only proto3 is supported.")


class DuplicateTypeError(Proto2GqlError):
    """Raised when two declarations would produce the same GraphQL type name."""

    def __init__(self, type_name: str):
        self.type_name = type_name
        super().__init__(f"Duplicate GraphQL type name {type_name!r}")


class ProtocError(Proto2GqlError):
    """Raised when protoc cannot build a descriptor set."""


class NoProtoFilesError(Proto2GqlError):
    """Raised when no .proto files are found under the input path."""
