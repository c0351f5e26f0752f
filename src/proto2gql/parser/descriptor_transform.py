"""Transform a protobuf FileDescriptorSet into the application's tree model."""

from __future__ import annotations

import sys
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from google.protobuf import descriptor_pb2 as d2

from proto2gql.models import (
    Declaration,
    ProtoEnum,
    ProtoField,
    ProtoMethod,
    ProtoMessage,
    ProtoNamespace,
    ProtoOneof,
    ProtoService,
)

FieldType = d2.FieldDescriptorProto

SCALAR_TYPE_NAMES: Dict[int, str] = {
    FieldType.TYPE_DOUBLE: "double",
    FieldType.TYPE_FLOAT: "float",
    FieldType.TYPE_INT64: "int64",
    FieldType.TYPE_UINT64: "uint64",
    FieldType.TYPE_INT32: "int32",
    FieldType.TYPE_FIXED64: "fixed64",
    FieldType.TYPE_FIXED32: "fixed32",
    FieldType.TYPE_BOOL: "bool",
    FieldType.TYPE_STRING: "string",
    FieldType.TYPE_BYTES: "bytes",
    FieldType.TYPE_UINT32: "uint32",
    FieldType.TYPE_SFIXED32: "sfixed32",
    FieldType.TYPE_SFIXED64: "sfixed64",
    FieldType.TYPE_SINT32: "sint32",
    FieldType.TYPE_SINT64: "sint64",
}

WELL_KNOWN_PACKAGE = "google.protobuf."

# Outer.Inner -> Outer_Inner
NESTED_NAME_SEPARATOR = "_"

# Field numbers used in SourceCodeInfo location paths.
_FILE_MESSAGE_TYPE = 4
_FILE_ENUM_TYPE = 5
_FILE_SERVICE = 6
_MESSAGE_NESTED_TYPE = 3
_MESSAGE_ENUM_TYPE = 4

_UNKNOWN_POSITION = (sys.maxsize, sys.maxsize)

LocationPath = Tuple[int, ...]
Positions = Dict[LocationPath, Tuple[int, int]]
# Fully-qualified proto name (".pkg.Outer.Inner") -> GraphQL type name.
TypeNames = Dict[str, str]


def resolve_type_reference(type_name: str, type_names: Optional[TypeNames] = None) -> str:
    """Turn a fully-qualified reference (`.pkg.Outer.Inner`) into a type name.

    Well-known types keep their dotted name so they can be substituted later.
    Known declarations use their package-relative name with nesting joined
    by underscores; anything else falls back to its short name.
    """
    qualified = type_name[1:] if type_name.startswith(".") else type_name
    if qualified.startswith(WELL_KNOWN_PACKAGE):
        return qualified
    if type_names is not None and type_name in type_names:
        return type_names[type_name]
    return qualified.rsplit(".", 1)[-1]


def collect_type_names(descriptor_set: d2.FileDescriptorSet) -> TypeNames:
    """Map every message and enum in the set to its GraphQL type name."""
    type_names: TypeNames = {}
    for file_proto in descriptor_set.file:
        scope = f".{file_proto.package}" if file_proto.package else ""
        for desc in file_proto.message_type:
            _collect_message_names(desc, scope, "", type_names)
        for desc in file_proto.enum_type:
            type_names[f"{scope}.{desc.name}"] = desc.name
    return type_names


def _collect_message_names(desc: d2.DescriptorProto, scope: str, prefix: str, type_names: TypeNames) -> None:
    full_name = f"{scope}.{desc.name}"
    local_name = f"{prefix}{desc.name}"
    type_names[full_name] = local_name
    nested_prefix = local_name + NESTED_NAME_SEPARATOR
    for nested in desc.nested_type:
        _collect_message_names(nested, full_name, nested_prefix, type_names)
    for nested_enum in desc.enum_type:
        type_names[f"{full_name}.{nested_enum.name}"] = nested_prefix + nested_enum.name


def build_tree(
    descriptor_set: d2.FileDescriptorSet,
    target_files: Optional[Sequence[str]] = None,
) -> ProtoNamespace:
    """Build the namespace tree for the target files (all files when none are given).

    Other files in the set only serve to resolve references; their
    declarations belong to their own documents.
    """
    root = ProtoNamespace(options={"syntax": _resolve_syntax(descriptor_set, target_files)})
    type_names = collect_type_names(descriptor_set)
    for file_proto in descriptor_set.file:
        if target_files is not None and file_proto.name not in target_files:
            continue
        namespace = _get_package_namespace(root, file_proto.package)
        namespace.nested.extend(_FileTransformer(file_proto, type_names).transform())
    return root


def _resolve_syntax(
    descriptor_set: d2.FileDescriptorSet,
    target_files: Optional[Sequence[str]],
) -> str:
    for file_proto in descriptor_set.file:
        if target_files is not None and file_proto.name not in target_files:
            continue
        # An empty syntax field means proto2.
        syntax = file_proto.syntax or "proto2"
        if not syntax.endswith("3"):
            return syntax
    return "proto3"


def _get_package_namespace(root: ProtoNamespace, package: str) -> ProtoNamespace:
    namespace = root
    if not package:
        return namespace
    for segment in package.split("."):
        child = namespace.get_namespace(segment)
        if child is None:
            child = ProtoNamespace(name=segment)
            namespace.nested.append(child)
        namespace = child
    return namespace


def _source_positions(file_proto: d2.FileDescriptorProto) -> Positions:
    positions: Positions = {}
    for loc in file_proto.source_code_info.location:
        if len(loc.span) >= 2:
            positions.setdefault(tuple(loc.path), (loc.span[0], loc.span[1]))
    return positions


class _FileTransformer:
    """Transform the declarations of one FileDescriptorProto."""

    def __init__(self, file_proto: d2.FileDescriptorProto, type_names: TypeNames):
        self._file = file_proto
        self._type_names = type_names
        self._positions = _source_positions(file_proto)
        self._scope = f".{file_proto.package}" if file_proto.package else ""

    def transform(self) -> List[Declaration]:
        entries: List[Tuple[LocationPath, Declaration]] = []
        for i, desc in enumerate(self._file.message_type):
            path = (_FILE_MESSAGE_TYPE, i)
            entries.append((path, self._transform_message(desc, self._scope, path)))
        for i, desc in enumerate(self._file.enum_type):
            entries.append(((_FILE_ENUM_TYPE, i), self._transform_enum(desc, self._scope)))
        for i, desc in enumerate(self._file.service):
            entries.append(((_FILE_SERVICE, i), self._transform_service(desc)))
        return self._in_source_order(entries)

    # -- helpers --

    def _in_source_order(self, entries: Iterable[Tuple[LocationPath, Declaration]]) -> List[Declaration]:
        """Order declarations as they appear in the source, when source info is present."""
        ordered = sorted(entries, key=lambda entry: self._positions.get(entry[0], _UNKNOWN_POSITION))
        return [decl for _, decl in ordered]

    def _type_name(self, full_name: str) -> str:
        return resolve_type_reference(full_name, self._type_names)

    def _field_type_name(self, field_proto: d2.FieldDescriptorProto) -> str:
        if field_proto.type in (FieldType.TYPE_MESSAGE, FieldType.TYPE_ENUM, FieldType.TYPE_GROUP):
            return self._type_name(field_proto.type_name)
        return SCALAR_TYPE_NAMES[field_proto.type]

    # -- declarations --

    def _transform_field(
        self,
        field_proto: d2.FieldDescriptorProto,
        map_entries: Dict[str, d2.DescriptorProto],
    ) -> ProtoField:
        is_repeated = field_proto.label == FieldType.LABEL_REPEATED

        entry = map_entries.get(field_proto.type_name)
        if entry is not None:
            # Map entries are synthesized as { key = 1; value = 2; }.
            value_field = next(f for f in entry.field if f.number == 2)
            return ProtoField(
                name=field_proto.name,
                type_name=self._field_type_name(value_field),
                is_repeated=is_repeated,
                is_map=True,
            )

        return ProtoField(
            name=field_proto.name,
            type_name=self._field_type_name(field_proto),
            is_repeated=is_repeated,
        )

    def _transform_oneofs(self, desc: d2.DescriptorProto) -> List[ProtoOneof]:
        """Collect real oneof groups; proto3 `optional` synthetic oneofs are dropped."""
        members: Dict[int, List[str]] = {i: [] for i in range(len(desc.oneof_decl))}
        for field_proto in desc.field:
            if field_proto.HasField("oneof_index") and not field_proto.proto3_optional:
                members[field_proto.oneof_index].append(field_proto.name)

        return [
            ProtoOneof(name=decl.name, members=members[i])
            for i, decl in enumerate(desc.oneof_decl)
            if members[i]
        ]

    def _transform_message(self, desc: d2.DescriptorProto, scope: str, path: LocationPath) -> ProtoMessage:
        full_name = f"{scope}.{desc.name}"
        map_entries = {
            f"{full_name}.{nested.name}": nested
            for nested in desc.nested_type
            if nested.options.map_entry
        }

        nested_entries: List[Tuple[LocationPath, Declaration]] = []
        for i, nested in enumerate(desc.nested_type):
            if nested.options.map_entry:
                continue
            nested_path = path + (_MESSAGE_NESTED_TYPE, i)
            nested_entries.append((nested_path, self._transform_message(nested, full_name, nested_path)))
        for i, nested_enum in enumerate(desc.enum_type):
            nested_entries.append((path + (_MESSAGE_ENUM_TYPE, i), self._transform_enum(nested_enum, full_name)))

        return ProtoMessage(
            name=self._type_name(full_name),
            fields=[self._transform_field(f, map_entries) for f in desc.field],
            oneofs=self._transform_oneofs(desc),
            nested=self._in_source_order(nested_entries),
        )

    def _transform_enum(self, desc: d2.EnumDescriptorProto, scope: str) -> ProtoEnum:
        return ProtoEnum(
            name=self._type_name(f"{scope}.{desc.name}"),
            values=[v.name for v in desc.value],
        )

    def _transform_service(self, desc: d2.ServiceDescriptorProto) -> ProtoService:
        return ProtoService(
            name=desc.name,
            methods=[
                ProtoMethod(
                    name=method.name,
                    request_type=self._type_name(method.input_type),
                    response_type=self._type_name(method.output_type),
                )
                for method in desc.method
            ],
        )
