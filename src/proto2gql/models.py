"""Read-only model of a parsed protobuf descriptor tree."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import ClassVar, Dict, List, Optional, Union


class DeclarationKind(Enum):
    NAMESPACE = auto()
    MESSAGE = auto()
    ENUM = auto()
    SERVICE = auto()


def normalize_field_name(name: str) -> str:
    """Strip exactly one leading qualifier dot from a field name."""
    if name.startswith("."):
        return name[1:]
    return name


@dataclass
class ProtoField:
    """A message field: [repeated|map<K, V>] type name = number;"""

    name: str
    type_name: str
    is_repeated: bool = False
    is_map: bool = False


@dataclass
class ProtoOneof:
    name: str
    members: List[str] = field(default_factory=list)


@dataclass
class ProtoMessage:
    """A message definition with its fields, oneof groups and nested types."""

    kind: ClassVar[DeclarationKind] = DeclarationKind.MESSAGE

    name: str
    fields: List[ProtoField] = field(default_factory=list)
    oneofs: List[ProtoOneof] = field(default_factory=list)
    nested: List[Declaration] = field(default_factory=list)

    def get_field(self, name: str) -> Optional[ProtoField]:
        for f in self.fields:
            if f.name == name:
                return f
        return None


@dataclass
class ProtoEnum:
    kind: ClassVar[DeclarationKind] = DeclarationKind.ENUM

    name: str
    values: List[str] = field(default_factory=list)


@dataclass
class ProtoMethod:
    name: str
    request_type: str
    response_type: str


@dataclass
class ProtoService:
    kind: ClassVar[DeclarationKind] = DeclarationKind.SERVICE

    name: str
    methods: List[ProtoMethod] = field(default_factory=list)


@dataclass
class ProtoNamespace:
    """A package node. The root namespace has an empty name and holds file options."""

    kind: ClassVar[DeclarationKind] = DeclarationKind.NAMESPACE

    name: str = ""
    nested: List[Declaration] = field(default_factory=list)
    options: Dict[str, str] = field(default_factory=dict)

    @property
    def syntax(self) -> str:
        return self.options.get("syntax", "")

    def get_namespace(self, name: str) -> Optional[ProtoNamespace]:
        for decl in self.nested:
            if decl.kind is DeclarationKind.NAMESPACE and decl.name == name:
                return decl
        return None


Declaration = Union[ProtoNamespace, ProtoMessage, ProtoEnum, ProtoService]
