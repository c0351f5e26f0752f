"""Walk a protobuf descriptor tree and assemble a GraphQL SDL document."""

from __future__ import annotations

from typing import List, Optional

from proto2gql.errors import UnsupportedSyntaxError
from proto2gql.generator.enum_generator import generate_enum
from proto2gql.generator.message_generator import generate_message
from proto2gql.generator.service_generator import generate_service
from proto2gql.models import Declaration, DeclarationKind, ProtoMessage, ProtoNamespace
from proto2gql.registry import EmissionRegistry

# Only reachable through well-known type substitution.
GOOGLE_PACKAGE = "google"


def is_type_name(name: str) -> bool:
    """Message, enum and service names start with an uppercase letter."""
    return name[:1].isupper()


def protobuf_to_graphql(root: ProtoNamespace) -> Optional[str]:
    """Convert a descriptor tree into SDL text.

    Returns None when the tree holds nothing to convert. Raises
    UnsupportedSyntaxError unless the root declares proto3 syntax.
    """
    syntax = root.syntax
    if not syntax.endswith("3"):
        raise UnsupportedSyntaxError(syntax)

    if not root.nested:
        return None

    registry = EmissionRegistry()
    blocks: List[str] = []

    for decl in root.nested:
        if decl.kind is DeclarationKind.NAMESPACE:
            if decl.name == GOOGLE_PACKAGE:
                continue
            package_blocks = _walk_package(decl, registry)
            if package_blocks:
                blocks.append("\n\n".join(package_blocks))
        elif is_type_name(decl.name):
            blocks.extend(_emit_declaration(decl, registry))

    if not blocks:
        return None

    return "\n\n".join(registry.declarations + blocks) + "\n"


def _walk_package(namespace: ProtoNamespace, registry: EmissionRegistry) -> List[str]:
    """Emit a package's declarations in order, descending into sub-packages."""
    blocks: List[str] = []
    for child in namespace.nested:
        if child.kind is DeclarationKind.NAMESPACE:
            blocks.extend(_walk_package(child, registry))
        elif is_type_name(child.name):
            blocks.extend(_emit_declaration(child, registry))
    return blocks


def _emit_declaration(decl: Declaration, registry: EmissionRegistry) -> List[str]:
    kind = decl.kind
    if kind is DeclarationKind.MESSAGE:
        return _emit_message(decl, registry)
    if kind is DeclarationKind.ENUM:
        registry.declare_type(decl.name)
        return [generate_enum(decl)]
    if kind is DeclarationKind.SERVICE:
        block = generate_service(decl, registry)
        return [block] if block is not None else []
    if kind is DeclarationKind.NAMESPACE:
        return _walk_package(decl, registry)
    raise ValueError(f"Unknown declaration kind: {kind}")


def _emit_message(message: ProtoMessage, registry: EmissionRegistry) -> List[str]:
    """Emit a message followed by its nested messages and enums."""
    registry.declare_type(message.name, f"{message.name}Input")
    blocks = [generate_message(message, registry)]
    for child in message.nested:
        if is_type_name(child.name):
            blocks.extend(_emit_declaration(child, registry))
    return blocks
