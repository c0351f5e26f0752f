from __future__ import annotations

from typing import Dict, List

from proto2gql.generator.templates import render_block
from proto2gql.models import ProtoField, ProtoMessage, ProtoOneof, normalize_field_name
from proto2gql.registry import EmissionRegistry
from proto2gql.type_mapping import MAP_TYPE, get_well_known_type, to_graphql_type


def resolve_type_name(type_name: str, registry: EmissionRegistry) -> str:
    """Resolve a proto type reference to a GraphQL type name.

    Well-known types are synthesized into the document on first use.
    Anything that is neither well-known nor a scalar passes through as a
    forward reference.
    """
    well_known = get_well_known_type(type_name)
    if well_known is not None:
        registry.synthesize(type_name, well_known)
        return well_known.type_name
    return to_graphql_type(type_name)


def _get_field_type(field: ProtoField, registry: EmissionRegistry) -> str:
    # Map key/value types are not reified.
    if field.is_map:
        return MAP_TYPE
    gql_type = resolve_type_name(field.type_name, registry)
    if field.is_repeated:
        return f"[{gql_type}]"
    return gql_type


def _build_oneof(oneof: ProtoOneof, message: ProtoMessage) -> Dict:
    types: List[str] = []
    for member in oneof.members:
        member_field = message.get_field(member)
        # Members always come from the message's own field table.
        type_name = member_field.type_name if member_field is not None else member
        types.append(to_graphql_type(type_name))
    return {
        "name": oneof.name,
        "members": list(oneof.members),
        "types": types,
    }


def generate_message(message: ProtoMessage, registry: EmissionRegistry) -> str:
    """Generate the output `type` and the parallel `input` type for a message.

    Oneof groups are emitted as a comment listing the members followed by a
    `name: A | B` field. The `|` shorthand is not valid SDL and downstream
    consumers have to special-case it.
    """
    fields = [
        {
            "name": normalize_field_name(f.name),
            "type": _get_field_type(f, registry),
        }
        for f in message.fields
    ]
    oneofs = [_build_oneof(o, message) for o in message.oneofs]

    return render_block(
        "message.graphql.j2",
        declarations=[
            ("type", message.name),
            ("input", f"{message.name}Input"),
        ],
        fields=fields,
        oneofs=oneofs,
    )
