from __future__ import annotations

from typing import Dict, List, Optional

from proto2gql.generator.message_generator import resolve_type_name
from proto2gql.generator.templates import render_block
from proto2gql.models import ProtoService
from proto2gql.registry import EmissionRegistry

QUERY = "Query"
MUTATION = "Mutation"

QUERY_PREFIXES = ("Get", "List")
MUTATION_PREFIXES = ("Create", "Update", "Delete")


def classify_method(method_name: str) -> str:
    """Classify an RPC as a Query or Mutation by its name prefix.

    Unrecognised names are treated as mutations.
    """
    if method_name.startswith(QUERY_PREFIXES):
        return QUERY
    # Listed for readability; unrecognised names are mutations as well.
    if method_name.startswith(MUTATION_PREFIXES):
        return MUTATION
    return MUTATION


def generate_service(service: ProtoService, registry: EmissionRegistry) -> Optional[str]:
    """Generate Query/Mutation blocks for a service's methods.

    Returns None when the service has no methods.
    """
    groups: Dict[str, List[Dict]] = {QUERY: [], MUTATION: []}
    for method in service.methods:
        groups[classify_method(method.name)].append({
            "name": method.name,
            "request": resolve_type_name(method.request_type, registry),
            "response": resolve_type_name(method.response_type, registry),
        })

    blocks: List[str] = []
    for root_name in (QUERY, MUTATION):
        methods = groups[root_name]
        if not methods:
            continue
        blocks.append(render_block(
            "operation.graphql.j2",
            keyword=registry.declare_root(root_name),
            name=root_name,
            methods=methods,
        ))

    if not blocks:
        return None
    return "\n\n".join(blocks)
