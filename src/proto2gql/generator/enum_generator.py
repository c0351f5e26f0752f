from __future__ import annotations

from proto2gql.generator.templates import render_block
from proto2gql.models import ProtoEnum


def generate_enum(enum: ProtoEnum) -> str:
    """Generate a GraphQL enum block. Values keep their declared order."""
    return render_block("enum.graphql.j2", name=enum.name, values=enum.values)
