from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Set

from proto2gql.errors import DuplicateTypeError
from proto2gql.type_mapping import WellKnownType


@dataclass
class EmissionRegistry:
    """Per-document record of synthesized auxiliary types.

    A fresh registry is created for every output document and threaded
    through the emitters; it is never shared between documents.
    """

    well_known: Set[str] = field(default_factory=set)
    root_types: Set[str] = field(default_factory=set)
    type_names: Set[str] = field(default_factory=set)
    # Most recently synthesized first.
    declarations: List[str] = field(default_factory=list)

    def synthesize(self, key: str, well_known_type: WellKnownType) -> bool:
        """Register a well-known type and prepend its declaration.

        Returns False when the type was already synthesized for this document.
        """
        if key in self.well_known:
            return False
        self.declare_type(well_known_type.type_name)
        self.well_known.add(key)
        self.declarations.insert(0, well_known_type.declaration())
        return True

    def declare_type(self, *names: str) -> None:
        """Claim GraphQL type names for this document.

        Raises DuplicateTypeError if any of them is already taken.
        """
        for name in names:
            if name in self.type_names:
                raise DuplicateTypeError(name)
        self.type_names.update(names)

    def declare_root(self, name: str) -> str:
        """Return the SDL keyword for a root operation type block.

        The first block for a root type declares it; later blocks extend it.
        """
        if name in self.root_types:
            return "extend type"
        self.root_types.add(name)
        return "type"
