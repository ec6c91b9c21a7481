"""Resolution of the interfaces a class implements.

Follows the class's ``implements`` clause through the oracle, includes every
merged declaration fragment of each named interface, and walks ``extends``
chains breadth-first to compute each interface's effective member set.
"""

from __future__ import annotations

import logging

from strictimpl.analysis.oracle import TypeOracle
from strictimpl.core.models import (
    ClassDeclaration,
    HeritageReference,
    InterfaceDeclaration,
    InterfaceSignature,
    MethodSignature,
)

logger = logging.getLogger(__name__)


class InterfaceResolver:
    """Resolve a class's implemented interfaces to effective member sets."""

    def __init__(self, oracle: TypeOracle) -> None:
        self._oracle = oracle

    def resolve(self, class_decl: ClassDeclaration) -> list[InterfaceSignature]:
        """Resolve the interfaces named in a class's ``implements`` clause.

        All declaration fragments of one interface symbol are merged into a
        single InterfaceSignature.

        Args:
            class_decl: The class declaration to inspect.

        Returns:
            One InterfaceSignature per resolved interface symbol, in discovery
            order. Empty when the class has no ``implements`` clause or
            nothing resolves.
        """
        resolved: list[InterfaceSignature] = []
        seen: set[str] = set()

        for reference in class_decl.implements:
            symbol = self._oracle.symbol_for_reference(reference)
            if symbol is None:
                logger.debug(f"Dropping unresolved interface reference {reference.name}")
                continue
            if symbol in seen:
                continue
            seen.add(symbol)

            fragments = self._fragments(symbol)
            if not fragments:
                continue
            resolved.append(
                InterfaceSignature(
                    declaration_id=fragments[0].declaration_id,
                    name=fragments[0].name,
                    members=tuple(self.effective_members(*fragments)),
                )
            )

        return resolved

    def effective_members(self, *fragments: InterfaceDeclaration) -> list[MethodSignature]:
        """Compute an interface's own members plus all ancestors' members.

        The fragments of the interface form the first level; each ``extends``
        reference expands to all fragments of the referenced interface on the
        next level. A name provided at a closer level shadows the same name at
        every farther level; members of one level are unioned. Each fragment is
        visited at most once, so cyclic ``extends`` graphs terminate.
        """
        members: list[MethodSignature] = []
        member_keys: set[tuple[str, int]] = set()
        shadowed: set[str] = set()
        visited: set[str] = {fragment.declaration_id for fragment in fragments}
        level: list[InterfaceDeclaration] = list(fragments)

        while level:
            level_names: set[str] = set()
            next_level: list[InterfaceDeclaration] = []

            for current in level:
                for method in current.methods:
                    if method.name in shadowed or method.key in member_keys:
                        continue
                    member_keys.add(method.key)
                    members.append(method)
                    level_names.add(method.name)

                for reference in current.extends:
                    for ancestor in self._interface_declarations(reference):
                        if ancestor.declaration_id in visited:
                            logger.debug(
                                f"Skipping already visited interface {ancestor.name} "
                                f"({ancestor.declaration_id})"
                            )
                            continue
                        visited.add(ancestor.declaration_id)
                        next_level.append(ancestor)

            shadowed |= level_names
            level = next_level

        return members

    def _interface_declarations(
        self, reference: HeritageReference
    ) -> list[InterfaceDeclaration]:
        """Resolve a reference to its interface declaration fragments."""
        symbol = self._oracle.symbol_for_reference(reference)
        if symbol is None:
            logger.debug(f"Dropping unresolved interface reference {reference.name}")
            return []
        return self._fragments(symbol)

    def _fragments(self, symbol: str) -> list[InterfaceDeclaration]:
        return [
            declaration
            for declaration in self._oracle.declarations_for_symbol(symbol)
            if isinstance(declaration, InterfaceDeclaration)
        ]
