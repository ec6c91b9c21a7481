"""Pairing of class methods with interface method signatures."""

from __future__ import annotations

from strictimpl.core.models import InterfaceSignature, MethodDeclaration, MethodSignature


class MethodMatcher:
    """Pair concrete class methods with same-named interface signatures."""

    def match(
        self,
        class_methods: tuple[MethodDeclaration, ...] | list[MethodDeclaration],
        interfaces: list[InterfaceSignature],
    ) -> list[tuple[MethodDeclaration, MethodSignature]]:
        """Match each instance method against every interface member of its name.

        Names are compared exactly. An interface member reachable through
        several resolved interfaces is paired once per class method.

        Args:
            class_methods: Methods declared directly in the class body.
            interfaces: Resolved interfaces with effective member sets.

        Returns:
            (class method, interface signature) pairs in class declaration
            order, then interface order, then member order.
        """
        pairs: list[tuple[MethodDeclaration, MethodSignature]] = []

        for method in class_methods:
            if method.is_static or not method.name:
                continue

            seen: set[tuple[str, int]] = set()
            for interface in interfaces:
                for signature in interface.members_named(method.name):
                    if signature.key in seen:
                        continue
                    seen.add(signature.key)
                    pairs.append((method, signature))

        return pairs
