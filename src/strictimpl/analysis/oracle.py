"""Type oracle contract consumed by the analysis core.

The oracle is the only place where types are looked up and compared. The core
treats it as a read-only collaborator: it never writes through it, and any
exception it raises is terminal for the file being analyzed.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from strictimpl.core.models import Declaration, HeritageReference, TypeAnnotation

ResolvedType = Any


class TypeOracleError(Exception):
    """Raised when the type oracle cannot serve a query at all."""


class TypeOracle(ABC):
    """Symbol lookup and assignability queries over one analysis run."""

    @abstractmethod
    def symbol_for_reference(self, reference: HeritageReference) -> str | None:
        """Resolve a heritage-clause reference to a symbol key.

        Returns:
            The symbol key, or None when the reference cannot be resolved.
        """
        ...

    @abstractmethod
    def declarations_for_symbol(self, symbol: str) -> list[Declaration]:
        """Return every declaration fragment contributing to a symbol."""
        ...

    @abstractmethod
    def resolve_type(self, annotation: TypeAnnotation) -> ResolvedType | None:
        """Resolve a type annotation.

        Returns:
            An oracle-specific type, or None when the type is unknown.
        """
        ...

    @abstractmethod
    def is_assignable(self, source: ResolvedType, target: ResolvedType) -> bool:
        """Check whether a value of type ``source`` may be used as ``target``."""
        ...

    def rest_element_type(self, resolved: ResolvedType) -> ResolvedType | None:
        """Element type of a rest parameter's array type, if known."""
        return None
