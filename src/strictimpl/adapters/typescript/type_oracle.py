"""TypeScript type oracle for Phase 2 checking.

This module implements the TypeOracle contract over a scanned symbol table. It
binds named type references to declarations, and answers assignability
queries with a best-effort model of TypeScript's rules: nominal hierarchy
first, then structural member comparison. Whenever a type uses a construct the
model does not cover, the type is reported as unresolvable instead of guessed.
"""

from __future__ import annotations

import logging

from strictimpl.adapters.base import SymbolTable
from strictimpl.adapters.typescript.types import (
    BOOLEAN,
    AnyType,
    ArrayType,
    FunctionType,
    IntersectionType,
    LiteralType,
    NamedType,
    ObjectMember,
    ObjectType,
    OpaqueType,
    PrimitiveType,
    TsType,
    TupleType,
    UnionType,
    union_of,
)
from strictimpl.analysis.oracle import TypeOracle, TypeOracleError
from strictimpl.core.models import (
    ClassDeclaration,
    Declaration,
    HeritageReference,
    TypeAnnotation,
)

logger = logging.getLogger(__name__)

BUILTIN_PREFIX = "builtin::"

ARRAY_BUILTINS = frozenset({"Array", "ReadonlyArray"})
# Builtin object types compared by name and (covariantly) by type arguments.
GENERIC_BUILTINS = frozenset(
    {
        "Promise",
        "PromiseLike",
        "Record",
        "Map",
        "ReadonlyMap",
        "Set",
        "ReadonlySet",
        "WeakMap",
        "WeakSet",
        "Iterable",
        "Iterator",
        "Date",
        "RegExp",
        "Error",
    }
)
TOP_OBJECT_BUILTINS = frozenset({"Object"})
FUNCTION_BUILTINS = frozenset({"Function"})

NULLISH = frozenset({"null", "undefined", "void"})

Pair = tuple[TsType, TsType]


def _expand_boolean(candidate: TsType) -> TsType:
    if candidate == PrimitiveType("boolean"):
        return BOOLEAN
    return candidate


class TypeScriptTypeOracle(TypeOracle):
    """Type oracle backed by a TypeScript project symbol table."""

    def __init__(self, symbol_table: SymbolTable) -> None:
        """Initialize the oracle.

        Args:
            symbol_table: Symbol table from Phase 1; only read here.
        """
        self._symbols = symbol_table

    # -- symbol queries ------------------------------------------------------

    def symbol_for_reference(self, reference: HeritageReference) -> str | None:
        return self._symbols.resolve_name(reference.name, reference.scope)

    def declarations_for_symbol(self, symbol: str) -> list[Declaration]:
        return self._symbols.get_declarations(symbol)

    # -- type resolution -----------------------------------------------------

    def resolve_type(self, annotation: TypeAnnotation) -> TsType | None:
        """Bind an annotation's type form in the scope it was written in.

        Raises:
            TypeOracleError: If the annotation was not produced by the
                TypeScript front end.
        """
        if not isinstance(annotation.expr, TsType):
            raise TypeOracleError(
                f"Annotation '{annotation.text}' carries no TypeScript type form"
            )
        bound = self._bind(annotation.expr, annotation.scope, frozenset())
        if bound is None:
            logger.debug(f"Unresolvable type '{annotation.text}' in {annotation.scope}")
        return bound

    def rest_element_type(self, resolved: TsType) -> TsType | None:
        if isinstance(resolved, ArrayType):
            return resolved.element
        if isinstance(resolved, TupleType) and resolved.elements:
            return union_of(list(resolved.elements))
        if isinstance(resolved, AnyType):
            return resolved
        return None

    def _bind(self, expr: TsType, scope: str, aliases: frozenset[str]) -> TsType | None:
        """Bind named references; None if any part is unresolvable."""
        if isinstance(expr, OpaqueType):
            return None
        if isinstance(expr, (AnyType, PrimitiveType, LiteralType)):
            return expr
        if isinstance(expr, UnionType):
            members = self._bind_all(expr.members, scope, aliases)
            return union_of(members) if members is not None else None
        if isinstance(expr, IntersectionType):
            members = self._bind_all(expr.members, scope, aliases)
            return IntersectionType(tuple(members)) if members is not None else None
        if isinstance(expr, ArrayType):
            element = self._bind(expr.element, scope, aliases)
            return ArrayType(element) if element is not None else None
        if isinstance(expr, TupleType):
            elements = self._bind_all(expr.elements, scope, aliases)
            return TupleType(tuple(elements)) if elements is not None else None
        if isinstance(expr, ObjectType):
            return self._bind_object(expr, scope, aliases)
        if isinstance(expr, FunctionType):
            parameters = self._bind_all(expr.parameters, scope, aliases)
            return_type = self._bind(expr.return_type, scope, aliases)
            if parameters is None or return_type is None:
                return None
            return FunctionType(
                parameters=tuple(parameters),
                required_count=expr.required_count,
                has_rest=expr.has_rest,
                return_type=return_type,
            )
        if isinstance(expr, NamedType):
            return self._bind_named(expr, scope, aliases)
        return None

    def _bind_all(
        self, exprs: tuple[TsType, ...], scope: str, aliases: frozenset[str]
    ) -> list[TsType] | None:
        bound: list[TsType] = []
        for expr in exprs:
            result = self._bind(expr, scope, aliases)
            if result is None:
                return None
            bound.append(result)
        return bound

    def _bind_object(
        self, expr: ObjectType, scope: str, aliases: frozenset[str]
    ) -> ObjectType | None:
        members: list[ObjectMember] = []
        for member in expr.members:
            member_type = None
            if member.type is not None:
                member_type = self._bind(member.type, scope, aliases)
                if member_type is None:
                    return None
            members.append(
                ObjectMember(member.name, member_type, member.optional, member.is_method)
            )
        return ObjectType(tuple(members))

    def _bind_named(
        self, expr: NamedType, scope: str, aliases: frozenset[str]
    ) -> TsType | None:
        arguments = self._bind_all(expr.arguments, scope, aliases)
        if arguments is None:
            return None

        symbol = self._symbols.resolve_name(expr.name, scope)
        if symbol is not None:
            kind = self._symbols.get_kind(symbol)
            if kind == "alias":
                if symbol in aliases:
                    logger.debug(f"Recursive type alias {expr.name}")
                    return None
                alias_scope = symbol.rpartition("::")[0]
                return self._bind(
                    self._symbols.type_aliases[symbol], alias_scope, aliases | {symbol}
                )
            if kind == "enum" and self._symbols.enum_bases.get(symbol) is None:
                logger.debug(f"Enum {expr.name} has computed or mixed members")
                return None
            return NamedType(expr.name, tuple(arguments), symbol)

        if expr.name in ARRAY_BUILTINS:
            if len(arguments) > 1:
                return None
            return ArrayType(arguments[0] if arguments else AnyType())
        if expr.name in GENERIC_BUILTINS | TOP_OBJECT_BUILTINS | FUNCTION_BUILTINS:
            return NamedType(expr.name, tuple(arguments), BUILTIN_PREFIX + expr.name)
        return None

    # -- assignability -------------------------------------------------------

    def is_assignable(self, source: TsType, target: TsType) -> bool:
        return self._assignable(source, target, frozenset())

    def _assignable(self, source: TsType, target: TsType, in_progress: frozenset[Pair]) -> bool:
        source = _expand_boolean(source)
        target = _expand_boolean(target)
        if source == target:
            return True
        if isinstance(target, AnyType):
            return True
        if isinstance(source, AnyType):
            return source.kind == "any"
        if isinstance(source, PrimitiveType) and source.name == "never":
            return True
        if isinstance(target, PrimitiveType) and target.name == "void":
            # A value returned where void is expected is simply ignored.
            return True

        if isinstance(source, UnionType):
            return all(self._assignable(m, target, in_progress) for m in source.members)
        if isinstance(target, UnionType):
            return any(self._assignable(source, m, in_progress) for m in target.members)
        if isinstance(target, IntersectionType):
            return all(self._assignable(source, m, in_progress) for m in target.members)
        if isinstance(source, IntersectionType):
            return any(self._assignable(m, target, in_progress) for m in source.members)

        if isinstance(source, LiteralType):
            if isinstance(target, LiteralType):
                return False
            source = PrimitiveType(source.base)
            if source == target:
                return True

        if isinstance(source, PrimitiveType):
            return self._primitive_assignable(source, target)
        if isinstance(target, PrimitiveType):
            if self._is_enum(source):
                return target.name == self._enum_base(source)
            # Only `object` accepts non-primitive sources.
            return target.name == "object"

        if self._is_top_object(target):
            return True
        if isinstance(target, NamedType) and target.name in FUNCTION_BUILTINS:
            return isinstance(source, FunctionType) or (
                isinstance(source, NamedType) and source.name in FUNCTION_BUILTINS
            )

        if isinstance(target, ArrayType):
            if isinstance(source, ArrayType):
                return self._assignable(source.element, target.element, in_progress)
            if isinstance(source, TupleType):
                return all(
                    self._assignable(e, target.element, in_progress) for e in source.elements
                )
            return False
        if isinstance(target, TupleType):
            return (
                isinstance(source, TupleType)
                and len(source.elements) == len(target.elements)
                and all(
                    self._assignable(s, t, in_progress)
                    for s, t in zip(source.elements, target.elements)
                )
            )

        if isinstance(target, FunctionType):
            return isinstance(source, FunctionType) and self._function_assignable(
                source, target, in_progress
            )

        if isinstance(source, NamedType) and isinstance(target, NamedType):
            if source.symbol == target.symbol:
                return self._arguments_assignable(source, target, in_progress)
            if target.symbol in self._supertypes(source.symbol):
                return True

        if isinstance(target, (NamedType, ObjectType)):
            return self._structurally_assignable(source, target, in_progress)
        return False

    def _primitive_assignable(self, source: PrimitiveType, target: TsType) -> bool:
        if isinstance(target, PrimitiveType):
            return source.name == target.name
        if self._is_enum(target):
            # Only numeric enums accept plain numbers.
            return source.name == "number" and self._enum_base(target) == "number"
        if source.name in NULLISH:
            return False
        # Primitives are accepted by `{}` and `Object`, which are handled by the caller.
        return self._is_top_object(target)

    def _is_top_object(self, target: TsType) -> bool:
        if isinstance(target, ObjectType) and not target.members:
            return True
        return isinstance(target, NamedType) and target.name in TOP_OBJECT_BUILTINS and (
            target.symbol.startswith(BUILTIN_PREFIX)
        )

    def _is_enum(self, candidate: TsType) -> bool:
        return (
            isinstance(candidate, NamedType)
            and self._symbols.get_kind(candidate.symbol) == "enum"
        )

    def _enum_base(self, enum: NamedType) -> str | None:
        return self._symbols.enum_bases.get(enum.symbol)

    def _arguments_assignable(
        self, source: NamedType, target: NamedType, in_progress: frozenset[Pair]
    ) -> bool:
        if not source.arguments or not target.arguments:
            return True
        if len(source.arguments) != len(target.arguments):
            return False
        return all(
            self._assignable(s, t, in_progress)
            for s, t in zip(source.arguments, target.arguments)
        )

    def _function_assignable(
        self, source: FunctionType, target: FunctionType, in_progress: frozenset[Pair]
    ) -> bool:
        if not source.has_rest and source.required_count > len(target.parameters):
            return False
        for s_param, t_param in zip(source.parameters, target.parameters):
            if not self._assignable(t_param, s_param, in_progress):
                return False
        return self._assignable(source.return_type, target.return_type, in_progress)

    def _supertypes(self, symbol: str) -> set[str]:
        """Transitive supertypes (extends/implements) of a declared type."""
        found: set[str] = set()
        pending = [symbol]
        while pending:
            current = pending.pop()
            for declaration in self._symbols.get_declarations(current):
                references = list(declaration.extends)
                if isinstance(declaration, ClassDeclaration):
                    references.extend(declaration.implements)
                for reference in references:
                    parent = self._symbols.resolve_name(reference.name, reference.scope)
                    if parent is None or parent in found or parent == symbol:
                        continue
                    found.add(parent)
                    pending.append(parent)
        return found

    def _structurally_assignable(
        self, source: TsType, target: TsType, in_progress: frozenset[Pair]
    ) -> bool:
        pair = (source, target)
        if pair in in_progress:
            return True
        in_progress = in_progress | {pair}

        target_members = self._members(target)
        source_members = self._members(source)
        if target_members is None or source_members is None:
            return False

        for name, member in target_members.items():
            provided = source_members.get(name)
            if provided is None:
                if member.optional:
                    continue
                return False
            if member.type is not None and provided.type is not None:
                if not self._assignable(provided.type, member.type, in_progress):
                    return False
        return True

    def _members(self, candidate: TsType) -> dict[str, ObjectMember] | None:
        """Known members of an object-like type, or None when not modeled."""
        if isinstance(candidate, ObjectType):
            return {member.name: member for member in candidate.members}
        if not isinstance(candidate, NamedType) or candidate.symbol.startswith(BUILTIN_PREFIX):
            return None
        if self._symbols.get_kind(candidate.symbol) not in ("interface", "class"):
            return None

        members: dict[str, ObjectMember] = {}
        visited: set[str] = set()
        pending = [candidate.symbol]
        while pending:
            symbol = pending.pop(0)
            if symbol in visited:
                continue
            visited.add(symbol)
            for declaration in self._symbols.get_declarations(symbol):
                self._collect_members(declaration, members)
                for reference in declaration.extends:
                    parent = self._symbols.resolve_name(reference.name, reference.scope)
                    if parent is not None:
                        pending.append(parent)
        return members

    def _collect_members(
        self, declaration: Declaration, members: dict[str, ObjectMember]
    ) -> None:
        for prop in declaration.properties:
            if prop.name in members:
                continue
            prop_type = None
            if prop.type is not None and isinstance(prop.type.expr, TsType):
                prop_type = self._bind(prop.type.expr, prop.type.scope, frozenset())
            members[prop.name] = ObjectMember(prop.name, prop_type, prop.optional)
        for method in declaration.methods:
            if method.name not in members:
                members[method.name] = ObjectMember(method.name, None, is_method=True)
