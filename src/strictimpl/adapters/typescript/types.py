"""TypeScript type forms and their construction from tree-sitter nodes.

Type annotations are converted once, at scan time, into small immutable type
forms. Named references stay unbound here; the type oracle binds them to
declarations of the scope the annotation was written in. Constructs outside
the supported subset become ``OpaqueType``, which the oracle reports as
unresolvable.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from tree_sitter import Node

from strictimpl.adapters.typescript.ast_utils import TsAstUtils

logger = logging.getLogger(__name__)

PREDEFINED_TYPES = frozenset(
    {
        "number",
        "string",
        "boolean",
        "bigint",
        "symbol",
        "object",
        "void",
        "never",
        "null",
        "undefined",
    }
)


class TsType:
    """Base class for TypeScript type forms."""

    __slots__ = ()


@dataclass(frozen=True)
class AnyType(TsType):
    """``any`` or ``unknown``."""

    kind: str = "any"


@dataclass(frozen=True)
class PrimitiveType(TsType):
    name: str


@dataclass(frozen=True)
class LiteralType(TsType):
    """A literal type; ``base`` is the primitive it widens to."""

    base: str
    value: str


@dataclass(frozen=True)
class UnionType(TsType):
    members: tuple[TsType, ...]


@dataclass(frozen=True)
class IntersectionType(TsType):
    members: tuple[TsType, ...]


@dataclass(frozen=True)
class ArrayType(TsType):
    element: TsType


@dataclass(frozen=True)
class TupleType(TsType):
    elements: tuple[TsType, ...]


@dataclass(frozen=True)
class ObjectMember:
    name: str
    type: TsType | None
    optional: bool = False
    is_method: bool = False


@dataclass(frozen=True)
class ObjectType(TsType):
    """Object type literal, e.g. ``{ name: string; greet(): void }``."""

    members: tuple[ObjectMember, ...] = ()


@dataclass(frozen=True)
class FunctionType(TsType):
    parameters: tuple[TsType, ...]
    required_count: int
    has_rest: bool
    return_type: TsType


@dataclass(frozen=True)
class NamedType(TsType):
    """Reference to a declared or builtin type.

    ``symbol`` is empty until the oracle binds the reference.
    """

    name: str
    arguments: tuple[TsType, ...] = ()
    symbol: str = ""


@dataclass(frozen=True)
class OpaqueType(TsType):
    """Type construct the oracle does not model."""

    text: str


def union_of(members: list[TsType]) -> TsType:
    """Build a flattened union, collapsing single-member unions."""
    flat: list[TsType] = []
    for member in members:
        candidates = member.members if isinstance(member, UnionType) else (member,)
        for candidate in candidates:
            if candidate not in flat:
                flat.append(candidate)
    if len(flat) == 1:
        return flat[0]
    return UnionType(tuple(flat))


# `boolean` is the union of its two literals, as in the TypeScript checker.
BOOLEAN = UnionType((LiteralType("boolean", "true"), LiteralType("boolean", "false")))


class TypeBuilder:
    """Convert tree-sitter type nodes into ``TsType`` forms."""

    def __init__(self, content: bytes, type_parameters: frozenset[str] = frozenset()) -> None:
        """Initialize the builder.

        Args:
            content: Source file content
            type_parameters: Names of type parameters in scope; references to
                them are opaque
        """
        self._content = content
        self._type_parameters = type_parameters

    def with_type_parameters(self, names: frozenset[str]) -> TypeBuilder:
        if not names:
            return self
        return TypeBuilder(self._content, self._type_parameters | names)

    def build(self, node: Node | None) -> TsType:
        """Build the type form of a type node (or of a ``type_annotation``)."""
        if node is None:
            return OpaqueType("")
        if node.type == "type_annotation":
            inner = TsAstUtils.first_named_child(node)
            return self.build(inner)
        return self._build_impl(node)

    def _text(self, node: Node) -> str:
        return TsAstUtils.get_node_text(node, self._content)

    def _build_impl(self, node: Node) -> TsType:
        node_type = node.type
        text = self._text(node)

        if node_type == "predefined_type":
            return self._predefined(text)

        if node_type == "type_identifier":
            if text in self._type_parameters:
                return OpaqueType(text)
            if text in PREDEFINED_TYPES:
                return self._predefined(text)
            return NamedType(text)

        if node_type == "nested_type_identifier":
            return NamedType(text.replace(" ", ""))

        if node_type == "generic_type":
            return self._generic(node)

        if node_type == "literal_type":
            return self._literal(node)

        if node_type == "union_type":
            return union_of([self._build_impl(child) for child in node.named_children])

        if node_type == "intersection_type":
            members: list[TsType] = []
            for child in node.named_children:
                built = self._build_impl(child)
                if isinstance(built, IntersectionType):
                    members.extend(built.members)
                else:
                    members.append(built)
            return IntersectionType(tuple(members))

        if node_type == "array_type":
            return ArrayType(self.build(TsAstUtils.first_named_child(node)))

        if node_type in ("parenthesized_type", "readonly_type"):
            inner = TsAstUtils.first_named_child(node)
            return self._build_impl(inner) if inner is not None else OpaqueType(text)

        if node_type == "tuple_type":
            elements = [self._build_impl(child) for child in node.named_children]
            if any(isinstance(element, OpaqueType) for element in elements):
                return OpaqueType(text)
            return TupleType(tuple(elements))

        if node_type == "object_type":
            return self._object(node)

        if node_type == "function_type":
            return self._function(node)

        logger.debug(f"Unsupported type node {node_type}: {text}")
        return OpaqueType(text)

    def _predefined(self, text: str) -> TsType:
        if text in ("any", "unknown"):
            return AnyType(text)
        if text == "boolean":
            return BOOLEAN
        if text in PREDEFINED_TYPES:
            return PrimitiveType(text)
        return OpaqueType(text)

    def _literal(self, node: Node) -> TsType:
        inner = TsAstUtils.first_named_child(node)
        text = self._text(node)
        if inner is None:
            return OpaqueType(text)
        if inner.type in ("null", "undefined"):
            return PrimitiveType(inner.type)
        if inner.type in ("number", "unary_expression"):
            return LiteralType("number", text)
        if inner.type in ("string", "template_string"):
            return LiteralType("string", text)
        if inner.type in ("true", "false"):
            return LiteralType("boolean", text)
        return OpaqueType(text)

    def _generic(self, node: Node) -> TsType:
        name_node = node.child_by_field_name("name")
        args_node = node.child_by_field_name("type_arguments")
        if name_node is None:
            return OpaqueType(self._text(node))
        name = self._text(name_node).replace(" ", "")
        if name in self._type_parameters:
            return OpaqueType(self._text(node))
        arguments: tuple[TsType, ...] = ()
        if args_node is not None:
            arguments = tuple(self._build_impl(child) for child in args_node.named_children)
        return NamedType(name, arguments)

    def _object(self, node: Node) -> TsType:
        members: list[ObjectMember] = []
        for child in node.named_children:
            if child.type == "property_signature":
                name_node = child.child_by_field_name("name")
                if name_node is None:
                    return OpaqueType(self._text(node))
                type_node = child.child_by_field_name("type")
                members.append(
                    ObjectMember(
                        name=self._text(name_node),
                        type=self.build(type_node) if type_node is not None else None,
                        optional=TsAstUtils.has_optional_marker(child),
                    )
                )
            elif child.type == "method_signature":
                name_node = child.child_by_field_name("name")
                if name_node is None:
                    return OpaqueType(self._text(node))
                members.append(
                    ObjectMember(
                        name=self._text(name_node),
                        type=None,
                        optional=TsAstUtils.has_optional_marker(child),
                        is_method=True,
                    )
                )
            elif child.type == "comment":
                continue
            else:
                # index, call and construct signatures are not modeled
                return OpaqueType(self._text(node))
        return ObjectType(tuple(members))

    def _function(self, node: Node) -> TsType:
        if node.child_by_field_name("type_parameters") is not None:
            return OpaqueType(self._text(node))
        params_node = node.child_by_field_name("parameters")
        return_node = node.child_by_field_name("return_type")
        if params_node is None or return_node is None:
            return OpaqueType(self._text(node))

        parameters: list[TsType] = []
        required_count = 0
        has_rest = False
        for param in TsAstUtils.parameter_nodes(params_node):
            pattern = param.child_by_field_name("pattern")
            if pattern is not None and pattern.type == "this":
                continue
            type_node = param.child_by_field_name("type")
            parameters.append(self.build(type_node) if type_node is not None else AnyType())
            if pattern is not None and pattern.type == "rest_pattern":
                has_rest = True
            elif TsAstUtils.is_optional_parameter(param):
                continue
            else:
                required_count += 1
        return FunctionType(
            parameters=tuple(parameters),
            required_count=required_count,
            has_rest=has_rest,
            return_type=self._build_impl(return_node),
        )
