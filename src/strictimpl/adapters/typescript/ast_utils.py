"""TypeScript AST utility functions.

This module provides utility functions for extracting information
from tree-sitter AST nodes for TypeScript source code.
"""

from __future__ import annotations

import posixpath
from collections.abc import Iterator
from pathlib import Path

from tree_sitter import Node

from strictimpl.core.models import HeritageReference, SourceSpan

CLASS_NODE_TYPES = ("class_declaration", "abstract_class_declaration", "class")

SOURCE_SUFFIXES = (".d.ts", ".d.mts", ".d.cts", ".ts", ".tsx", ".mts", ".cts", ".js", ".mjs")


class TsAstUtils:
    """TypeScript AST utility functions for tree-sitter nodes."""

    @staticmethod
    def get_node_text(node: Node, content: bytes) -> str:
        """Get the text content of a node.

        Args:
            node: The AST node
            content: Source file content

        Returns:
            The text content of the node
        """
        return content[node.start_byte:node.end_byte].decode("utf-8")

    @staticmethod
    def span(node: Node) -> SourceSpan:
        """Source span of a node (byte offsets, 1-based line and column)."""
        return SourceSpan(
            start_offset=node.start_byte,
            length=node.end_byte - node.start_byte,
            line=node.start_point[0] + 1,
            column=node.start_point[1] + 1,
        )

    @staticmethod
    def first_named_child(node: Node) -> Node | None:
        for child in node.named_children:
            if child.type != "comment":
                return child
        return None

    @staticmethod
    def iter_nodes(root: Node, node_types: tuple[str, ...]) -> Iterator[Node]:
        """Yield nodes of the given types in source (pre-)order.

        Uses an explicit stack so deeply nested sources cannot exhaust the
        interpreter's recursion limit.
        """
        stack = [root]
        while stack:
            node = stack.pop()
            if node.type in node_types:
                yield node
            stack.extend(reversed(node.children))

    @staticmethod
    def has_optional_marker(node: Node) -> bool:
        """Whether a member or parameter carries a ``?`` marker."""
        return any(child.type == "?" for child in node.children)

    @staticmethod
    def has_keyword(node: Node, keyword: str) -> bool:
        return any(child.type == keyword for child in node.children)

    @staticmethod
    def parameter_nodes(params_node: Node) -> list[Node]:
        """Parameter nodes of a ``formal_parameters`` node."""
        return [
            child
            for child in params_node.named_children
            if child.type in ("required_parameter", "optional_parameter")
        ]

    @staticmethod
    def is_optional_parameter(param: Node) -> bool:
        """Optional via ``?`` or via a default value."""
        return (
            param.type == "optional_parameter"
            or TsAstUtils.has_optional_marker(param)
            or param.child_by_field_name("value") is not None
        )

    @staticmethod
    def member_name(node: Node, content: bytes) -> str:
        """Name of a class/interface member.

        Returns an empty string for computed names, which match nothing.
        """
        name_node = node.child_by_field_name("name")
        if name_node is None or name_node.type == "computed_property_name":
            return ""
        name = TsAstUtils.get_node_text(name_node, content)
        if name_node.type == "string":
            return name[1:-1]
        return name

    @staticmethod
    def type_parameter_names(node: Node, content: bytes) -> frozenset[str]:
        """Names declared in a node's ``type_parameters`` list."""
        params_node = node.child_by_field_name("type_parameters")
        if params_node is None:
            return frozenset()
        names: set[str] = set()
        for child in params_node.named_children:
            if child.type == "type_parameter":
                name_node = child.child_by_field_name("name")
                if name_node is not None:
                    names.add(TsAstUtils.get_node_text(name_node, content))
        return frozenset(names)

    @staticmethod
    def reference_name(node: Node, content: bytes) -> str:
        """Referenced name of a heritage clause entry, without type arguments."""
        if node.type == "generic_type":
            name_node = node.child_by_field_name("name")
            if name_node is not None:
                node = name_node
        return "".join(TsAstUtils.get_node_text(node, content).split())

    @staticmethod
    def class_heritage(
        class_node: Node, content: bytes, scope: str
    ) -> tuple[list[HeritageReference], list[HeritageReference]]:
        """Extract ``implements`` and ``extends`` references of a class.

        Returns:
            Tuple of (implements references, extends references)
        """
        implements: list[HeritageReference] = []
        extends: list[HeritageReference] = []
        for child in class_node.children:
            if child.type != "class_heritage":
                continue
            for clause in child.named_children:
                if clause.type == "implements_clause":
                    target = implements
                elif clause.type == "extends_clause":
                    target = extends
                else:
                    continue
                for type_ref in clause.named_children:
                    if type_ref.type in ("type_arguments", "comment"):
                        continue
                    target.append(
                        HeritageReference(
                            name=TsAstUtils.reference_name(type_ref, content),
                            span=TsAstUtils.span(type_ref),
                            scope=scope,
                        )
                    )
        return implements, extends

    @staticmethod
    def interface_extends(
        interface_node: Node, content: bytes, scope: str
    ) -> list[HeritageReference]:
        """Extract the references of an interface's ``extends`` clause."""
        references: list[HeritageReference] = []
        for child in interface_node.children:
            if child.type not in ("extends_type_clause", "extends_clause"):
                continue
            for type_ref in child.named_children:
                if type_ref.type in ("type_arguments", "comment"):
                    continue
                references.append(
                    HeritageReference(
                        name=TsAstUtils.reference_name(type_ref, content),
                        span=TsAstUtils.span(type_ref),
                        scope=scope,
                    )
                )
        return references

    @staticmethod
    def extract_imports(root: Node, content: bytes) -> list[tuple[str, str, str]]:
        """Extract import bindings from the AST.

        Args:
            root: Root node of the AST
            content: Source file content

        Returns:
            List of (local name, module specifier, imported name) tuples.
            Namespace imports use ``*`` as the imported name and default
            imports use ``default``.
        """
        bindings: list[tuple[str, str, str]] = []
        for statement in root.named_children:
            if statement.type != "import_statement":
                continue
            source_node = statement.child_by_field_name("source")
            if source_node is None:
                continue
            specifier = TsAstUtils.get_node_text(source_node, content).strip("'\"`")

            for clause in statement.named_children:
                if clause.type != "import_clause":
                    continue
                for item in clause.named_children:
                    if item.type == "identifier":
                        local = TsAstUtils.get_node_text(item, content)
                        bindings.append((local, specifier, "default"))
                    elif item.type == "namespace_import":
                        alias = TsAstUtils.first_named_child(item)
                        if alias is not None:
                            local = TsAstUtils.get_node_text(alias, content)
                            bindings.append((local, specifier, "*"))
                    elif item.type == "named_imports":
                        for spec in item.named_children:
                            if spec.type != "import_specifier":
                                continue
                            name_node = spec.child_by_field_name("name")
                            alias_node = spec.child_by_field_name("alias")
                            if name_node is None:
                                continue
                            imported = TsAstUtils.get_node_text(name_node, content)
                            local = (
                                TsAstUtils.get_node_text(alias_node, content)
                                if alias_node is not None
                                else imported
                            )
                            bindings.append((local, specifier, imported))
        return bindings

    @staticmethod
    def default_export_name(export_node: Node, content: bytes) -> str | None:
        """Name exported by an ``export default`` statement, if it names one."""
        if not TsAstUtils.has_keyword(export_node, "default"):
            return None
        declaration = export_node.child_by_field_name("declaration")
        if declaration is not None:
            name_node = declaration.child_by_field_name("name")
            if name_node is not None:
                return TsAstUtils.get_node_text(name_node, content)
            return None
        value = export_node.child_by_field_name("value")
        if value is not None and value.type == "identifier":
            return TsAstUtils.get_node_text(value, content)
        return None


def module_scope(file_path: Path, source_root: Path) -> str:
    """Module key of a file: its root-relative POSIX path without suffix."""
    try:
        relative = file_path.relative_to(source_root)
    except ValueError:
        relative = Path(file_path.name)
    return strip_source_suffix(relative.as_posix())


def strip_source_suffix(path: str) -> str:
    for suffix in SOURCE_SUFFIXES:
        if path.endswith(suffix):
            return path[: -len(suffix)]
    return path


def resolve_module_specifier(scope: str, specifier: str) -> str | None:
    """Resolve a relative import specifier against the importing module.

    Returns None for package (non-relative) specifiers.
    """
    if not specifier.startswith("."):
        return None
    joined = posixpath.normpath(posixpath.join(posixpath.dirname(scope), specifier))
    return strip_source_suffix(joined)
