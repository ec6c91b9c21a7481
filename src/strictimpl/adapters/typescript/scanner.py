"""TypeScript scanner for Phase 1 symbol table construction.

This module parses TypeScript source files and registers every interface,
class, type alias and enum declaration in the symbol table, together with each
file's import context and its class declarations in source order.
"""

from __future__ import annotations

import logging
from pathlib import Path

from tree_sitter import Node, Parser

from strictimpl.adapters.base import (
    FileContext,
    ImportedName,
    SymbolTable,
    generate_declaration_id,
)
from strictimpl.adapters.typescript.ast_utils import (
    CLASS_NODE_TYPES,
    TsAstUtils,
    module_scope,
    resolve_module_specifier,
)
from strictimpl.adapters.typescript.types import OpaqueType, TypeBuilder
from strictimpl.core.models import (
    ClassDeclaration,
    InterfaceDeclaration,
    MethodDeclaration,
    MethodSignature,
    Parameter,
    ParsedSource,
    PropertySignature,
    TypeAnnotation,
)

logger = logging.getLogger(__name__)

DECLARATION_NODE_TYPES = (
    *CLASS_NODE_TYPES,
    "interface_declaration",
    "type_alias_declaration",
    "enum_declaration",
    "export_statement",
)


class SourceSyntaxError(Exception):
    """Raised when a source file does not parse cleanly."""

    def __init__(self, line: int | None = None) -> None:
        self.line = line
        location = f" at line {line}" if line is not None else ""
        super().__init__(f"Syntax error{location}")


class TypeScriptScanner:
    """Phase 1: Scan TypeScript files to build the symbol table."""

    def __init__(self, parsers: dict[str, Parser]) -> None:
        """Initialize the scanner.

        Args:
            parsers: Configured tree-sitter parsers keyed by dialect
                ("typescript" and "tsx")
        """
        self._parsers = parsers

    def scan_files(self, files: list[Path], source_root: Path) -> SymbolTable:
        """Scan files and build the symbol table.

        Files that cannot be read, or that contain syntax errors, are recorded
        in ``SymbolTable.failed_files`` and skipped.

        Args:
            files: Source files to scan
            source_root: Root directory for module keys and relative paths

        Returns:
            SymbolTable containing all declarations
        """
        symbol_table = SymbolTable()

        for file_path in files:
            try:
                self.scan_file(file_path, source_root, symbol_table)
            except Exception as e:
                logger.warning(f"Failed to scan {file_path}: {e}")
                symbol_table.failed_files[self._display_path(file_path, source_root)] = str(e)

        return symbol_table

    def scan_file(self, file_path: Path, source_root: Path, symbol_table: SymbolTable) -> None:
        """Scan a single file into the symbol table.

        Args:
            file_path: Path to the TypeScript file
            source_root: Root directory for module keys and relative paths
            symbol_table: Symbol table to populate

        Raises:
            SourceSyntaxError: If the file has syntax errors; nothing from it
                is registered.
        """
        content = file_path.read_bytes()
        parser = self._parsers["tsx" if file_path.suffix == ".tsx" else "typescript"]
        tree = parser.parse(content)
        root = tree.root_node
        if root.has_error:
            error_node = next(TsAstUtils.iter_nodes(root, ("ERROR",)), None)
            raise SourceSyntaxError(
                error_node.start_point[0] + 1 if error_node is not None else None
            )

        scope = module_scope(file_path, source_root)
        display_path = self._display_path(file_path, source_root)
        context = self._build_file_context(root, content, scope)
        builder = TypeBuilder(content)

        classes: list[ClassDeclaration] = []
        for node in TsAstUtils.iter_nodes(root, DECLARATION_NODE_TYPES):
            if node.type in CLASS_NODE_TYPES:
                class_decl = self._build_class(node, content, scope, builder)
                classes.append(class_decl)
                if class_decl.name:
                    symbol_table.add_declaration(class_decl)
            elif node.type == "interface_declaration":
                interface = self._build_interface(node, content, scope, builder)
                if interface is not None:
                    symbol_table.add_declaration(interface)
            elif node.type == "type_alias_declaration":
                self._register_alias(node, content, scope, builder, symbol_table)
            elif node.type == "enum_declaration":
                name_node = node.child_by_field_name("name")
                if name_node is not None:
                    symbol_table.add_enum(
                        scope,
                        TsAstUtils.get_node_text(name_node, content),
                        self._enum_base(node),
                    )
            elif node.type == "export_statement":
                default_name = TsAstUtils.default_export_name(node, content)
                if default_name is not None:
                    context.default_export = default_name

        symbol_table.add_file(
            context,
            ParsedSource(file_path=display_path, scope=scope, classes=tuple(classes)),
        )

    @staticmethod
    def _display_path(file_path: Path, source_root: Path) -> str:
        try:
            return file_path.relative_to(source_root).as_posix()
        except ValueError:
            return file_path.as_posix()

    def _build_file_context(self, root: Node, content: bytes, scope: str) -> FileContext:
        context = FileContext(scope=scope)
        for local, specifier, imported in TsAstUtils.extract_imports(root, content):
            module = resolve_module_specifier(scope, specifier)
            binding = ImportedName(
                module=module if module is not None else specifier,
                name=imported,
                external=module is None,
            )
            if imported == "*":
                context.namespace_imports[local] = binding
            else:
                context.imports[local] = binding
        return context

    def _annotation(
        self, type_node: Node | None, content: bytes, scope: str, builder: TypeBuilder
    ) -> TypeAnnotation | None:
        """Build a TypeAnnotation from a ``type_annotation`` (or type) node."""
        if type_node is None:
            return None
        if type_node.type == "type_annotation":
            inner = TsAstUtils.first_named_child(type_node)
            if inner is None:
                return None
            type_node = inner
        return TypeAnnotation(
            text=TsAstUtils.get_node_text(type_node, content),
            span=TsAstUtils.span(type_node),
            scope=scope,
            expr=builder.build(type_node),
        )

    def _build_parameters(
        self, callable_node: Node, content: bytes, scope: str, builder: TypeBuilder
    ) -> tuple[Parameter, ...]:
        params_node = callable_node.child_by_field_name("parameters")
        if params_node is None:
            return ()

        parameters: list[Parameter] = []
        for param in TsAstUtils.parameter_nodes(params_node):
            pattern = param.child_by_field_name("pattern")
            if pattern is None:
                pattern = TsAstUtils.first_named_child(param)
            if pattern is not None and pattern.type == "this":
                continue

            rest = pattern is not None and pattern.type == "rest_pattern"
            if pattern is None:
                name = ""
            else:
                name = TsAstUtils.get_node_text(pattern, content)
                if rest:
                    name = name[3:].strip()

            parameters.append(
                Parameter(
                    name=name,
                    type=self._annotation(
                        param.child_by_field_name("type"), content, scope, builder
                    ),
                    optional=not rest and TsAstUtils.is_optional_parameter(param),
                    rest=rest,
                    span=TsAstUtils.span(param),
                )
            )
        return tuple(parameters)

    def _build_interface(
        self, node: Node, content: bytes, scope: str, builder: TypeBuilder
    ) -> InterfaceDeclaration | None:
        name_node = node.child_by_field_name("name")
        if name_node is None:
            return None
        name = TsAstUtils.get_node_text(name_node, content)
        declaration_id = generate_declaration_id(scope, name, node.start_byte)
        builder = builder.with_type_parameters(TsAstUtils.type_parameter_names(node, content))

        methods: list[MethodSignature] = []
        properties: list[PropertySignature] = []
        body = node.child_by_field_name("body")
        members = body.named_children if body is not None else []
        for ordinal, member in enumerate(members):
            if member.type == "method_signature":
                member_name = TsAstUtils.member_name(member, content)
                if not member_name:
                    continue
                member_builder = builder.with_type_parameters(
                    TsAstUtils.type_parameter_names(member, content)
                )
                methods.append(
                    MethodSignature(
                        name=member_name,
                        parameters=self._build_parameters(member, content, scope, member_builder),
                        return_type=self._annotation(
                            member.child_by_field_name("return_type"),
                            content,
                            scope,
                            member_builder,
                        ),
                        owner_id=declaration_id,
                        owner_name=name,
                        ordinal=ordinal,
                        span=TsAstUtils.span(member),
                    )
                )
            elif member.type == "property_signature":
                member_name = TsAstUtils.member_name(member, content)
                if not member_name:
                    continue
                properties.append(
                    PropertySignature(
                        name=member_name,
                        type=self._annotation(
                            member.child_by_field_name("type"), content, scope, builder
                        ),
                        optional=TsAstUtils.has_optional_marker(member),
                    )
                )

        return InterfaceDeclaration(
            declaration_id=declaration_id,
            name=name,
            scope=scope,
            span=TsAstUtils.span(node),
            extends=tuple(TsAstUtils.interface_extends(node, content, scope)),
            methods=tuple(methods),
            properties=tuple(properties),
        )

    def _build_class(
        self, node: Node, content: bytes, scope: str, builder: TypeBuilder
    ) -> ClassDeclaration:
        name_node = node.child_by_field_name("name")
        name = TsAstUtils.get_node_text(name_node, content) if name_node is not None else ""
        builder = builder.with_type_parameters(TsAstUtils.type_parameter_names(node, content))
        implements, extends = TsAstUtils.class_heritage(node, content, scope)

        methods: list[MethodDeclaration] = []
        properties: list[PropertySignature] = []
        body = node.child_by_field_name("body")
        members = body.named_children if body is not None else []
        for member in members:
            if member.type == "method_definition":
                # Accessors are properties, not methods.
                if TsAstUtils.has_keyword(member, "get") or TsAstUtils.has_keyword(member, "set"):
                    continue
                member_name = TsAstUtils.member_name(member, content)
                if not member_name or member_name == "constructor":
                    continue
                name_field = member.child_by_field_name("name")
                member_builder = builder.with_type_parameters(
                    TsAstUtils.type_parameter_names(member, content)
                )
                methods.append(
                    MethodDeclaration(
                        name=member_name,
                        parameters=self._build_parameters(member, content, scope, member_builder),
                        return_type=self._annotation(
                            member.child_by_field_name("return_type"),
                            content,
                            scope,
                            member_builder,
                        ),
                        is_static=TsAstUtils.has_keyword(member, "static"),
                        ordinal=len(methods),
                        name_span=TsAstUtils.span(name_field),
                        span=TsAstUtils.span(member),
                    )
                )
            elif member.type in ("public_field_definition", "field_definition"):
                member_name = TsAstUtils.member_name(member, content)
                if not member_name or TsAstUtils.has_keyword(member, "static"):
                    continue
                properties.append(
                    PropertySignature(
                        name=member_name,
                        type=self._annotation(
                            member.child_by_field_name("type"), content, scope, builder
                        ),
                        optional=TsAstUtils.has_optional_marker(member),
                    )
                )

        return ClassDeclaration(
            declaration_id=generate_declaration_id(scope, name, node.start_byte),
            name=name,
            scope=scope,
            span=TsAstUtils.span(node),
            implements=tuple(implements),
            extends=tuple(extends),
            methods=tuple(methods),
            properties=tuple(properties),
        )

    def _register_alias(
        self,
        node: Node,
        content: bytes,
        scope: str,
        builder: TypeBuilder,
        symbol_table: SymbolTable,
    ) -> None:
        name_node = node.child_by_field_name("name")
        value_node = node.child_by_field_name("value")
        if name_node is None:
            return
        name = TsAstUtils.get_node_text(name_node, content)
        if value_node is None or node.child_by_field_name("type_parameters") is not None:
            aliased = OpaqueType(name)
        else:
            aliased = builder.build(value_node)
        symbol_table.add_type_alias(scope, name, aliased)

    @staticmethod
    def _enum_base(node: Node) -> str | None:
        """Primitive an enum's members widen to: "number", "string" or None.

        Members without an initializer are numeric. Any computed or mixed
        initializer makes the base unknown.
        """
        body = node.child_by_field_name("body")
        if body is None:
            return "number"
        bases: set[str | None] = set()
        for member in body.named_children:
            if member.type == "comment":
                continue
            if member.type != "enum_assignment":
                bases.add("number")
                continue
            value = member.child_by_field_name("value")
            if value is not None and value.type in ("number", "unary_expression"):
                bases.add("number")
            elif value is not None and value.type in ("string", "template_string"):
                bases.add("string")
            else:
                bases.add(None)
        if not bases:
            return "number"
        if len(bases) > 1:
            return None
        return bases.pop()
