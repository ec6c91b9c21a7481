"""Base classes and utilities for language adapters.

This module defines the LanguageAdapter abstract interface for implementing
language-specific front ends, along with the project symbol table, file
discovery, and deterministic declaration ID generation.
"""

from __future__ import annotations

import hashlib
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from strictimpl.core.models import Declaration, Diagnostic, ParsedSource

logger = logging.getLogger(__name__)


class ImportedName(BaseModel):
    """One import binding of a file."""

    module: str = Field(..., description="Resolved module key, or the raw package specifier")
    name: str = Field(..., description="Imported name ('default' or '*' for namespaces)")
    external: bool = Field(False, description="Imported from a package outside the project")


class FileContext(BaseModel):
    """File-level context for symbol resolution.

    Contains information about the current file being analyzed,
    used to resolve short names to declarations.
    """

    scope: str = Field(..., description="Module key of the file")
    imports: dict[str, ImportedName] = Field(
        default_factory=dict, description="Local name -> imported binding"
    )
    namespace_imports: dict[str, ImportedName] = Field(
        default_factory=dict, description="Namespace alias -> imported module"
    )
    default_export: str | None = Field(None, description="Name exported as default")


class SymbolTable(BaseModel):
    """Symbol table for two-phase analysis.

    Stores declaration information collected during Phase 1 (scanning) for use
    in Phase 2 (checking). Symbols are keyed ``"<scope>::<name>"``; one symbol
    may have several declaration fragments (declaration merging).
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    type_map: dict[str, list[str]] = Field(
        default_factory=dict, description="short_name -> [symbol keys]"
    )
    kinds: dict[str, str] = Field(
        default_factory=dict, description="symbol key -> interface/class/alias/enum"
    )
    declarations: dict[str, list[Declaration]] = Field(
        default_factory=dict, description="symbol key -> declaration fragments"
    )
    type_aliases: dict[str, Any] = Field(
        default_factory=dict, description="symbol key -> aliased type form"
    )
    enum_bases: dict[str, str | None] = Field(
        default_factory=dict, description="symbol key -> number/string, None if mixed"
    )
    files: dict[str, FileContext] = Field(
        default_factory=dict, description="scope -> file context"
    )
    sources: dict[str, ParsedSource] = Field(
        default_factory=dict, description="file path -> parsed classes"
    )
    failed_files: dict[str, str] = Field(
        default_factory=dict, description="file path -> failure reason"
    )

    @staticmethod
    def symbol_key(scope: str, name: str) -> str:
        return f"{scope}::{name}"

    def _register(self, scope: str, name: str, kind: str) -> str:
        key = self.symbol_key(scope, name)
        if name not in self.type_map:
            self.type_map[name] = []
        if key not in self.type_map[name]:
            self.type_map[name].append(key)
        # A class merged with an interface of the same name keeps its first kind.
        self.kinds.setdefault(key, kind)
        return key

    def add_declaration(self, declaration: Declaration) -> str:
        """Register an interface or class declaration fragment."""
        key = self._register(declaration.scope, declaration.name, declaration.kind)
        fragments = self.declarations.setdefault(key, [])
        if all(f.declaration_id != declaration.declaration_id for f in fragments):
            fragments.append(declaration)
        return key

    def add_type_alias(self, scope: str, name: str, aliased: Any) -> str:
        key = self._register(scope, name, "alias")
        self.type_aliases.setdefault(key, aliased)
        return key

    def add_enum(self, scope: str, name: str, base: str | None = "number") -> str:
        """Register an enum; ``base`` is the primitive its members widen to."""
        key = self._register(scope, name, "enum")
        self.enum_bases.setdefault(key, base)
        return key

    def add_file(self, context: FileContext, source: ParsedSource) -> None:
        self.files[context.scope] = context
        self.sources[source.file_path] = source

    def get_kind(self, symbol: str) -> str | None:
        return self.kinds.get(symbol)

    def get_declarations(self, symbol: str) -> list[Declaration]:
        return list(self.declarations.get(symbol, []))

    def resolve_name(self, name: str, scope: str) -> str | None:
        """Resolve a name as written in a module to a symbol key.

        Resolution order:
        1. Namespace-qualified names (``ns.Name``) through namespace imports
        2. Declarations in the same module
        3. Named and default imports from project modules
        4. A unique declaration of that name anywhere in the project

        Names imported from packages outside the project never resolve.

        Args:
            name: The name to resolve
            scope: The module the name is written in

        Returns:
            The symbol key if resolved, None otherwise
        """
        context = self.files.get(scope)

        if "." in name:
            alias, _, member = name.partition(".")
            if context is None or alias not in context.namespace_imports:
                return None
            binding = context.namespace_imports[alias]
            if binding.external or "." in member:
                return None
            return self._lookup_in_module(binding.module, member)

        local = self.symbol_key(scope, name)
        if local in self.kinds:
            return local

        if context is not None and name in context.imports:
            binding = context.imports[name]
            if binding.external:
                return None
            return self._lookup_in_module(binding.module, binding.name)

        # Sort candidates for deterministic resolution order
        candidates = sorted(self.type_map.get(name, []))
        return candidates[0] if len(candidates) == 1 else None

    def _lookup_in_module(self, module: str, name: str) -> str | None:
        for candidate_scope in (module, f"{module}/index"):
            if name == "default":
                context = self.files.get(candidate_scope)
                if context is None or context.default_export is None:
                    continue
                key = self.symbol_key(candidate_scope, context.default_export)
            else:
                key = self.symbol_key(candidate_scope, name)
            if key in self.kinds:
                return key
        return None


@dataclass
class FileReport:
    """Outcome of checking one file."""

    file_path: str
    diagnostics: list[Diagnostic] = field(default_factory=list)
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.error is None


def generate_declaration_id(scope: str, name: str, start_offset: int) -> str:
    """Generate a deterministic declaration ID.

    Uses SHA256 of the declaring module, the declared name and the
    declaration's offset, so the same declaration gets the same ID across runs.

    Args:
        scope: Module key of the declaring file
        name: Declared name (may be empty for anonymous classes)
        start_offset: Byte offset of the declaration

    Returns:
        A hex string ID (length from config, default 16)
    """
    from strictimpl.core.config import get_config

    config = get_config()
    content = "|".join([scope, name, str(start_offset)])
    return hashlib.sha256(content.encode()).hexdigest()[: config.id_length]


def discover_files(
    source_path: Path,
    extensions: list[str],
    exclude_dirs: list[str],
    max_file_bytes: int,
) -> list[Path]:
    """Find source files under a path, in sorted order.

    A file path is returned as-is when its suffix matches.
    """
    if source_path.is_file():
        return [source_path] if source_path.suffix in extensions else []

    excluded = set(exclude_dirs)
    found: list[Path] = []
    for ext in extensions:
        for candidate in source_path.rglob(f"*{ext}"):
            relative_parts = candidate.relative_to(source_path).parts[:-1]
            if excluded.intersection(relative_parts):
                continue
            if not candidate.is_file():
                continue
            if candidate.stat().st_size > max_file_bytes:
                logger.warning(f"Skipping {candidate}: larger than {max_file_bytes} bytes")
                continue
            found.append(candidate)
    return sorted(set(found))


class LanguageAdapter(ABC):
    """Abstract base class for language-specific front ends.

    Implements a two-phase strategy:
    - Phase 1 (Scanning): Parse all files and build the symbol table
    - Phase 2 (Checking): Run the rule over every file with a type oracle
      backed by the symbol table

    Subclasses must implement the abstract methods for their specific language.
    """

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the supported language name."""
        ...

    @abstractmethod
    def analyze(self, source_path: Path) -> list[FileReport]:
        """Analyze a source directory (or single file) and report per file.

        This method orchestrates the two phases:
        1. Call build_symbol_table() to scan declarations
        2. Call check_files() to run the rule

        Args:
            source_path: Root directory of source code, or one file

        Returns:
            One FileReport per discovered file, sorted by path
        """
        ...

    @abstractmethod
    def build_symbol_table(self, source_path: Path) -> SymbolTable:
        """Phase 1: Scan all files and build the symbol table.

        Args:
            source_path: Root directory of source code, or one file

        Returns:
            SymbolTable containing all declarations
        """
        ...

    @abstractmethod
    def check_files(self, symbol_table: SymbolTable) -> list[FileReport]:
        """Phase 2: Run the rule over every scanned file.

        Files whose check raises are reported with an error and no
        diagnostics; other files are unaffected.

        Args:
            symbol_table: Symbol table from Phase 1

        Returns:
            One FileReport per file
        """
        ...
