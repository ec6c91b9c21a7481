"""TypeScript language adapter using tree-sitter-typescript.

This module implements the LanguageAdapter interface for TypeScript source
code, using tree-sitter for parsing and a two-phase approach: declarations are
collected first, then every class is checked against a type oracle backed by
the collected symbol table.
"""

from __future__ import annotations

import logging
from pathlib import Path

import tree_sitter_typescript as tsts
from tree_sitter import Language, Parser

from strictimpl.adapters.base import FileReport, LanguageAdapter, SymbolTable, discover_files
from strictimpl.adapters.typescript.scanner import TypeScriptScanner
from strictimpl.adapters.typescript.type_oracle import TypeScriptTypeOracle
from strictimpl.analysis.rule import StrictInterfaceImplementationRule
from strictimpl.core.config import StrictImplConfig, get_config

logger = logging.getLogger(__name__)


class TypeScriptAdapter(LanguageAdapter):
    """TypeScript language adapter using tree-sitter.

    Implements two-phase checking:
    - Phase 1: Scan all files to build the symbol table (interfaces, classes,
      type aliases, enums and imports)
    - Phase 2: Apply the strict interface implementation rule to each file

    Limitations:
    - Generic types and conditional/mapped types are opaque to the oracle
    - Re-exports (``export { X } from``) are not followed
    """

    def __init__(self, config: StrictImplConfig | None = None) -> None:
        """Initialize the TypeScript adapter.

        Args:
            config: Runner configuration; defaults to the global config
        """
        self._config = config or get_config()
        self._parsers = {
            "typescript": Parser(Language(tsts.language_typescript())),
            "tsx": Parser(Language(tsts.language_tsx())),
        }
        self._scanner = TypeScriptScanner(self._parsers)
        self._rule = StrictInterfaceImplementationRule(self._config.severity)

    @property
    def language_name(self) -> str:
        """Return TypeScript as the supported language."""
        return "typescript"

    def analyze(self, source_path: Path) -> list[FileReport]:
        """Analyze TypeScript source code and report per file.

        Args:
            source_path: Root directory of TypeScript source code, or one file

        Returns:
            One FileReport per discovered file, sorted by path
        """
        # Phase 1: Build symbol table
        symbol_table = self.build_symbol_table(source_path)

        # Phase 2: Check classes
        return self.check_files(symbol_table)

    def discover(self, source_path: Path) -> list[Path]:
        return discover_files(
            source_path,
            self._config.file_extensions,
            self._config.exclude_dirs,
            self._config.max_file_bytes,
        )

    def build_symbol_table(self, source_path: Path) -> SymbolTable:
        """Phase 1: Scan all TypeScript files and build the symbol table.

        Args:
            source_path: Root directory of TypeScript source code, or one file

        Returns:
            SymbolTable containing all declarations
        """
        source_root = source_path if source_path.is_dir() else source_path.parent
        files = self.discover(source_path)
        logger.info(f"Scanning {len(files)} TypeScript files under {source_root}")
        return self._scanner.scan_files(files, source_root)

    def check_files(self, symbol_table: SymbolTable) -> list[FileReport]:
        """Phase 2: Apply the rule to every scanned file.

        Args:
            symbol_table: Symbol table from Phase 1

        Returns:
            One FileReport per file, sorted by path
        """
        oracle = TypeScriptTypeOracle(symbol_table)
        reports: list[FileReport] = []

        for file_path, source in symbol_table.sources.items():
            try:
                diagnostics = self._rule.apply(source, oracle)
            except Exception as e:
                logger.warning(f"Failed to check {file_path}: {e}")
                reports.append(FileReport(file_path=file_path, error=str(e)))
                continue
            reports.append(FileReport(file_path=file_path, diagnostics=diagnostics))

        for file_path, reason in symbol_table.failed_files.items():
            reports.append(FileReport(file_path=file_path, error=reason))

        return sorted(reports, key=lambda report: report.file_path)
