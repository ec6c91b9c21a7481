"""Language adapters that feed the strict implementation check.

This module provides the base classes and utilities for implementing
language-specific front ends and their type oracles.
"""

from strictimpl.adapters.base import (
    FileContext,
    FileReport,
    LanguageAdapter,
    SymbolTable,
    discover_files,
    generate_declaration_id,
)
from strictimpl.adapters.typescript import TypeScriptAdapter, TypeScriptTypeOracle

__all__ = [
    "FileContext",
    "FileReport",
    "LanguageAdapter",
    "SymbolTable",
    "TypeScriptAdapter",
    "TypeScriptTypeOracle",
    "discover_files",
    "generate_declaration_id",
]
