"""TypeScript language adapter."""

from strictimpl.adapters.typescript.adapter import TypeScriptAdapter
from strictimpl.adapters.typescript.type_oracle import TypeScriptTypeOracle

__all__ = ["TypeScriptAdapter", "TypeScriptTypeOracle"]
