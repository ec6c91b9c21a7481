"""Analysis core: interface resolution, method matching, compatibility, emission."""

from strictimpl.analysis.compatibility import CompatibilityChecker
from strictimpl.analysis.emitter import DiagnosticEmitter
from strictimpl.analysis.interface_resolver import InterfaceResolver
from strictimpl.analysis.matcher import MethodMatcher
from strictimpl.analysis.oracle import ResolvedType, TypeOracle, TypeOracleError
from strictimpl.analysis.rule import RULE_ID, RuleMetadata, StrictInterfaceImplementationRule

__all__ = [
    "CompatibilityChecker",
    "DiagnosticEmitter",
    "InterfaceResolver",
    "MethodMatcher",
    "RULE_ID",
    "ResolvedType",
    "RuleMetadata",
    "StrictInterfaceImplementationRule",
    "TypeOracle",
    "TypeOracleError",
]
