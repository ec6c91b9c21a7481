"""The strict interface implementation rule.

Ensures that class methods implementing interface methods are substitutable
for them: parameters no narrower, return types no wider.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field

from strictimpl.analysis.compatibility import CompatibilityChecker
from strictimpl.analysis.emitter import DiagnosticEmitter
from strictimpl.analysis.interface_resolver import InterfaceResolver
from strictimpl.analysis.matcher import MethodMatcher
from strictimpl.analysis.oracle import TypeOracle
from strictimpl.core.models import ClassDeclaration, Diagnostic, ParsedSource, Severity, Violation

logger = logging.getLogger(__name__)

RULE_ID = "strict-interface-implementation"


class RuleMetadata(BaseModel):
    """Descriptive metadata of a rule, as shown by ``strictimpl rules``."""

    rule_name: str
    description: str
    has_fix: bool = False
    options: dict[str, object] = Field(default_factory=dict)
    options_description: str = "no options"
    requires_type_info: bool = True
    type: str = "typescript"
    typescript_only: bool = True


class StrictInterfaceImplementationRule:
    """Check every class in a source file against the interfaces it implements."""

    metadata = RuleMetadata(
        rule_name=RULE_ID,
        description="Ensures interfaces are strictly implemented on classes",
    )

    def __init__(self, severity: Severity = Severity.ERROR) -> None:
        self._matcher = MethodMatcher()
        self._emitter = DiagnosticEmitter(RULE_ID, severity)

    def apply(self, source: ParsedSource, oracle: TypeOracle) -> list[Diagnostic]:
        """Run the check over one parsed file.

        Each class is visited once: resolve its interfaces, match its methods,
        check every pair, and emit diagnostics for the whole file. Exceptions
        raised by the oracle propagate; no partial result is returned.

        Args:
            source: Class declarations of the file, in source order.
            oracle: Type oracle for the current run.

        Returns:
            Diagnostics ordered by source position.
        """
        resolver = InterfaceResolver(oracle)
        checker = CompatibilityChecker(oracle)

        violations: list[Violation] = []
        for class_decl in source.classes:
            violations.extend(self.check_class(class_decl, resolver, checker))

        return self._emitter.emit(violations, source.file_path)

    def check_class(
        self,
        class_decl: ClassDeclaration,
        resolver: InterfaceResolver,
        checker: CompatibilityChecker,
    ) -> list[Violation]:
        """Resolve, match and check a single class declaration."""
        if not class_decl.implements:
            return []

        interfaces = resolver.resolve(class_decl)
        if not interfaces:
            logger.debug(f"No resolvable interfaces for class {class_decl.name}")
            return []

        violations: list[Violation] = []
        for method, signature in self._matcher.match(class_decl.methods, interfaces):
            violations.extend(
                checker.check(method, signature, class_name=class_decl.name)
            )
        return violations
