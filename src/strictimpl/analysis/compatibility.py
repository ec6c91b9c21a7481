"""Substitutability check of a class method against an interface method.

Parameters are compared contravariantly: every type the interface lets callers
pass must be accepted by the implementation. The return type is compared
covariantly: the implementation may promise more than the interface, never
less. All type comparisons go through the type oracle; a type the oracle cannot
resolve skips that one comparison without reporting anything.
"""

from __future__ import annotations

import logging

from strictimpl.analysis.oracle import ResolvedType, TypeOracle
from strictimpl.core.models import (
    MethodDeclaration,
    MethodSignature,
    Parameter,
    TypeAnnotation,
    Violation,
    ViolationKind,
)

logger = logging.getLogger(__name__)


class CompatibilityChecker:
    """Apply the parameter/return variance rule to matched method pairs."""

    def __init__(self, oracle: TypeOracle) -> None:
        self._oracle = oracle

    def check(
        self,
        class_method: MethodDeclaration,
        interface_method: MethodSignature,
        *,
        class_name: str = "",
    ) -> list[Violation]:
        """Check one class method against one interface method signature.

        Args:
            class_method: The implementing method.
            interface_method: The interface signature it must satisfy.
            class_name: Name of the implementing class, for reporting.

        Returns:
            Violations ordered by parameter position, return type last.
        """
        violations: list[Violation] = []

        def report(
            position: int | str, kind: ViolationKind, reason: str, span
        ) -> None:
            violations.append(
                Violation(
                    class_name=class_name,
                    method=class_method,
                    interface_method=interface_method,
                    position=position,
                    kind=kind,
                    reason=reason,
                    span=span,
                )
            )

        interface_params = interface_method.parameters
        impl_params = class_method.parameters
        impl_has_rest = any(param.rest for param in impl_params)

        required = sum(1 for param in interface_params if param.required)
        if not impl_has_rest and required > len(impl_params):
            report(
                len(impl_params),
                ViolationKind.MISSING_PARAMETER,
                f"declares {len(impl_params)} parameter(s) but the interface "
                f"requires {required}",
                class_method.name_span,
            )

        for index, interface_param in enumerate(interface_params):
            if interface_param.rest:
                # The interface rest parameter stands for every remaining position.
                for impl_index in range(index, len(impl_params)):
                    impl_param = impl_params[impl_index]
                    if not self._accepts(interface_param, impl_param):
                        report(
                            impl_index,
                            ViolationKind.PARAMETER_NARROWED,
                            self._narrowed_reason(interface_param, impl_param),
                            impl_param.location,
                        )
                break

            if index >= len(impl_params):
                break

            impl_param = impl_params[index]
            if impl_param.rest:
                # One report for the rest parameter, at its first failing position.
                for remaining in interface_params[index:]:
                    if not self._accepts(remaining, impl_param):
                        report(
                            index,
                            ViolationKind.PARAMETER_NARROWED,
                            self._narrowed_reason(remaining, impl_param),
                            impl_param.location,
                        )
                        break
                break

            # At most one violation per position; narrowing takes precedence.
            loosened = interface_param.required and impl_param.optional
            if not self._accepts(interface_param, impl_param):
                reason = self._narrowed_reason(interface_param, impl_param)
                if loosened:
                    reason += " and the parameter is optional"
                report(index, ViolationKind.PARAMETER_NARROWED, reason, impl_param.location)
            elif loosened:
                report(
                    index,
                    ViolationKind.PARAMETER_OPTIONAL,
                    f"parameter '{impl_param.name}' is optional but the interface "
                    f"requires '{interface_param.name}'",
                    impl_param.location,
                )

        interface_return = self._resolve(interface_method.return_type)
        impl_return = self._resolve(class_method.return_type)
        if interface_return is not None and impl_return is not None:
            if not self._oracle.is_assignable(impl_return, interface_return):
                report(
                    "return",
                    ViolationKind.RETURN_WIDENED,
                    f"return type '{class_method.return_type.text}' is not assignable "
                    f"to '{interface_method.return_type.text}'",
                    class_method.return_type.span,
                )

        return violations

    def _accepts(self, interface_param: Parameter, impl_param: Parameter) -> bool:
        """Whether the implementation parameter accepts the interface's type.

        Returns True when either side cannot be resolved.
        """
        interface_type = self._resolve(interface_param.type)
        impl_type = self._resolve(impl_param.type)

        if interface_param.rest and not impl_param.rest and interface_type is not None:
            interface_type = self._oracle.rest_element_type(interface_type)
        if impl_param.rest and not interface_param.rest and impl_type is not None:
            impl_type = self._oracle.rest_element_type(impl_type)

        if interface_type is None or impl_type is None:
            logger.debug(
                f"Skipping comparison of parameter '{impl_param.name}' "
                f"against '{interface_param.name}': unresolved type"
            )
            return True

        return self._oracle.is_assignable(interface_type, impl_type)

    def _resolve(self, annotation: TypeAnnotation | None) -> ResolvedType | None:
        if annotation is None:
            return None
        return self._oracle.resolve_type(annotation)

    @staticmethod
    def _narrowed_reason(interface_param: Parameter, impl_param: Parameter) -> str:
        impl_text = impl_param.type.text if impl_param.type else "?"
        interface_text = interface_param.type.text if interface_param.type else "?"
        return f"parameter type '{impl_text}' does not accept '{interface_text}'"
