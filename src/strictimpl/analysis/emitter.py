"""Conversion of violations into ordered diagnostic records."""

from __future__ import annotations

from strictimpl.core.models import Diagnostic, Severity, Violation, ViolationKind

RETURN_VALUE = "return value"

MESSAGE_TEMPLATES: dict[ViolationKind, str] = {
    ViolationKind.PARAMETER_NARROWED: (
        "Method '{method}' narrows parameter '{target}' of interface '{interface}': {reason}"
    ),
    ViolationKind.PARAMETER_OPTIONAL: (
        "Method '{method}' makes parameter '{target}' of interface '{interface}' "
        "optional: {reason}"
    ),
    ViolationKind.MISSING_PARAMETER: (
        "Method '{method}' cannot accept every argument of interface '{interface}' "
        "(first missing: '{target}'): {reason}"
    ),
    ViolationKind.RETURN_WIDENED: (
        "Method '{method}' widens the {target} of interface '{interface}': {reason}"
    ),
}


class DiagnosticEmitter:
    """Turn violations into positioned, deterministically ordered diagnostics."""

    def __init__(self, rule_id: str, severity: Severity = Severity.ERROR) -> None:
        self._rule_id = rule_id
        self._severity = severity

    def emit(self, violations: list[Violation], file_path: str) -> list[Diagnostic]:
        """Build diagnostics for one file.

        Ordered by start offset, then method declaration order, then parameter
        index (return value last), then interface name.
        """
        ordered = sorted(violations, key=self._sort_key)
        return [self._to_diagnostic(violation, file_path) for violation in ordered]

    def format_message(self, violation: Violation) -> str:
        """Render the human-readable message for a single violation."""
        if violation.position == "return":
            target = RETURN_VALUE
        else:
            target = violation.parameter_name or f"#{violation.position}"
        return MESSAGE_TEMPLATES[violation.kind].format(
            method=violation.method.name,
            target=target,
            interface=violation.interface_method.owner_name,
            reason=violation.reason,
        )

    def _to_diagnostic(self, violation: Violation, file_path: str) -> Diagnostic:
        return Diagnostic(
            file_path=file_path,
            start_offset=violation.span.start_offset,
            length=violation.span.length,
            line=violation.span.line,
            column=violation.span.column,
            message=self.format_message(violation),
            rule_id=self._rule_id,
            severity=self._severity,
        )

    @staticmethod
    def _sort_key(violation: Violation) -> tuple[int, int, int, str, str]:
        position = (
            len(violation.method.parameters) + 1
            if violation.position == "return"
            else violation.position
        )
        return (
            violation.span.start_offset,
            violation.method.ordinal,
            position,
            violation.interface_method.owner_name,
            violation.kind.value,
        )
