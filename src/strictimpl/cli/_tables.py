"""Rich table builders used by the CLI."""

from __future__ import annotations

from rich.table import Table

from strictimpl.analysis.rule import RuleMetadata
from strictimpl.core.models import Diagnostic, Severity


def build_diagnostics_table(diagnostics: list[Diagnostic]) -> Table:
    """Build a (Location, Severity, Message) table."""
    table = Table(show_header=True)
    table.add_column("Location", style="cyan", no_wrap=True)
    table.add_column("Severity")
    table.add_column("Message")
    for diagnostic in diagnostics:
        style = "red" if diagnostic.severity == Severity.ERROR else "yellow"
        table.add_row(
            f"{diagnostic.file_path}:{diagnostic.line}:{diagnostic.column}",
            f"[{style}]{diagnostic.severity.value}[/{style}]",
            diagnostic.message,
        )
    return table


def build_rule_table(metadata: RuleMetadata) -> Table:
    """Build a headerless key/value table of rule metadata."""
    table = Table(show_header=False, title=metadata.rule_name)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for key, value in metadata.model_dump().items():
        table.add_row(key, str(value))
    return table
