"""strictimpl CLI - strict interface implementation checker.

This module provides the command-line interface for checking TypeScript
sources and inspecting the rule's metadata.
"""

from __future__ import annotations

import json
import logging
import traceback
from pathlib import Path
from typing import Annotated, Optional

import typer
from dotenv import load_dotenv
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(
    name="strictimpl",
    help="Check that TypeScript classes implement their interfaces strictly",
    no_args_is_help=True,
)

# Rich console for formatted output
console = Console()
err_console = Console(stderr=True)

# Global verbose flag
_verbose: bool = False


def set_verbose(verbose: bool) -> None:
    """Set global verbose mode and configure logging."""
    global _verbose
    _verbose = verbose
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def print_exception(e: Exception) -> None:
    """Print exception details in verbose mode."""
    if _verbose:
        err_console.print("\n[dim]--- Traceback (verbose mode) ---[/dim]")
        err_console.print(f"[dim]{traceback.format_exc()}[/dim]")


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging and full tracebacks"),
    ] = False,
) -> None:
    """strictimpl - strict interface implementation checker."""
    set_verbose(verbose)


def load_config(severity: Optional[str]):
    """Load configuration, applying command-line overrides."""
    from strictimpl.core.config import reload_config
    from strictimpl.core.models import Severity

    try:
        config = reload_config()
    except ValidationError as e:
        err_console.print(f"[red]Error:[/red] Invalid configuration: {e}")
        print_exception(e)
        raise typer.Exit(2)

    if severity is None:
        return config
    try:
        return config.model_copy(update={"severity": Severity(severity)})
    except ValueError as e:
        err_console.print(f"[red]Error:[/red] Invalid severity: {severity}")
        err_console.print("  Valid options: error, warning")
        print_exception(e)
        raise typer.Exit(2)


@app.command()
def check(
    path: Annotated[
        Path,
        typer.Argument(
            help="TypeScript source directory or file to check",
            resolve_path=True,
        ),
    ],
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output machine-readable JSON"),
    ] = False,
    severity: Annotated[
        Optional[str],
        typer.Option("--severity", "-s", help="Severity of reported diagnostics: error or warning"),
    ] = None,
) -> None:
    """Check classes against the interfaces they implement.

    Example:
        strictimpl check src/
        strictimpl check src/ --json --severity warning
    """
    from strictimpl.cli._tables import build_diagnostics_table
    from strictimpl.core.serializer import serialize_to_list
    from strictimpl.services.checker_service import CheckerService

    config = load_config(severity)
    service = CheckerService(config)

    try:
        if json_output:
            result = service.check_path(path)
        else:
            with console.status("[bold blue]Checking..."):
                result = service.check_path(path)
    except Exception as e:
        err_console.print(f"[red]Error:[/red] Check failed: {e}")
        print_exception(e)
        raise typer.Exit(2)

    if json_output:
        payload = {
            "source_path": str(result.source_path),
            "files_checked": result.files_checked,
            "diagnostics": serialize_to_list(result.diagnostics),
            "errors": result.errors,
        }
        typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))
    else:
        if result.diagnostics:
            console.print(build_diagnostics_table(result.diagnostics))
        for error in result.errors:
            err_console.print(f"[red]Error:[/red] {error}")
        if result.success and not result.has_diagnostics:
            console.print(
                f"[green]✓[/green] {result.files_checked} files checked, no problems found"
            )
        else:
            console.print(
                f"{result.files_checked} files checked: "
                f"{len(result.diagnostics)} problems, {len(result.errors)} errors"
            )

    if config.fail_on_diagnostics and (result.has_diagnostics or not result.success):
        raise typer.Exit(1)


@app.command()
def rules(
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output machine-readable JSON"),
    ] = False,
) -> None:
    """Show metadata of the strict interface implementation rule."""
    from strictimpl.analysis.rule import StrictInterfaceImplementationRule
    from strictimpl.cli._tables import build_rule_table

    metadata = StrictInterfaceImplementationRule.metadata
    if json_output:
        typer.echo(json.dumps(metadata.model_dump(), ensure_ascii=False, indent=2))
        return
    console.print(build_rule_table(metadata))


if __name__ == "__main__":
    app()
