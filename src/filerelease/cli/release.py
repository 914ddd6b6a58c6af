"""
filerelease release - Release one category immediately.

Runs the same discovery-and-move as the HTTP endpoint and prints the outcome,
either as a table or as the export JSON payload.
"""

import json
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from filerelease.config.loader import load_config
from filerelease.config.settings import ReleaseSettings
from filerelease.core.categories import Category
from filerelease.exceptions import ConfigurationError, FileSystemError
from filerelease.service.api.payloads import export_response, system_failure_response
from filerelease.service.releaser import FileReleaser
from filerelease.utils.logging import setup_logging_from_config

console = Console()


def release(
    category: str = typer.Argument(..., help="Category: redemption, outpay or own-and-ben"),
    env: str | None = typer.Option(None, help="Environment (dev, staging, prod)"),
    project_dir: Path = typer.Option(Path.cwd(), "--project-dir", "-d", help="Project directory"),
    as_json: bool = typer.Option(False, "--json", help="Print the export payload as JSON"),
    verbose: bool = typer.Option(False, "--verbose", help="Show log output on the console"),
) -> None:
    """
    Move every staged file of CATEGORY into the publish directory.

    Exits with 1 when the release could not run at all. Per-file failures are
    reported but do not change the exit code.
    """
    try:
        target = Category.parse(category)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="CATEGORY") from None

    try:
        config = load_config(project_dir, env=env)
        setup_logging_from_config(config.data, project_dir=project_dir, console_enabled=verbose)
        settings = ReleaseSettings.from_config(config)
    except ConfigurationError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    try:
        result = FileReleaser(settings).release(target)
    except FileSystemError as e:
        if as_json:
            typer.echo(json.dumps(system_failure_response(target.name, e.message), indent=2))
        else:
            typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(1) from None

    if as_json:
        typer.echo(json.dumps(export_response(target.name, result), indent=2))
        return

    if result.attempted == 0:
        console.print(f"[dim]No staged files with prefix '{target.prefix}'[/dim]")
        return

    table = Table(title=f"Release {target.name}", show_header=True)
    table.add_column("File", style="cyan")
    table.add_column("Status")
    table.add_column("Error", style="dim")
    for name in result.successful_files:
        table.add_row(name, "[green]moved[/green]", "")
    for error in result.errors:
        table.add_row(error.file_name, "[red]failed[/red]", error.error_message)
    console.print(table)

    console.print(f"\n[bold]{result.success_count}[/bold] moved, [bold]{result.error_count}[/bold] failed")
