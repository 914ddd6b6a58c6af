"""
filerelease serve - Long-running service.

Runs the HTTP API for on-demand releases together with the background
cron scheduler.
"""

from pathlib import Path

import typer

from filerelease.exceptions import ConfigurationError
from filerelease.service.server import run_service

app = typer.Typer(name="serve", help="Run the release service (HTTP API + scheduler)", invoke_without_command=True)


@app.callback()
def serve(
    ctx: typer.Context,
    env: str | None = typer.Option(None, help="Environment (dev, staging, prod)"),
    no_scheduler: bool = typer.Option(False, "--no-scheduler", help="Disable background scheduler"),
    host: str | None = typer.Option(None, help="Host to bind to (default: service.host)"),
    port: int | None = typer.Option(None, help="Port to bind to (default: service.port)"),
    project_dir: Path = typer.Option(Path.cwd(), "--project-dir", "-d", help="Project directory"),
) -> None:
    """
    Run filerelease as a long-running service.
    """
    if ctx.invoked_subcommand is None:
        try:
            run_service(
                project_dir=project_dir,
                env=env,
                host=host,
                port=port,
                enable_scheduler=not no_scheduler,
            )
        except ConfigurationError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1) from None
