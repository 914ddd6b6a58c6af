"""
filerelease schedule - Show the configured release schedules.

Lists each category's cron expression with its next fire times, without
starting the scheduler.
"""

from datetime import UTC, datetime
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from filerelease.config.loader import load_config
from filerelease.config.settings import ReleaseSettings
from filerelease.exceptions import ConfigurationError
from filerelease.service.cron_parser import upcoming_fire_times

app = typer.Typer(name="schedule", help="Show upcoming scheduled releases", invoke_without_command=True)

console = Console()


@app.callback()
def schedule(
    ctx: typer.Context,
    env: str | None = typer.Option(None, help="Environment (dev, staging, prod)"),
    project_dir: Path = typer.Option(Path.cwd(), "--project-dir", "-d", help="Project directory"),
    count: int = typer.Option(3, "--count", "-n", min=1, max=50, help="Fire times to show per category"),
) -> None:
    """
    Show the cron schedule and next fire times of every category.
    """
    if ctx.invoked_subcommand is not None:
        return

    try:
        settings = ReleaseSettings.from_config(load_config(project_dir, env=env))
    except ConfigurationError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    if not settings.schedules:
        console.print("[dim]No schedules configured[/dim]")
        return

    now = datetime.now(UTC)
    table = Table(title="Release Schedules", show_header=True)
    table.add_column("Category", style="cyan")
    table.add_column("Cron", style="green")
    table.add_column("Timezone", style="dim")
    table.add_column("Next fire times", style="yellow")

    for category, sched in settings.schedules.items():
        if not sched.enabled:
            table.add_row(category.name, sched.cron, sched.timezone, "[dim]disabled[/dim]")
            continue
        times = upcoming_fire_times(sched.cron, now=now, count=count, timezone=sched.timezone)
        table.add_row(
            category.name,
            sched.cron,
            sched.timezone,
            "\n".join(t.strftime("%Y-%m-%d %H:%M:%S %Z") for t in times),
        )

    console.print(table)
