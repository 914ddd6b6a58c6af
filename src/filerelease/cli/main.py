"""
Main CLI entry point.
"""

import typer

from filerelease import __version__
from filerelease.cli import release, schedule, serve


def version_callback(value: bool):
    """Callback to display version and exit."""
    if value:
        typer.echo(f"filerelease version {__version__}")
        raise typer.Exit()


app = typer.Typer(
    name="filerelease",
    help="filerelease - release staged export files into the publish directory",
    add_completion=False,
)

app.add_typer(serve.app, name="serve")
app.command("release")(release.release)
app.add_typer(schedule.app, name="schedule")


@app.callback(invoke_without_command=True)
def entrypoint(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        help="Show version and exit.",
    ),
):
    """
    filerelease - release staged export files into the publish directory.

    Run 'filerelease <command> --help' for help on a specific command.
    """
    if ctx.invoked_subcommand is None and not version:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def main():
    """Main CLI entry point."""
    app()


if __name__ == "__main__":
    main()
