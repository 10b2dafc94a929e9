"""CLI entry point for dev-flow."""

import click

from . import __version__


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Echo every git command")
@click.version_option(__version__, prog_name="flow")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Flow: team Git workflow automation.

    Sync a private branch onto a shared feature branch as one atomic
    commit, keep up with the trunk, and cut releases.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


# Import and register commands
from .commands.sync import sync
from .commands.trunk import trunk_sync
from .commands.release import release

cli.add_command(sync)
cli.add_command(trunk_sync)
cli.add_command(release)


if __name__ == "__main__":
    cli()
