import click

from ..operations import TrunkStrategy, TrunkSync
from ._shared import get_config, get_executor, get_prompter, handle_flow_errors


@click.command("trunk-sync")
@click.option(
    "-s",
    "--strategy",
    type=click.Choice([s.value for s in TrunkStrategy]),
    help="merge for shared branches, rebase for private ones",
)
@click.pass_context
@handle_flow_errors
def trunk_sync(ctx: click.Context, strategy: str | None) -> None:
    """Bring the latest trunk (main/master) into the current branch."""
    TrunkSync(get_executor(ctx), get_prompter(ctx), get_config(ctx)).run(
        TrunkStrategy(strategy) if strategy else None
    )
