import click

from ..operations import ReleaseManager
from ._shared import get_config, get_executor, get_prompter, handle_flow_errors


@click.group()
def release() -> None:
    """Cut and finish release branches."""


@release.command()
@click.argument("version")
@click.option("-f", "--from", "source", help="Feature branch to release from")
@click.pass_context
@handle_flow_errors
def start(ctx: click.Context, version: str, source: str | None) -> None:
    """Create release/vVERSION from a feature branch and push it.

    VERSION: Release version, e.g. 1.4.0
    """
    manager = ReleaseManager(get_executor(ctx), get_prompter(ctx), get_config(ctx))
    if manager.start(version, source) is None:
        click.echo("Release not created.")


@release.command()
@click.argument("branch", required=False)
@click.pass_context
@handle_flow_errors
def finish(ctx: click.Context, branch: str | None) -> None:
    """Tag a release branch and push it with its tag.

    BRANCH: Release branch (default: choose from the remote)
    """
    ReleaseManager(get_executor(ctx), get_prompter(ctx), get_config(ctx)).finish(branch)
