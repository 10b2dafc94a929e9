import click

from ..messages import CommandMessageSource, StaticMessageSource
from ..operations import FeatureSync
from ._shared import get_config, get_executor, get_prompter, handle_flow_errors


@click.command()
@click.option("-b", "--branch", help="Private branch to sync (default: choose interactively)")
@click.option("-t", "--target", help="Shared feature branch to publish to")
@click.option("-m", "--message", help="Message for the compacted commit")
@click.option("-y", "--yes", "assume_private", is_flag=True, help="Confirm the branch is private")
@click.option("--pr", "review", is_flag=True, help="Push the branch for review instead of merging")
@click.pass_context
@handle_flow_errors
def sync(
    ctx: click.Context,
    branch: str | None,
    target: str | None,
    message: str | None,
    assume_private: bool,
    review: bool,
) -> None:
    """Rebase a private branch onto a feature branch, compact it and publish.

    Commits ahead of the target are squashed into one before a fast-forward
    merge and push. Any failure while compacting restores the original commits.
    """
    executor = get_executor(ctx)
    config = get_config(ctx)

    if message:
        source = StaticMessageSource(message)
    elif config.message_command:
        source = CommandMessageSource(config.message_command, cwd=executor.cwd)
    else:
        source = None

    report = FeatureSync(executor, get_prompter(ctx), config, source).run(
        private_branch=branch,
        target_branch=target,
        assume_private=assume_private,
        review=review,
    )
    ctx.exit(report.exit_code)
