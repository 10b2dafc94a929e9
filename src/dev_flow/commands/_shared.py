"""Shared utilities for commands."""

import functools

import click

from ..console import warn
from ..errors import FlowError, PromptCancelled
from ..operations import FlowConfig, FlowConfigManager, GitExecutor
from ..prompts import ClickPrompter, Prompter


def get_executor(ctx: click.Context) -> GitExecutor:
    """Return the executor for this invocation, creating it on first use."""
    obj = ctx.ensure_object(dict)
    if "executor" not in obj:
        obj["executor"] = GitExecutor(verbose=obj.get("verbose", False))
    return obj["executor"]


def get_prompter(ctx: click.Context) -> Prompter:
    obj = ctx.ensure_object(dict)
    if "prompter" not in obj:
        obj["prompter"] = ClickPrompter()
    return obj["prompter"]


def get_config(ctx: click.Context) -> FlowConfig:
    obj = ctx.ensure_object(dict)
    if "config" not in obj:
        obj["config"] = FlowConfigManager(get_executor(ctx)).load()
    return obj["config"]


def handle_flow_errors(func):
    """Turn FlowError into click's error reporting; cancellation exits 0."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except PromptCancelled as e:
            warn(f"Cancelled: {e}")
            click.get_current_context().exit(e.exit_code)
        except FlowError as e:
            if e.exit_code == 0:
                click.get_current_context().exit(0)
            raise click.ClickException(str(e))

    return wrapper
