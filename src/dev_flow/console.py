"""Operator-facing output."""

import click


def step(message: str) -> None:
    click.secho(f"\n{message}", fg="blue", bold=True)


def info(message: str) -> None:
    click.echo(message)


def success(message: str) -> None:
    click.secho(message, fg="green")


def hint(message: str) -> None:
    click.secho(message, fg="cyan")


def warn(message: str) -> None:
    click.secho(message, fg="yellow", err=True)


def error(message: str) -> None:
    click.secho(message, fg="red", err=True)


def debug(message: str) -> None:
    click.secho(message, dim=True, err=True)


def remediation(title: str, commands: list[str]) -> None:
    """Print a numbered manual recovery sequence."""
    warn(title)
    for number, command in enumerate(commands, start=1):
        click.secho(f"  {number}. {command}", fg="yellow", err=True)
