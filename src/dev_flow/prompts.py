"""Interactive prompt surface.

Every stage that needs human input goes through a ``Prompter``. The CLI
injects ``ClickPrompter``; tests inject a scripted one. Cancelling any prompt
raises ``PromptCancelled`` so the orchestrator can map it to an abort.
"""

from dataclasses import dataclass
from typing import Protocol

import click

from dev_flow.errors import PromptCancelled


@dataclass(frozen=True, slots=True)
class Choice:
    """One option of a single-choice select."""

    label: str
    value: str


MANUAL_ENTRY = "__manual__"


class Prompter(Protocol):
    def select(self, message: str, choices: list[Choice], default: str | None = None) -> str: ...

    def text(self, message: str, default: str | None = None) -> str: ...

    def confirm(self, message: str, default: bool = True) -> bool: ...


class ClickPrompter:
    """Prompter backed by click's terminal prompts."""

    def select(self, message: str, choices: list[Choice], default: str | None = None) -> str:
        if not choices:
            raise ValueError("select() needs at least one choice")
        click.echo(message)
        default_index = 1
        for index, choice in enumerate(choices, start=1):
            marker = "*" if choice.value == default else " "
            if choice.value == default:
                default_index = index
            click.echo(f" {marker} {index}) {choice.label}")
        try:
            picked = click.prompt(
                "Select",
                type=click.IntRange(1, len(choices)),
                default=default_index,
            )
        except click.Abort:
            raise PromptCancelled("Selection cancelled")
        return choices[picked - 1].value

    def text(self, message: str, default: str | None = None) -> str:
        try:
            return click.prompt(message, default=default, show_default=default is not None)
        except click.Abort:
            raise PromptCancelled("Input cancelled")

    def confirm(self, message: str, default: bool = True) -> bool:
        try:
            return click.confirm(message, default=default)
        except click.Abort:
            raise PromptCancelled("Confirmation cancelled")


def select_or_enter(
    prompter: Prompter,
    message: str,
    choices: list[Choice],
    default: str | None,
    manual_message: str,
) -> str:
    """Select from choices with a trailing manual-entry option; returns a stripped name."""
    options = list(choices) + [Choice("Enter a name manually", MANUAL_ENTRY)]
    if default not in {c.value for c in choices}:
        default = choices[0].value if choices else MANUAL_ENTRY
    value = prompter.select(message, options, default)
    if value == MANUAL_ENTRY:
        value = prompter.text(manual_message)
    return value.strip()
