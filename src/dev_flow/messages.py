"""Sources for the consolidated commit message."""

import shlex
import subprocess
from typing import Protocol

from dev_flow import console
from dev_flow.errors import EmptyMessageError
from dev_flow.prompts import Prompter


class MessageSource(Protocol):
    def produce(self, staged_files: list[str]) -> str | None:
        """Return a proposed message, or None to fall back to manual entry."""
        ...


class StaticMessageSource:
    """A message given up front, e.g. on the command line."""

    def __init__(self, message: str):
        self.message = message

    def produce(self, staged_files: list[str]) -> str | None:
        return self.message.strip() or None


class CommandMessageSource:
    """Ask an external command for a message.

    The staged paths are written to the command's stdin, one per line, and
    its stdout is the proposal. Any failure means manual entry.
    """

    def __init__(self, command: str, cwd=None):
        self.command = command
        self.cwd = cwd

    def produce(self, staged_files: list[str]) -> str | None:
        try:
            argv = shlex.split(self.command)
        except ValueError as e:
            console.warn(f"Cannot parse message command ({e}); falling back to manual entry")
            return None
        if not argv:
            return None
        try:
            result = subprocess.run(
                argv,
                cwd=self.cwd,
                input="\n".join(staged_files) + "\n",
                capture_output=True,
                text=True,
            )
        except OSError as e:
            console.warn(f"Message command unavailable ({e}); falling back to manual entry")
            return None
        if result.returncode != 0:
            console.warn(
                f"Message command exited with {result.returncode}; falling back to manual entry"
            )
            return None
        return result.stdout.strip() or None


def collect_message(
    source: MessageSource | None,
    prompter: Prompter,
    staged_files: list[str],
) -> str:
    """Obtain one commit message for the staged changeset.

    A message given up front is used as is. A generated proposal is shown
    for confirmation first. Raises EmptyMessageError when the final message
    is blank.
    """
    proposal = source.produce(staged_files) if source is not None else None
    if proposal and isinstance(source, StaticMessageSource):
        return proposal
    if proposal:
        console.info(f"Proposed message:\n\n{proposal}\n")
        if prompter.confirm("Use this message?", default=True):
            return proposal

    message = prompter.text('Commit message for the combined change (e.g. "feat: describe it")')
    message = (message or "").strip()
    if not message:
        raise EmptyMessageError("Commit message cannot be empty")
    return message
