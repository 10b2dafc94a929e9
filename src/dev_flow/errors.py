"""Custom exceptions for dev-flow."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dev_flow.operations.executor import GitResult


class FlowError(Exception):
    """Base exception for all flow errors."""

    exit_code: int = 1


class PreconditionError(FlowError):
    """Raised when the repository is not in a state the pipeline can start from."""

    pass


class GitCommandError(FlowError):
    """Raised when a git command that had to succeed failed."""

    def __init__(self, message: str, result: "GitResult | None" = None):
        super().__init__(message)
        self.result = result


class ConflictError(FlowError):
    """Raised when a rebase or merge stopped on conflicts."""

    exit_code: int = 0


class CompactionFailure(FlowError):
    """Raised when the consolidated commit could not be created."""

    pass


class EmptyMessageError(CompactionFailure):
    """Raised when no usable commit message was supplied."""

    pass


class PromptCancelled(FlowError):
    """Raised when the operator cancels an interactive prompt."""

    exit_code: int = 0
