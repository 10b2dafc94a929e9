"""Preconditions checked before any mutating step."""

from dev_flow import console
from dev_flow.errors import PreconditionError
from dev_flow.operations.executor import GitExecutor
from dev_flow.prompts import Prompter


class SafetyGate:
    """Clean-tree precondition and private-branch confirmation."""

    def __init__(self, executor: GitExecutor, prompter: Prompter):
        self.executor = executor
        self.prompter = prompter

    def dirty_paths(self) -> list[str]:
        return self.executor.status_porcelain()

    def check_clean(self) -> bool:
        return not self.dirty_paths()

    def ensure_clean(self) -> None:
        """Raise PreconditionError listing uncommitted paths."""
        paths = self.dirty_paths()
        if paths:
            raise PreconditionError(
                "Working tree has uncommitted changes; commit or stash them first:\n"
                + "\n".join(f"  {p}" for p in paths)
            )

    def confirm_ownership(self, branch: str, assume_private: bool = False) -> bool:
        """Ask the operator to confirm exclusive ownership of ``branch``."""
        if assume_private:
            return True
        console.warn(
            f"Compaction rewrites the history of '{branch}'. "
            "Never run it on a branch other people commit to."
        )
        return self.prompter.confirm(
            f"Is '{branch}' a private branch used only by you?", default=True
        )
