"""Bring the trunk's latest changes into the current branch."""

from enum import Enum

from dev_flow import console
from dev_flow.errors import ConflictError, GitCommandError, PreconditionError
from dev_flow.operations.config import FlowConfig, FlowConfigManager
from dev_flow.operations.executor import GitExecutor
from dev_flow.operations.safety import SafetyGate
from dev_flow.prompts import Choice, Prompter


class TrunkStrategy(Enum):
    MERGE = "merge"
    REBASE = "rebase"


class TrunkSync:
    """Merge (shared branches) or rebase (private branches) onto the trunk."""

    def __init__(self, executor: GitExecutor, prompter: Prompter, config: FlowConfig):
        self.executor = executor
        self.prompter = prompter
        self.config = config
        self.gate = SafetyGate(executor, prompter)

    def choose_strategy(self) -> TrunkStrategy:
        value = self.prompter.select(
            "What kind of branch is this?",
            [
                Choice("Shared branch (merge, keeps history)", TrunkStrategy.MERGE.value),
                Choice("Private branch (rebase, linear history)", TrunkStrategy.REBASE.value),
            ],
            TrunkStrategy.MERGE.value,
        )
        return TrunkStrategy(value)

    def run(self, strategy: TrunkStrategy | None = None) -> str:
        """Sync and return the trunk name.

        Raises ConflictError when git stops on conflicts.
        """
        self.gate.ensure_clean()
        current = self.executor.get_current_branch()
        if not current:
            raise PreconditionError("HEAD is detached; check out a branch first")
        console.info(f"Current branch: {current}")

        strategy = strategy or self.choose_strategy()
        trunk = FlowConfigManager(self.executor).resolve_trunk(self.config)
        remote_trunk = f"{self.config.remote}/{trunk}"

        console.step(f"Fetching {remote_trunk}...")
        fetched = self.executor.fetch(self.config.remote, trunk)
        if not fetched.ok:
            raise GitCommandError(f"Could not fetch {remote_trunk}", fetched)

        if strategy is TrunkStrategy.MERGE:
            self._merge(current, remote_trunk)
        else:
            self._rebase(current, remote_trunk)
        return trunk

    def _merge(self, current: str, remote_trunk: str) -> None:
        console.step(f"Merging {remote_trunk} into {current}...")
        if not self.executor.merge(remote_trunk).ok:
            console.remediation(
                "Merge stopped on conflicts. Resolve them, then:",
                ["git add <files>", "git commit"],
            )
            raise ConflictError(f"Merging {remote_trunk} into {current} conflicted")
        console.success(f"Merged {remote_trunk} into {current}.")
        console.hint(f"Push it with: git push {self.config.remote} {current}")

    def _rebase(self, current: str, remote_trunk: str) -> None:
        console.step(f"Rebasing {current} onto {remote_trunk}...")
        if not self.executor.rebase(remote_trunk).ok:
            console.remediation(
                "Rebase stopped on conflicts. Resolve them, then:",
                ["git add <files>", "git rebase --continue"],
            )
            raise ConflictError(f"Rebasing {current} onto {remote_trunk} conflicted")
        console.success(f"Rebased {current} onto {remote_trunk}.")
        console.hint(
            "History was rewritten; push with: "
            f"git push {self.config.remote} {current} --force-with-lease"
        )
