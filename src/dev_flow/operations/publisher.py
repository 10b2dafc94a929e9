"""Merge the compacted branch into its target and push it."""

from dev_flow import console
from dev_flow.operations.executor import GitExecutor
from dev_flow.operations.models import PublishOutcome
from dev_flow.prompts import Prompter


class Publisher:
    def __init__(self, executor: GitExecutor, prompter: Prompter, remote: str = "origin"):
        self.executor = executor
        self.prompter = prompter
        self.remote = remote

    def publish(self, private: str, target: str) -> PublishOutcome:
        """Fast-forward ``target`` to ``private`` and push it.

        The operator is always switched back to ``private`` afterwards.
        """
        console.step(f"Step 3: publishing {private} to {target}")
        try:
            return self._merge_and_push(private, target)
        finally:
            self._restore(private)

    def _merge_and_push(self, private: str, target: str) -> PublishOutcome:
        if not self.executor.checkout(target).ok:
            return PublishOutcome.FAILED

        if not self.executor.pull(self.remote, target).ok:
            console.error(f"Could not update {target} from {self.remote}.")
            return PublishOutcome.FAILED

        merged = self.executor.merge(private, ff_only=True)
        if not merged.ok:
            console.remediation(
                f"{self.remote}/{target} moved while you were syncing; "
                "someone else published in the meantime. Nothing was merged.",
                [f"git checkout {private}", "run `flow sync` again"],
            )
            return PublishOutcome.RACE

        pushed = self.executor.push(self.remote, target)
        if not pushed.ok:
            console.remediation(
                f"{private} is merged into your local {target}, but the push failed. "
                "Local state is safe; only the push needs retrying:",
                [f"git push {self.remote} {target}"],
            )
            return PublishOutcome.PARTIAL

        console.success(f"{target} now carries your change and is pushed to {self.remote}.")
        return PublishOutcome.PUBLISHED

    def publish_for_review(self, private: str, target: str) -> PublishOutcome:
        """Push ``private`` itself so a merge request can be opened."""
        console.step(f"Step 3: pushing {private} for review")
        pushed = self.executor.push(self.remote, private)
        if not pushed.ok:
            console.warn("Push rejected. After a rebase the remote branch usually needs a forced update.")
            if not self.prompter.confirm(
                f"Force-push {private} with --force-with-lease?", default=False
            ):
                return PublishOutcome.FAILED
            if not self.executor.push(self.remote, private, force_with_lease=True).ok:
                return PublishOutcome.FAILED

        console.success(f"{private} pushed to {self.remote}.")
        console.hint(f"Open a merge request: {private} -> {target}")
        return PublishOutcome.PUBLISHED

    def _restore(self, private: str) -> None:
        if self.executor.get_current_branch() == private:
            return
        if not self.executor.checkout(private).ok:
            console.warn(f"Could not switch back to {private}; run `git checkout {private}`.")
