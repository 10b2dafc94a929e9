"""Replay a private branch onto the latest remote tip of its target."""

from dev_flow import console
from dev_flow.errors import GitCommandError
from dev_flow.operations.executor import GitExecutor
from dev_flow.operations.models import RebaseOutcome


class Rebaser:
    def __init__(self, executor: GitExecutor, remote: str = "origin"):
        self.executor = executor
        self.remote = remote

    def rebase(self, private: str, target: str) -> RebaseOutcome:
        """Fetch ``target`` and rebase ``private`` (checked out) onto it.

        Conflicts are left in place for the operator; nothing is resolved
        or aborted automatically.
        """
        remote_target = f"{self.remote}/{target}"
        console.step(f"Step 1: rebasing {private} onto {remote_target}")

        fetched = self.executor.fetch(self.remote, target)
        if not fetched.ok:
            raise GitCommandError(
                f"Could not fetch {remote_target}; check that the branch exists on the remote",
                fetched,
            )

        result = self.executor.rebase(remote_target)
        if result.ok:
            return RebaseOutcome.CLEAN

        console.remediation(
            "Rebase stopped on conflicts. Resolve them manually:",
            [
                "fix the conflicting files in your editor",
                "git add <files>",
                "git rebase --continue",
                "run `flow sync` again",
            ],
        )
        return RebaseOutcome.CONFLICTED
