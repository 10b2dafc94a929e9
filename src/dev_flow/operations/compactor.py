"""Collapse a private branch's unpublished commits into one."""

from dev_flow import console
from dev_flow.errors import CompactionFailure, GitCommandError, PromptCancelled
from dev_flow.messages import MessageSource, collect_message
from dev_flow.operations.executor import GitExecutor
from dev_flow.operations.models import CompactionOutcome, CompactionResult, Session
from dev_flow.prompts import Prompter


class Compactor:
    """Soft-reset compaction with a single rollback point.

    Strategy:
    - Record the branch tip as the anchor (on the session and as a backup ref)
    - ``reset --soft`` to the target's remote tip so all changes are staged
    - Nothing staged: the branch already matches the target, stop there
    - Otherwise commit the staged changes once with a collected message
    - Any failure before that commit lands resets hard to the anchor
    """

    def __init__(
        self,
        executor: GitExecutor,
        prompter: Prompter,
        message_source: MessageSource | None = None,
    ):
        self.executor = executor
        self.prompter = prompter
        self.message_source = message_source

    def compact(self, session: Session) -> CompactionResult:
        ahead = session.ahead_count or 0
        if ahead == 0:
            console.success("Your branch has nothing the target does not; nothing to publish.")
            return CompactionResult(CompactionOutcome.NOTHING_TO_PUBLISH)
        if ahead == 1:
            console.success("Only one commit ahead; no compaction needed.")
            return CompactionResult(CompactionOutcome.SKIPPED)

        console.step(f"Step 2: compacting {ahead} commits into one")
        session.anchor = self.executor.rev_parse("HEAD")
        if not self.executor.update_ref(session.anchor_ref, session.anchor).ok:
            console.warn(f"Could not write {session.anchor_ref}; the anchor is {session.anchor}")
            session.anchor_saved = False

        try:
            result = self._collapse(session)
        except PromptCancelled:
            self._rollback(session)
            return CompactionResult(
                CompactionOutcome.ROLLED_BACK, cancelled=True, detail="message entry cancelled"
            )
        except (CompactionFailure, GitCommandError) as e:
            self._rollback(session)
            return CompactionResult(CompactionOutcome.ROLLED_BACK, detail=str(e))
        except BaseException:
            self._rollback(session)
            raise

        self.executor.delete_ref(session.anchor_ref)
        return result

    def _collapse(self, session: Session) -> CompactionResult:
        reset = self.executor.reset_soft(session.remote_target)
        if not reset.ok:
            raise CompactionFailure(f"Soft reset to {session.remote_target} failed")

        staged = self.executor.staged_files()
        if not staged:
            console.success(
                "The combined changes cancel out; the branch now matches the target "
                "and no commit was created."
            )
            return CompactionResult(CompactionOutcome.EMPTY)

        message = collect_message(self.message_source, self.prompter, staged)
        committed = self.executor.commit(message)
        if not committed.ok:
            raise CompactionFailure("Creating the combined commit failed")

        new_commit = self.executor.rev_parse("HEAD")
        console.success(f"Compacted {session.ahead_count} commits into {new_commit[:7]}.")
        return CompactionResult(CompactionOutcome.COLLAPSED, new_commit=new_commit)

    def _rollback(self, session: Session) -> None:
        """Restore the private branch to the anchor exactly."""
        console.error(
            f"Compaction did not complete; restoring {session.private_branch} "
            f"to {session.anchor[:7]}..."
        )
        restored = self.executor.reset_hard(session.anchor)
        if not restored.ok:
            backup = session.anchor_ref if session.anchor_saved else session.anchor
            console.remediation(
                "Automatic rollback failed. Your original commits are safe; restore them with:",
                [f"git reset --hard {backup}"],
            )
            raise CompactionFailure(
                f"Rollback to {session.anchor} failed; restore it from {backup}"
            )
        self.executor.delete_ref(session.anchor_ref)
        console.warn(f"{session.private_branch} restored; no commits were lost.")
