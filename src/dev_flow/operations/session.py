"""Sequence the sync pipeline and own its state machine."""

from dev_flow import console
from dev_flow.errors import FlowError, PreconditionError, PromptCancelled
from dev_flow.messages import MessageSource
from dev_flow.operations.compactor import Compactor
from dev_flow.operations.config import FlowConfig
from dev_flow.operations.executor import GitExecutor
from dev_flow.operations.models import (
    CompactionOutcome,
    PublishOutcome,
    RebaseOutcome,
    Session,
    SessionState,
    SyncOutcome,
    SyncReport,
)
from dev_flow.operations.publisher import Publisher
from dev_flow.operations.rebaser import Rebaser
from dev_flow.operations.safety import SafetyGate
from dev_flow.prompts import Choice, Prompter, select_or_enter

_PUBLISH_OUTCOMES = {
    PublishOutcome.PUBLISHED: SyncOutcome.PUBLISHED,
    PublishOutcome.PARTIAL: SyncOutcome.PARTIAL,
    PublishOutcome.RACE: SyncOutcome.RACE,
    PublishOutcome.FAILED: SyncOutcome.FAILED,
}


class FeatureSync:
    """Sync a private branch onto a shared feature branch.

    Safety gate, rebase, ahead count, compaction, publish, restore. Each
    stage hands back a tagged outcome; the caller decides the exit code
    from the returned SyncReport.
    """

    def __init__(
        self,
        executor: GitExecutor,
        prompter: Prompter,
        config: FlowConfig | None = None,
        message_source: MessageSource | None = None,
    ):
        self.executor = executor
        self.prompter = prompter
        self.config = config or FlowConfig()
        self.gate = SafetyGate(executor, prompter)
        self.rebaser = Rebaser(executor, self.config.remote)
        self.compactor = Compactor(executor, prompter, message_source)
        self.publisher = Publisher(executor, prompter, self.config.remote)

    def run(
        self,
        private_branch: str | None = None,
        target_branch: str | None = None,
        assume_private: bool = False,
        review: bool = False,
    ) -> SyncReport:
        session = Session(remote=self.config.remote)
        try:
            return self._run(session, private_branch, target_branch, assume_private, review)
        except PromptCancelled as e:
            console.warn(f"Cancelled: {e}")
            return self._finish(session, SyncOutcome.ABORTED, str(e))
        except PreconditionError as e:
            console.error(str(e))
            return self._finish(session, SyncOutcome.PRECONDITION_FAILED, str(e))
        except FlowError as e:
            console.error(str(e))
            return self._finish(session, SyncOutcome.FAILED, str(e))

    def _run(
        self,
        session: Session,
        private_branch: str | None,
        target_branch: str | None,
        assume_private: bool,
        review: bool,
    ) -> SyncReport:
        self.gate.ensure_clean()
        session.advance(SessionState.CLEAN_CHECKED)

        session.original_branch = self.executor.get_current_branch()
        session.private_branch = (private_branch or "").strip() or self._choose_private(
            session.original_branch
        )
        if not session.private_branch:
            raise PreconditionError("No private branch selected")
        session.advance(SessionState.BRANCH_CHOSEN)

        if not self.gate.confirm_ownership(session.private_branch, assume_private):
            console.error(
                "Aborted. Shared branches must be merged normally, never compacted."
            )
            return self._finish(session, SyncOutcome.ABORTED, "ownership not confirmed")
        session.advance(SessionState.OWNERSHIP_CONFIRMED)

        session.target_branch = (target_branch or "").strip() or self._choose_target()
        if not session.target_branch:
            raise PreconditionError("No target branch selected")
        if session.target_branch == session.private_branch:
            raise PreconditionError("The private branch and the target branch must differ")

        if self.executor.get_current_branch() != session.private_branch:
            console.info(f"Switching to {session.private_branch}...")
            if not self.executor.checkout(session.private_branch).ok:
                raise PreconditionError(f"Cannot check out '{session.private_branch}'")

        if self.rebaser.rebase(session.private_branch, session.target_branch) is RebaseOutcome.CONFLICTED:
            return self._finish(session, SyncOutcome.CONFLICT, "rebase stopped on conflicts")
        session.advance(SessionState.REBASED)

        session.ahead_count = self.executor.rev_list_count(
            session.remote_target, session.private_branch
        )
        session.advance(SessionState.AHEAD_COUNTED)

        compaction = self.compactor.compact(session)
        if compaction.outcome is CompactionOutcome.ROLLED_BACK:
            if compaction.cancelled:
                return self._finish(session, SyncOutcome.ABORTED, compaction.detail)
            return self._finish(session, SyncOutcome.COMPACTION_ROLLED_BACK, compaction.detail)
        if compaction.outcome in (CompactionOutcome.NOTHING_TO_PUBLISH, CompactionOutcome.EMPTY):
            return self._finish(session, SyncOutcome.NOTHING_TO_PUBLISH)
        session.advance(SessionState.COMPACTED)

        if review:
            published = self.publisher.publish_for_review(
                session.private_branch, session.target_branch
            )
        else:
            published = self.publisher.publish(session.private_branch, session.target_branch)
        outcome = _PUBLISH_OUTCOMES[published]
        if published in (PublishOutcome.PUBLISHED, PublishOutcome.PARTIAL):
            session.advance(SessionState.PUBLISHED)
        if self.executor.get_current_branch() == session.private_branch:
            session.advance(SessionState.RESTORED)

        if outcome is SyncOutcome.PUBLISHED:
            self._summarize(session, review)
        return self._finish(session, outcome)

    def _choose_private(self, current: str) -> str:
        entries = self.executor.recent_branches("refs/heads/", self.config.recent_branches)
        choices = [
            Choice(f"{ref:<20} ({date}) - {subject}", ref) for ref, date, subject in entries
        ]
        return select_or_enter(
            self.prompter,
            "Select your private development branch",
            choices,
            current,
            "Private branch name",
        )

    def _choose_target(self) -> str:
        console.info(f"Fetching {self.config.remote}...")
        if not self.executor.fetch(self.config.remote, quiet=True).ok:
            console.warn("Fetch failed; listing branches from the local cache.")

        remote_prefix = f"{self.config.remote}/"
        entries = self.executor.recent_branches(
            f"refs/remotes/{remote_prefix}{self.config.feature_prefix}",
            self.config.recent_branches,
        )
        choices = []
        for ref, date, subject in entries:
            name = ref[len(remote_prefix) :] if ref.startswith(remote_prefix) else ref
            choices.append(Choice(f"{name:<20} ({date}) - {subject}", name))
        return select_or_enter(
            self.prompter,
            "Select the shared feature branch to publish to",
            choices,
            None,
            f"Target branch (e.g. {self.config.feature_prefix}1.0.0)",
        )

    def _summarize(self, session: Session, review: bool) -> None:
        if not review:
            console.success(
                f"Done. {session.target_branch} stays linear; "
                f"{session.private_branch} is checked out and ready for more work."
            )
        if self.executor.has_upstream(session.private_branch):
            console.hint(
                "Your private branch has a remote copy and its history was rewritten. "
                f"Next time push it with: git push {session.remote} "
                f"{session.private_branch} --force-with-lease"
            )

    def _finish(self, session: Session, outcome: SyncOutcome, detail: str = "") -> SyncReport:
        session.advance(SessionState.TERMINAL)
        return SyncReport(outcome=outcome, session=session, detail=detail)
