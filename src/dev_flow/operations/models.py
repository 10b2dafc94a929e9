"""Session state and stage outcomes."""

from dataclasses import dataclass, field
from enum import Enum


class SessionState(Enum):
    INIT = "init"
    CLEAN_CHECKED = "clean-checked"
    BRANCH_CHOSEN = "branch-chosen"
    OWNERSHIP_CONFIRMED = "ownership-confirmed"
    REBASED = "rebased"
    AHEAD_COUNTED = "ahead-counted"
    COMPACTED = "compacted"
    PUBLISHED = "published"
    RESTORED = "restored"
    TERMINAL = "terminal"


class RebaseOutcome(Enum):
    CLEAN = "clean"
    CONFLICTED = "conflicted"


class CompactionOutcome(Enum):
    NOTHING_TO_PUBLISH = "nothing-to-publish"
    SKIPPED = "skipped"
    COLLAPSED = "collapsed"
    EMPTY = "empty"
    ROLLED_BACK = "rolled-back"


class PublishOutcome(Enum):
    PUBLISHED = "published"
    PARTIAL = "partial"
    RACE = "race"
    FAILED = "failed"


class SyncOutcome(Enum):
    PUBLISHED = "published"
    NOTHING_TO_PUBLISH = "nothing-to-publish"
    ABORTED = "aborted"
    CONFLICT = "conflict"
    PRECONDITION_FAILED = "precondition-failed"
    COMPACTION_ROLLED_BACK = "compaction-rolled-back"
    PARTIAL = "partial"
    RACE = "race"
    FAILED = "failed"

    @property
    def exit_code(self) -> int:
        if self in _SUCCESS_OUTCOMES:
            return 0
        return 1


_SUCCESS_OUTCOMES = frozenset(
    {
        SyncOutcome.PUBLISHED,
        SyncOutcome.NOTHING_TO_PUBLISH,
        SyncOutcome.ABORTED,
        SyncOutcome.CONFLICT,
    }
)


_FORWARD_ORDER = list(SessionState)


@dataclass
class Session:
    """One run of the sync pipeline. Never persisted."""

    remote: str = "origin"
    original_branch: str = ""
    private_branch: str = ""
    target_branch: str = ""
    anchor: str | None = None
    anchor_saved: bool = True
    ahead_count: int | None = None
    state: SessionState = SessionState.INIT
    history: list[SessionState] = field(default_factory=lambda: [SessionState.INIT])

    @property
    def remote_target(self) -> str:
        return f"{self.remote}/{self.target_branch}"

    @property
    def anchor_ref(self) -> str:
        return f"refs/flow/anchors/{self.private_branch}"

    def advance(self, state: SessionState) -> None:
        """Move to a later state; TERMINAL is reachable from anywhere."""
        if state is not SessionState.TERMINAL and _FORWARD_ORDER.index(
            state
        ) <= _FORWARD_ORDER.index(self.state):
            raise ValueError(f"Cannot move from {self.state.value} back to {state.value}")
        self.state = state
        self.history.append(state)


@dataclass(frozen=True, slots=True)
class CompactionResult:
    outcome: CompactionOutcome
    new_commit: str | None = None
    cancelled: bool = False
    detail: str = ""


@dataclass(frozen=True, slots=True)
class SyncReport:
    outcome: SyncOutcome
    session: Session
    detail: str = ""

    @property
    def exit_code(self) -> int:
        return self.outcome.exit_code
