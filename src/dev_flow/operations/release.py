"""Cut release branches and tag finished releases."""

import re

from dev_flow import console
from dev_flow.errors import FlowError, GitCommandError, PreconditionError
from dev_flow.operations.config import FlowConfig, FlowConfigManager
from dev_flow.operations.executor import GitExecutor
from dev_flow.operations.safety import SafetyGate
from dev_flow.prompts import Choice, Prompter, select_or_enter

VERSION_RE = re.compile(r"^\d+\.\d+\.\d+(?:[-+][0-9A-Za-z.-]+)?$")


def validate_version(version: str) -> str:
    """Strip a leading 'v' and check MAJOR.MINOR.PATCH[-pre]."""
    version = version.strip()
    if version.startswith("v"):
        version = version[1:]
    if not VERSION_RE.match(version):
        raise FlowError(f"Invalid version: '{version}' (expected e.g. 1.2.3)")
    return version


def version_from_branch(branch: str, release_prefix: str) -> str:
    """Extract the version from a branch like release/v1.2.3."""
    match = re.match(rf"^{re.escape(release_prefix)}v?(\d+\.\d+\.\d+.*)$", branch)
    if not match:
        raise FlowError(f"Cannot read a version from branch '{branch}'")
    return match.group(1)


class ReleaseManager:
    def __init__(self, executor: GitExecutor, prompter: Prompter, config: FlowConfig):
        self.executor = executor
        self.prompter = prompter
        self.config = config
        self.gate = SafetyGate(executor, prompter)

    def start(self, version: str, source_branch: str | None = None) -> str | None:
        """Create and push ``release/v<version>`` from a feature branch.

        Returns the new branch name, or None if the operator backed out.
        """
        version = validate_version(version)
        self.gate.ensure_clean()

        if not self.executor.fetch(self.config.remote, quiet=True).ok:
            console.warn("Fetch failed; continuing with the local cache.")

        source = (source_branch or "").strip() or self._choose_feature_branch()
        if not source:
            raise PreconditionError("No feature branch selected")
        self._checkout_source(source)

        release_branch = f"{self.config.release_prefix}v{version}"
        if not self._clear_blocking_branch():
            return None

        if not self.prompter.confirm(
            f"Create {release_branch} from {source} and push it?", default=True
        ):
            return None

        self.executor.run_checked(["checkout", "-b", release_branch])
        pushed = self.executor.push(self.config.remote, release_branch)
        if not pushed.ok:
            raise GitCommandError(f"Pushing {release_branch} failed", pushed)

        console.success(f"{release_branch} is ready.")
        console.hint("Next: deploy it to staging (usually done by CI).")
        return release_branch

    def finish(self, branch: str | None = None) -> str:
        """Tag the chosen release branch and push it with its tag. Returns the tag."""
        self.gate.ensure_clean()
        console.step("Fetching all remotes...")
        if not self.executor.fetch_all().ok:
            console.warn("Fetch failed; choosing from the local cache.")

        branch = (branch or "").strip() or self._choose_release_branch()
        version = version_from_branch(branch, self.config.release_prefix)

        console.step(f"Checking out {branch}...")
        self.executor.run_checked(["checkout", branch])
        pulled = self.executor.pull(self.config.remote, branch)
        if not pulled.ok:
            raise GitCommandError(f"Could not update {branch}", pulled)

        tag = f"v{version}"
        tagged = self.executor.tag(tag, f"Release {version}")
        if not tagged.ok:
            raise GitCommandError(f"Creating tag {tag} failed", tagged)
        pushed = self.executor.push(self.config.remote, branch, follow_tags=True)
        if not pushed.ok:
            raise GitCommandError(
                f"Tag {tag} created locally but the push failed; retry with "
                f"git push --follow-tags {self.config.remote} {branch}",
                pushed,
            )

        trunk = FlowConfigManager(self.executor).resolve_trunk(self.config)
        console.success(f"{branch} is tagged {tag} and pushed.")
        console.hint(f"Open a merge request: {branch} -> {trunk}")
        console.warn(
            "After going live, delete the feature branch and "
            f"{branch} to keep the repository tidy."
        )
        return tag

    def _choose_feature_branch(self) -> str:
        remote_prefix = f"{self.config.remote}/"
        entries = self.executor.recent_branches(
            f"refs/remotes/{remote_prefix}{self.config.feature_prefix}",
            self.config.recent_branches,
        )
        choices = [
            Choice(f"{ref[len(remote_prefix):]:<20} ({date}) - {subject}", ref[len(remote_prefix) :])
            for ref, date, subject in entries
        ]
        return select_or_enter(
            self.prompter,
            "Select the feature branch to release",
            choices,
            None,
            f"Feature branch (e.g. {self.config.feature_prefix}1.0.0)",
        )

    def _choose_release_branch(self) -> str:
        remote_prefix = f"{self.config.remote}/{self.config.release_prefix}"
        branches = [
            b[len(self.config.remote) + 1 :]
            for b in self.executor.remote_branches()
            if b.startswith(remote_prefix)
        ]
        if not branches:
            raise PreconditionError(
                f"No {self.config.release_prefix}* branches on {self.config.remote}"
            )
        return self.prompter.select(
            "Select the release branch to finish",
            [Choice(b, b) for b in branches],
            branches[0],
        )

    def _checkout_source(self, source: str) -> None:
        console.step(f"Checking out {source}...")
        if self.executor.branch_exists(source):
            self.executor.run_checked(["checkout", source])
            pulled = self.executor.pull(self.config.remote, source)
            if not pulled.ok:
                raise GitCommandError(f"Could not update {source}", pulled)
        else:
            self.executor.run_checked(
                ["checkout", "-b", source, f"{self.config.remote}/{source}"]
            )

    def _clear_blocking_branch(self) -> bool:
        """A local branch named like the prefix blocks creating refs beneath it."""
        blocker = self.config.release_prefix.rstrip("/")
        if not self.executor.branch_exists(blocker):
            return True
        console.warn(f"A local branch named '{blocker}' prevents creating {blocker}/... branches.")
        action = self.prompter.select(
            f"How should '{blocker}' be handled?",
            [
                Choice(f"Rename it to {blocker}-backup (recommended)", "rename"),
                Choice("Delete it", "delete"),
                Choice("Cancel", "cancel"),
            ],
            "rename",
        )
        if action == "rename":
            self.executor.run_checked(["branch", "-m", blocker, f"{blocker}-backup"])
            console.success(f"Renamed {blocker} to {blocker}-backup")
        elif action == "delete":
            self.executor.run_checked(["branch", "-D", blocker])
            console.success(f"Deleted {blocker}")
        else:
            return False
        return True
