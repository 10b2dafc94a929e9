"""Git adapter for dev-flow."""

import subprocess
from dataclasses import dataclass
from pathlib import Path

from dev_flow import console
from dev_flow.errors import GitCommandError, PreconditionError


@dataclass(frozen=True, slots=True)
class GitResult:
    """Outcome of a single git invocation."""

    args: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        """Combined stderr and stdout, stripped."""
        return "\n".join(s for s in (self.stderr.strip(), self.stdout.strip()) if s)


class GitExecutor:
    """Execute git commands and report success or failure with captured output."""

    def __init__(self, cwd: Path | None = None, verbose: bool = False):
        self.cwd = cwd
        self.verbose = verbose

    def run(self, args: list[str], quiet: bool = False) -> GitResult:
        """Run a git command and always return a GitResult.

        A failing call is echoed to the operator verbatim unless ``quiet``.
        """
        if self.verbose:
            console.debug(f"$ git {' '.join(args)}")
        completed = subprocess.run(
            ["git"] + args,
            cwd=self.cwd,
            capture_output=True,
            text=True,
        )
        result = GitResult(
            args=tuple(args),
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
        if not result.ok and not quiet:
            console.error(f"Command failed: git {' '.join(args)}")
            if result.output:
                console.error(result.output)
        return result

    def run_checked(self, args: list[str], quiet: bool = False) -> GitResult:
        """Run a git command that must succeed."""
        result = self.run(args, quiet=quiet)
        if not result.ok:
            raise GitCommandError(
                f"git {' '.join(args)} failed: {result.output or 'no output'}",
                result,
            )
        return result

    # Inspection

    def status_porcelain(self) -> list[str]:
        """Return the porcelain status lines of the working tree."""
        result = self.run(["status", "--porcelain"], quiet=True)
        if not result.ok:
            raise PreconditionError(
                f"Unable to read working tree status: {result.output}"
            )
        return [line for line in result.stdout.splitlines() if line.strip()]

    def get_current_branch(self) -> str:
        """Get current branch name, empty on a detached HEAD."""
        result = self.run(["branch", "--show-current"], quiet=True)
        return result.stdout.strip() if result.ok else ""

    def rev_parse(self, ref: str) -> str:
        """Resolve a reference to a full commit id."""
        return self.run_checked(["rev-parse", "--verify", ref], quiet=True).stdout.strip()

    def branch_exists(self, branch: str) -> bool:
        """Check if a local branch exists."""
        result = self.run(
            ["rev-parse", "--verify", "--quiet", f"refs/heads/{branch}"], quiet=True
        )
        return result.ok

    def rev_list_count(self, base: str, tip: str) -> int:
        """Count commits reachable from tip but not from base."""
        result = self.run_checked(["rev-list", "--count", f"{base}..{tip}"], quiet=True)
        return int(result.stdout.strip() or "0")

    def staged_files(self) -> list[str]:
        """List paths staged against HEAD."""
        result = self.run_checked(["diff", "--cached", "--name-only"], quiet=True)
        return [line for line in result.stdout.splitlines() if line.strip()]

    def remote_branches(self) -> list[str]:
        """List remote-tracking branches as printed by ``branch -r``."""
        result = self.run(["branch", "-r"], quiet=True)
        if not result.ok:
            return []
        branches = []
        for line in result.stdout.splitlines():
            name = line.strip()
            if not name or " -> " in name:
                continue
            branches.append(name)
        return branches

    def recent_branches(self, namespace: str, limit: int) -> list[tuple[str, str, str]]:
        """List (short ref, relative date, subject) under a ref namespace, newest first."""
        result = self.run(
            [
                "for-each-ref",
                "--sort=-committerdate",
                f"--count={limit}",
                "--format=%(refname:short)|%(committerdate:relative)|%(subject)",
                namespace,
            ],
            quiet=True,
        )
        if not result.ok:
            return []
        entries = []
        for line in result.stdout.splitlines():
            if not line.strip():
                continue
            ref, _, rest = line.partition("|")
            date, _, subject = rest.partition("|")
            entries.append((ref, date, subject))
        return entries

    def has_upstream(self, branch: str) -> bool:
        result = self.run(
            ["rev-parse", "--abbrev-ref", f"{branch}@{{u}}"], quiet=True
        )
        return result.ok

    def get_config(self, key: str) -> str | None:
        """Get a git config value, None when unset."""
        result = self.run(["config", "--get", key], quiet=True)
        if not result.ok:
            return None
        return result.stdout.strip()

    # Mutation

    def fetch(self, remote: str, ref: str | None = None, quiet: bool = False) -> GitResult:
        args = ["fetch", remote]
        if ref:
            args.append(ref)
        return self.run(args, quiet=quiet)

    def fetch_all(self) -> GitResult:
        return self.run(["fetch", "--all"])

    def checkout(self, ref: str) -> GitResult:
        return self.run(["checkout", ref])

    def rebase(self, onto: str) -> GitResult:
        return self.run(["rebase", onto])

    def merge(self, ref: str, ff_only: bool = False) -> GitResult:
        args = ["merge", "--no-edit"]
        if ff_only:
            args.append("--ff-only")
        args.append(ref)
        return self.run(args)

    def pull(self, remote: str, branch: str, ff_only: bool = True) -> GitResult:
        args = ["pull"]
        if ff_only:
            args.append("--ff-only")
        return self.run(args + [remote, branch])

    def push(
        self,
        remote: str,
        ref: str,
        force_with_lease: bool = False,
        follow_tags: bool = False,
    ) -> GitResult:
        args = ["push"]
        if force_with_lease:
            args.append("--force-with-lease")
        if follow_tags:
            args.append("--follow-tags")
        return self.run(args + [remote, ref])

    def reset_soft(self, ref: str) -> GitResult:
        return self.run(["reset", "--soft", ref])

    def reset_hard(self, ref: str) -> GitResult:
        return self.run(["reset", "--hard", ref])

    def commit(self, message: str) -> GitResult:
        return self.run(["commit", "-m", message])

    def update_ref(self, ref: str, commit: str) -> GitResult:
        return self.run(["update-ref", ref, commit], quiet=True)

    def delete_ref(self, ref: str) -> GitResult:
        return self.run(["update-ref", "-d", ref], quiet=True)

    def tag(self, name: str, message: str) -> GitResult:
        return self.run(["tag", "-a", name, "-m", message])
