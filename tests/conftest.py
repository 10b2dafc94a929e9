import os
import subprocess
from pathlib import Path
from typing import Callable

import pytest
from click.testing import CliRunner

from dev_flow.operations import FlowConfig, GitExecutor


class GitRepo:
    """Thin helper around a repository path used by the tests."""

    def __init__(self, path: Path):
        self.path = path

    def git(self, *args: str, check: bool = True) -> str:
        result = subprocess.run(
            ["git", *args], cwd=self.path, capture_output=True, text=True, check=check
        )
        return result.stdout.strip()

    def commit_file(self, name: str, content: str, message: str | None = None) -> str:
        (self.path / name).write_text(content)
        self.git("add", name)
        self.git("commit", "-m", message or f"Update {name}")
        return self.head()

    def head(self, ref: str = "HEAD") -> str:
        return self.git("rev-parse", ref)

    def current_branch(self) -> str:
        return self.git("branch", "--show-current")

    def count(self, spec: str) -> int:
        return int(self.git("rev-list", "--count", spec))

    def executor(self) -> GitExecutor:
        return GitExecutor(cwd=self.path)


class ScriptedPrompter:
    """Prompter that replays canned answers in order.

    An answer that is an exception instance is raised instead of returned.
    """

    def __init__(self, *answers):
        self.answers = list(answers)
        self.calls: list[tuple[str, str]] = []

    def _next(self, kind: str, message: str):
        self.calls.append((kind, message))
        if not self.answers:
            raise AssertionError(f"Unexpected {kind} prompt: {message}")
        answer = self.answers.pop(0)
        if isinstance(answer, BaseException):
            raise answer
        return answer

    def select(self, message, choices, default=None):
        answer = self._next("select", message)
        if answer is None:
            return default
        return answer

    def text(self, message, default=None):
        return self._next("text", message)

    def confirm(self, message, default=True):
        return self._next("confirm", message)


@pytest.fixture(autouse=True)
def git_identity(monkeypatch):
    """Give every git process an identity and keep user config out of the way."""
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Test User")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "test@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Test User")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "test@example.com")
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", os.devnull)
    monkeypatch.setenv("GIT_TERMINAL_PROMPT", "0")


@pytest.fixture
def temp_git_repo(tmp_path: Path) -> GitRepo:
    """Create a temporary git repository with a main branch."""
    path = tmp_path / "local"
    path.mkdir()
    subprocess.run(["git", "init", "-b", "main"], cwd=path, check=True, capture_output=True)
    repo = GitRepo(path)
    repo.commit_file("README.md", "# Test Repo", "Initial commit")
    return repo


@pytest.fixture
def origin_repo(tmp_path: Path) -> GitRepo:
    """A bare remote holding main and feat/1.0."""
    origin = tmp_path / "origin.git"
    subprocess.run(
        ["git", "init", "--bare", "-b", "main", str(origin)], check=True, capture_output=True
    )
    seed = tmp_path / "seed"
    seed.mkdir()
    subprocess.run(["git", "init", "-b", "main"], cwd=seed, check=True, capture_output=True)
    seed_repo = GitRepo(seed)
    seed_repo.commit_file("README.md", "# Shared project\n", "Initial commit")
    seed_repo.git("remote", "add", "origin", str(origin))
    seed_repo.git("push", "origin", "main")
    seed_repo.git("checkout", "-b", "feat/1.0")
    seed_repo.commit_file("feature.txt", "feature base\n", "Start feature 1.0")
    seed_repo.git("push", "origin", "feat/1.0")
    return GitRepo(origin)


def _clone(origin: GitRepo, dest: Path) -> GitRepo:
    subprocess.run(
        ["git", "clone", "-b", "main", str(origin.path), str(dest)],
        check=True,
        capture_output=True,
    )
    return GitRepo(dest)


@pytest.fixture
def work_repo(origin_repo: GitRepo, tmp_path: Path) -> GitRepo:
    """A clone of origin with a private branch ``dev`` based on feat/1.0."""
    repo = _clone(origin_repo, tmp_path / "work")
    repo.git("checkout", "--no-track", "-b", "dev", "origin/feat/1.0")
    return repo


@pytest.fixture
def teammate_repo(origin_repo: GitRepo, tmp_path: Path) -> GitRepo:
    """A second clone used to publish concurrently."""
    repo = _clone(origin_repo, tmp_path / "teammate")
    repo.git("checkout", "-b", "feat/1.0", "origin/feat/1.0")
    return repo


@pytest.fixture
def clone_origin(origin_repo: GitRepo, tmp_path: Path) -> Callable[[str], GitRepo]:
    """Factory for further clones of origin on main."""

    def clone(name: str) -> GitRepo:
        return _clone(origin_repo, tmp_path / name)

    return clone


@pytest.fixture
def make_prompter() -> Callable[..., ScriptedPrompter]:
    return ScriptedPrompter


@pytest.fixture
def flow_config() -> FlowConfig:
    return FlowConfig()


@pytest.fixture
def runner():
    """Create a Click test runner."""
    return CliRunner()
