import pytest

from dev_flow.errors import PreconditionError, PromptCancelled
from dev_flow.operations import SafetyGate


def test_clean_tree(temp_git_repo, make_prompter):
    gate = SafetyGate(temp_git_repo.executor(), make_prompter())
    assert gate.check_clean() is True
    gate.ensure_clean()


def test_untracked_file_makes_tree_dirty(temp_git_repo, make_prompter):
    (temp_git_repo.path / "notes.txt").write_text("scratch")
    gate = SafetyGate(temp_git_repo.executor(), make_prompter())
    assert gate.check_clean() is False
    assert gate.dirty_paths() == ["?? notes.txt"]


def test_ensure_clean_reports_paths(temp_git_repo, make_prompter):
    (temp_git_repo.path / "README.md").write_text("edited")
    gate = SafetyGate(temp_git_repo.executor(), make_prompter())
    with pytest.raises(PreconditionError, match="README.md"):
        gate.ensure_clean()


def test_confirm_ownership_asks(temp_git_repo, make_prompter):
    prompter = make_prompter(False)
    gate = SafetyGate(temp_git_repo.executor(), prompter)
    assert gate.confirm_ownership("dev") is False
    assert prompter.calls == [("confirm", "Is 'dev' a private branch used only by you?")]


def test_confirm_ownership_assumed(temp_git_repo, make_prompter):
    prompter = make_prompter()
    gate = SafetyGate(temp_git_repo.executor(), prompter)
    assert gate.confirm_ownership("dev", assume_private=True) is True
    assert prompter.calls == []


def test_confirm_ownership_cancel_propagates(temp_git_repo, make_prompter):
    gate = SafetyGate(temp_git_repo.executor(), make_prompter(PromptCancelled("ctrl-c")))
    with pytest.raises(PromptCancelled):
        gate.confirm_ownership("dev")
