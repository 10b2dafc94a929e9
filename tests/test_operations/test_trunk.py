import pytest

from dev_flow.errors import ConflictError, GitCommandError, PreconditionError
from dev_flow.operations import FlowConfig, TrunkStrategy, TrunkSync


@pytest.fixture
def trunk_moved(clone_origin):
    """A separate clone that pushes to origin/main."""
    return clone_origin("other")


def push_to_main(other, name, content):
    sha = other.commit_file(name, content)
    other.git("push", "origin", "main")
    return sha


def test_merge_strategy(work_repo, trunk_moved, flow_config, make_prompter):
    trunk_tip = push_to_main(trunk_moved, "trunk.txt", "trunk\n")

    trunk = TrunkSync(work_repo.executor(), make_prompter(), flow_config).run(TrunkStrategy.MERGE)

    assert trunk == "main"
    assert trunk_tip in work_repo.git("rev-list", "dev").split()
    assert len(work_repo.git("log", "-1", "--format=%P").split()) == 2


def test_rebase_strategy_chosen_interactively(work_repo, trunk_moved, flow_config, make_prompter):
    trunk_tip = push_to_main(trunk_moved, "trunk.txt", "trunk\n")
    prompter = make_prompter(TrunkStrategy.REBASE.value)

    TrunkSync(work_repo.executor(), prompter, flow_config).run()

    assert work_repo.head("dev~1") == trunk_tip
    assert len(work_repo.git("log", "-1", "--format=%P").split()) == 1


def test_merge_conflict(work_repo, trunk_moved, flow_config, make_prompter):
    push_to_main(trunk_moved, "README.md", "trunk readme\n")
    work_repo.commit_file("README.md", "dev readme\n")

    with pytest.raises(ConflictError) as excinfo:
        TrunkSync(work_repo.executor(), make_prompter(), flow_config).run(TrunkStrategy.MERGE)
    assert excinfo.value.exit_code == 0


def test_rebase_conflict(work_repo, trunk_moved, flow_config, make_prompter, capsys):
    push_to_main(trunk_moved, "README.md", "trunk readme\n")
    work_repo.commit_file("README.md", "dev readme\n")

    with pytest.raises(ConflictError):
        TrunkSync(work_repo.executor(), make_prompter(), flow_config).run(TrunkStrategy.REBASE)
    assert "git rebase --continue" in capsys.readouterr().err


def test_configured_trunk_missing(work_repo, make_prompter):
    config = FlowConfig(trunk="develop")
    with pytest.raises(GitCommandError, match="origin/develop"):
        TrunkSync(work_repo.executor(), make_prompter(), config).run(TrunkStrategy.MERGE)


def test_dirty_tree(work_repo, flow_config, make_prompter):
    (work_repo.path / "scratch.txt").write_text("x")
    with pytest.raises(PreconditionError):
        TrunkSync(work_repo.executor(), make_prompter(), flow_config).run(TrunkStrategy.MERGE)
