from dev_flow.operations import PublishOutcome, Publisher


def test_fast_forward_publish(work_repo, origin_repo, make_prompter):
    tip = work_repo.commit_file("a.txt", "a\n")

    outcome = Publisher(work_repo.executor(), make_prompter()).publish("dev", "feat/1.0")

    assert outcome is PublishOutcome.PUBLISHED
    assert origin_repo.head("feat/1.0") == tip
    assert work_repo.head("feat/1.0") == tip
    assert work_repo.current_branch() == "dev"


def test_push_failure_is_partial(work_repo, make_prompter, tmp_path):
    tip = work_repo.commit_file("a.txt", "a\n")
    remote_before = work_repo.head("origin/feat/1.0")
    work_repo.git("remote", "set-url", "--push", "origin", str(tmp_path / "missing.git"))

    outcome = Publisher(work_repo.executor(), make_prompter()).publish("dev", "feat/1.0")

    assert outcome is PublishOutcome.PARTIAL
    assert work_repo.head("feat/1.0") == tip
    assert work_repo.head("origin/feat/1.0") == remote_before
    assert work_repo.current_branch() == "dev"


def test_concurrent_publish_is_a_race(work_repo, teammate_repo, origin_repo, make_prompter):
    work_repo.commit_file("a.txt", "a\n")
    theirs = teammate_repo.commit_file("theirs.txt", "theirs\n")
    teammate_repo.git("push", "origin", "feat/1.0")

    outcome = Publisher(work_repo.executor(), make_prompter()).publish("dev", "feat/1.0")

    assert outcome is PublishOutcome.RACE
    assert origin_repo.head("feat/1.0") == theirs
    assert work_repo.head("feat/1.0") == theirs
    assert work_repo.current_branch() == "dev"


def test_review_push(work_repo, origin_repo, make_prompter, capsys):
    tip = work_repo.commit_file("a.txt", "a\n")

    outcome = Publisher(work_repo.executor(), make_prompter()).publish_for_review("dev", "feat/1.0")

    assert outcome is PublishOutcome.PUBLISHED
    assert origin_repo.head("dev") == tip
    assert origin_repo.head("feat/1.0") != tip
    assert "dev -> feat/1.0" in capsys.readouterr().out


def test_review_push_rejected_then_forced(work_repo, origin_repo, make_prompter):
    work_repo.commit_file("a.txt", "a\n")
    work_repo.git("push", "origin", "dev")
    work_repo.git("commit", "--amend", "-m", "rewritten")
    rewritten = work_repo.head()

    prompter = make_prompter(True)
    outcome = Publisher(work_repo.executor(), prompter).publish_for_review("dev", "feat/1.0")

    assert outcome is PublishOutcome.PUBLISHED
    assert origin_repo.head("dev") == rewritten


def test_review_push_rejected_and_declined(work_repo, make_prompter):
    work_repo.commit_file("a.txt", "a\n")
    work_repo.git("push", "origin", "dev")
    work_repo.git("commit", "--amend", "-m", "rewritten")

    outcome = Publisher(work_repo.executor(), make_prompter(False)).publish_for_review(
        "dev", "feat/1.0"
    )

    assert outcome is PublishOutcome.FAILED
