"""End-to-end tests for the snapgit command line."""

import pytest
from loguru import logger

from snapgit.cli import main


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    yield tmp_path
    # drop the sink bound to the captured stderr
    logger.remove()


def run(capsys, *argv):
    code = main(list(argv))
    return code, capsys.readouterr().out


def test_init_add_commit_log(workdir, capsys) -> None:
    assert run(capsys, "init")[0] == 0
    (workdir / "hello.txt").write_text("hello")
    assert run(capsys, "add", "hello.txt")[0] == 0
    code, out = run(capsys, "commit", "say hello")
    assert code == 0
    commit_id = out.strip()

    code, out = run(capsys, "log")
    assert code == 0
    assert out.startswith(f"===\ncommit {commit_id}\nDate: ")
    assert "say hello" in out
    assert "initial commit" in out


def test_errors_print_message_and_exit_1(workdir, capsys) -> None:
    code, out = run(capsys, "status")
    assert code == 1
    assert out.strip() == "Not in an initialized snapgit directory."

    run(capsys, "init")
    code, out = run(capsys, "checkout", "nowhere")
    assert code == 1
    assert out.strip() == "No such branch exists."

    code, out = run(capsys, "commit", "nothing")
    assert code == 1
    assert out.strip() == "No changes added to the commit."


def test_checkout_file_forms(workdir, capsys) -> None:
    run(capsys, "init")
    (workdir / "f.txt").write_text("v1")
    run(capsys, "add", "f.txt")
    first = run(capsys, "commit", "v1")[1].strip()
    (workdir / "f.txt").write_text("v2")
    run(capsys, "add", "f.txt")
    run(capsys, "commit", "v2")

    (workdir / "f.txt").write_text("scratch")
    assert run(capsys, "checkout", "--", "f.txt")[0] == 0
    assert (workdir / "f.txt").read_text() == "v2"

    assert run(capsys, "checkout", first[:8], "--", "f.txt")[0] == 0
    assert (workdir / "f.txt").read_text() == "v1"


def test_checkout_without_operands(workdir, capsys) -> None:
    with pytest.raises(SystemExit):
        main(["checkout"])


def test_branch_status_and_find(workdir, capsys) -> None:
    run(capsys, "init")
    run(capsys, "branch", "dev")

    code, out = run(capsys, "branch")
    assert out.splitlines() == [" dev", "*master"]

    (workdir / "a.txt").write_text("a")
    run(capsys, "add", "a.txt")
    code, out = run(capsys, "status")
    assert out.startswith("=== Branches ===\ndev\n*master\n\n=== Staged Files ===\na.txt\n")

    commit_id = run(capsys, "commit", "add a")[1].strip()
    assert run(capsys, "find", "add a")[1].strip() == commit_id
    assert run(capsys, "rm-branch", "master") == (1, "Cannot remove the current branch.\n")


def test_merge_conflict_is_reported_not_fatal(workdir, capsys) -> None:
    run(capsys, "init")
    (workdir / "f.txt").write_text("a\n")
    run(capsys, "add", "f.txt")
    run(capsys, "commit", "split")
    run(capsys, "branch", "other")
    (workdir / "f.txt").write_text("b\n")
    run(capsys, "add", "f.txt")
    run(capsys, "commit", "head")
    run(capsys, "checkout", "other")
    (workdir / "f.txt").write_text("c\n")
    run(capsys, "add", "f.txt")
    run(capsys, "commit", "other")
    run(capsys, "checkout", "master")

    code, out = run(capsys, "merge", "other")

    assert code == 0
    assert out.startswith("Encountered a merge conflict.")
    code, out = run(capsys, "log")
    assert "Merge: " in out
    assert "Merged other into master." in out
