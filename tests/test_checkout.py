"""Tests for file checkout, branch checkout and reset."""

import pytest

from snapgit.errors import (
    AlreadyCurrent,
    CommitNotFound,
    FileNotInCommit,
    UnknownBranch,
    UntrackedFileConflict,
)


def snapshot(repo):
    """Working files with their contents."""
    return {path: repo.storage.read_working_file(path) for path in repo.storage.list_working_files()}


class TestCheckoutFile:

    def test_restores_head_version(self, repo, commit_files) -> None:
        commit_files("v1", {"f.txt": "one"})
        (repo.root / "f.txt").write_text("scribbled")

        repo.checkout_file("f.txt")

        assert (repo.root / "f.txt").read_text() == "one"

    def test_restores_version_from_older_commit(self, repo, commit_files) -> None:
        old = commit_files("v1", {"f.txt": "one"})
        commit_files("v2", {"f.txt": "two"})

        repo.checkout_file("f.txt", old[:10])

        assert (repo.root / "f.txt").read_text() == "one"
        assert repo.load_staging().is_empty()

    def test_file_not_in_commit(self, repo) -> None:
        with pytest.raises(FileNotInCommit):
            repo.checkout_file("nothing.txt")

    def test_unknown_commit(self, repo) -> None:
        with pytest.raises(CommitNotFound):
            repo.checkout_file("f.txt", "deadbeef")


class TestCheckoutBranch:

    def test_unknown_branch(self, repo) -> None:
        with pytest.raises(UnknownBranch):
            repo.checkout_branch("nope")

    def test_current_branch(self, repo) -> None:
        with pytest.raises(AlreadyCurrent):
            repo.checkout_branch("master")

    def test_switches_snapshot_and_head(self, repo, commit_files) -> None:
        commit_files("shared", {"shared.txt": "s"})
        repo.branch("other")
        commit_files("master only", {"master.txt": "m", "shared.txt": "s2"})
        (repo.root / "pending.txt").write_text("p")
        repo.add("pending.txt")

        repo.checkout_branch("other")

        assert repo.refs.current_branch() == "other"
        assert snapshot(repo) == {"shared.txt": b"s"}
        assert repo.load_staging().is_empty()

    def test_untracked_file_in_the_way(self, repo, commit_files) -> None:
        repo.branch("other")
        repo.checkout_branch("other")
        commit_files("other adds f", {"f.txt": "from other"})
        repo.checkout_branch("master")
        (repo.root / "f.txt").write_text("precious")
        (repo.root / "g.txt").write_text("g")
        repo.add("g.txt")
        before = snapshot(repo)

        with pytest.raises(UntrackedFileConflict) as excinfo:
            repo.checkout_branch("other")

        assert excinfo.value.paths == ["f.txt"]
        assert snapshot(repo) == before
        assert repo.refs.current_branch() == "master"
        assert list(repo.load_staging().additions) == ["g.txt"]

    def test_any_untracked_file_blocks(self, repo, commit_files) -> None:
        repo.branch("other")
        commit_files("master adds f", {"f.txt": "f"})
        (repo.root / "notes.txt").write_text("mine")
        before = snapshot(repo)

        with pytest.raises(UntrackedFileConflict) as excinfo:
            repo.checkout_branch("other")

        assert excinfo.value.paths == ["notes.txt"]
        assert snapshot(repo) == before
        assert repo.refs.current_branch() == "master"

    def test_files_missing_from_target_are_deleted(self, repo, commit_files) -> None:
        repo.branch("other")
        commit_files("master adds nested", {"f.txt": "f", "dir/g.txt": "g"})
        (repo.root / "staged.txt").write_text("s")
        repo.add("staged.txt")

        repo.checkout_branch("other")

        assert snapshot(repo) == {}
        assert not (repo.root / "dir").exists()


class TestReset:

    def test_moves_current_branch_not_head(self, repo, commit_files) -> None:
        first = commit_files("first", {"f.txt": "1"})
        commit_files("second", {"f.txt": "2", "g.txt": "g"})
        (repo.root / "h.txt").write_text("h")
        repo.add("h.txt")

        assert repo.reset(first[:8]) == first

        assert repo.refs.current_branch() == "master"
        assert repo.refs.get("master") == first
        assert snapshot(repo) == {"f.txt": b"1"}
        assert repo.load_staging().is_empty()

    def test_untracked_file_blocks_reset(self, repo, commit_files) -> None:
        first = commit_files("first", {"f.txt": "1"})
        second = commit_files("second", removed=["f.txt"])
        (repo.root / "f.txt").write_text("untracked now")

        with pytest.raises(UntrackedFileConflict):
            repo.reset(first)

        assert repo.refs.get("master") == second
        assert (repo.root / "f.txt").read_text() == "untracked now"

    def test_unknown_commit(self, repo) -> None:
        with pytest.raises(CommitNotFound):
            repo.reset("0123456789")
