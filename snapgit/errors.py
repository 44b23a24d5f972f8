"""
Named error conditions raised by the snapgit core.

Every error here is raised before the failing operation mutates anything.
Non-fatal merge outcomes are reported through ``MergeResult`` instead.
"""


class SnapgitError(Exception):
    """Base exception for snapgit errors."""

    kind = "error"
    default_message = "snapgit error"

    def __init__(self, message=None):
        super().__init__(message or self.default_message)


class NotFoundError(SnapgitError):
    """A blob, commit, branch or file could not be found."""

    kind = "not-found"


class PreconditionViolation(SnapgitError):
    """The operation cannot run in the repository's current state."""

    kind = "precondition"


class UntrackedFileConflict(SnapgitError):
    """Untracked working files would be overwritten."""

    kind = "untracked-conflict"
    default_message = (
        "There is an untracked file in the way; delete it, or add and commit it first."
    )

    def __init__(self, paths=(), message=None):
        self.paths = sorted(paths)
        super().__init__(message)


class ObjectNotFound(NotFoundError):
    default_message = "No object with that id exists."


class CommitNotFound(NotFoundError):
    default_message = "No commit with that id exists."


class UnknownBranch(NotFoundError):
    default_message = "A branch with that name does not exist."


class FileNotInCommit(NotFoundError):
    default_message = "File does not exist in that commit."


class FileNotFound(NotFoundError):
    default_message = "File does not exist."


class NoMatchingCommit(NotFoundError):
    default_message = "Found no commit with that message."


class NotARepository(NotFoundError):
    default_message = "Not in an initialized snapgit directory."


class EmptyMessage(PreconditionViolation):
    default_message = "Please enter a commit message."


class NothingStaged(PreconditionViolation):
    default_message = "No changes added to the commit."


class NothingToRemove(PreconditionViolation):
    default_message = "No reason to remove the file."


class UncommittedChanges(PreconditionViolation):
    default_message = "You have uncommitted changes."


class SelfMerge(PreconditionViolation):
    default_message = "Cannot merge a branch with itself."


class AlreadyCurrent(PreconditionViolation):
    default_message = "No need to checkout the current branch."


class BranchExists(PreconditionViolation):
    default_message = "A branch with that name already exists."


class CannotRemoveCurrentBranch(PreconditionViolation):
    default_message = "Cannot remove the current branch."


class RepositoryExists(PreconditionViolation):
    default_message = (
        "A snapgit version-control system already exists in the current directory."
    )


class InvalidPath(PreconditionViolation):
    default_message = "File is outside the working directory."


class InvalidBranchName(PreconditionViolation):
    default_message = "Invalid branch name."
