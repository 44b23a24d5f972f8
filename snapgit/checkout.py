#writing commit snapshots into the working area
#branch checkout, reset and merge refuse to run while an untracked file is
#present; the check happens before any write
from loguru import logger

from .errors import AlreadyCurrent, FileNotInCommit, UnknownBranch, UntrackedFileConflict


def check_untracked(repo, staging):
    """
    Raise UntrackedFileConflict if any working file is neither staged for
    addition nor tracked by the head commit.
    """
    head = repo.head_commit()
    blocking = [
        path for path in repo.storage.list_working_files()
        if path not in staging.additions and not head.tracks(path)
    ]
    if blocking:
        raise UntrackedFileConflict(blocking)


def materialize(repo, target, staging):
    #working area ends up holding exactly TARGET's files; STAGING is cleared
    wanted = target.tracked_files
    for path in sorted(repo.storage.list_working_files() - set(wanted)):
        repo.storage.delete_working_file(path)
    for path, blob_id in sorted(wanted.items()):
        repo.storage.write_working_file(path, repo.objects.get(blob_id))
    staging.clear()


def checkout_file(repo, commit_id, path):
    """Overwrite PATH in the working area with its version in COMMIT_ID."""
    commit = repo.graph.get(repo.graph.resolve(commit_id))
    blob_id = commit.blob_id(path)
    if blob_id is None:
        raise FileNotInCommit()
    repo.storage.write_working_file(path, repo.objects.get(blob_id))
    logger.debug(f"Checked out {path} from {commit_id[:10]}")


def checkout_branch(repo, name):
    if not repo.refs.exists(name):
        raise UnknownBranch("No such branch exists.")
    if name == repo.refs.current_branch():
        raise AlreadyCurrent()
    target = repo.graph.get(repo.refs.get(name))
    with repo.staging() as staging:
        check_untracked(repo, staging)
        materialize(repo, target, staging)
    repo.refs.set_current(name)
    logger.info(f"Switched to branch {name}")


def reset(repo, commit_id): #moves the current branch to COMMIT_ID and checks out its snapshot
    commit_id = repo.graph.resolve(commit_id)
    target = repo.graph.get(commit_id)
    with repo.staging() as staging:
        check_untracked(repo, staging)
        materialize(repo, target, staging)
    repo.refs.advance_current(commit_id)
    logger.info(f"Reset {repo.refs.current_branch()} to {commit_id[:10]}")
    return commit_id
