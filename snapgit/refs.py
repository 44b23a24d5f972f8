#branch references (name -> commit id) and the head pointer (current branch)
from loguru import logger

from .data import valid_branch_name
from .errors import BranchExists, CannotRemoveCurrentBranch, InvalidBranchName, UnknownBranch


class RefTable:

    def __init__(self, storage):
        self.storage = storage

    def names(self):
        return sorted(self.storage.list_refs())

    def exists(self, name):
        return bool(name) and self.storage.read_ref(name) is not None

    def get(self, name):
        oid = self.storage.read_ref(name) if name else None
        if oid is None:
            raise UnknownBranch(f"No such branch exists: {name}.")
        return oid

    def create(self, name, commit_id):
        if not valid_branch_name(name):
            raise InvalidBranchName(f"Invalid branch name: {name!r}.")
        if self.exists(name):
            raise BranchExists()
        self.storage.write_ref(name, commit_id)
        logger.info(f"Created branch {name} at {commit_id[:10]}")

    def move(self, name, commit_id):
        self.storage.write_ref(name, commit_id)

    def delete(self, name):
        if not self.exists(name):
            raise UnknownBranch()
        if name == self.current_branch():
            raise CannotRemoveCurrentBranch()
        self.storage.delete_ref(name)
        logger.info(f"Deleted branch {name}")

    def current_branch(self):
        return self.storage.read_head()

    def set_current(self, name):
        self.storage.write_head(name)

    def head_commit_id(self):
        return self.get(self.current_branch())

    def advance_current(self, commit_id): #moves the current branch, HEAD itself stays
        self.move(self.current_branch(), commit_id)
