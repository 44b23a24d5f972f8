#the staging area: path -> blob id maps waiting for the next commit
#a path is in at most one of additions and removals
from .errors import NothingStaged, NothingToRemove


class StagingArea:

    def __init__(self, additions=None, removals=None):
        self.additions = dict(additions or {})
        self.removals = dict(removals or {})

    @classmethod
    def load(cls, raw):
        return cls(raw.get('additions'), raw.get('removals'))

    def dump(self):
        return {'additions': dict(self.additions), 'removals': dict(self.removals)}

    def is_empty(self):
        return not self.additions and not self.removals

    def clear(self):
        self.additions.clear()
        self.removals.clear()

    def stage_addition(self, path, blob_id, head):
        """Stage PATH at BLOB_ID; returns whether it ended up staged.

        If HEAD already tracks PATH at BLOB_ID there is nothing to commit,
        so PATH is dropped from both maps instead.
        """
        self.removals.pop(path, None)
        if head is not None and head.blob_id(path) == blob_id:
            self.additions.pop(path, None)
            return False
        self.additions[path] = blob_id
        return True

    def stage_removal(self, path, head):
        #True means PATH is now staged for removal and the working file should go
        if path in self.additions:
            del self.additions[path]
            return False
        blob_id = head.blob_id(path) if head is not None else None
        if blob_id is None:
            raise NothingToRemove()
        self.removals[path] = blob_id
        return True

    def apply(self, draft): #overlay the staged changes on the draft's files, then drain
        if self.is_empty():
            raise NothingStaged()
        for path, blob_id in self.additions.items():
            draft.add_file(path, blob_id)
        for path in self.removals:
            draft.remove_file(path)
        self.clear()
