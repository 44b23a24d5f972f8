#the repository: every user-level operation on a working directory
#object store, commit graph and refs live as long as the Repository; the
#staging area is loaded per operation
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from loguru import logger

from . import checkout, merge as merging
from .config import get_settings
from .data import Storage
from .errors import FileNotFound, NoMatchingCommit, NotARepository
from .graph import CommitGraph
from .index import StagingArea
from .objects import ObjectStore
from .refs import RefTable


@dataclass
class Status:
    branches: List[str]
    current: Optional[str]
    staged: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)
    modified: Dict[str, str] = field(default_factory=dict)
    untracked: List[str] = field(default_factory=list)


class Repository:

    def __init__(self, root='.', settings=None, clock=time.time):
        self.settings = settings or get_settings()
        self.storage = Storage(root, self.settings)
        self.objects = ObjectStore(self.storage)
        self.graph = CommitGraph(self.objects, clock=clock)
        self.refs = RefTable(self.storage)

    @property
    def root(self):
        return self.storage.root

    def exists(self):
        return self.storage.exists()

    def _require(self):
        if not self.exists():
            raise NotARepository()

    def init(self):
        """Create the metadata directory, the root commit and the default branch."""
        self.storage.init()
        root_id = self.graph.write(self.graph.create(self.settings.initial_message, None))
        branch = self.settings.default_branch
        self.refs.create(branch, root_id)
        self.refs.set_current(branch)
        self.storage.save_index(StagingArea().dump())
        logger.info(f"Initialized empty repository in {self.storage.git_dir}")
        return root_id

    # staging

    def load_staging(self):
        return StagingArea.load(self.storage.load_index())

    @contextmanager
    def staging(self):
        #written back only when the block finishes without raising
        with self.storage.get_index() as raw:
            area = StagingArea.load(raw)
            yield area
            raw.clear()
            raw.update(area.dump())

    def head_commit(self):
        return self.graph.get(self.refs.head_commit_id())

    def add(self, path):
        """Stage the working version of PATH; returns whether it ended up staged."""
        self._require()
        path = self.storage.working_path(path)
        content = self.storage.read_working_file(path)
        if content is None:
            raise FileNotFound()
        blob_id = self.objects.put(content)
        with self.staging() as staging:
            staged = staging.stage_addition(path, blob_id, self.head_commit())
        logger.debug(f"add {path}: {'staged' if staged else 'unchanged'}")
        return staged

    def rm(self, path):
        self._require()
        path = self.storage.working_path(path)
        with self.staging() as staging:
            if staging.stage_removal(path, self.head_commit()):
                self.storage.delete_working_file(path)

    def commit(self, message, merge_parent=None): #head snapshot plus the staged changes
        self._require()
        draft = self.graph.create(message, self.refs.head_commit_id(), merge_parent)
        with self.staging() as staging:
            staging.apply(draft)
            commit_id = self.graph.write(draft)
            self.refs.advance_current(commit_id)
        logger.info(f"Committed {commit_id[:10]}: {message}")
        return commit_id

    # checkout, reset and merge

    def checkout_file(self, path, commit_id=None):
        self._require()
        checkout.checkout_file(self, commit_id or self.refs.head_commit_id(),
                               self.storage.working_path(path))

    def checkout_branch(self, name):
        self._require()
        checkout.checkout_branch(self, name)

    def reset(self, commit_id):
        self._require()
        return checkout.reset(self, commit_id)

    def merge(self, other):
        self._require()
        return merging.merge(self, other)

    # history

    def log(self):
        """The head's first-parent history, newest first."""
        self._require()
        return [(oid, self.graph.get(oid)) for oid in self.graph.ancestors(self.refs.head_commit_id())]

    def global_log(self):
        self._require()
        return list(self.graph.iter_commits())

    def find(self, message):
        self._require()
        found = [oid for oid, commit in self.graph.iter_commits() if commit.message == message]
        if not found:
            raise NoMatchingCommit()
        return found

    # branches

    def branch(self, name):
        self._require()
        commit_id = self.refs.head_commit_id()
        self.refs.create(name, commit_id)
        return commit_id

    def rm_branch(self, name):
        self._require()
        self.refs.delete(name)

    def branches(self):
        self._require()
        return self.refs.names()

    def status(self):
        self._require()
        head = self.head_commit()
        staging = self.load_staging()
        tracked = head.tracked_files
        working = self.storage.list_working_files()

        modified = {}
        for path, blob_id in tracked.items():
            if path in staging.additions or path in staging.removals:
                continue
            change = self._compare(path, blob_id)
            if change:
                modified[path] = change
        for path, blob_id in staging.additions.items():
            change = self._compare(path, blob_id)
            if change:
                modified[path] = change

        untracked = [
            path for path in working
            if path not in staging.additions
            and (path not in tracked or path in staging.removals)
        ]
        return Status(
            branches=self.refs.names(),
            current=self.refs.current_branch(),
            staged=sorted(staging.additions),
            removed=sorted(staging.removals),
            modified=dict(sorted(modified.items())),
            untracked=sorted(untracked),
        )

    def _compare(self, path, blob_id):
        content = self.storage.read_working_file(path)
        if content is None:
            return 'deleted'
        if self.objects.hash_of(content) != blob_id:
            return 'modified'
        return None
