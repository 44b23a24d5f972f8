#commits and the history they form
#there is no stored graph: it is read by following parent and merge-parent ids
import itertools
import operator
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from loguru import logger

from .errors import CommitNotFound, EmptyMessage, ObjectNotFound
from .objects import COMMIT

ROOT_TIMESTAMP = 0


@dataclass(frozen=True)
class Commit:
    message: str
    timestamp: int
    parent: Optional[str] = None
    merge_parent: Optional[str] = None
    files: Tuple[Tuple[str, str], ...] = () #(path, blob id) pairs sorted by path

    @property
    def tracked_files(self): #a fresh copy, never the commit's own data
        return dict(self.files)

    @property
    def parents(self):
        return tuple(p for p in (self.parent, self.merge_parent) if p)

    def blob_id(self, path):
        return self.tracked_files.get(path)

    def tracks(self, path):
        return any(name == path for name, _ in self.files)

    def serialize(self):
        lines = [f'timestamp {self.timestamp}']
        if self.parent:
            lines.append(f'parent {self.parent}')
        if self.merge_parent:
            lines.append(f'merge-parent {self.merge_parent}')
        lines.extend(f'file {blob} {path}' for path, blob in self.files)
        lines.append('')
        lines.append(self.message)
        return '\n'.join(lines).encode()

    @classmethod
    def parse(cls, raw):
        fields = {'parent': None, 'merge_parent': None}
        files = []
        lines = iter(raw.decode().split('\n'))
        for line in itertools.takewhile(operator.truth, lines): #headers end at the first empty line
            key, value = line.split(' ', 1)
            if key == 'timestamp':
                fields['timestamp'] = int(value)
            elif key == 'parent':
                fields['parent'] = value
            elif key == 'merge-parent':
                fields['merge_parent'] = value
            elif key == 'file':
                blob, path = value.split(' ', 1)
                files.append((path, blob))
            else:
                raise ValueError(f'Unknown field {key}')
        message = '\n'.join(lines)
        return cls(message=message, files=tuple(sorted(files)), **fields)


@dataclass
class CommitDraft:
    #a commit under construction; files starts as a copy of the parent's map
    message: str
    timestamp: int
    parent: Optional[str] = None
    merge_parent: Optional[str] = None
    files: Dict[str, str] = field(default_factory=dict)

    def add_file(self, path, blob_id):
        self.files[path] = blob_id

    def remove_file(self, path):
        self.files.pop(path, None)

    def freeze(self):
        return Commit(
            message=self.message,
            timestamp=self.timestamp,
            parent=self.parent,
            merge_parent=self.merge_parent,
            files=tuple(sorted(self.files.items())),
        )


class CommitGraph:

    def __init__(self, objects, clock=time.time):
        self.objects = objects
        self.clock = clock

    def create(self, message, parent_id, merge_parent_id=None):
        """Start a new commit on top of PARENT_ID.

        Without a parent this is the root: epoch timestamp and no files, so
        every fresh repository gets the same root id.
        """
        if not message or not message.strip():
            raise EmptyMessage()
        if parent_id is None:
            return CommitDraft(message=message, timestamp=ROOT_TIMESTAMP)
        parent = self.get(parent_id)
        return CommitDraft(
            message=message,
            timestamp=int(self.clock()),
            parent=parent_id,
            merge_parent=merge_parent_id,
            files=parent.tracked_files,
        )

    def write(self, commit):
        if isinstance(commit, CommitDraft):
            commit = commit.freeze()
        oid = self.objects.put(commit.serialize(), COMMIT)
        logger.debug(f"Stored commit {oid[:10]}: {commit.message!r}")
        return oid

    def get(self, commit_id):
        if not commit_id:
            raise CommitNotFound()
        try:
            raw = self.objects.get(commit_id, COMMIT)
        except ObjectNotFound:
            raise CommitNotFound(f"No commit with id {commit_id} exists.") from None
        return Commit.parse(raw)

    def exists(self, commit_id):
        return bool(commit_id) and self.objects.contains(commit_id, COMMIT)

    def resolve(self, commit_id): #full id or a unique prefix
        if not commit_id:
            raise CommitNotFound()
        if self.exists(commit_id):
            return commit_id
        matches = [oid for oid in self.objects.iter_ids(COMMIT) if oid.startswith(commit_id)]
        if len(matches) != 1:
            raise CommitNotFound()
        return matches[0]

    def iter_commits(self):
        for oid in self.objects.iter_ids(COMMIT):
            yield oid, self.get(oid)

    def ancestors(self, commit_id):
        #COMMIT_ID then its first parents down to the root, merge parents skipped
        while commit_id:
            yield commit_id
            commit_id = self.get(commit_id).parent

    def closure(self, commit_id):
        #every id reachable through parents and merge parents
        seen = set()
        pending = deque([commit_id])
        while pending:
            oid = pending.popleft()
            if not oid or oid in seen:
                continue
            seen.add(oid)
            pending.extend(self.get(oid).parents)
        return seen

    def find_split_point(self, tip_a, tip_b):
        """Latest common ancestor of TIP_A and TIP_B.

        TIP_B's whole ancestry is collected; TIP_A's first-parent chain is
        then walked outward, checking each commit's parent before its merge
        parent, and the first id found in TIP_B's ancestry wins.
        """
        shared = self.closure(tip_b)
        if tip_a in shared:
            return tip_a
        for oid in self.ancestors(tip_a):
            for candidate in self.get(oid).parents:
                if candidate in shared:
                    return candidate
        return None
