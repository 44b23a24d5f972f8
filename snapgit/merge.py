"""
Three-way merge of another branch into the current one.

Each path is resolved by comparing its blob id at the split point, at the
head and at the other tip. Only exact blob ids are compared; a path changed
differently on both sides becomes a conflict file holding both versions.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from loguru import logger

from .checkout import check_untracked, reset
from .errors import SelfMerge, UncommittedChanges, UnknownBranch

CONFLICT_HEAD = b'<<<<<<< HEAD\n'
CONFLICT_SEPARATOR = b'=======\n'
CONFLICT_END = b'>>>>>>>\n'


class MergeStatus(Enum):
    ALREADY_ANCESTOR = "already-ancestor"
    FAST_FORWARDED = "fast-forwarded"
    MERGED = "merged"
    CONFLICTED = "conflicted"


@dataclass
class MergeResult:
    """Outcome of a merge that passed its preconditions."""

    status: MergeStatus
    commit_id: Optional[str] = None
    conflicts: List[str] = field(default_factory=list)

    @property
    def conflicted(self) -> bool:
        return self.status is MergeStatus.CONFLICTED


def conflict_content(head: bytes, other: bytes) -> bytes:
    return CONFLICT_HEAD + head + CONFLICT_SEPARATOR + other + CONFLICT_END


def merge(repo, other) -> MergeResult:
    """
    Merge branch OTHER into the current branch.

    Raises UncommittedChanges, UnknownBranch, SelfMerge or
    UntrackedFileConflict before touching anything.
    """
    staging = repo.load_staging()
    if not staging.is_empty():
        raise UncommittedChanges()
    if not repo.refs.exists(other):
        raise UnknownBranch()
    current = repo.refs.current_branch()
    if other == current:
        raise SelfMerge()

    head_tip = repo.refs.get(current)
    other_tip = repo.refs.get(other)
    check_untracked(repo, staging)

    split = repo.graph.find_split_point(head_tip, other_tip)
    if split == other_tip:
        logger.info(f"{other} is an ancestor of {current}; nothing to merge")
        return MergeResult(MergeStatus.ALREADY_ANCESTOR, commit_id=head_tip)
    if split == head_tip:
        reset(repo, other_tip)
        logger.info(f"Fast-forwarded {current} to {other_tip[:10]}")
        return MergeResult(MergeStatus.FAST_FORWARDED, commit_id=other_tip)

    conflicts = _apply_merge_rules(repo, head_tip, other_tip, split)
    commit_id = repo.commit(f"Merged {other} into {current}.", merge_parent=other_tip)
    if conflicts:
        logger.warning(f"Merge of {other} into {current} has conflicts in {conflicts}")
        return MergeResult(MergeStatus.CONFLICTED, commit_id=commit_id, conflicts=conflicts)
    logger.info(f"Merged {other} into {current} as {commit_id[:10]}")
    return MergeResult(MergeStatus.MERGED, commit_id=commit_id)


def _apply_merge_rules(repo, head_tip, other_tip, split_id):
    head = repo.graph.get(head_tip)
    other = repo.graph.get(other_tip)
    split = repo.graph.get(split_id)
    v_heads, v_others, v_splits = head.tracked_files, other.tracked_files, split.tracked_files
    paths = sorted(set(v_heads) | set(v_others) | set(v_splits))

    conflicts = []
    with repo.staging() as staging:
        for path in paths:
            # None stands for "absent" and never equals a blob id
            v_head, v_other, v_split = v_heads.get(path), v_others.get(path), v_splits.get(path)

            if v_split == v_head and v_split != v_other:
                if v_other is None:
                    staging.stage_removal(path, head)
                    repo.storage.delete_working_file(path)
                else:
                    repo.storage.write_working_file(path, repo.objects.get(v_other))
                    staging.stage_addition(path, v_other, head)
            elif v_split != v_head and v_split != v_other and v_head != v_other:
                content = conflict_content(_content(repo, v_head), _content(repo, v_other))
                repo.storage.write_working_file(path, content)
                staging.stage_addition(path, repo.objects.put(content), head)
                conflicts.append(path)
    return conflicts


def _content(repo, blob_id):
    return repo.objects.get(blob_id) if blob_id else b''
