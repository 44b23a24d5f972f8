"""
snapgit: a local, content-addressed version-control core.
"""

from .base import Repository, Status
from .config import Settings, get_settings
from .errors import SnapgitError, UntrackedFileConflict
from .graph import Commit, CommitDraft, CommitGraph
from .index import StagingArea
from .merge import MergeResult, MergeStatus
from .objects import ObjectStore

__version__ = '1.0'

__all__ = [
    "Repository",
    "Status",
    "Settings",
    "get_settings",
    "SnapgitError",
    "UntrackedFileConflict",
    "Commit",
    "CommitDraft",
    "CommitGraph",
    "StagingArea",
    "MergeResult",
    "MergeStatus",
    "ObjectStore",
]
