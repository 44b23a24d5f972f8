#serves as disk: object bytes, refs, HEAD, the index and the working files
import os
import hashlib
import json
import tempfile

from contextlib import contextmanager
from pathlib import Path

from loguru import logger

from .config import get_settings
from .errors import InvalidBranchName, InvalidPath, ObjectNotFound, RepositoryExists

HEAD_PREFIX = 'ref: refs/heads/'


class Storage:
    """
    File-based storage rooted at a working directory.

    Layout under the metadata directory:
    - objects/{oid}
    - refs/heads/{branch}  (contains commit id)
    - HEAD  (contains "ref: refs/heads/{branch}")
    - index  (JSON staging area)
    """

    def __init__(self, root, settings=None):
        self.settings = settings or get_settings()
        self.root = Path(root)
        self.git_dir = self.root / self.settings.repo_dir
        self.objects_dir = self.git_dir / 'objects'
        self.heads_dir = self.git_dir / 'refs' / 'heads'
        self.head_file = self.git_dir / 'HEAD'
        self.index_file = self.git_dir / 'index'

    def exists(self):
        return self.git_dir.is_dir()

    def init(self): #makes the metadata, objects and refs directories
        if self.exists():
            raise RepositoryExists()
        self.objects_dir.mkdir(parents=True)
        self.heads_dir.mkdir(parents=True)
        logger.debug(f"Created {self.git_dir}")

    # objects

    def put_bytes(self, obj):
        """Store OBJ under its SHA-1 and return the hex id; no-op if present."""
        oid = hash_object(obj)
        path = self.objects_dir / oid
        if not path.exists():
            _write_atomic(path, obj)
            logger.debug(f"Wrote object {oid[:10]} ({len(obj)} bytes)")
        return oid

    def get_bytes(self, oid):
        if not self.has_bytes(oid):
            raise ObjectNotFound(f"No object with id {oid} exists.")
        return (self.objects_dir / oid).read_bytes()

    def has_bytes(self, oid):
        return bool(oid) and (self.objects_dir / oid).is_file()

    def iter_object_ids(self):
        for path in sorted(self.objects_dir.iterdir()):
            if path.is_file() and not path.name.startswith('.'):
                yield path.name

    # refs

    def read_ref(self, name):
        if not valid_branch_name(name):
            return None
        path = self.heads_dir / name
        if not path.is_file():
            return None
        return path.read_text().strip() or None

    def write_ref(self, name, oid):
        assert oid
        if not valid_branch_name(name):
            raise InvalidBranchName(f"Invalid branch name: {name!r}.")
        _write_atomic(self.heads_dir / name, oid.encode())
        logger.debug(f"refs/heads/{name} -> {oid[:10]}")

    def delete_ref(self, name):
        if not valid_branch_name(name):
            raise InvalidBranchName(f"Invalid branch name: {name!r}.")
        (self.heads_dir / name).unlink()

    def list_refs(self):
        return {path.name for path in self.heads_dir.iterdir()
                if path.is_file() and not path.name.startswith('.')}

    def read_head(self):
        if not self.head_file.is_file():
            return None
        value = self.head_file.read_text().strip()
        if value.startswith(HEAD_PREFIX):
            return value[len(HEAD_PREFIX):]
        return None

    def write_head(self, branch):
        _write_atomic(self.head_file, f'{HEAD_PREFIX}{branch}'.encode())

    # index

    def load_index(self):
        if not self.index_file.is_file():
            return {}
        with open(self.index_file) as f:
            return json.load(f)

    def save_index(self, index):
        _write_atomic(self.index_file, json.dumps(index, sort_keys=True).encode())

    @contextmanager
    def get_index(self):
        #saved back only when the block finishes without raising
        index = self.load_index()
        yield index
        self.save_index(index)

    # working files

    def working_path(self, path):
        #normalized PATH; anything outside the working area is refused
        if not path or '\n' in path or os.path.isabs(path):
            raise InvalidPath(f'Invalid path: {path!r}.')
        path = normalize_path(path)
        if path == '.' or path == '..' or path.startswith('../') or self.is_ignored(path):
            raise InvalidPath(f'Invalid path: {path!r}.')
        return path

    def _working_path(self, path):
        return self.root / self.working_path(path)

    def read_working_file(self, path):
        full = self._working_path(path)
        if not full.is_file():
            return None
        return full.read_bytes()

    def write_working_file(self, path, content):
        full = self._working_path(path)
        full.parent.mkdir(parents=True, exist_ok=True)
        full.write_bytes(content)

    def delete_working_file(self, path):
        full = self._working_path(path)
        if full.is_file():
            full.unlink()
        # prune directories left empty, never the root
        parent = full.parent
        while parent != self.root and self.root in parent.parents:
            try:
                parent.rmdir()
            except OSError:
                break
            parent = parent.parent

    def list_working_files(self):
        result = set()
        for root, dirnames, filenames in os.walk(self.root):
            rel_dir = os.path.relpath(root, self.root)
            dirnames[:] = [d for d in dirnames
                           if not self.is_ignored(os.path.join(rel_dir, d))]
            for filename in filenames:
                path = normalize_path(os.path.join(rel_dir, filename))
                if not self.is_ignored(path):
                    result.add(path)
        return result

    def is_ignored(self, path):
        return normalize_path(path).split('/')[0] == self.settings.repo_dir


def hash_object(obj): #sha1 hex digest, the name the object is stored under
    return hashlib.sha1(obj).hexdigest()


def valid_branch_name(name): #one plain file under refs/heads
    return (bool(name) and not name.startswith('.')
            and not any(c in name for c in "/\\\n\r\t "))


def normalize_path(path):
    """Relative working path with '/' separators."""
    return Path(os.path.normpath(path)).as_posix()


def _write_atomic(path, content):
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix='.tmp-')
    try:
        with os.fdopen(fd, 'wb') as out:
            out.write(content)
            out.flush()
            os.fsync(out.fileno())
        os.replace(tmp, path)
    except BaseException:
        if os.path.exists(tmp):
            os.remove(tmp)
        raise
