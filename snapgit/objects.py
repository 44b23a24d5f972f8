"""
Content-addressed object store.

Objects are stored as ``<kind>\\x00<content>`` and addressed by the SHA-1 of
those bytes, so a blob and a commit with the same content never share an id.
Stored objects are never updated or deleted.
"""

from .data import hash_object
from .errors import ObjectNotFound

BLOB = 'blob'
COMMIT = 'commit'


class ObjectStore:

    def __init__(self, storage):
        self.storage = storage

    def put(self, data, kind=BLOB):
        """Store DATA as an object of KIND and return its id."""
        return self.storage.put_bytes(_frame(data, kind))

    def hash_of(self, data, kind=BLOB):
        """The id DATA would get, without storing it."""
        return hash_object(_frame(data, kind))

    def get(self, oid, expected=BLOB):
        """Return the content of object OID.

        Raises ObjectNotFound when OID is unknown or is not of kind EXPECTED
        (pass ``expected=None`` to accept any kind).
        """
        kind, content = self._read(oid)
        if expected is not None and kind != expected:
            raise ObjectNotFound(f"Object {oid} is a {kind}, not a {expected}.")
        return content

    def kind_of(self, oid):
        return self._read(oid)[0]

    def contains(self, oid, kind=None):
        if not self.storage.has_bytes(oid):
            return False
        return kind is None or self.kind_of(oid) == kind

    def iter_ids(self, kind=None):
        for oid in self.storage.iter_object_ids():
            if kind is None or self.kind_of(oid) == kind:
                yield oid

    def _read(self, oid):
        obj = self.storage.get_bytes(oid)
        kind, _, content = obj.partition(b'\x00')
        return kind.decode(), content


def _frame(data, kind):
    return kind.encode() + b'\x00' + data
