"""
Shared fixtures for GarageDash Server tests

Provides an in-memory store with the same capability as StoreManager, so the
core modules and routes can be tested without a live Garage cluster.
"""

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from errors import StoreNotFoundError
from models.infrastructure import StoredObject, ListResult, ObjectStream


class FakeBody:
    """Stand-in for botocore's StreamingBody"""

    def __init__(self, data: bytes):
        self.data = data
        self.position = 0
        self.closed = False

    def iter_chunks(self, chunk_size):
        while self.position < len(self.data):
            chunk = self.data[self.position:self.position + chunk_size]
            self.position += len(chunk)
            yield chunk

    def read(self):
        remaining = self.data[self.position:]
        self.position = len(self.data)
        return remaining

    def close(self):
        self.closed = True


class FakeStore:
    """
    In-memory object store with S3 listing semantics

    FailNext(operation, error, apply=False) makes the next call of that
    operation raise error; with apply=True the mutation happens first, the
    way Garage applies a write before reporting ServiceUnavailable.
    """

    def __init__(self):
        self.archive_bucket = "archive"
        self.trash_bucket = "archive-trash"
        self.buckets = {self.archive_bucket: {}, self.trash_bucket: {}}
        self.calls = []
        self.failures = {}
        self.opened_bodies = []

    # Test helpers

    def Seed(self, key, data=b"", bucket=None, content_type=None):
        bucket = bucket or self.archive_bucket
        self.buckets[bucket][key] = {
            "data": data,
            "content_type": content_type,
            "last_modified": datetime(2024, 1, 1, tzinfo=timezone.utc),
        }

    def Data(self, key, bucket=None):
        return self.buckets[bucket or self.archive_bucket][key]["data"]

    def ContentType(self, key, bucket=None):
        return self.buckets[bucket or self.archive_bucket][key]["content_type"]

    def Has(self, key, bucket=None):
        return key in self.buckets[bucket or self.archive_bucket]

    def FailNext(self, operation, error, apply=False):
        self.failures.setdefault(operation, []).append((error, apply))

    def _Run(self, operation, mutation=None):
        queued = self.failures.get(operation)
        if queued:
            error, apply = queued.pop(0)
            if apply and mutation:
                mutation()
            raise error
        if mutation:
            mutation()

    # Store capability

    def ListObjects(self, bucket, prefix, delimiter="/"):
        self.calls.append(("list", bucket, prefix, delimiter))
        self._Run("list")

        result = ListResult(prefix=prefix)
        common_prefixes = set()
        for key in sorted(self.buckets[bucket]):
            if not key.startswith(prefix):
                continue
            rest = key[len(prefix):]
            if delimiter and delimiter in rest:
                common_prefixes.add(prefix + rest[:rest.index(delimiter) + 1])
            else:
                stored = self.buckets[bucket][key]
                result.objects.append(StoredObject(
                    key=key,
                    size=len(stored["data"]),
                    last_modified=stored["last_modified"],
                ))
        result.common_prefixes = sorted(common_prefixes)
        return result

    def GetObject(self, bucket, key):
        self.calls.append(("get", bucket, key))
        self._Run("get")
        if key not in self.buckets[bucket]:
            raise StoreNotFoundError(f"Object not found: {bucket}/{key}", "get", bucket, key, "NoSuchKey")
        stored = self.buckets[bucket][key]
        body = FakeBody(stored["data"])
        self.opened_bodies.append(body)
        return ObjectStream(
            key=key,
            body=body,
            content_type=stored["content_type"] or "application/octet-stream",
            size=len(stored["data"]),
            chunk_size=4,
        )

    def PutObject(self, bucket, key, data, content_type):
        self.calls.append(("put", bucket, key))
        self._Run("put", lambda: self.Seed(key, data, bucket, content_type))

    def UploadStream(self, bucket, key, fileobj, content_type):
        self.calls.append(("upload", bucket, key))
        data = fileobj.read()
        self._Run("upload", lambda: self.Seed(key, data, bucket, content_type))

    def CopyObject(self, src_bucket, src_key, dst_bucket, dst_key):
        self.calls.append(("copy", src_bucket, src_key, dst_bucket, dst_key))
        if src_key not in self.buckets[src_bucket]:
            self._Run("copy")
            raise StoreNotFoundError(f"Object not found: {src_bucket}/{src_key}", "copy", src_bucket, src_key, "NoSuchKey")

        def Copy():
            self.buckets[dst_bucket][dst_key] = dict(self.buckets[src_bucket][src_key])

        self._Run("copy", Copy)

    def DeleteObject(self, bucket, key):
        self.calls.append(("delete", bucket, key))
        self._Run("delete", lambda: self.buckets[bucket].pop(key, None))


@pytest.fixture
def store():
    """Empty in-memory store"""
    return FakeStore()


@pytest.fixture
def client(store):
    """FastAPI TestClient wired to the in-memory store"""
    from fastapi.testclient import TestClient
    import storage
    from server import app

    previous = storage.store_manager
    storage.store_manager = store
    try:
        yield TestClient(app)
    finally:
        storage.store_manager = previous
