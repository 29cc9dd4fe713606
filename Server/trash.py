"""
GarageDash Server - Trash (Soft Delete)

This module implements trash semantics on top of the object store:
- Soft delete: copy the object into the trash bucket, then delete the original
- Batch soft delete with one result per key
- Restore of a trashed object to its original key
- Permanent purge from the trash bucket

Trash keys embed the deletion time: "<originalKey>_<epochMillis>".
Each step absorbs transient replication errors; any other error aborts the
remaining steps. Nothing is rolled back.
"""

import logging
import re
import time
from dataclasses import dataclass
from typing import List, Optional, Tuple

from errors import GarageDashError, ValidationError, TolerateReplicationLag
from models.api import FileEntry
from namespace import ListEntries

logger = logging.getLogger(__name__)

TRASH_KEY_PATTERN = re.compile(r"(?P<original>.+)_(?P<timestamp>\d+)", re.DOTALL)


@dataclass
class SoftDeleteResult:
    """Outcome of one soft delete"""
    key: str
    success: bool
    trash_key: Optional[str] = None
    trashed_at: Optional[int] = None
    error: Optional[Exception] = None


# ==================== Trash Keys ====================

def CurrentEpochMillis() -> int:
    """Milliseconds since the epoch"""
    return int(time.time() * 1000)


def BuildTrashKey(key: str, timestamp_ms: int) -> str:
    """Trash key for key deleted at timestamp_ms"""
    return f"{key}_{timestamp_ms}"


def ParseTrashKey(trash_key: str) -> Tuple[str, int]:
    """
    Split a trash key into the original key and the deletion time

    The split happens at the last "_<digits>" suffix, so originals that
    themselves contain underscores are recovered intact.

    Returns:
        (original_key, deleted_at_ms)

    Raises:
        ValidationError: If trash_key has no "_<digits>" suffix
    """
    match = TRASH_KEY_PATTERN.fullmatch(trash_key)
    if not match:
        raise ValidationError(f"Not a trash key: {trash_key}")
    return match.group("original"), int(match.group("timestamp"))


# ==================== Soft Delete ====================

def SoftDelete(store, key: str, now_ms: Optional[int] = None) -> SoftDeleteResult:
    """
    Move key from the archive bucket into the trash bucket

    Steps (strictly sequential):
    1. Copy archive/key to trash/<key>_<now_ms>
    2. Delete archive/key

    A failed copy leaves the original untouched. A failed delete after a
    successful copy leaves the object in both buckets; that duplicate is
    safe and is not rolled back.

    Args:
        store: StoreManager
        key: Full object key to delete
        now_ms: Deletion timestamp, defaults to the current time

    Returns:
        SoftDeleteResult with the trash key on success

    Raises:
        StoreNotFoundError: If key does not exist
        StoreError: Any non-transient store failure
    """
    timestamp = now_ms if now_ms is not None else CurrentEpochMillis()
    trash_key = BuildTrashKey(key, timestamp)

    with TolerateReplicationLag("copy to trash", key):
        store.CopyObject(store.archive_bucket, key, store.trash_bucket, trash_key)

    with TolerateReplicationLag("delete", key):
        store.DeleteObject(store.archive_bucket, key)

    logger.info(f"Moved '{key}' to trash as '{trash_key}'")
    return SoftDeleteResult(key=key, success=True, trash_key=trash_key, trashed_at=timestamp)


def SoftDeleteMany(store, keys: List[str], now_ms: Optional[int] = None) -> List[SoftDeleteResult]:
    """
    Soft delete several keys independently

    Not atomic: a failure on one key is recorded in its result and the
    remaining keys are still attempted. Earlier successes are kept.

    Returns:
        One SoftDeleteResult per key, in input order
    """
    results = []
    for key in keys:
        try:
            results.append(SoftDelete(store, key, now_ms))
        except GarageDashError as e:
            logger.error(f"Failed to move '{key}' to trash: {str(e)}")
            results.append(SoftDeleteResult(key=key, success=False, error=e))

    failed = sum(1 for result in results if not result.success)
    if failed:
        logger.warning(f"Batch delete finished with {failed} of {len(keys)} failures")
    else:
        logger.info(f"Batch delete moved {len(keys)} objects to trash")
    return results


# ==================== Recovery ====================

def ListTrash(store, prefix: Optional[str] = "") -> List[FileEntry]:
    """List one folder level of the trash bucket"""
    return ListEntries(store, prefix, bucket=store.trash_bucket)


def RestoreFromTrash(store, trash_key: str) -> str:
    """
    Copy a trashed object back to its original key

    The trash copy is left in place; PurgeTrashed removes it. An existing
    object at the original key is overwritten.

    Returns:
        str: The restored original key

    Raises:
        ValidationError: If trash_key is not a trash key
        StoreNotFoundError: If nothing is stored at trash_key
    """
    original_key, deleted_at = ParseTrashKey(trash_key)

    with TolerateReplicationLag("restore", original_key):
        store.CopyObject(store.trash_bucket, trash_key, store.archive_bucket, original_key)

    logger.info(f"Restored '{original_key}' from trash (deleted at {deleted_at})")
    return original_key


def PurgeTrashed(store, trash_key: str) -> None:
    """Permanently delete one object from the trash bucket"""
    with TolerateReplicationLag("purge", trash_key):
        store.DeleteObject(store.trash_bucket, trash_key)
    logger.info(f"Purged '{trash_key}' from trash")
