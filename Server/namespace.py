"""
GarageDash Server - Namespace Mapping

Object stores have no directories. This module synthesizes one level of a
folder tree from a single prefix + delimiter listing:
- common prefixes become folders
- objects directly under the prefix become files

No directory index is kept anywhere; every call recomputes the view.
"""

import logging
from typing import FrozenSet, Iterable, List, Optional

from content_gateway import GuessMimeType
from models.api import FileEntry
from models.infrastructure import ListResult

logger = logging.getLogger(__name__)

DELIMITER = "/"


def NormalizePrefix(prefix: Optional[str]) -> str:
    """
    Normalize a user-supplied folder path into a store query prefix

    Empty (or None) means the root. Anything else ends with exactly one
    delimiter, so "docs", "docs/" and "docs//" all query "docs/".
    """
    if not prefix:
        return ""
    stripped = prefix.rstrip(DELIMITER)
    if not stripped:
        return ""
    return stripped + DELIMITER


def BuildEntries(listing: ListResult, query_prefix: str) -> List[FileEntry]:
    """
    Turn one listing result into folder and file entries

    Pure function: no store access, so it can be tested with a fake listing.

    Args:
        listing: Common prefixes and direct objects returned by the store
        query_prefix: The normalized prefix the listing was made with

    Returns:
        List of FileEntry (folders first, in store order; callers sort)
    """
    entries: List[FileEntry] = []

    for common_prefix in listing.common_prefixes:
        if not common_prefix.startswith(query_prefix):
            continue
        name = common_prefix[len(query_prefix):].rstrip(DELIMITER)
        if not name:
            # The query prefix itself is not a visitable folder
            continue
        entries.append(FileEntry(
            name=name,
            path=common_prefix.rstrip(DELIMITER),
            kind="folder",
        ))

    for obj in listing.objects:
        if not obj.key.startswith(query_prefix):
            continue
        name = obj.key[len(query_prefix):]
        # Skip the prefix marker itself and legacy folder-marker objects
        if not name or name.endswith(DELIMITER):
            continue
        entries.append(FileEntry(
            name=name,
            path=obj.key,
            kind="file",
            size=obj.size or 0,
            last_modified=obj.last_modified,
            mime_type=obj.content_type or GuessMimeType(name),
        ))

    return entries


def ListEntries(store, prefix: Optional[str] = "", bucket: Optional[str] = None) -> List[FileEntry]:
    """
    List one folder level of a bucket

    Args:
        store: StoreManager
        prefix: Folder path; empty means root
        bucket: Bucket to list, defaults to the archive bucket

    Returns:
        List of FileEntry, order not guaranteed

    Raises:
        StoreError: Any store failure, without retries
    """
    bucket = bucket or store.archive_bucket
    query_prefix = NormalizePrefix(prefix)

    listing = store.ListObjects(bucket, query_prefix, DELIMITER)
    entries = BuildEntries(listing, query_prefix)

    logger.debug(f"Listed '{query_prefix or '/'}' in {bucket}: {len(entries)} entries")
    return entries


def PathSet(entries: Iterable[FileEntry]) -> FrozenSet[str]:
    """Identity of a listing: the unordered set of entry paths"""
    return frozenset(entry.path for entry in entries)
