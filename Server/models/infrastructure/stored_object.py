"""
GarageDash Server - Stored Object Models

Dataclasses describing what the object store returns from a listing call.
"""

from datetime import datetime
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class StoredObject:
    """A single object returned by a prefix listing"""
    key: str
    size: int = 0
    last_modified: Optional[datetime] = None
    content_type: Optional[str] = None  # ListObjectsV2 never reports this; fakes may


@dataclass
class ListResult:
    """
    Result of one prefix + delimiter listing

    common_prefixes holds the groupings beyond the delimiter (each ends with
    the delimiter), objects holds the keys directly under the prefix.
    """
    prefix: str
    common_prefixes: List[str] = field(default_factory=list)
    objects: List[StoredObject] = field(default_factory=list)
