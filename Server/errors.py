"""
GarageDash Server - Error Taxonomy

This module defines the errors raised by the core layers:
- ValidationError for caller input that violates a contract
- StoreError and its subclasses for failures reported by the object store

Store errors are classified by the store manager into one of three kinds
(not found, transient replication, other) so the core never inspects
vendor-specific error codes itself.
"""

import logging
from contextlib import contextmanager

logger = logging.getLogger(__name__)


class GarageDashError(Exception):
    """Base exception for all GarageDash server errors."""
    pass


class ValidationError(GarageDashError):
    """Raised when caller-supplied input violates a contract."""
    pass


class StoreError(GarageDashError):
    """
    Base exception for failures reported by the object store

    Args:
        message: Human readable description
        operation: Store operation that failed (e.g. 'copy', 'delete')
        bucket: Bucket the operation targeted
        key: Object key the operation targeted
        code: Store-reported error code, if any
    """

    def __init__(self, message: str, operation: str = None, bucket: str = None,
                 key: str = None, code: str = None):
        super().__init__(message)
        self.operation = operation
        self.bucket = bucket
        self.key = key
        self.code = code


class StoreNotFoundError(StoreError):
    """The requested key (or bucket) does not exist."""
    pass


class StoreTransientError(StoreError):
    """Some replicas were not reachable yet; the write quorum may still have been met."""
    pass


class StoreFailureError(StoreError):
    """Any other store failure (auth, malformed request, store down)."""
    pass


@contextmanager
def TolerateReplicationLag(operation: str, key: str):
    """
    Absorb transient replication errors raised inside the block

    Garage reports ServiceUnavailable while background replication catches up,
    even though the mutation already reached a write quorum. Such errors are
    logged as a warning and treated as success. Every other error propagates.

    Args:
        operation: Name of the guarded operation, used for logging
        key: Object key the operation targets, used for logging
    """
    try:
        yield
    except StoreTransientError as e:
        logger.warning(f"Background sync warning for {operation} of '{key}' - likely succeeded ({e})")
