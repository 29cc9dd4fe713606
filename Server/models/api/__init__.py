"""
GarageDash Server - API Models Package

This package contains Pydantic models for all API endpoints.
"""

from models.api.file_entry import FileEntry, FileListResponse
from models.api.file_operations import (
    FileWriteResponse,
    TextUpdateRequest,
    FileDeleteResponse,
    BatchDeleteRequest,
    BatchDeleteResult,
    BatchDeleteResponse
)
from models.api.trash_operations import RestoreRequest, RestoreResponse, PurgeResponse

__all__ = [
    'FileEntry',
    'FileListResponse',
    'FileWriteResponse',
    'TextUpdateRequest',
    'FileDeleteResponse',
    'BatchDeleteRequest',
    'BatchDeleteResult',
    'BatchDeleteResponse',
    'RestoreRequest',
    'RestoreResponse',
    'PurgeResponse',
]
