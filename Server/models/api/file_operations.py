"""
GarageDash Server - File Operation API Models

Pydantic models for upload, text update and delete endpoints.
"""

from typing import Any, List, Optional
from pydantic import BaseModel


class FileWriteResponse(BaseModel):
    """Response model for PUT and PATCH on a file"""
    success: bool
    path: str


class TextUpdateRequest(BaseModel):
    """Request model for PATCH; content is validated by the content gateway"""
    content: Any = None


class FileDeleteResponse(BaseModel):
    """Response model for a soft delete"""
    success: bool
    path: str
    trashed_at: int  # epoch milliseconds
    trash_key: str


class BatchDeleteRequest(BaseModel):
    """Request model for deleting several files at once"""
    paths: List[str]


class BatchDeleteResult(BaseModel):
    """Outcome of one key in a batch delete"""
    path: str
    success: bool
    trash_key: Optional[str] = None
    trashed_at: Optional[int] = None
    error: Optional[str] = None


class BatchDeleteResponse(BaseModel):
    """Response model for a batch delete; one result per requested path"""
    success: bool
    results: List[BatchDeleteResult]
