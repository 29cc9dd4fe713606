"""
GarageDash Server - Trash Endpoints

This module contains endpoints for browsing the trash bucket, restoring
trashed files and purging them permanently.
"""

import logging
from fastapi import APIRouter, Query

from errors import GarageDashError
from models.api import FileListResponse, RestoreRequest, RestoreResponse, PurgeResponse
from trash import ListTrash, RestoreFromTrash, PurgeTrashed
from routes.error_mapping import ToHTTPException


# Create logger
logger = logging.getLogger(__name__)

# Create router instance
router = APIRouter()


@router.get("/api/trash", response_model=FileListResponse, tags=["Trash"])
def list_trash(path: str = Query("", description="Folder path inside the trash; empty for the root")):
    """List one folder level of the trash bucket"""
    from storage import store_manager

    try:
        entries = ListTrash(store_manager, path)
    except GarageDashError as e:
        raise ToHTTPException(e, "list trash", path, "Failed to list trash")

    return FileListResponse(path=path, files=entries)


@router.post("/api/trash/restore", response_model=RestoreResponse, tags=["Trash"])
def restore_file(request: RestoreRequest):
    """
    Copy a trashed file back to its original path

    Raises:
        HTTPException: 400 for a malformed trash key, 404 if it does not exist
    """
    from storage import store_manager

    try:
        original_key = RestoreFromTrash(store_manager, request.trash_key)
    except GarageDashError as e:
        raise ToHTTPException(e, "restore", request.trash_key, "Failed to restore file")

    return RestoreResponse(success=True, path=original_key, restored_from=request.trash_key)


@router.delete("/api/trash/{trash_key:path}", response_model=PurgeResponse, tags=["Trash"])
def purge_file(trash_key: str):
    """Permanently delete a file from the trash"""
    from storage import store_manager

    try:
        PurgeTrashed(store_manager, trash_key)
    except GarageDashError as e:
        raise ToHTTPException(e, "purge", trash_key, "Failed to purge file")

    return PurgeResponse(success=True, trash_key=trash_key)
