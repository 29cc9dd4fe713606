"""
GarageDash Server - File Endpoints

This module contains endpoints for browsing, downloading, uploading,
editing and deleting files in the archive bucket.
"""

import logging
import tempfile
from urllib.parse import quote

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask
from starlette.concurrency import run_in_threadpool

from errors import GarageDashError
from models.api import (
    FileListResponse, FileWriteResponse, TextUpdateRequest,
    FileDeleteResponse, BatchDeleteRequest, BatchDeleteResult, BatchDeleteResponse
)
from namespace import ListEntries
from content_gateway import ReadObject, WriteStream, WriteText
from trash import SoftDelete, SoftDeleteMany
from routes.error_mapping import ToHTTPException


# Create logger
logger = logging.getLogger(__name__)

# Create router instance
router = APIRouter()

# Uploads larger than this are spooled to disk before being sent to the store
SPOOL_MAX_MEMORY_BYTES = 8 * 1024 * 1024


# ==================== Listing ====================

@router.get("/api/files", response_model=FileListResponse, tags=["Files"])
def list_files(path: str = Query("", description="Folder path; empty for the root")):
    """
    List one folder level of the archive

    Returns:
        FileListResponse: The requested path and its files and folders
    """
    from storage import store_manager

    try:
        entries = ListEntries(store_manager, path)
    except GarageDashError as e:
        raise ToHTTPException(e, "list", path, "Failed to list files")

    logger.info(f"Listed {len(entries)} entries in '{path or '/'}'")
    return FileListResponse(path=path, files=entries)


# ==================== Batch Delete ====================

@router.post("/api/files/delete-batch", response_model=BatchDeleteResponse, tags=["Files"])
def delete_files(request: BatchDeleteRequest):
    """
    Move several files to the trash

    Each path is attempted independently; the response carries one result
    per path so callers can see partial failures. Nothing is rolled back.
    """
    from storage import store_manager

    results = SoftDeleteMany(store_manager, request.paths)

    response_results = [
        BatchDeleteResult(
            path=result.key,
            success=result.success,
            trash_key=result.trash_key,
            trashed_at=result.trashed_at,
            error=str(result.error) if result.error else None
        )
        for result in results
    ]
    return BatchDeleteResponse(
        success=all(result.success for result in results),
        results=response_results
    )


# ==================== Single File ====================

@router.get("/api/files/{file_path:path}", tags=["Files"])
def download_file(file_path: str):
    """
    Stream a file's content

    Returns:
        StreamingResponse with the stored content type and length

    Raises:
        HTTPException: 404 if the file does not exist
    """
    from storage import store_manager

    try:
        stream = ReadObject(store_manager, file_path)
    except GarageDashError as e:
        raise ToHTTPException(e, "download", file_path, "Failed to get file")

    filename = file_path.rsplit("/", 1)[-1]
    logger.info(f"Downloading '{file_path}' ({stream.size} bytes)")

    # The background task releases the connection if the client goes away early
    return StreamingResponse(
        stream,
        media_type=stream.content_type,
        headers={
            "Content-Length": str(stream.size),
            "Content-Disposition": f"inline; filename*=UTF-8''{quote(filename)}",
        },
        background=BackgroundTask(stream.Close),
    )


@router.put("/api/files/{file_path:path}", response_model=FileWriteResponse, tags=["Files"])
async def upload_file(file_path: str, request: Request):
    """
    Upload or overwrite a file from the raw request body

    The body is streamed into a spooled temporary file (memory up to
    SPOOL_MAX_MEMORY_BYTES, disk beyond) and then handed to the store as a
    managed upload. Without a Content-Type header the type is guessed from
    the file name.
    """
    from storage import store_manager

    content_type = request.headers.get("content-type")

    spool = tempfile.SpooledTemporaryFile(max_size=SPOOL_MAX_MEMORY_BYTES)
    try:
        async for chunk in request.stream():
            await run_in_threadpool(spool.write, chunk)
        spool.seek(0)

        await run_in_threadpool(WriteStream, store_manager, file_path, spool, content_type)
    except GarageDashError as e:
        raise ToHTTPException(e, "upload", file_path, "Failed to upload file")
    finally:
        spool.close()

    return FileWriteResponse(success=True, path=file_path)


@router.patch("/api/files/{file_path:path}", response_model=FileWriteResponse, tags=["Files"])
def update_text_file(file_path: str, request: TextUpdateRequest):
    """
    Replace a file with text from the editor (stored as text/plain)

    Raises:
        HTTPException: 400 if content is not a string
    """
    from storage import store_manager

    try:
        WriteText(store_manager, file_path, request.content)
    except GarageDashError as e:
        raise ToHTTPException(e, "update", file_path, "Failed to update file")

    return FileWriteResponse(success=True, path=file_path)


@router.delete("/api/files/{file_path:path}", response_model=FileDeleteResponse, tags=["Files"])
def delete_file(file_path: str):
    """
    Move a file to the trash

    Raises:
        HTTPException: 404 if the file does not exist
    """
    from storage import store_manager

    try:
        result = SoftDelete(store_manager, file_path)
    except GarageDashError as e:
        raise ToHTTPException(e, "delete", file_path, "Failed to delete file")

    return FileDeleteResponse(
        success=True,
        path=file_path,
        trashed_at=result.trashed_at,
        trash_key=result.trash_key
    )
