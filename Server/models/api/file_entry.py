"""
GarageDash Server - File Entry API Model

Pydantic model for one entry of a directory listing.
"""

from datetime import datetime
from typing import List, Optional, Literal
from pydantic import BaseModel


class FileEntry(BaseModel):
    """
    One file or inferred folder in a listing

    Folders carry no stored metadata: size is 0, last_modified and
    mime_type are None. path never ends with a slash.
    """
    name: str
    path: str
    kind: Literal["file", "folder"]
    size: int = 0
    last_modified: Optional[datetime] = None
    mime_type: Optional[str] = None


class FileListResponse(BaseModel):
    """Response model for a directory listing"""
    path: str
    files: List[FileEntry]
