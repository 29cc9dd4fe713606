"""
GarageDash Server - Trash API Models

Pydantic models for trash restore and purge endpoints.
"""

from pydantic import BaseModel


class RestoreRequest(BaseModel):
    trash_key: str


class RestoreResponse(BaseModel):
    success: bool
    path: str
    restored_from: str


class PurgeResponse(BaseModel):
    success: bool
    trash_key: str
