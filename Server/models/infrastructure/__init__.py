"""
GarageDash Server - Infrastructure Models Package

This package contains dataclass models for values exchanged with the
object store, like listing results and object streams.
"""

from models.infrastructure.stored_object import StoredObject, ListResult
from models.infrastructure.object_stream import ObjectStream

__all__ = [
    'StoredObject',
    'ListResult',
    'ObjectStream',
]
