"""
GarageDash Client - Exceptions Package

Contains all exception classes for the GarageDash client.

Author: GarageDash Project
"""

from .api_error import GarageDashAPIError
from .not_found_error import GarageDashNotFoundError
from .validation_error import GarageDashValidationError
from .server_error import GarageDashServerError

__all__ = [
    'GarageDashAPIError',
    'GarageDashNotFoundError',
    'GarageDashValidationError',
    'GarageDashServerError'
]
