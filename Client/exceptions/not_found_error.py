"""
GarageDash Client - Not Found Error Exception

Exception raised when the requested file does not exist (HTTP 404).

Author: GarageDash Project
"""

from .api_error import GarageDashAPIError


class GarageDashNotFoundError(GarageDashAPIError):
    """Exception for missing files."""
    pass
