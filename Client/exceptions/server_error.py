"""
GarageDash Client - Server Error Exception

Exception raised for server-related errors, including connection failures.

Author: GarageDash Project
"""

from .api_error import GarageDashAPIError


class GarageDashServerError(GarageDashAPIError):
    """Exception for server errors."""
    pass
