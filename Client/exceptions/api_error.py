"""
GarageDash Client - API Error Exception

Base exception class for all API-related errors.

Author: GarageDash Project
"""


class GarageDashAPIError(Exception):
    """Base exception for API errors."""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code
