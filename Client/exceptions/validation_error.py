"""
GarageDash Client - Validation Error Exception

Exception raised when the server rejects a request as invalid (HTTP 400/422).

Author: GarageDash Project
"""

from .api_error import GarageDashAPIError


class GarageDashValidationError(GarageDashAPIError):
    """Exception for rejected requests."""
    pass
