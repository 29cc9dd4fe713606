"""
GarageDash Server - Error Mapping

Translates core errors into HTTP exceptions for the route modules.
"""

import logging
from fastapi import HTTPException, status

from errors import (
    GarageDashError, ValidationError,
    StoreNotFoundError, StoreTransientError
)

logger = logging.getLogger(__name__)


def ToHTTPException(error: GarageDashError, operation: str, key: str, detail: str) -> HTTPException:
    """
    Map a core error onto an HTTPException, logging it with its context

    Args:
        error: Error raised by a core module
        operation: Operation being performed (for the log line)
        key: Object key involved (for the log line)
        detail: Generic message returned for opaque store failures

    Returns:
        HTTPException ready to raise
    """
    if isinstance(error, ValidationError):
        logger.warning(f"Rejected {operation} of '{key}': {str(error)}")
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))

    if isinstance(error, StoreNotFoundError):
        logger.warning(f"{operation} of '{key}': not found")
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"File not found: {key}")

    if isinstance(error, StoreTransientError):
        logger.error(f"{operation} of '{key}' hit an unavailable store: {str(error)}")
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=detail)

    logger.error(f"Error during {operation} of '{key}': {str(error)}")
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)
