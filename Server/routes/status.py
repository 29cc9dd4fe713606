"""
GarageDash Server - Status Endpoints

This module contains the health check endpoint.
"""

from datetime import datetime, timezone
from fastapi import APIRouter


# Create router instance
router = APIRouter()


# ==================== Health Check Endpoint ====================

@router.get("/health", tags=["Status"])
async def health_check():
    """
    Health check endpoint to verify server is running

    Returns:
        dict: Server status information
    """
    from storage import store_manager

    return {
        "status": "healthy",
        "service": "GarageDash Server",
        "version": "1.0.0",
        "store_configured": store_manager is not None,
        "timestamp_utc": datetime.now(timezone.utc).isoformat()
    }
