"""
GarageDash Server - Main FastAPI Application

This module contains the main FastAPI application for the GarageDash server.
It exposes the archive bucket of a Garage object store as a browsable
file tree with upload, edit and trash endpoints.
"""

import logging
from logging.handlers import RotatingFileHandler
from datetime import datetime
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from server_config import ServerConfigManager, ServerConfig
from managers.store_manager import StoreManager

# Import storage module for shared store_manager instance
import storage


def ConfigureLogging(config: ServerConfig) -> Path:
    """
    Configure logging to write to both console and a rotating file

    Args:
        config: Resolved server configuration (log_level, log_dir)

    Returns:
        Path: The log file in use
    """
    # Create logs directory if it doesn't exist
    logs_dir = Path(config.log_dir)
    logs_dir.mkdir(parents=True, exist_ok=True)

    # Create log filename with timestamp
    log_filename = logs_dir / f"garagedash-server-{datetime.now().strftime('%Y-%m-%d')}.log"

    logging.basicConfig(
        level=getattr(logging, str(config.log_level).upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            # Console handler
            logging.StreamHandler(),
            # File handler with rotation (max 10MB per file, keep 10 backup files)
            RotatingFileHandler(
                log_filename,
                maxBytes=10 * 1024 * 1024,  # 10MB
                backupCount=10,
                encoding='utf-8'
            )
        ]
    )
    return log_filename


logger = logging.getLogger(__name__)


# ==================== Lifespan Events ====================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    FastAPI lifespan event handler for startup and shutdown
    Builds the shared store manager unless one was installed already (tests)
    """
    # Startup
    if storage.store_manager is None:
        config = ServerConfigManager().load_config()
        ConfigureLogging(config)
        logger.info("GarageDash Server starting up...")
        storage.store_manager = StoreManager(config)
        logger.info("Object store client initialized successfully")

    logger.info("Server startup complete")

    yield

    # Shutdown
    logger.info("GarageDash Server shutting down...")
    logger.info("Shutdown complete")


# ==================== FastAPI Application ====================

app = FastAPI(
    title="GarageDash Server",
    description="File browser backend for a Garage object store",
    version="1.0.0",
    lifespan=lifespan
)

# ==================== CORS Middleware ====================

# Allow all origins for development
# In production, this should be restricted to the dashboard URL
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ==================== Import Routers ====================

from routes import status, files, trash


# ==================== Include Routers ====================

app.include_router(status.router)
app.include_router(files.router)
app.include_router(trash.router)


# ==================== Main Entry Point ====================

if __name__ == "__main__":
    """
    Run the server using uvicorn
    """
    config = ServerConfigManager().load_config()
    ConfigureLogging(config)
    storage.store_manager = StoreManager(config)

    logger.info("Starting GarageDash Server...")

    # host="0.0.0.0" allows connections from other machines on the network
    uvicorn.run(
        "server:app",
        host="0.0.0.0",
        port=8000,
        reload=False,
        log_level="info"
    )
