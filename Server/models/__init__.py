"""
GarageDash Server - Models Package

This package contains all data models for the GarageDash server:
- api: API endpoint Pydantic models
- infrastructure: Dataclass models for store listings and object streams
"""

# Re-export all models for convenient importing
from models.api import *
from models.infrastructure import *
