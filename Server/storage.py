"""
GarageDash Server - Storage Module

This module exports the global store_manager instance for use across the application.
"""

from managers.store_manager import StoreManager

# Global store manager instance
# Initialized in server.py lifespan handler
store_manager: StoreManager = None
