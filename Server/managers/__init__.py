"""
GarageDash Server - Managers Package

This package contains manager classes for the object store and other resources.
"""

from managers.store_manager import StoreManager

__all__ = ['StoreManager']
