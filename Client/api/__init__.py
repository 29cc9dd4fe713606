"""
GarageDash Client - API Package

This package contains the API communication classes.
"""

from .garagedash_api import GarageDashAPI

__all__ = ['GarageDashAPI']
