"""
GarageDash Client - Settings Package

Contains the configuration manager for the client.

Author: GarageDash Project
"""

from .config_manager import ConfigManager, DEFAULT_CONFIG

__all__ = [
    'ConfigManager',
    'DEFAULT_CONFIG'
]
