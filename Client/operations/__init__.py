"""
GarageDash Client - Operations Package

This package contains the browser state and the listing poller.
"""

from .browser_state import BrowserState, normalize_path
from .listing_poller import ListingPoller

__all__ = ['BrowserState', 'normalize_path', 'ListingPoller']
