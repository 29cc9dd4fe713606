"""
GarageDash Client - Browser State Module

Keeps the view of the folder being browsed and reconciles each polled
listing into it. A listing only replaces the view when its set of paths
differs from what is shown, so an unchanged folder never flickers.

Author: GarageDash Project
"""

import logging
from typing import Optional, Dict, Any, List, Tuple

# Configure logging
logger = logging.getLogger(__name__)


def normalize_path(path: Optional[str]) -> str:
    """Folder path without leading or trailing slashes ("" is the root)."""
    return (path or "").strip("/")


class BrowserState:
    """
    View state of the file browser.

    Responsibilities:
    - Track the current folder and its entries, keyed by path
    - Reconcile polled listings without replacing an unchanged view
    - Drop listings that belong to a folder the user already left
    - Order entries for display, applying pins and nicknames
    """

    def __init__(self, config_manager=None):
        """
        Initialize browser state.

        Args:
            config_manager: Optional ConfigManager providing pins and nicknames
        """
        self.config = config_manager
        self.current_path = ""
        self.entries: Dict[str, Dict[str, Any]] = {}
        self.loaded = False
        self.last_error: Optional[str] = None

    def navigate(self, path: str):
        """Switch to another folder and clear the view until it is listed."""
        self.current_path = normalize_path(path)
        self.entries = {}
        self.loaded = False
        self.last_error = None
        logger.debug(f"Navigated to '/{self.current_path}'")

    def parent_path(self) -> str:
        """Path of the parent folder (the root is its own parent)."""
        if "/" not in self.current_path:
            return ""
        return self.current_path.rsplit("/", 1)[0]

    def breadcrumbs(self) -> List[Tuple[str, str]]:
        """(name, path) pairs from the root down to the current folder."""
        crumbs = [("Home", "")]
        if not self.current_path:
            return crumbs
        parts = self.current_path.split("/")
        for index, part in enumerate(parts):
            crumbs.append((part, "/".join(parts[:index + 1])))
        return crumbs

    def reconcile(self, listing: Dict[str, Any]) -> bool:
        """
        Merge a listing response into the view.

        Args:
            listing: {"path": str, "files": [entry dicts]} as returned by list_files

        Returns:
            True if the view changed, False if the listing was identical
            (compared by path only) or belonged to another folder
        """
        if normalize_path(listing.get("path")) != self.current_path:
            logger.debug(f"Ignoring stale listing for '/{listing.get('path')}'")
            return False

        files = listing.get("files", [])
        new_paths = frozenset(entry["path"] for entry in files)

        if self.loaded and new_paths == frozenset(self.entries):
            return False

        added = len(new_paths - frozenset(self.entries))
        removed = len(frozenset(self.entries) - new_paths)
        self.entries = {entry["path"]: entry for entry in files}
        self.loaded = True
        logger.debug(f"View of '/{self.current_path}' updated (+{added} -{removed})")
        return True

    def display_name(self, entry: Dict[str, Any]) -> str:
        """Nickname of an entry if one is set, otherwise its name."""
        if self.config:
            nickname = self.config.get_nickname(entry["path"])
            if nickname:
                return nickname
        return entry["name"]

    def is_pinned(self, entry: Dict[str, Any]) -> bool:
        return bool(self.config and self.config.is_pinned(entry["path"]))

    def sorted_entries(self) -> List[Dict[str, Any]]:
        """Entries for display: pinned first, then folders, then by name."""
        return sorted(
            self.entries.values(),
            key=lambda entry: (
                not self.is_pinned(entry),
                entry.get("kind") != "folder",
                self.display_name(entry).lower()
            )
        )
