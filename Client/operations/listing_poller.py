"""
GarageDash Client - Listing Poller Module

Polls the current folder at a fixed interval and feeds the results to a
BrowserState. Mutations are fire-and-forget: they are sent, and the folder
is re-listed right after, since the server pushes no change notifications.

Author: GarageDash Project
"""

import logging
import threading
from typing import Optional, Callable, List, Dict, Any, BinaryIO

from exceptions import GarageDashAPIError

# Configure logging
logger = logging.getLogger(__name__)


class ListingPoller:
    """
    Keeps a BrowserState in sync with the server.

    Responsibilities:
    - Poll list_files for the current folder at a fixed interval
    - Notify a callback only when the view actually changed
    - Keep the previous view when a poll fails
    - Send deletes, uploads and edits, then re-poll
    """

    def __init__(self, api_client, browser_state, interval_seconds: float = 5.0,
                 on_change: Optional[Callable] = None):
        """
        Initialize the poller.

        Args:
            api_client: GarageDashAPI instance for server communication
            browser_state: BrowserState to reconcile listings into
            interval_seconds: Seconds between polls
            on_change: Optional callback, called with the BrowserState after a change
        """
        self.api = api_client
        self.state = browser_state
        self.interval_seconds = interval_seconds
        self.on_change = on_change
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    # ==================== Polling ====================

    def poll_once(self) -> bool:
        """
        List the current folder once and reconcile it.

        Returns:
            True if the view changed
        """
        path = self.state.current_path
        try:
            listing = self.api.list_files(path)
        except GarageDashAPIError as e:
            logger.warning(f"Failed to list '/{path}', keeping previous view: {e}")
            self.state.last_error = str(e)
            return False

        self.state.last_error = None
        changed = self.state.reconcile(listing)
        if changed and self.on_change:
            self.on_change(self.state)
        return changed

    def run(self, max_polls: Optional[int] = None):
        """
        Poll until stop() is called (or max_polls polls were made).

        Blocks the calling thread; use start() to poll in the background.
        """
        polls = 0
        while not self._stop_event.is_set():
            self.poll_once()
            polls += 1
            if max_polls is not None and polls >= max_polls:
                break
            self._stop_event.wait(self.interval_seconds)

    def start(self):
        """Start polling in a background thread."""
        if self._thread and self._thread.is_alive():
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self.run, daemon=True)
        self._thread.start()
        logger.info(f"Polling '/{self.state.current_path}' every {self.interval_seconds}s")

    def stop(self):
        """Stop background polling."""
        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=self.interval_seconds + 1)
            self._thread = None

    def navigate(self, path: str) -> bool:
        """Switch folders and list the new one immediately."""
        self.state.navigate(path)
        return self.poll_once()

    # ==================== Fire-and-forget Mutations ====================

    def delete(self, file_path: str) -> Optional[Dict[str, Any]]:
        """
        Move a file to the trash, then re-poll.

        Returns:
            The server's result, or None if the request failed
        """
        try:
            return self.api.delete_file(file_path)
        except GarageDashAPIError as e:
            logger.error(f"Failed to delete '{file_path}': {e}")
            return None
        finally:
            self.poll_once()

    def delete_many(self, file_paths: List[str]) -> Optional[Dict[str, Any]]:
        """
        Move several files to the trash, then re-poll.

        Returns:
            The per-path results from the server, or None if the request failed
        """
        try:
            result = self.api.delete_files(file_paths)
            failed = [r["path"] for r in result.get("results", []) if not r.get("success")]
            if failed:
                logger.warning(f"Could not delete {len(failed)} of {len(file_paths)} files: {', '.join(failed)}")
            return result
        except GarageDashAPIError as e:
            logger.error(f"Failed to delete {len(file_paths)} files: {e}")
            return None
        finally:
            self.poll_once()

    def upload(self, file_path: str, fileobj: BinaryIO, content_type: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """Upload a file, then re-poll."""
        try:
            return self.api.upload_file(file_path, fileobj, content_type)
        except GarageDashAPIError as e:
            logger.error(f"Failed to upload '{file_path}': {e}")
            return None
        finally:
            self.poll_once()

    def update_text(self, file_path: str, content: str) -> Optional[Dict[str, Any]]:
        """Save edited text, then re-poll."""
        try:
            return self.api.update_text(file_path, content)
        except GarageDashAPIError as e:
            logger.error(f"Failed to save '{file_path}': {e}")
            return None
        finally:
            self.poll_once()
