"""
GarageDash Client - API Communication Module

Handles all communication with the GarageDash server via REST API:
listing folders, transferring file content, and trash operations.

Author: GarageDash Project
"""

import json
import logging
from pathlib import Path
from typing import Optional, Dict, Any, List, BinaryIO
from urllib.parse import quote

import requests

from exceptions import (
    GarageDashAPIError,
    GarageDashNotFoundError,
    GarageDashValidationError,
    GarageDashServerError
)

# Configure logging
logger = logging.getLogger(__name__)


class GarageDashAPI:
    """
    API client for communicating with the GarageDash server.

    Responsibilities:
    - List folders of the archive and the trash
    - Download, upload and edit files
    - Move files to the trash, restore and purge them
    - Translate HTTP failures into GarageDash exceptions
    """

    def __init__(self, server_url: str, server_port: int, verify_ssl: bool = True, timeout: int = 30):
        """
        Initialize API client.

        Args:
            server_url: Base URL of server (e.g., "http://nas.local")
            server_port: Server port number (e.g., 8000)
            verify_ssl: Whether to verify SSL certificates
            timeout: Timeout in seconds for regular requests
        """
        self.base_url = f"{server_url}:{server_port}"
        self.verify_ssl = verify_ssl
        self.timeout = timeout
        # Use session for connection pooling to avoid TCP handshake overhead on each request
        self.session = requests.Session()
        logger.debug(f"Initialized API client for {self.base_url} (SSL verification: {self.verify_ssl})")

    def close(self):
        """
        Close the session and release resources.

        Should be called when done using the API client.
        """
        if hasattr(self, 'session') and self.session:
            self.session.close()
            logger.debug("API client session closed")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    @staticmethod
    def _file_endpoint(file_path: str) -> str:
        """Endpoint for a single file, keeping slashes as path separators"""
        return f"/api/files/{quote(file_path, safe='/')}"

    def _make_request(self, method: str, endpoint: str, **kwargs) -> requests.Response:
        """
        Make an API request and check its status.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint (e.g., "/api/files")
            **kwargs: Additional arguments for request

        Returns:
            The successful response

        Raises:
            GarageDashNotFoundError: On HTTP 404
            GarageDashValidationError: On HTTP 400 or 422
            GarageDashServerError: On HTTP 5xx or connection problems
            GarageDashAPIError: On any other failed status
        """
        url = f"{self.base_url}{endpoint}"
        logger.debug(f"API request: {method} {endpoint}")

        # Add verify_ssl and timeout if not specified
        if "verify" not in kwargs:
            kwargs["verify"] = self.verify_ssl
        if "timeout" not in kwargs:
            kwargs["timeout"] = self.timeout

        try:
            response = self.session.request(method, url, **kwargs)
        except requests.exceptions.ConnectionError as e:
            logger.error(f"Cannot connect to server at {self.base_url}: {e}")
            raise GarageDashServerError(f"Cannot connect to server at {self.base_url}")
        except requests.exceptions.Timeout:
            logger.error("Request timed out")
            raise GarageDashServerError("Request timed out")
        except requests.exceptions.RequestException as e:
            logger.error(f"Request error: {str(e)}")
            raise GarageDashServerError(f"Request error: {str(e)}")

        if response.status_code < 400:
            return response

        error_message = response.text
        try:
            error_message = response.json().get("detail", error_message)
        except (json.JSONDecodeError, ValueError, AttributeError):
            pass

        if response.status_code == 404:
            logger.warning(f"{method} {endpoint}: not found")
            raise GarageDashNotFoundError(str(error_message), response.status_code)
        if response.status_code in (400, 422):
            logger.error(f"{method} {endpoint} rejected: {error_message}")
            raise GarageDashValidationError(str(error_message), response.status_code)
        if response.status_code >= 500:
            logger.error(f"Server error {response.status_code}: {error_message}")
            raise GarageDashServerError(f"Server error {response.status_code}: {error_message}", response.status_code)

        logger.error(f"Request failed with status {response.status_code}: {error_message}")
        raise GarageDashAPIError(f"Request failed with status {response.status_code}: {error_message}", response.status_code)

    # ==================== Listing ====================

    def list_files(self, path: str = "") -> Dict[str, Any]:
        """
        List one folder of the archive.

        Args:
            path: Folder path, empty for the root

        Returns:
            {"path": str, "files": [entry dicts]}
        """
        return self._make_request("GET", "/api/files", params={"path": path}).json()

    def list_trash(self, path: str = "") -> Dict[str, Any]:
        """List one folder of the trash bucket."""
        return self._make_request("GET", "/api/trash", params={"path": path}).json()

    # ==================== File Content ====================

    def read_file(self, file_path: str) -> bytes:
        """
        Download a file into memory.

        Raises:
            GarageDashNotFoundError: If the file does not exist
        """
        return self._make_request("GET", self._file_endpoint(file_path)).content

    def download_file(self, file_path: str, destination: Path, chunk_size: int = 65536) -> int:
        """
        Stream a file to disk.

        Args:
            file_path: Full key of the file
            destination: Local file to write
            chunk_size: Bytes per chunk

        Returns:
            Number of bytes written
        """
        written = 0
        response = self._make_request("GET", self._file_endpoint(file_path), stream=True, timeout=300)
        try:
            with open(destination, 'wb') as f:
                for chunk in response.iter_content(chunk_size=chunk_size):
                    if chunk:
                        f.write(chunk)
                        written += len(chunk)
        finally:
            response.close()

        logger.info(f"Downloaded '{file_path}' to {destination} ({written} bytes)")
        return written

    def upload_file(self, file_path: str, fileobj: BinaryIO, content_type: Optional[str] = None) -> Dict[str, Any]:
        """
        Upload or overwrite a file, streaming from fileobj.

        Args:
            file_path: Full key to write
            fileobj: Readable binary stream
            content_type: Optional MIME type; the server guesses from the name when omitted
        """
        headers = {"Content-Type": content_type} if content_type else {}
        result = self._make_request(
            "PUT",
            self._file_endpoint(file_path),
            data=fileobj,
            headers=headers,
            timeout=300
        ).json()
        logger.info(f"Uploaded '{file_path}'")
        return result

    def update_text(self, file_path: str, content: str) -> Dict[str, Any]:
        """Replace a file with UTF-8 text."""
        return self._make_request("PATCH", self._file_endpoint(file_path), json={"content": content}).json()

    # ==================== Deletion and Trash ====================

    def delete_file(self, file_path: str) -> Dict[str, Any]:
        """
        Move a file to the trash.

        Returns:
            {"success", "path", "trashed_at", "trash_key"}
        """
        result = self._make_request("DELETE", self._file_endpoint(file_path)).json()
        logger.info(f"Moved '{file_path}' to trash as '{result.get('trash_key')}'")
        return result

    def delete_files(self, file_paths: List[str]) -> Dict[str, Any]:
        """
        Move several files to the trash.

        Returns:
            {"success": bool, "results": [per-path result dicts]}
        """
        return self._make_request("POST", "/api/files/delete-batch", json={"paths": file_paths}).json()

    def restore_file(self, trash_key: str) -> Dict[str, Any]:
        """Copy a trashed file back to its original path."""
        return self._make_request("POST", "/api/trash/restore", json={"trash_key": trash_key}).json()

    def purge_file(self, trash_key: str) -> Dict[str, Any]:
        """Permanently delete a file from the trash."""
        return self._make_request("DELETE", f"/api/trash/{quote(trash_key, safe='/')}").json()
