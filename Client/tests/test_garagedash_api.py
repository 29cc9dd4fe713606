"""
Tests for the GarageDash API client

The requests session is replaced with a mock so no server is needed.
"""

import json
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import requests

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from api import GarageDashAPI
from exceptions import (
    GarageDashAPIError,
    GarageDashNotFoundError,
    GarageDashValidationError,
    GarageDashServerError
)


def make_response(status_code, payload=None, content=None):
    response = requests.models.Response()
    response.status_code = status_code
    if payload is not None:
        response._content = json.dumps(payload).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
    else:
        response._content = content or b""
    return response


@pytest.fixture
def api():
    client = GarageDashAPI("http://nas.local", 8000, verify_ssl=False, timeout=5)
    client.session = MagicMock()
    return client


def test_list_files_request(api):
    """Test the listing request and its defaults"""
    api.session.request.return_value = make_response(200, {"path": "docs", "files": []})

    result = api.list_files("docs")

    assert result == {"path": "docs", "files": []}
    api.session.request.assert_called_once_with(
        "GET", "http://nas.local:8000/api/files",
        params={"path": "docs"}, verify=False, timeout=5
    )


def test_file_paths_are_quoted(api):
    """Test that keys with spaces keep their slashes"""
    api.session.request.return_value = make_response(200, content=b"data")

    assert api.read_file("my docs/a b.txt") == b"data"

    method, url = api.session.request.call_args[0]
    assert method == "GET"
    assert url == "http://nas.local:8000/api/files/my%20docs/a%20b.txt"


def test_not_found_maps_to_exception(api):
    """Test 404 with a FastAPI detail message"""
    api.session.request.return_value = make_response(404, {"detail": "File not found: a.txt"})

    with pytest.raises(GarageDashNotFoundError) as excinfo:
        api.delete_file("a.txt")

    assert str(excinfo.value) == "File not found: a.txt"
    assert excinfo.value.status_code == 404


@pytest.mark.parametrize("status_code", [400, 422])
def test_validation_errors(api, status_code):
    """Test that rejected input maps to a validation error"""
    api.session.request.return_value = make_response(status_code, {"detail": "Content must be a string"})

    with pytest.raises(GarageDashValidationError):
        api.update_text("a.txt", "x")


def test_server_error_with_plain_body(api):
    """Test 5xx responses that are not JSON"""
    api.session.request.return_value = make_response(503, content=b"Service Unavailable")

    with pytest.raises(GarageDashServerError) as excinfo:
        api.list_files()

    assert "503" in str(excinfo.value)
    assert "Service Unavailable" in str(excinfo.value)


def test_other_client_errors(api):
    """Test that other 4xx statuses use the base error"""
    api.session.request.return_value = make_response(409, {"detail": "Conflict"})

    with pytest.raises(GarageDashAPIError) as excinfo:
        api.list_trash()

    assert type(excinfo.value) is GarageDashAPIError
    assert excinfo.value.status_code == 409


def test_connection_error(api):
    """Test that an unreachable server raises a server error"""
    api.session.request.side_effect = requests.exceptions.ConnectionError("refused")

    with pytest.raises(GarageDashServerError) as excinfo:
        api.list_files()

    assert "Cannot connect" in str(excinfo.value)


def test_upload_sends_content_type(api):
    """Test that an explicit content type is sent and an implicit one is not"""
    api.session.request.return_value = make_response(200, {"success": True, "path": "a.bin"})

    api.upload_file("a.bin", b"payload", "application/x-custom")
    assert api.session.request.call_args[1]["headers"] == {"Content-Type": "application/x-custom"}

    api.upload_file("a.bin", b"payload")
    assert api.session.request.call_args[1]["headers"] == {}
    assert api.session.request.call_args[0][0] == "PUT"


def test_batch_and_trash_requests(api):
    """Test the request bodies for batch delete, restore and purge"""
    api.session.request.return_value = make_response(200, {"success": True, "results": []})

    api.delete_files(["a.txt", "b.txt"])
    assert api.session.request.call_args[0][1].endswith("/api/files/delete-batch")
    assert api.session.request.call_args[1]["json"] == {"paths": ["a.txt", "b.txt"]}

    api.restore_file("a.txt_1700000000000")
    assert api.session.request.call_args[1]["json"] == {"trash_key": "a.txt_1700000000000"}

    api.purge_file("docs/a.txt_1700000000000")
    method, url = api.session.request.call_args[0]
    assert method == "DELETE"
    assert url.endswith("/api/trash/docs/a.txt_1700000000000")


def test_download_file_streams_to_disk(api, tmp_path):
    """Test streaming download writes all chunks and closes the response"""
    response = MagicMock()
    response.status_code = 200
    response.iter_content.return_value = [b"abc", b"", b"def"]
    api.session.request.return_value = response

    destination = tmp_path / "out.bin"
    written = api.download_file("a.bin", destination)

    assert written == 6
    assert destination.read_bytes() == b"abcdef"
    assert api.session.request.call_args[1]["stream"] is True
    response.close.assert_called_once()
