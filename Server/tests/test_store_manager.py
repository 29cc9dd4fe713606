"""
Tests for the object store manager in GarageDash Server

Uses botocore's Stubber so no live store is needed. Tests listing,
streaming reads and the translation of S3 errors into the store taxonomy.
"""

import io
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError
from botocore.response import StreamingBody
from botocore.stub import Stubber

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from errors import StoreNotFoundError, StoreTransientError, StoreFailureError
from managers.store_manager import StoreManager, ClassifyClientError
from server_config import ServerConfig, ServerConfigManager


@pytest.fixture
def manager(tmp_path, monkeypatch):
    for name in ServerConfig.model_fields:
        monkeypatch.delenv(name.upper(), raising=False)
    monkeypatch.setenv("S3_ACCESS_KEY_ID", "GKtest")
    monkeypatch.setenv("S3_SECRET_ACCESS_KEY", "secret")
    config = ServerConfigManager(config_file=tmp_path / "missing.json").load_config()
    return StoreManager(config)


def MakeClientError(code, status_code, operation="CopyObject"):
    return ClientError(
        {
            "Error": {"Code": code, "Message": f"{code} message"},
            "ResponseMetadata": {"HTTPStatusCode": status_code},
        },
        operation,
    )


def test_classify_client_errors():
    """Test mapping of S3 error codes onto the taxonomy"""
    not_found = ClassifyClientError(MakeClientError("NoSuchKey", 404), "get", "archive", "a.txt")
    head_missing = ClassifyClientError(MakeClientError("404", 404), "get", "archive", "a.txt")
    transient = ClassifyClientError(MakeClientError("ServiceUnavailable", 503), "copy", "archive", "a.txt")
    other = ClassifyClientError(MakeClientError("AccessDenied", 403), "put", "archive", "a.txt")

    assert isinstance(not_found, StoreNotFoundError)
    assert isinstance(head_missing, StoreNotFoundError)
    assert isinstance(transient, StoreTransientError)
    assert isinstance(other, StoreFailureError)
    assert transient.operation == "copy"
    assert transient.key == "a.txt"
    assert other.code == "AccessDenied"


def test_list_objects_follows_pages(manager):
    """Test that a paginated listing is merged into one result"""
    modified = datetime(2024, 5, 1, tzinfo=timezone.utc)
    with Stubber(manager.client) as stubber:
        stubber.add_response("list_objects_v2", {
            "CommonPrefixes": [{"Prefix": "reports/2023/"}],
            "Contents": [{"Key": "reports/summary.txt", "Size": 12, "LastModified": modified}],
            "IsTruncated": True,
            "NextContinuationToken": "page-2",
        })
        stubber.add_response("list_objects_v2", {
            "CommonPrefixes": [{"Prefix": "reports/2024/"}],
            "IsTruncated": False,
        })

        result = manager.ListObjects("archive", "reports/", "/")

    assert result.common_prefixes == ["reports/2023/", "reports/2024/"]
    assert [(o.key, o.size, o.last_modified) for o in result.objects] == [("reports/summary.txt", 12, modified)]


def test_list_objects_failure(manager):
    """Test that listing errors are translated"""
    with Stubber(manager.client) as stubber:
        stubber.add_client_error("list_objects_v2", service_error_code="NoSuchBucket", http_status_code=404)

        with pytest.raises(StoreFailureError):
            manager.ListObjects("archive", "", "/")


def test_get_object_stream(manager):
    """Test that a GET returns a stream with store metadata"""
    body = StreamingBody(io.BytesIO(b"hello"), 5)
    with Stubber(manager.client) as stubber:
        stubber.add_response("get_object", {
            "Body": body,
            "ContentType": "text/plain",
            "ContentLength": 5,
        })

        stream = manager.GetObject("archive", "a.txt")

    assert stream.content_type == "text/plain"
    assert stream.size == 5
    assert stream.Read() == b"hello"
    assert stream.closed


def test_get_missing_object(manager):
    """Test that NoSuchKey becomes StoreNotFoundError"""
    with Stubber(manager.client) as stubber:
        stubber.add_client_error("get_object", service_error_code="NoSuchKey", http_status_code=404)

        with pytest.raises(StoreNotFoundError) as excinfo:
            manager.GetObject("archive", "missing.txt")

    assert excinfo.value.key == "missing.txt"
    assert excinfo.value.code == "NoSuchKey"


def test_put_object(manager, monkeypatch):
    """Test that puts carry the content type"""
    captured = {}
    monkeypatch.setattr(manager.client, "put_object", lambda **kwargs: captured.update(kwargs))

    manager.PutObject("archive", "a.txt", b"abc", "text/plain")

    assert captured == {"Bucket": "archive", "Key": "a.txt", "Body": b"abc", "ContentType": "text/plain"}


def test_upload_stream_uses_managed_transfer(manager, monkeypatch):
    """Test that streamed writes go through upload_fileobj"""
    captured = {}

    def UploadFileobj(fileobj, bucket, key, ExtraArgs=None):
        captured.update(data=fileobj.read(), bucket=bucket, key=key, extra=ExtraArgs)

    monkeypatch.setattr(manager.client, "upload_fileobj", UploadFileobj)

    manager.UploadStream("archive", "v.mp4", io.BytesIO(b"video"), "video/mp4")

    assert captured == {"data": b"video", "bucket": "archive", "key": "v.mp4", "extra": {"ContentType": "video/mp4"}}


def test_copy_service_unavailable_is_transient(manager):
    """Test that Garage's ServiceUnavailable is classified as transient"""
    with Stubber(manager.client) as stubber:
        stubber.add_client_error("copy_object", service_error_code="ServiceUnavailable", http_status_code=503)

        with pytest.raises(StoreTransientError):
            manager.CopyObject("archive", "a.txt", "archive-trash", "a.txt_1")


def test_delete_object_failure(manager):
    """Test that other delete errors are plain failures"""
    with Stubber(manager.client) as stubber:
        stubber.add_client_error("delete_object", service_error_code="AccessDenied", http_status_code=403)

        with pytest.raises(StoreFailureError):
            manager.DeleteObject("archive", "a.txt")


def test_connection_errors_are_failures(manager, monkeypatch):
    """Test that transport errors become StoreFailureError"""
    def Unreachable(**kwargs):
        raise EndpointConnectionError(endpoint_url="http://127.0.0.1:3900")

    monkeypatch.setattr(manager.client, "delete_object", Unreachable)

    with pytest.raises(StoreFailureError):
        manager.DeleteObject("archive", "a.txt")
