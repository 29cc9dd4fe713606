"""
GarageDash Server - Object Store Manager

This module handles all communication with the S3-compatible object store:
- Client construction from ServerConfig (path-style addressing for Garage)
- Prefix + delimiter listing (ListObjectsV2, paginated)
- Object get/put/copy/delete and managed streaming uploads
- Translation of boto3/botocore errors into the GarageDash store taxonomy

The manager holds only configuration and a thread-safe boto3 client, so a
single instance is shared across all in-flight requests.
"""

import logging
from contextlib import contextmanager
from typing import Optional, BinaryIO

import boto3
from boto3.exceptions import S3UploadFailedError
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from errors import StoreError, StoreNotFoundError, StoreTransientError, StoreFailureError
from models.infrastructure import StoredObject, ListResult, ObjectStream
from server_config import ServerConfig

logger = logging.getLogger(__name__)


# Error codes reported by S3/Garage for a missing object
NOT_FOUND_CODES = {"NoSuchKey", "NotFound", "404"}

# Error codes Garage reports while some replicas are unreachable
TRANSIENT_CODES = {"ServiceUnavailable", "503"}

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def ClassifyClientError(error: ClientError, operation: str, bucket: str, key: Optional[str]) -> StoreError:
    """
    Map a botocore ClientError onto the store error taxonomy

    Args:
        error: Error raised by the boto3 client
        operation: Store operation that failed
        bucket: Target bucket
        key: Target key (None for bucket-level operations)

    Returns:
        StoreNotFoundError, StoreTransientError or StoreFailureError
    """
    response = getattr(error, "response", None) or {}
    error_info = response.get("Error", {})
    code = str(error_info.get("Code", ""))
    message = error_info.get("Message") or str(error)
    status_code = response.get("ResponseMetadata", {}).get("HTTPStatusCode")

    if code in NOT_FOUND_CODES:
        return StoreNotFoundError(f"Object not found: {bucket}/{key}", operation, bucket, key, code)
    if code in TRANSIENT_CODES or status_code == 503:
        return StoreTransientError(f"Store temporarily unavailable: {message}", operation, bucket, key, code)
    return StoreFailureError(f"Store {operation} failed: {message}", operation, bucket, key, code)


@contextmanager
def _TranslateErrors(operation: str, bucket: str, key: Optional[str] = None):
    """Re-raise boto3/botocore errors as StoreError subclasses"""
    try:
        yield
    except ClientError as e:
        raise ClassifyClientError(e, operation, bucket, key) from e
    except S3UploadFailedError as e:
        # The managed transfer wraps the ClientError that caused the failure
        cause = e.__cause__ or e.__context__
        if isinstance(cause, ClientError):
            raise ClassifyClientError(cause, operation, bucket, key) from e
        raise StoreFailureError(f"Store {operation} failed: {e}", operation, bucket, key) from e
    except BotoCoreError as e:
        raise StoreFailureError(f"Store {operation} failed: {e}", operation, bucket, key) from e


class StoreManager:
    """
    Typed capability over the backing object store.

    Responsibilities:
    - list(prefix, delimiter), get(key) -> stream, put(key, bytes, contentType)
    - streamed upload, copy(src -> dst bucket/key), delete(bucket, key)
    - Raise only StoreError subclasses for store-reported failures
    """

    def __init__(self, config: ServerConfig, client=None):
        """
        Initialize the store manager.

        Args:
            config: Resolved server configuration
            client: Optional pre-built boto3 S3 client (used by tests)
        """
        self.config = config
        self.archive_bucket = config.archive_bucket
        self.trash_bucket = config.trash_bucket

        if client is None:
            client = boto3.client(
                "s3",
                endpoint_url=config.s3_endpoint,
                region_name=config.s3_region,
                aws_access_key_id=config.s3_access_key_id or None,
                aws_secret_access_key=config.s3_secret_access_key or None,
                config=Config(
                    s3={"addressing_style": "path"},  # Required for Garage
                    connect_timeout=config.connect_timeout_seconds,
                    read_timeout=config.read_timeout_seconds,
                    retries={"max_attempts": config.max_attempts},
                ),
            )
        self.client = client
        logger.info(f"Object store client ready: endpoint={config.s3_endpoint}, region={config.s3_region}")

    def ListObjects(self, bucket: str, prefix: str, delimiter: str = "/") -> ListResult:
        """
        List one level of the namespace under prefix

        Pages are followed until exhausted; the result is one logical listing.

        Args:
            bucket: Bucket to list
            prefix: Key prefix (already normalized by the caller)
            delimiter: Grouping delimiter

        Returns:
            ListResult with common prefixes and direct objects
        """
        result = ListResult(prefix=prefix)

        with _TranslateErrors("list", bucket, prefix):
            paginator = self.client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=bucket, Prefix=prefix, Delimiter=delimiter):
                for common_prefix in page.get("CommonPrefixes", []):
                    if common_prefix.get("Prefix"):
                        result.common_prefixes.append(common_prefix["Prefix"])
                for obj in page.get("Contents", []):
                    if obj.get("Key"):
                        result.objects.append(StoredObject(
                            key=obj["Key"],
                            size=obj.get("Size") or 0,
                            last_modified=obj.get("LastModified"),
                        ))

        logger.debug(
            f"Listed {bucket}/{prefix}: {len(result.common_prefixes)} prefixes, {len(result.objects)} objects"
        )
        return result

    def GetObject(self, bucket: str, key: str) -> ObjectStream:
        """
        Open an object for streaming

        Raises:
            StoreNotFoundError: If no object exists at key
        """
        with _TranslateErrors("get", bucket, key):
            response = self.client.get_object(Bucket=bucket, Key=key)

        body = response.get("Body")
        if body is None:
            raise StoreNotFoundError(f"Object not found: {bucket}/{key}", "get", bucket, key)

        return ObjectStream(
            key=key,
            body=body,
            content_type=response.get("ContentType") or DEFAULT_CONTENT_TYPE,
            size=response.get("ContentLength") or 0,
        )

    def PutObject(self, bucket: str, key: str, data: bytes, content_type: str) -> None:
        """Store a whole buffer at key"""
        with _TranslateErrors("put", bucket, key):
            self.client.put_object(Bucket=bucket, Key=key, Body=data, ContentType=content_type)
        logger.debug(f"Put {len(data)} bytes at {bucket}/{key} ({content_type})")

    def UploadStream(self, bucket: str, key: str, fileobj: BinaryIO, content_type: str) -> None:
        """
        Store a file-like object at key using a managed (multipart) upload

        The stream is read in parts and never held fully in memory.
        """
        with _TranslateErrors("upload", bucket, key):
            self.client.upload_fileobj(fileobj, bucket, key, ExtraArgs={"ContentType": content_type})
        logger.debug(f"Uploaded stream to {bucket}/{key} ({content_type})")

    def CopyObject(self, src_bucket: str, src_key: str, dst_bucket: str, dst_key: str) -> None:
        """Server-side copy of src_bucket/src_key to dst_bucket/dst_key"""
        with _TranslateErrors("copy", src_bucket, src_key):
            self.client.copy_object(
                Bucket=dst_bucket,
                Key=dst_key,
                CopySource={"Bucket": src_bucket, "Key": src_key},
            )
        logger.debug(f"Copied {src_bucket}/{src_key} to {dst_bucket}/{dst_key}")

    def DeleteObject(self, bucket: str, key: str) -> None:
        """Delete bucket/key (S3 does not report missing keys on delete)"""
        with _TranslateErrors("delete", bucket, key):
            self.client.delete_object(Bucket=bucket, Key=key)
        logger.debug(f"Deleted {bucket}/{key}")
