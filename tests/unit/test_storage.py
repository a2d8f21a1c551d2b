"""
Tests for storage clients: in-memory, S3 (mocked boto3) and the factory.
"""

import io
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from consistency_probe.config.models import StorageConfig
from consistency_probe.storage.factory import create_storage_client
from consistency_probe.storage.memory import InMemoryStorageClient
from consistency_probe.storage.protocol import (
    GetResult,
    PutResult,
    StorageClient,
    StorageClientError,
    object_key,
)
from consistency_probe.storage.s3 import S3StorageClient


def _client_error(code: str, status: int, operation: str) -> ClientError:
    return ClientError(
        {
            "Error": {"Code": code, "Message": code},
            "ResponseMetadata": {"HTTPStatusCode": status, "RequestId": "req-1"},
        },
        operation,
    )


class TestResults:
    def test_put_ok(self):
        assert PutResult().ok
        assert not PutResult(error=RuntimeError()).ok

    def test_get_requires_200(self):
        assert GetResult(status_code=200, content=b"").ok
        assert not GetResult(status_code=304, content=b"").ok
        assert not GetResult(status_code=200, error=RuntimeError()).ok

    def test_object_key(self):
        assert object_key(12) == "12"
        assert object_key(12, "prefix") == "prefix/12"
        assert object_key(12, "prefix/") == "prefix/12"


class TestInMemoryStorageClient:
    def test_satisfies_protocol(self):
        assert isinstance(InMemoryStorageClient(), StorageClient)

    def test_put_then_get(self, tmp_path):
        path = tmp_path / "f"
        path.write_bytes(b"data")
        client = InMemoryStorageClient()

        assert client.put("b", "1", path).ok
        result = client.get("b", "1")

        assert result.ok
        assert result.content == b"data"
        assert client.stats == {"put_count": 1, "get_count": 1, "objects": 1}

    def test_get_missing(self):
        result = InMemoryStorageClient().get("b", "nope")
        assert result.status_code == 404
        assert isinstance(result.error, KeyError)

    def test_put_missing_file(self, tmp_path):
        result = InMemoryStorageClient().put("b", "1", tmp_path / "missing")
        assert isinstance(result.error, FileNotFoundError)

    def test_buckets_are_separate(self, tmp_path):
        path = tmp_path / "f"
        path.write_bytes(b"x")
        client = InMemoryStorageClient()
        client.put("a", "1", path)

        assert client.keys("a") == ["1"]
        assert client.keys("b") == []

    def test_clear(self, tmp_path):
        path = tmp_path / "f"
        path.write_bytes(b"x")
        client = InMemoryStorageClient()
        client.put("a", "1", path)
        client.clear()
        assert client.stats == {"put_count": 0, "get_count": 0, "objects": 0}


class TestS3StorageClient:
    @pytest.fixture
    def boto_client(self):
        return MagicMock()

    @pytest.fixture
    def s3(self, boto_client):
        return S3StorageClient("a", "s", "eu-west-1", client=boto_client)

    @pytest.fixture
    def local_file(self, tmp_path):
        path = tmp_path / "testfile_0.jpg"
        path.write_bytes(b"payload")
        return path

    def test_put_success(self, s3, boto_client, local_file):
        boto_client.put_object.return_value = {
            "ETag": '"abc"',
            "ResponseMetadata": {"HTTPStatusCode": 200, "RequestId": "r", "RetryAttempts": 0},
        }

        result = s3.put("bucket", "0", local_file)

        assert result.ok
        assert result.metadata["ETag"] == '"abc"'
        assert result.metadata["http_status_code"] == 200
        kwargs = boto_client.put_object.call_args.kwargs
        assert kwargs["Bucket"] == "bucket"
        assert kwargs["Key"] == "0"

    def test_put_client_error(self, s3, boto_client, local_file):
        boto_client.put_object.side_effect = _client_error("AccessDenied", 403, "PutObject")

        result = s3.put("bucket", "0", local_file)

        assert not result.ok
        assert isinstance(result.error, ClientError)
        assert result.metadata["http_status_code"] == 403
        assert result.metadata["error_code"] == "AccessDenied"

    def test_put_connection_error(self, s3, boto_client, local_file):
        boto_client.put_object.side_effect = EndpointConnectionError(endpoint_url="https://x")

        result = s3.put("bucket", "0", local_file)

        assert isinstance(result.error, EndpointConnectionError)
        assert result.metadata is None

    def test_put_missing_local_file(self, s3, tmp_path):
        result = s3.put("bucket", "0", tmp_path / "missing")
        assert isinstance(result.error, FileNotFoundError)

    def test_get_success(self, s3, boto_client):
        boto_client.get_object.return_value = {
            "Body": io.BytesIO(b"payload"),
            "ContentLength": 7,
            "LastModified": datetime(2026, 1, 1, tzinfo=timezone.utc),
            "ResponseMetadata": {"HTTPStatusCode": 200, "RequestId": "r"},
        }

        result = s3.get("bucket", "0")

        assert result.ok
        assert result.content == b"payload"
        assert result.metadata["LastModified"] == "2026-01-01T00:00:00+00:00"
        assert "Body" not in result.metadata

    def test_get_not_found(self, s3, boto_client):
        boto_client.get_object.side_effect = _client_error("NoSuchKey", 404, "GetObject")

        result = s3.get("bucket", "0")

        assert not result.ok
        assert result.status_code == 404
        assert result.metadata["error_code"] == "NoSuchKey"

    def test_get_body_read_failure(self, s3, boto_client):
        body = MagicMock()
        body.read.side_effect = OSError("connection reset")
        boto_client.get_object.return_value = {
            "Body": body,
            "ResponseMetadata": {"HTTPStatusCode": 200},
        }

        result = s3.get("bucket", "0")

        assert not result.ok
        assert result.status_code == 200
        assert isinstance(result.error, OSError)

    def test_builds_boto3_client(self):
        with patch("consistency_probe.storage.s3.boto3.client") as mock_client:
            S3StorageClient("a", "s", "eu-west-1", endpoint_url="http://minio:9000")

        args, kwargs = mock_client.call_args
        assert args == ("s3",)
        assert kwargs["aws_access_key_id"] == "a"
        assert kwargs["region_name"] == "eu-west-1"
        assert kwargs["endpoint_url"] == "http://minio:9000"

    def test_client_construction_failure(self):
        with patch("consistency_probe.storage.s3.boto3.client", side_effect=ValueError("bad")):
            with pytest.raises(StorageClientError):
                S3StorageClient("a", "s", "eu-west-1")


class TestFactory:
    def test_creates_memory(self):
        client = create_storage_client(StorageConfig(backend="memory"))
        assert isinstance(client, InMemoryStorageClient)

    def test_creates_s3(self):
        config = StorageConfig(backend="s3", access_key_id="a", secret_access_key="s")
        with patch("consistency_probe.storage.s3.boto3.client"):
            client = create_storage_client(config)
        assert isinstance(client, S3StorageClient)

    def test_s3_without_credentials(self):
        with pytest.raises(StorageClientError):
            create_storage_client(StorageConfig(backend="s3"))
