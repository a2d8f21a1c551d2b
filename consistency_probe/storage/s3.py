"""
S3 storage client backed by boto3.
"""

from pathlib import Path
from typing import Any

import boto3
import structlog
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from consistency_probe.storage.protocol import GetResult, PutResult, StorageClientError

logger = structlog.get_logger()

# Response fields kept in failure records. The full boto3 response carries
# the streaming body and other values that are not JSON serializable.
_PUT_FIELDS = ("ETag", "VersionId", "ServerSideEncryption")
_GET_FIELDS = ("ETag", "VersionId", "ContentLength", "ContentType", "LastModified")


def _response_metadata(response: dict[str, Any], fields: tuple[str, ...]) -> dict[str, Any]:
    meta = response.get("ResponseMetadata", {})
    result: dict[str, Any] = {
        "http_status_code": meta.get("HTTPStatusCode"),
        "request_id": meta.get("RequestId"),
        "retry_attempts": meta.get("RetryAttempts"),
    }
    for name in fields:
        if name in response:
            value = response[name]
            result[name] = value.isoformat() if hasattr(value, "isoformat") else value
    return result


def _error_metadata(exc: ClientError) -> dict[str, Any]:
    return _response_metadata(exc.response, ()) | {
        "error_code": exc.response.get("Error", {}).get("Code"),
    }


class S3StorageClient:
    """
    Reads and writes probe objects with the boto3 S3 client.

    Errors are returned inside PutResult/GetResult rather than raised so the
    workers can record them without unwinding their loops. boto3's own
    retry policy is left as configured by botocore.
    """

    def __init__(
        self,
        access_key_id: str,
        secret_access_key: str,
        region: str,
        endpoint_url: str | None = None,
        connect_timeout: float = 10.0,
        read_timeout: float = 60.0,
        client: Any = None,
    ) -> None:
        if client is not None:
            self._client = client
            return

        try:
            self._client = boto3.client(
                "s3",
                aws_access_key_id=access_key_id,
                aws_secret_access_key=secret_access_key,
                region_name=region,
                endpoint_url=endpoint_url,
                config=Config(connect_timeout=connect_timeout, read_timeout=read_timeout),
            )
        except (BotoCoreError, ValueError) as e:
            raise StorageClientError(f"Could not create S3 client: {e}") from e

        logger.debug("s3_client_created", region=region, endpoint_url=endpoint_url)

    def put(self, bucket: str, key: str, local_path: Path) -> PutResult:
        try:
            with open(local_path, "rb") as body:
                response = self._client.put_object(Bucket=bucket, Key=key, Body=body)
        except ClientError as e:
            return PutResult(metadata=_error_metadata(e), error=e)
        except (BotoCoreError, OSError) as e:
            return PutResult(error=e)
        return PutResult(metadata=_response_metadata(response, _PUT_FIELDS))

    def get(self, bucket: str, key: str) -> GetResult:
        try:
            response = self._client.get_object(Bucket=bucket, Key=key)
        except ClientError as e:
            metadata = _error_metadata(e)
            return GetResult(metadata=metadata, status_code=metadata["http_status_code"], error=e)
        except BotoCoreError as e:
            return GetResult(error=e)

        metadata = _response_metadata(response, _GET_FIELDS)
        try:
            content = response["Body"].read()
        except (BotoCoreError, OSError) as e:
            return GetResult(metadata=metadata, status_code=metadata["http_status_code"], error=e)

        return GetResult(
            metadata=metadata,
            content=content,
            status_code=metadata["http_status_code"],
        )
