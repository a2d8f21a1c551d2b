"""
Object storage package for the consistency probe.

Provides the narrow put/get interface used by the workers, with an S3
implementation (boto3) and an in-memory one for dry runs.
"""

from consistency_probe.storage.protocol import (
    GetResult,
    PutResult,
    StorageClient,
    StorageClientError,
    object_key,
)

__all__ = [
    "GetResult",
    "PutResult",
    "StorageClient",
    "StorageClientError",
    "object_key",
]
