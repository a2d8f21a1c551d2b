"""
Factory for creating storage client instances from configuration.
"""

from consistency_probe.config.models import StorageConfig
from consistency_probe.storage.protocol import StorageClient, StorageClientError


def create_storage_client(config: StorageConfig) -> StorageClient:
    """
    Create a storage client based on configuration.

    Args:
        config: Storage configuration

    Returns:
        A StorageClient implementation

    Raises:
        StorageClientError: If the S3 backend is selected without credentials
            or the boto3 client cannot be built
    """
    backend = config.backend.lower()

    if backend == "memory":
        from consistency_probe.storage.memory import InMemoryStorageClient

        return InMemoryStorageClient()

    if not config.has_credentials():
        raise StorageClientError("S3 backend requires an access key ID and secret access key")

    from consistency_probe.storage.s3 import S3StorageClient

    return S3StorageClient(
        access_key_id=config.access_key_id,
        secret_access_key=config.secret_access_key,
        region=config.region,
        endpoint_url=config.endpoint_url,
        connect_timeout=config.connect_timeout,
        read_timeout=config.read_timeout,
    )
