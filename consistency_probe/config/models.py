"""
Pydantic configuration models for the consistency probe.

These models define the structure and validation for probe configuration.
"""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings

from consistency_probe.core.ledger import RunRange


class RangeConfig(BaseModel):
    """Identifier range written during a run: [start, start + count)."""

    start: int = Field(default=0, ge=0, description="First object identifier")
    count: int = Field(default=100, ge=0, description="Number of objects to write")

    def to_run_range(self) -> RunRange:
        """Freeze into the immutable range used by the workers."""
        return RunRange(start=self.start, count=self.count)


class StorageConfig(BaseModel):
    """Object storage connection settings."""

    backend: str = Field(
        default="s3",
        description="Storage backend: s3 | memory",
    )
    bucket: str = Field(
        default="readwriteconsistencytest",
        description="Target bucket name",
    )
    region: str = Field(default="eu-west-1", description="AWS region")
    endpoint_url: str | None = Field(
        default=None,
        description="Custom endpoint for S3-compatible services (e.g., MinIO)",
    )
    access_key_id: str = Field(default="", description="AWS access key ID")
    secret_access_key: str = Field(default="", description="AWS secret access key")
    key_prefix: str = Field(
        default="",
        description="Optional prefix prepended to every object key",
    )
    connect_timeout: float = Field(
        default=10.0,
        gt=0,
        description="Connection timeout in seconds passed to botocore",
    )
    read_timeout: float = Field(
        default=60.0,
        gt=0,
        description="Read timeout in seconds passed to botocore",
    )

    @field_validator("backend")
    @classmethod
    def known_backend(cls, v: str) -> str:
        """Ensure backend is one of the supported storage clients."""
        v = v.lower()
        if v not in {"s3", "memory"}:
            raise ValueError(f"Unknown storage backend: {v}")
        return v

    def has_credentials(self) -> bool:
        """Check if both halves of the access key pair are set."""
        return bool(self.access_key_id and self.secret_access_key)


class FixtureConfig(BaseModel):
    """Local test fixture and download directories."""

    input_dir: Path = Field(
        default=Path("test-files-in"),
        description="Directory for generated test files",
    )
    output_dir: Path = Field(
        default=Path("test-files-out"),
        description="Directory for objects read back from storage",
    )
    payload_size_bytes: int = Field(
        default=8192,
        ge=1,
        le=5 * 1024 * 1024,
        description="Size of the synthetic payload written per object",
    )
    verify_content: bool = Field(
        default=True,
        description="Treat a read whose body differs from the written payload as a failure",
    )


class ReportConfig(BaseModel):
    """Final report settings."""

    path: Path = Field(default=Path("stats.txt"), description="Report output path")
    format: str = Field(default="text", description="Report format: text | json")

    @field_validator("format")
    @classmethod
    def known_format(cls, v: str) -> str:
        """Ensure report format is supported."""
        v = v.lower()
        if v not in {"text", "json"}:
            raise ValueError(f"Unknown report format: {v}")
        return v


class ProbeConfig(BaseSettings):
    """
    Root probe configuration.

    Values can be loaded from YAML files and overridden via environment
    variables (e.g. PROBE_STORAGE__ACCESS_KEY_ID).
    """

    range: RangeConfig = Field(default_factory=RangeConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    fixtures: FixtureConfig = Field(default_factory=FixtureConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)

    model_config = {
        "env_prefix": "PROBE_",
        "env_nested_delimiter": "__",
    }
