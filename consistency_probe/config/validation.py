"""
Configuration validation for the consistency probe.

Provides additional validation beyond Pydantic model validation.
"""

import structlog

from consistency_probe.config.models import ProbeConfig

logger = structlog.get_logger()


class ConfigurationError(Exception):
    """Raised when configuration is invalid."""

    pass


def validate_config(config: ProbeConfig) -> list[str]:
    """
    Validate probe configuration.

    Performs cross-field checks that the Pydantic models cannot express.

    Args:
        config: ProbeConfig to validate

    Returns:
        List of warning messages (non-fatal issues)

    Raises:
        ConfigurationError: If configuration has fatal issues
    """
    warnings: list[str] = []
    errors: list[str] = []

    storage = config.storage
    if storage.backend == "s3":
        if not storage.has_credentials():
            errors.append(
                "S3 backend requires storage.access_key_id and storage.secret_access_key"
            )
        if not storage.bucket:
            errors.append("S3 backend requires storage.bucket")
    elif storage.backend == "memory":
        warnings.append(
            "Memory backend never leaves the process; results say nothing about real storage."
        )

    fixtures = config.fixtures
    if fixtures.input_dir.resolve() == fixtures.output_dir.resolve():
        errors.append(
            f"fixtures.input_dir and fixtures.output_dir must differ (both {fixtures.input_dir})"
        )

    if config.range.count == 0:
        warnings.append("range.count is 0; the run will write and read nothing.")

    if fixtures.payload_size_bytes > 1024 * 1024 and config.range.count > 1000:
        warnings.append(
            f"Writing {config.range.count} objects of {fixtures.payload_size_bytes} bytes "
            "will take a long time."
        )

    for warning in warnings:
        logger.warning("config_validation_warning", message=warning)

    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ConfigurationError(error_msg)

    return warnings
