"""
Command-line interface for the consistency probe.

Provides commands for running a probe and validating configuration.
"""

import sys
from typing import Any

import click
import structlog

from consistency_probe.config import ConfigurationError, load_config, validate_config
from consistency_probe.utils.logging import configure_logging


logger = structlog.get_logger()


@click.group()
@click.option(
    "--config", "-c",
    type=click.Path(exists=True),
    help="Path to configuration file",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output",
)
@click.option(
    "--json-logs",
    is_flag=True,
    help="Output logs as JSON",
)
@click.pass_context
def main(ctx, config, verbose, json_logs):
    """S3 read-after-write consistency probe."""
    ctx.ensure_object(dict)

    log_level = "DEBUG" if verbose else "INFO"
    configure_logging(level=log_level, json_output=json_logs)

    ctx.obj["config_path"] = config
    ctx.obj["log_level"] = log_level


def _overrides(**options: Any) -> dict[str, Any]:
    """Build a nested override dict from CLI options that were actually given."""
    mapping = {
        "access_key_id": ("storage", "access_key_id"),
        "secret_access_key": ("storage", "secret_access_key"),
        "bucket": ("storage", "bucket"),
        "region": ("storage", "region"),
        "endpoint_url": ("storage", "endpoint_url"),
        "backend": ("storage", "backend"),
        "start": ("range", "start"),
        "count": ("range", "count"),
        "report_path": ("report", "path"),
        "report_format": ("report", "format"),
    }
    result: dict[str, Any] = {}
    for option, value in options.items():
        if value is None:
            continue
        section, key = mapping[option]
        result.setdefault(section, {})[key] = value
    return result


@main.command()
@click.argument("access_key_id", required=False)
@click.argument("secret_access_key", required=False)
@click.option("--bucket", "-b", default=None, help="Target bucket (default: from config)")
@click.option("--region", default=None, help="AWS region (default: from config)")
@click.option("--endpoint-url", default=None, help="Custom S3-compatible endpoint")
@click.option(
    "--backend",
    type=click.Choice(["s3", "memory"]),
    default=None,
    help="Storage backend (memory performs a dry run)",
)
@click.option("--start", type=int, default=None, help="First object identifier")
@click.option("--count", "-n", type=int, default=None, help="Number of objects to write")
@click.option("--report", "report_path", type=click.Path(), default=None, help="Report file path")
@click.option(
    "--report-format",
    type=click.Choice(["text", "json"]),
    default=None,
    help="Report format",
)
@click.option(
    "--trace-events",
    is_flag=True,
    help="Include the observed event sequence in the report",
)
@click.pass_context
def run(
    ctx,
    access_key_id,
    secret_access_key,
    bucket,
    region,
    endpoint_url,
    backend,
    start,
    count,
    report_path,
    report_format,
    trace_events,
):
    """Run the read-after-write probe.

    Credentials can be given as the two positional arguments, in the config
    file, or via PROBE_STORAGE__ACCESS_KEY_ID / PROBE_STORAGE__SECRET_ACCESS_KEY.

    Examples:

    \b
    # 100 objects against the configured bucket
    probe run AKIA... SECRET...

    \b
    # Dry run without touching S3
    probe run --backend memory --count 10
    """
    from consistency_probe.core.report import write_report
    from consistency_probe.core.runner import ProbeRunError, ProbeRunner
    from consistency_probe.events.listeners import ProgressListener
    from consistency_probe.storage.factory import create_storage_client
    from consistency_probe.storage.protocol import StorageClientError

    config_path = ctx.obj.get("config_path")

    try:
        config = load_config(
            config_path,
            override_values=_overrides(
                access_key_id=access_key_id,
                secret_access_key=secret_access_key,
                bucket=bucket,
                region=region,
                endpoint_url=endpoint_url,
                backend=backend,
                start=start,
                count=count,
                report_path=report_path,
                report_format=report_format,
            ),
        )

        warnings = validate_config(config)
        for warning in warnings:
            click.echo(f"Warning: {warning}", err=True)

        storage = create_storage_client(config.storage)

        runner = ProbeRunner.from_config(
            config,
            storage,
            listeners=[ProgressListener(total=config.range.count)],
            record_events=trace_events,
        )
        report = runner.run()

        for line in report.summary_lines():
            click.echo(line)

        path = write_report(report, config.report.path, config.report.format)
        logger.info("report_written", path=str(path), format=config.report.format)

    except (ConfigurationError, StorageClientError) as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)
    except ProbeRunError as e:
        logger.exception("probe_run_failed", error=str(e))
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except Exception as e:
        logger.exception("probe_failed", error=str(e))
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@main.command("validate-config")
@click.pass_context
def validate_config_cmd(ctx):
    """Validate the configuration file."""
    config_path = ctx.obj.get("config_path")

    try:
        config = load_config(config_path)
        warnings = validate_config(config)

        click.echo("Configuration is valid.")
        click.echo(f"  Backend: {config.storage.backend}")
        click.echo(f"  Bucket: {config.storage.bucket} ({config.storage.region})")
        click.echo(f"  Range: [{config.range.start}, {config.range.start + config.range.count})")

        if warnings:
            click.echo("\nWarnings:")
            for warning in warnings:
                click.echo(f"  - {warning}")

    except ConfigurationError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
