"""CLI entry point for soil sensor dashboard management commands."""

import sys

import click
from pydantic import ValidationError

from app import create_app
from app.exceptions import BusinessLogicException
from app.models.device_config import CONFIG_FIELDS
from app.schemas.config import ConfigUpdateRequestSchema
from app.services.dashboard_service import config_summary


@click.group()
def cli() -> None:
    """Soil sensor dashboard CLI - backend and configuration commands."""
    pass


@cli.command()
def check_backend() -> None:
    """Check that the data backend is configured and answers requests.

    Examples:
        soil-dashboard-cli check-backend
    """
    app = create_app()
    backend_client = app.container.backend_client()

    if not backend_client.enabled:
        click.echo("Error: SUPABASE_URL and SUPABASE_ANON_KEY must be set", err=True)
        sys.exit(1)

    click.echo(f"Using backend: {backend_client.base_url}")

    if not backend_client.ping():
        click.echo("Error: Cannot reach data backend", err=True)
        sys.exit(1)

    click.echo("Data backend is reachable")


@cli.command()
def list_configs() -> None:
    """List the global default and every per-device override."""
    app = create_app()
    config_service = app.container.config_service()

    try:
        configs = config_service.list_configs()
    except BusinessLogicException as e:
        click.echo(f"Error listing configs: {e.message}", err=True)
        sys.exit(1)

    if not configs:
        click.echo("No configurations found")
        return

    for config in configs:
        target = config.device_id or "global"
        click.echo(
            f"{config.id}  {target:<17}  v{config.config_version}  {config_summary(config)}"
        )


@cli.command()
@click.argument("device_id")
def create_config(device_id: str) -> None:
    """Create a per-device override with default values.

    Examples:
        soil-dashboard-cli create-config AA:BB:CC:DD:EE:FF
    """
    app = create_app()
    config_service = app.container.config_service()

    try:
        config = config_service.create_device_config(device_id)
    except BusinessLogicException as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)

    click.echo(f"Created config {config.id} for {config.device_id} (version {config.config_version})")


@cli.command()
@click.argument("config_id")
@click.option("--interval", "collection_interval_min", type=int, help="Collection interval in minutes (1-1440)")
@click.option("--deep-sleep/--no-deep-sleep", "deep_sleep_enabled", default=None, help="Deep sleep between collections")
@click.option("--ntp-hours", "ntp_sync_interval_hours", type=int, help="NTP sync interval in hours (1-168)")
@click.option("--max-failures", "max_consecutive_failures", type=int, help="Failures before extended sleep (1-100)")
@click.option("--extended-sleep", "extended_sleep_minutes", type=int, help="Extended sleep in minutes (1-1440)")
@click.option("--sensor-address", "sensor_address", type=str, help="Single-character sensor address")
@click.option("--test-mode/--no-test-mode", "test_mode_enabled", default=None, help="Test mode flag")
@click.option("--debug-logging/--no-debug-logging", "debug_logging_enabled", default=None, help="Debug logging flag")
def update_config(config_id: str, **changes: object) -> None:
    """Update a configuration and advance its version.

    Options that are not given keep their current value.

    Examples:
        soil-dashboard-cli update-config <id> --interval 30 --no-test-mode
    """
    app = create_app()
    config_service = app.container.config_service()

    try:
        current = config_service.get_config(config_id)

        values = {field: getattr(current, field) for field in CONFIG_FIELDS}
        values.update({k: v for k, v in changes.items() if v is not None})
        update = ConfigUpdateRequestSchema.model_validate(values)

        result = config_service.update_config(config_id, update)

    except ValidationError as e:
        for error in e.errors():
            field = ".".join(str(x) for x in error["loc"])
            click.echo(f"Invalid {field}: {error['msg']}", err=True)
        sys.exit(1)

    except BusinessLogicException as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)

    click.echo(
        f"Updated config {config_id}: version {result.previous_version} -> {result.new_version}"
    )


def main() -> None:
    """Entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
