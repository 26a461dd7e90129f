"""Command-line entry points for the alertstore service."""

from __future__ import annotations

import logging
from pathlib import Path

import click
import uvicorn
from rich.console import Console
from rich.table import Table

from .api import create_app
from .errors import PersistenceError
from .logging_utils import configure_logging
from .settings import get_settings
from .snapshot import SnapshotWriter, load_snapshot
from .store import AlertStore

LOGGER = logging.getLogger(__name__)
CONSOLE = Console()


@click.group()
def main() -> None:
    """Store alerts per service and answer time-range queries."""


@main.command()
@click.option("--host", type=str, default=None, help="Bind address (defaults to HOST)")
@click.option("--port", type=int, default=None, help="Bind port (defaults to PORT)")
@click.option(
    "--snapshot-path",
    type=click.Path(path_type=Path),
    default=None,
    help="Snapshot file rewritten on every submission (defaults to SNAPSHOT_PATH)",
)
@click.option(
    "--restore/--no-restore",
    default=False,
    show_default=True,
    help="Load the existing snapshot instead of starting empty",
)
def serve(
    host: str | None,
    port: int | None,
    snapshot_path: Path | None,
    restore: bool,
) -> None:
    """Run the HTTP API."""
    settings = get_settings()
    configure_logging(settings.log_level)

    path = snapshot_path or Path(settings.snapshot_path)
    writer = SnapshotWriter(path)
    if restore and path.exists():
        try:
            store = AlertStore.restore(load_snapshot(path), writer)
        except PersistenceError as exc:
            raise SystemExit(str(exc)) from exc
        LOGGER.info(
            "Restored %s alert(s) for %s service(s) from %s",
            store.alert_count,
            len(store),
            path,
        )
    else:
        store = AlertStore(writer)

    bind_host = host or settings.host
    bind_port = port or settings.port
    LOGGER.info("Server started on %s:%s, snapshots at %s", bind_host, bind_port, path)
    uvicorn.run(create_app(store), host=bind_host, port=bind_port, log_config=None)


@main.command()
@click.option(
    "--snapshot-path",
    type=click.Path(path_type=Path),
    default=None,
    help="Snapshot file to read (defaults to SNAPSHOT_PATH)",
)
@click.option("--service-id", type=str, default=None, help="Only show this service")
def show(snapshot_path: Path | None, service_id: str | None) -> None:
    """Print the alerts held in a snapshot file."""
    path = snapshot_path or Path(get_settings().snapshot_path)
    if not path.exists():
        raise SystemExit(f"Snapshot file not found: {path}")
    try:
        document = load_snapshot(path)
    except PersistenceError as exc:
        raise SystemExit(str(exc)) from exc

    services = document["data"]
    alerts = document["alerts"]
    if service_id is not None:
        if service_id not in alerts:
            raise SystemExit(f"Service not found in snapshot: {service_id}")
        alerts = {service_id: alerts[service_id]}

    table = Table(title=f"Alerts in {path.name}")
    table.add_column("Service")
    table.add_column("Alert")
    table.add_column("Timestamp")
    table.add_column("Type")
    table.add_column("Severity")
    table.add_column("Team")

    count = 0
    for sid, records in alerts.items():
        name = services.get(sid, {}).get("service_name") or sid
        for record in records:
            table.add_row(
                f"{name} ({sid})" if name != sid else sid,
                str(record.get("alert_id", "")),
                str(record.get("alert_ts", "")),
                str(record.get("alert_type", "")),
                str(record.get("severity", "")),
                str(record.get("team_slack", "")),
            )
            count += 1

    CONSOLE.print(table)
    CONSOLE.print(f"{count} alert(s) across {len(alerts)} service(s)")


if __name__ == "__main__":  # pragma: no cover
    main()
