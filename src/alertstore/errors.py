"""Errors raised by the alert store."""

from __future__ import annotations

from pathlib import Path


class AlertStoreError(Exception):
    """Base class for alert store failures."""


class PersistenceError(AlertStoreError):
    """The snapshot file could not be written or read."""

    def __init__(self, path: Path, message: str):
        super().__init__(f"{path}: {message}")
        self.path = path


class ServiceNotFound(AlertStoreError, LookupError):
    def __init__(self, service_id: str):
        super().__init__(f"Service not found: {service_id}")
        self.service_id = service_id


class NoAlertsInRange(AlertStoreError, LookupError):
    def __init__(self, service_id: str, start_ts: str, end_ts: str):
        super().__init__(
            f"No alerts for {service_id} between {start_ts} and {end_ts}"
        )
        self.service_id = service_id
        self.start_ts = start_ts
        self.end_ts = end_ts
