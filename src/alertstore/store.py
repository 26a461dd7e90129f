"""In-memory alert store indexed by service."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from .alerts import AlertRecord, ServiceRecord
from .errors import NoAlertsInRange, PersistenceError, ServiceNotFound
from .locking import ReadWriteLock
from .snapshot import SnapshotWriter

LOGGER = logging.getLogger(__name__)


class AlertStore:
    """Service and alert maps behind one readers-writer lock.

    Both maps are always mutated together under the write lock, and every
    submission rewrites the snapshot before the lock is released. Queries take
    the read lock and may run concurrently with each other.
    """

    def __init__(self, writer: SnapshotWriter):
        self.writer = writer
        self._lock = ReadWriteLock()
        self._services: dict[str, ServiceRecord] = {}
        self._alerts: dict[str, list[AlertRecord]] = {}

    @classmethod
    def restore(cls, document: Mapping[str, Any], writer: SnapshotWriter) -> "AlertStore":
        """Build a store holding the contents of a snapshot document.

        Raises :class:`PersistenceError` when an entry is not a valid record.
        """
        store = cls(writer)
        try:
            for service_id, service in document.get("data", {}).items():
                store._services[service_id] = ServiceRecord.model_validate(service)
            for service_id, alerts in document.get("alerts", {}).items():
                if not isinstance(alerts, list):
                    raise TypeError(f"alerts for {service_id} must be a list")
                store._alerts[service_id] = [
                    AlertRecord.model_validate(alert) for alert in alerts
                ]
                store._services.setdefault(
                    service_id, ServiceRecord(service_id=service_id, service_name="")
                )
        except (ValidationError, AttributeError, TypeError) as exc:
            raise PersistenceError(writer.path, f"cannot restore snapshot: {exc}") from exc
        return store

    def submit_alert(self, record: AlertRecord, service_name: str) -> str:
        """Store ``record`` and rewrite the snapshot.

        Raises :class:`PersistenceError` when the snapshot cannot be written.
        The alert stays in memory in that case.
        """
        with self._lock.write_locked():
            self._services[record.service_id] = ServiceRecord(
                service_id=record.service_id, service_name=service_name
            )
            self._alerts.setdefault(record.service_id, []).append(record)
            try:
                self.writer.write(self)
            except PersistenceError:
                LOGGER.exception(
                    "Alert %s kept in memory but snapshot failed", record.alert_id
                )
                raise
        LOGGER.info("Stored alert %s for service %s", record.alert_id, record.service_id)
        return record.alert_id

    def query_alerts(self, service_id: str, start_ts: str, end_ts: str) -> list[AlertRecord]:
        """Return the service's alerts with ``start_ts <= alert_ts <= end_ts``.

        Timestamps are compared as strings, which matches chronological order
        only for RFC3339 values with the same precision and timezone notation.
        Matches keep their insertion order.
        """
        with self._lock.read_locked():
            alerts = self._alerts.get(service_id)
            if alerts is None:
                raise ServiceNotFound(service_id)
            matches = [alert for alert in alerts if start_ts <= alert.alert_ts <= end_ts]
        LOGGER.debug(
            "Query %s [%s, %s] matched %s alert(s)", service_id, start_ts, end_ts, len(matches)
        )
        if not matches:
            raise NoAlertsInRange(service_id, start_ts, end_ts)
        return matches

    def services(self) -> dict[str, ServiceRecord]:
        with self._lock.read_locked():
            return dict(self._services)

    def alerts_for(self, service_id: str) -> list[AlertRecord]:
        with self._lock.read_locked():
            alerts = self._alerts.get(service_id)
            if alerts is None:
                raise ServiceNotFound(service_id)
            return list(alerts)

    @property
    def alert_count(self) -> int:
        with self._lock.read_locked():
            return sum(len(alerts) for alerts in self._alerts.values())

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._services)

    def export(self) -> dict[str, Any]:
        with self._lock.read_locked():
            return self.as_snapshot()

    def as_snapshot(self) -> dict[str, Any]:
        # No locking here: the snapshot writer calls this under the write lock.
        return {
            "data": {
                service_id: service.model_dump()
                for service_id, service in self._services.items()
            },
            "alerts": {
                service_id: [alert.model_dump() for alert in alerts]
                for service_id, alerts in self._alerts.items()
            },
        }
