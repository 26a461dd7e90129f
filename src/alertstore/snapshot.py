"""JSON snapshots of the alert store."""

from __future__ import annotations

import json
import logging
import os
from contextlib import suppress
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from .alerts import AlertRecord, ServiceRecord
from .errors import PersistenceError

if TYPE_CHECKING:  # pragma: no cover
    from .store import AlertStore

LOGGER = logging.getLogger(__name__)


class SnapshotWriter:
    """Rewrite the whole store to a single JSON file.

    Every call replaces the file with the current contents of both maps; the
    file is never appended to. Data goes to a sibling ``.tmp`` file first and is
    moved over the target once flushed, so readers of the file see either the
    previous snapshot or the new one.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def write(self, store: AlertStore) -> None:
        """Persist ``store``. The caller must hold the store's write lock."""
        payload = store.as_snapshot()
        tmp_path = self.path.with_name(f"{self.path.name}.tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tmp_path.open("w", encoding="utf-8") as fp:
                json.dump(payload, fp, indent=2)
                fp.flush()
                os.fsync(fp.fileno())
            os.replace(tmp_path, self.path)
        except OSError as exc:
            with suppress(OSError):
                tmp_path.unlink(missing_ok=True)
            raise PersistenceError(self.path, f"snapshot write failed: {exc}") from exc
        LOGGER.debug(
            "Wrote snapshot to %s (%s services)", self.path, len(payload["data"])
        )


def load_snapshot(path: Path) -> dict[str, Any]:
    """Read a snapshot written by :class:`SnapshotWriter`."""
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise PersistenceError(path, f"snapshot read failed: {exc}") from exc
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise PersistenceError(path, f"snapshot is not valid JSON: {exc}") from exc
    if (
        not isinstance(data, dict)
        or not isinstance(data.get("data"), dict)
        or not isinstance(data.get("alerts"), dict)
    ):
        raise PersistenceError(path, "snapshot must contain 'data' and 'alerts' mappings")
    try:
        for service in data["data"].values():
            ServiceRecord.model_validate(service)
        for service_id, alerts in data["alerts"].items():
            if not isinstance(alerts, list):
                raise TypeError(f"alerts for {service_id} must be a list")
            for alert in alerts:
                AlertRecord.model_validate(alert)
    except (ValidationError, TypeError) as exc:
        raise PersistenceError(path, f"snapshot has malformed entries: {exc}") from exc
    return data
