"""alertstore package exports."""

from importlib import metadata

from .alerts import AlertRecord, AlertSubmission, ServiceRecord
from .errors import AlertStoreError, NoAlertsInRange, PersistenceError, ServiceNotFound
from .snapshot import SnapshotWriter, load_snapshot
from .store import AlertStore

try:  # pragma: no cover
	__version__ = metadata.version("alertstore")
except metadata.PackageNotFoundError:  # pragma: no cover
	__version__ = "0.0.0"

__all__ = [
	"AlertRecord",
	"AlertStore",
	"AlertStoreError",
	"AlertSubmission",
	"NoAlertsInRange",
	"PersistenceError",
	"ServiceNotFound",
	"ServiceRecord",
	"SnapshotWriter",
	"__version__",
	"load_snapshot",
]
