import logging
from typing import List

from option_backup.backends import EventBackend
from option_backup.conf import BackupSettings
from option_backup.snapshots import CaptureResult, CaptureStatus, SnapshotStore

logger = logging.getLogger(__name__)


def capture_isolated(store: SnapshotStore, name: str) -> CaptureResult:
    """Capture ``name``, turning any exception into a failed result."""
    try:
        return store.capture(name)
    except Exception as exc:
        logger.exception("Backup of option %s failed", name)
        return CaptureResult(name=name, status=CaptureStatus.FAILED, error=str(exc))


class BackupScheduler:
    """Keeps the daily backup event registered and runs it."""

    def __init__(self, config: BackupSettings, store: SnapshotStore, events: EventBackend):
        self.config = config
        self.store = store
        self.events = events

    def ensure_scheduled(self) -> bool:
        """Register the recurring backup event unless it already exists."""
        if self.events.is_registered(self.config.hook):
            return False
        self.events.register(self.config.hook, None, self.config.recurrence)
        logger.info("Scheduled %s option backups", self.config.recurrence)
        return True

    def on_trigger(self) -> List[CaptureResult]:
        """Back up every configured option; one failure does not stop the rest."""
        results = [capture_isolated(self.store, name) for name in self.config.options]

        failed = [result.name for result in results if not result.ok]
        if failed:
            logger.error("Option backup finished with failures: %s", ", ".join(failed))
        return results
