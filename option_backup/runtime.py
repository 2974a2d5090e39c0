import time
from dataclasses import dataclass
from typing import Callable, Optional

from option_backup.backends import CronBackend, EventBackend, KeyValueBackend, OptionsBackend
from option_backup.conf import BackupSettings
from option_backup.controller import RestoreController
from option_backup.scheduler import BackupScheduler
from option_backup.snapshots import SnapshotStore


@dataclass(frozen=True)
class BackupComponents:
    config: BackupSettings
    store: SnapshotStore
    scheduler: BackupScheduler
    controller: RestoreController


def build_components(
    config: BackupSettings,
    backend: Optional[KeyValueBackend] = None,
    events: Optional[EventBackend] = None,
    clock: Callable[[], float] = time.time,
) -> BackupComponents:
    """Wire the snapshot store, scheduler and controller around one backend."""
    if backend is None:
        backend = OptionsBackend()
    if events is None:
        events = CronBackend()

    store = SnapshotStore(config, backend, clock=clock)
    return BackupComponents(
        config=config,
        store=store,
        scheduler=BackupScheduler(config, store, events),
        controller=RestoreController(config, store, backend),
    )
