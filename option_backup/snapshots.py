"""
Snapshot history for configured options.

Each option's history is a JSON object ``{capture_time: value}`` stored as an
option of its own (``obr_backup_<name>``). Entries stay in insertion order and
only the last ``backup_length`` are kept.
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from option_backup.backends import MISSING, KeyValueBackend
from option_backup.conf import BackupSettings
from option_backup.exceptions import BackupNotFound
from option_backup.selectors import LATEST, Exact, Selector

logger = logging.getLogger(__name__)

History = Dict[int, Any]


class CaptureStatus(str, Enum):
    CAPTURED = "captured"
    SKIPPED = "skipped"
    DECLINED = "declined"
    FAILED = "failed"


@dataclass
class CaptureResult:
    name: str
    status: CaptureStatus
    timestamp: Optional[int] = None
    retained: int = 0
    evicted: List[int] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status != CaptureStatus.FAILED


def trim_history(history: History, length: int) -> Tuple[History, List[int]]:
    """Keep the last ``length`` entries by insertion order; return (kept, evicted keys)."""
    items = list(history.items())
    if len(items) <= length:
        return dict(items), []
    cut = len(items) - length
    return dict(items[cut:]), [key for key, _ in items[:cut]]


class SnapshotStore:
    def __init__(
        self,
        config: BackupSettings,
        backend: KeyValueBackend,
        clock: Callable[[], float] = time.time,
    ):
        self.config = config
        self.backend = backend
        self.clock = clock

    def _read_history(self, name: str) -> Optional[History]:
        raw = self.backend.get(self.config.backup_key(name), MISSING)
        if raw is MISSING:
            return None
        if not isinstance(raw, dict):
            logger.warning("Ignoring malformed backup history for %s", name)
            return None
        try:
            return {int(key): value for key, value in raw.items()}
        except ValueError:
            logger.warning("Ignoring backup history for %s with non-integer time keys", name)
            return None

    def capture(self, name: str) -> CaptureResult:
        """Append the current value of ``name`` to its history."""
        current = self.backend.get(name, MISSING)
        if current is MISSING:
            logger.info("Option %s has no current value; backup skipped", name)
            return CaptureResult(name=name, status=CaptureStatus.SKIPPED)

        history = self._read_history(name) or {}
        timestamp = int(self.clock())
        history[timestamp] = current
        history, evicted = trim_history(history, self.config.backup_length)

        self.backend.set(self.config.backup_key(name), history, autoload=False)

        if evicted:
            logger.info("Evicted %s backup(s) of %s: %s", len(evicted), name, evicted)
        logger.info("Backed up option %s at %s (%s retained)", name, timestamp, len(history))
        return CaptureResult(
            name=name,
            status=CaptureStatus.CAPTURED,
            timestamp=timestamp,
            retained=len(history),
            evicted=evicted,
        )

    def list_snapshots(self, name: str) -> Tuple[bool, List[int]]:
        history = self._read_history(name)
        if history is None:
            return False, []
        return True, list(history)

    def count(self, name: str) -> int:
        return len(self._read_history(name) or {})

    def get_snapshot(self, name: str, selector: Selector = LATEST) -> Tuple[int, Any]:
        """
        Resolve ``selector`` against the history of ``name``.

        ``Latest`` is the last inserted entry, which is not necessarily the
        numerically largest time key.

        Raises:
            BackupNotFound: If there is no history, or no entry for an exact key
        """
        history = self._read_history(name)
        if history is None:
            raise BackupNotFound.no_history(name)

        if isinstance(selector, Exact):
            if selector.timestamp not in history:
                raise BackupNotFound.no_time_key()
            return selector.timestamp, history[selector.timestamp]

        if not history:
            raise BackupNotFound.no_history(name)
        timestamp = next(reversed(history))
        return timestamp, history[timestamp]
