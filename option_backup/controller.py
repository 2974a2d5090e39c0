"""
Operator-facing backup operations: list, view, restore and back up now.

The controller never prints or prompts. Callers pass a ``confirm`` callable
where the operator has to agree before anything is written.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, List, Optional

from option_backup.backends import MISSING, KeyValueBackend
from option_backup.conf import BackupSettings
from option_backup.exceptions import OptionNotSpecified
from option_backup.scheduler import capture_isolated
from option_backup.selectors import LATEST, Selector
from option_backup.snapshots import CaptureResult, CaptureStatus, SnapshotStore

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_timestamp(timestamp: int) -> str:
    """UTC date for a capture time."""
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime(DATE_FORMAT)


def values_match(a: Any, b: Any) -> bool:
    """
    Deep equality that also compares JSON types and object key order, so
    ``True`` is not ``1`` and ``{"a": 1, "b": 2}`` is not ``{"b": 2, "a": 1}``.
    """
    if type(a) is not type(b):
        return False
    if isinstance(a, dict):
        return list(a) == list(b) and all(values_match(a[key], b[key]) for key in a)
    if isinstance(a, (list, tuple)):
        return len(a) == len(b) and all(values_match(x, y) for x, y in zip(a, b))
    return a == b


@dataclass
class BackupListing:
    name: str
    backup_key: str
    count: int
    time_keys: List[int]

    def as_row(self) -> dict:
        return {
            "name": self.name,
            "backup_key": self.backup_key,
            "count": self.count,
            "time_keys": list(self.time_keys),
        }


@dataclass
class ResolvedSnapshot:
    name: str
    backup_key: str
    timestamp: int
    value: Any

    @property
    def date(self) -> str:
        return format_timestamp(self.timestamp)


@dataclass
class RestorePlan:
    snapshot: ResolvedSnapshot
    current_value: Any

    @property
    def name(self) -> str:
        return self.snapshot.name

    @property
    def backup_value(self) -> Any:
        return self.snapshot.value

    @property
    def date(self) -> str:
        return self.snapshot.date

    @property
    def has_current_value(self) -> bool:
        return self.current_value is not MISSING

    @property
    def is_noop(self) -> bool:
        return self.has_current_value and values_match(self.current_value, self.backup_value)


class RestoreStatus(str, Enum):
    RESTORED = "restored"
    NOOP = "noop"
    ABORTED = "aborted"


@dataclass
class RestoreResult:
    status: RestoreStatus
    plan: RestorePlan


class RestoreController:
    def __init__(self, config: BackupSettings, store: SnapshotStore, backend: KeyValueBackend):
        self.config = config
        self.store = store
        self.backend = backend

    def list_backups(self) -> List[BackupListing]:
        """One row per configured option that currently has a value."""
        listings = []
        for name in self.config.options:
            if self.backend.get(name, MISSING) is MISSING:
                continue
            _, time_keys = self.store.list_snapshots(name)
            listings.append(
                BackupListing(
                    name=name,
                    backup_key=self.config.backup_key(name),
                    count=len(time_keys),
                    time_keys=time_keys,
                )
            )
        return listings

    def view(self, name: Optional[str], selector: Selector = LATEST) -> ResolvedSnapshot:
        """
        Resolve a snapshot for display.

        Raises:
            OptionNotSpecified: If no option name was given
            BackupNotFound: If the option has no history or no such time key
        """
        if not name:
            raise OptionNotSpecified()
        timestamp, value = self.store.get_snapshot(name, selector)
        return ResolvedSnapshot(
            name=name,
            backup_key=self.config.backup_key(name),
            timestamp=timestamp,
            value=value,
        )

    def plan_restore(self, name: Optional[str], selector: Selector = LATEST) -> RestorePlan:
        snapshot = self.view(name, selector)
        return RestorePlan(snapshot=snapshot, current_value=self.backend.get(snapshot.name, MISSING))

    def restore(
        self,
        name: Optional[str],
        selector: Selector = LATEST,
        confirm: Optional[Callable[[RestorePlan], bool]] = None,
    ) -> RestoreResult:
        """
        Write a snapshot back as the option's value.

        Nothing is written when the snapshot already matches the current
        value, or when ``confirm`` returns False. Without ``confirm`` the
        restore proceeds unprompted.
        """
        plan = self.plan_restore(name, selector)

        if plan.is_noop:
            logger.info("Backup %s of %s matches the current value; nothing to restore", plan.snapshot.timestamp, plan.name)
            return RestoreResult(status=RestoreStatus.NOOP, plan=plan)

        if confirm is not None and not confirm(plan):
            logger.info("Restore of %s declined", plan.name)
            return RestoreResult(status=RestoreStatus.ABORTED, plan=plan)

        self.backend.set(plan.name, plan.backup_value)
        logger.info("Restored option %s from backup %s (%s UTC)", plan.name, plan.snapshot.timestamp, plan.date)
        return RestoreResult(status=RestoreStatus.RESTORED, plan=plan)

    def backup_now(self, confirm: Optional[Callable[[str], bool]] = None) -> List[CaptureResult]:
        """
        Back up every configured option immediately.

        For options whose history is already full, ``confirm(name)`` is asked
        first because the oldest backup will be evicted. Declining stops the
        run: neither that option nor any later one is backed up.
        """
        results = []
        for name in self.config.options:
            if confirm is not None and self.store.count(name) >= self.config.backup_length:
                if not confirm(name):
                    logger.info("Backup of %s declined", name)
                    results.append(CaptureResult(name=name, status=CaptureStatus.DECLINED))
                    break
            results.append(capture_isolated(self.store, name))
        return results
