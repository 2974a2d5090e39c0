from typing import Any, Dict, List, Optional

from option_backup.backends import EventBackend, KeyValueBackend
from option_backup.conf import BackupSettings

T1, T2, T3, T4 = 1700000000, 1700086400, 1700172800, 1700259200


class MemoryBackend(KeyValueBackend):
    """Dict-backed store that records every write."""

    def __init__(self, values: Optional[Dict[str, Any]] = None, fail_on: tuple = ()):
        self.values = dict(values or {})
        self.writes: List[tuple] = []
        self.fail_on = fail_on

    def get(self, key, default=None):
        if key in self.fail_on:
            raise RuntimeError(f"store unavailable for {key}")
        return self.values.get(key, default)

    def set(self, key, value, autoload=None):
        self.writes.append((key, value, autoload))
        self.values[key] = value


class MemoryEvents(EventBackend):
    def __init__(self):
        self.registered = []

    def is_registered(self, event):
        return any(name == event for name, _, _ in self.registered)

    def register(self, event, start, recurrence):
        self.registered.append((event, start, recurrence))


class FakeClock:
    def __init__(self, *times):
        self.times = list(times)

    def __call__(self):
        return self.times.pop(0)


def make_settings(**kwargs) -> BackupSettings:
    kwargs.setdefault("options", ("siteurl", "sidebars_widgets"))
    return BackupSettings(**kwargs)
