from dataclasses import dataclass
from typing import Optional, Union

from option_backup.exceptions import BackupNotFound

LATEST_KEYWORD = "latest"


@dataclass(frozen=True)
class Latest:
    """The most recently inserted snapshot."""

    def __str__(self) -> str:
        return LATEST_KEYWORD


@dataclass(frozen=True)
class Exact:
    """The snapshot captured at ``timestamp``."""

    timestamp: int

    def __str__(self) -> str:
        return str(self.timestamp)


Selector = Union[Latest, Exact]

LATEST = Latest()


def parse_selector(raw: Optional[str]) -> Selector:
    """
    Parse a command line time key.

    ``None`` and ``"latest"`` select the last inserted snapshot; an integer
    selects that capture time. Anything else cannot name a snapshot.
    """
    if raw is None or raw == LATEST_KEYWORD:
        return LATEST
    try:
        return Exact(int(raw))
    except (TypeError, ValueError):
        raise BackupNotFound.no_time_key() from None
