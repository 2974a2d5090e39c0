"""
Settings for option backups.

Read once from ``settings.OPTION_BACKUP`` when the app loads::

    OPTION_BACKUP = {
        "OPTIONS": ["siteurl", "sidebars_widgets"],
        "BACKUP_LENGTH": 3,
    }
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

DEFAULT_OPTIONS = ("siteurl", "sidebars_widgets")
DEFAULT_BACKUP_LENGTH = 3
BACKUP_PREFIX = "obr_backup_"
BACKUP_HOOK = "option_backup.backup_options"
BACKUP_RECURRENCE = "daily"


@dataclass(frozen=True)
class BackupSettings:
    options: Tuple[str, ...] = DEFAULT_OPTIONS
    backup_length: int = DEFAULT_BACKUP_LENGTH
    prefix: str = BACKUP_PREFIX
    hook: str = BACKUP_HOOK
    recurrence: str = BACKUP_RECURRENCE

    def __post_init__(self):
        if isinstance(self.options, str):
            raise ImproperlyConfigured("OPTION_BACKUP['OPTIONS'] must be a list of option names, not a string.")
        object.__setattr__(self, "options", tuple(self.options))
        if len(set(self.options)) != len(self.options):
            raise ImproperlyConfigured("OPTION_BACKUP['OPTIONS'] contains duplicate names.")
        if not all(isinstance(name, str) and name for name in self.options):
            raise ImproperlyConfigured("OPTION_BACKUP['OPTIONS'] must only contain non-empty strings.")
        if isinstance(self.backup_length, bool) or not isinstance(self.backup_length, int) or self.backup_length < 1:
            raise ImproperlyConfigured("OPTION_BACKUP['BACKUP_LENGTH'] must be an integer >= 1.")

    def backup_key(self, name: str) -> str:
        """Option name the snapshot history for ``name`` is stored under."""
        return f"{self.prefix}{name}"


def load_backup_settings(overrides: Optional[Mapping[str, Any]] = None) -> BackupSettings:
    """Build ``BackupSettings`` from Django settings, or from ``overrides`` if given."""
    if overrides is None:
        overrides = getattr(settings, "OPTION_BACKUP", {})

    unknown = set(overrides) - {"OPTIONS", "BACKUP_LENGTH", "PREFIX"}
    if unknown:
        raise ImproperlyConfigured(f"Unknown OPTION_BACKUP keys: {', '.join(sorted(unknown))}")

    return BackupSettings(
        options=overrides.get("OPTIONS", DEFAULT_OPTIONS),
        backup_length=overrides.get("BACKUP_LENGTH", DEFAULT_BACKUP_LENGTH),
        prefix=overrides.get("PREFIX", BACKUP_PREFIX),
    )
