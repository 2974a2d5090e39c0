"""
Interfaces to the host options store and scheduler.

The snapshot and scheduling code only talks to these classes, so tests and
other hosts can provide their own implementations.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Optional

from django.utils import timezone

from cron import services as cron_services
from options import services as option_services

MISSING = object()


class KeyValueBackend(ABC):
    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored under ``key``, or ``default``."""

    @abstractmethod
    def set(self, key: str, value: Any, autoload: Optional[bool] = None) -> None:
        """Store ``value`` under ``key``."""


class EventBackend(ABC):
    @abstractmethod
    def is_registered(self, event: str) -> bool:
        """Return True if a recurring event for ``event`` exists."""

    @abstractmethod
    def register(self, event: str, start: Optional[datetime], recurrence: str) -> None:
        """Register a recurring event; a ``start`` of None means now."""


class OptionsBackend(KeyValueBackend):
    """Stores values in the ``options`` app."""

    def get(self, key: str, default: Any = None) -> Any:
        return option_services.get_option(key, default)

    def set(self, key: str, value: Any, autoload: Optional[bool] = None) -> None:
        option_services.update_option(key, value, autoload=autoload)


class CronBackend(EventBackend):
    """Registers events with the ``cron`` app."""

    def is_registered(self, event: str) -> bool:
        return cron_services.is_scheduled(event)

    def register(self, event: str, start: Optional[datetime], recurrence: str) -> None:
        cron_services.schedule_event(event, start or timezone.now(), recurrence)
