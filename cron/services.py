"""
Persisted recurring events.

One event per hook. Events are fired by ``run_due_events``, normally from the
``run_cron`` management command invoked by the system crontab.
"""

import logging
from datetime import datetime
from typing import List, Optional

from django.db import transaction
from django.utils import timezone

from cron.hooks import HookRegistry, registry as default_registry
from cron.models import RECURRENCE_INTERVALS, ScheduledEvent

logger = logging.getLogger(__name__)


def next_scheduled(hook: str) -> Optional[datetime]:
    """Return the next run time for ``hook``, or None if it is not scheduled."""
    return (
        ScheduledEvent.objects.filter(hook=hook)
        .values_list("next_run", flat=True)
        .first()
    )


def is_scheduled(hook: str) -> bool:
    return ScheduledEvent.objects.filter(hook=hook).exists()


def schedule_event(hook: str, start: datetime, recurrence: str) -> tuple[ScheduledEvent, bool]:
    """
    Register a recurring event for ``hook`` unless one already exists.

    Args:
        hook: Hook name whose callbacks run when the event fires
        start: First run time
        recurrence: One of ``RECURRENCE_INTERVALS``

    Returns:
        Tuple of (event, created)

    Raises:
        ValueError: If the recurrence is unknown
    """
    if recurrence not in RECURRENCE_INTERVALS:
        raise ValueError(
            f"Unknown recurrence {recurrence!r}; expected one of {', '.join(RECURRENCE_INTERVALS)}"
        )

    event, created = ScheduledEvent.objects.get_or_create(
        hook=hook,
        defaults={"next_run": start, "recurrence": recurrence},
    )
    if created:
        logger.info("Scheduled %s event %s starting %s", recurrence, hook, start.isoformat())
    return event, created


def unschedule_event(hook: str) -> bool:
    deleted, _ = ScheduledEvent.objects.filter(hook=hook).delete()
    return bool(deleted)


def run_due_events(
    now: Optional[datetime] = None,
    registry: Optional[HookRegistry] = None,
    dry_run: bool = False,
) -> List[str]:
    """
    Fire every event whose next run time has passed.

    Each registered callback runs independently: an exception is logged and
    the remaining callbacks and events still run. After firing, the event's
    next run is advanced by one interval, or to ``now + interval`` if that is
    still in the past.

    Returns:
        Hooks that were due, in firing order
    """
    if now is None:
        now = timezone.now()
    if registry is None:
        registry = default_registry

    due = list(ScheduledEvent.objects.filter(next_run__lte=now).order_by("next_run"))
    fired = []

    for event in due:
        fired.append(event.hook)
        if dry_run:
            continue

        callbacks = registry.callbacks(event.hook)
        if not callbacks:
            logger.warning("No callbacks registered for due event %s", event.hook)

        for callback in callbacks:
            try:
                callback()
            except Exception:
                logger.exception("Callback for event %s failed", event.hook)

        next_run = event.next_run + event.interval
        if next_run <= now:
            next_run = now + event.interval

        with transaction.atomic():
            ScheduledEvent.objects.filter(pk=event.pk).update(next_run=next_run, last_run=now)
        logger.debug("Event %s next runs at %s", event.hook, next_run.isoformat())

    return fired
