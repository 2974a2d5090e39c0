from datetime import timedelta

from django.db import models

RECURRENCE_INTERVALS = {
    "hourly": timedelta(hours=1),
    "twicedaily": timedelta(hours=12),
    "daily": timedelta(days=1),
    "weekly": timedelta(weeks=1),
}


class ScheduledEvent(models.Model):
    """A recurring event that fires the callbacks registered for its hook."""

    RECURRENCE_CHOICES = [(name, name) for name in RECURRENCE_INTERVALS]

    hook = models.CharField(max_length=191, unique=True)
    next_run = models.DateTimeField(db_index=True)
    recurrence = models.CharField(max_length=20, choices=RECURRENCE_CHOICES)
    last_run = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["next_run"]

    def __str__(self) -> str:
        return f"{self.hook} ({self.recurrence}, next {self.next_run:%Y-%m-%d %H:%M:%S})"

    @property
    def interval(self) -> timedelta:
        return RECURRENCE_INTERVALS[self.recurrence]
