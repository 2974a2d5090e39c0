from django.contrib import admin

from cron.models import ScheduledEvent


@admin.register(ScheduledEvent)
class ScheduledEventAdmin(admin.ModelAdmin):
    list_display = ("hook", "recurrence", "next_run", "last_run")
    search_fields = ("hook",)
    ordering = ("next_run",)
