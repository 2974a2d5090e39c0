from datetime import datetime, timedelta, timezone as dt_timezone
from io import StringIO

from django.core.management import call_command
from django.test import TestCase

from cron.hooks import HookRegistry
from cron.models import ScheduledEvent
from cron.services import (
    is_scheduled,
    next_scheduled,
    run_due_events,
    schedule_event,
    unschedule_event,
)

START = datetime(2026, 1, 1, 3, 0, tzinfo=dt_timezone.utc)


class ScheduleEventTests(TestCase):
    def setUp(self):
        ScheduledEvent.objects.all().delete()

    def test_schedule_event_is_idempotent_per_hook(self):
        _, created = schedule_event("test.hook", START, "daily")
        self.assertTrue(created)
        _, created = schedule_event("test.hook", START + timedelta(hours=5), "hourly")
        self.assertFalse(created)

        self.assertEqual(ScheduledEvent.objects.filter(hook="test.hook").count(), 1)
        self.assertEqual(next_scheduled("test.hook"), START)

    def test_unknown_recurrence_is_rejected(self):
        with self.assertRaises(ValueError):
            schedule_event("test.hook", START, "fortnightly")

    def test_unschedule_event(self):
        schedule_event("test.hook", START, "daily")
        self.assertTrue(is_scheduled("test.hook"))
        self.assertTrue(unschedule_event("test.hook"))
        self.assertFalse(is_scheduled("test.hook"))
        self.assertIsNone(next_scheduled("test.hook"))


class RunDueEventsTests(TestCase):
    def setUp(self):
        ScheduledEvent.objects.all().delete()
        self.registry = HookRegistry()
        self.calls = []

    def test_due_event_fires_and_advances_one_interval(self):
        schedule_event("test.hook", START, "daily")
        self.registry.register("test.hook", lambda: self.calls.append("fired"))

        fired = run_due_events(now=START + timedelta(minutes=1), registry=self.registry)

        self.assertEqual(fired, ["test.hook"])
        self.assertEqual(self.calls, ["fired"])
        event = ScheduledEvent.objects.get(hook="test.hook")
        self.assertEqual(event.next_run, START + timedelta(days=1))
        self.assertEqual(event.last_run, START + timedelta(minutes=1))

    def test_event_not_yet_due_is_left_alone(self):
        schedule_event("test.hook", START, "daily")
        self.registry.register("test.hook", lambda: self.calls.append("fired"))

        fired = run_due_events(now=START - timedelta(seconds=1), registry=self.registry)

        self.assertEqual(fired, [])
        self.assertEqual(self.calls, [])

    def test_missed_runs_are_not_replayed(self):
        schedule_event("test.hook", START, "daily")
        self.registry.register("test.hook", lambda: self.calls.append("fired"))
        now = START + timedelta(days=3, hours=2)

        run_due_events(now=now, registry=self.registry)

        self.assertEqual(self.calls, ["fired"])
        self.assertEqual(next_scheduled("test.hook"), now + timedelta(days=1))

    def test_failing_callback_does_not_stop_others(self):
        def boom():
            raise RuntimeError("boom")

        schedule_event("a.hook", START, "daily")
        schedule_event("b.hook", START + timedelta(minutes=1), "daily")
        self.registry.register("a.hook", boom)
        self.registry.register("a.hook", lambda: self.calls.append("a"))
        self.registry.register("b.hook", lambda: self.calls.append("b"))

        with self.assertLogs("cron.services", level="ERROR"):
            fired = run_due_events(now=START + timedelta(hours=1), registry=self.registry)

        self.assertEqual(fired, ["a.hook", "b.hook"])
        self.assertEqual(self.calls, ["a", "b"])

    def test_dry_run_does_not_fire(self):
        schedule_event("test.hook", START, "daily")
        self.registry.register("test.hook", lambda: self.calls.append("fired"))

        fired = run_due_events(now=START, registry=self.registry, dry_run=True)

        self.assertEqual(fired, ["test.hook"])
        self.assertEqual(self.calls, [])
        self.assertEqual(next_scheduled("test.hook"), START)


class HookRegistryTests(TestCase):
    def test_register_ignores_duplicates(self):
        registry = HookRegistry()

        def callback():
            return None

        registry.register("hook", callback)
        registry.register("hook", callback)
        self.assertEqual(registry.callbacks("hook"), [callback])


class RunCronCommandTests(TestCase):
    def setUp(self):
        ScheduledEvent.objects.all().delete()

    def test_reports_when_nothing_is_due(self):
        out = StringIO()
        call_command("run_cron", stdout=out)
        self.assertIn("No events due.", out.getvalue())

    def test_dry_run_lists_due_events(self):
        schedule_event("test.hook", START, "daily")
        out = StringIO()
        call_command("run_cron", "--dry-run", stdout=out)
        self.assertIn("Due: test.hook", out.getvalue())
        self.assertEqual(next_scheduled("test.hook"), START)
