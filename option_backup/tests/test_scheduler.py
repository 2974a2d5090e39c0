from datetime import timedelta

from django.test import SimpleTestCase, TestCase
from django.utils import timezone

from cron.hooks import registry
from cron.models import ScheduledEvent
from cron.services import run_due_events
from option_backup.apps import get_components
from option_backup.backends import CronBackend
from option_backup.conf import BACKUP_HOOK
from option_backup.scheduler import BackupScheduler
from option_backup.snapshots import CaptureStatus, SnapshotStore
from options.services import get_option, update_option

from option_backup.tests.helpers import T1, FakeClock, MemoryBackend, MemoryEvents, make_settings


class BackupSchedulerTests(SimpleTestCase):
    def make_scheduler(self, backend, options=("siteurl", "sidebars_widgets")):
        settings = make_settings(options=options)
        self.events = MemoryEvents()
        store = SnapshotStore(settings, backend, clock=FakeClock(T1, T1, T1))
        return BackupScheduler(settings, store, self.events)

    def test_ensure_scheduled_registers_once(self):
        scheduler = self.make_scheduler(MemoryBackend())

        self.assertTrue(scheduler.ensure_scheduled())
        self.assertFalse(scheduler.ensure_scheduled())

        self.assertEqual(self.events.registered, [(BACKUP_HOOK, None, "daily")])

    def test_on_trigger_captures_every_configured_option(self):
        backend = MemoryBackend({"siteurl": "http://example.com", "sidebars_widgets": {"sidebar-1": []}})
        scheduler = self.make_scheduler(backend)

        results = scheduler.on_trigger()

        self.assertEqual([r.status for r in results], [CaptureStatus.CAPTURED, CaptureStatus.CAPTURED])
        self.assertEqual(backend.values["obr_backup_siteurl"], {T1: "http://example.com"})
        self.assertEqual(backend.values["obr_backup_sidebars_widgets"], {T1: {"sidebar-1": []}})

    def test_on_trigger_skips_options_without_value(self):
        backend = MemoryBackend({"sidebars_widgets": {}})
        results = self.make_scheduler(backend).on_trigger()

        self.assertEqual([r.status for r in results], [CaptureStatus.SKIPPED, CaptureStatus.CAPTURED])
        self.assertNotIn("obr_backup_siteurl", backend.values)

    def test_failure_on_one_option_does_not_stop_the_rest(self):
        backend = MemoryBackend(
            {"blogname": "Blog", "siteurl": "http://example.com"},
            fail_on=("obr_backup_blogname",),
        )
        scheduler = self.make_scheduler(backend, options=("blogname", "siteurl"))

        with self.assertLogs("option_backup.scheduler", level="ERROR"):
            results = scheduler.on_trigger()

        self.assertEqual(results[0].status, CaptureStatus.FAILED)
        self.assertIn("store unavailable", results[0].error)
        self.assertEqual(results[1].status, CaptureStatus.CAPTURED)
        self.assertEqual(backend.values["obr_backup_siteurl"], {T1: "http://example.com"})


class CronIntegrationTests(TestCase):
    def setUp(self):
        ScheduledEvent.objects.all().delete()

    def test_ensure_scheduled_creates_one_daily_event(self):
        scheduler = get_components().scheduler

        self.assertTrue(scheduler.ensure_scheduled())
        self.assertFalse(scheduler.ensure_scheduled())

        event = ScheduledEvent.objects.get(hook=BACKUP_HOOK)
        self.assertEqual(event.recurrence, "daily")
        self.assertEqual(ScheduledEvent.objects.count(), 1)
        self.assertTrue(CronBackend().is_registered(BACKUP_HOOK))

    def test_backup_hook_is_registered_at_startup(self):
        self.assertIn(get_components().scheduler.on_trigger, registry.callbacks(BACKUP_HOOK))

    def test_due_event_backs_up_configured_options(self):
        update_option("siteurl", "http://example.com")
        get_components().scheduler.ensure_scheduled()

        run_due_events(now=timezone.now() + timedelta(minutes=1))

        history = get_option("obr_backup_siteurl")
        self.assertEqual(list(history.values()), ["http://example.com"])
        self.assertIsNone(get_option("obr_backup_sidebars_widgets"))
