from django.test import SimpleTestCase, TestCase

from option_backup.backends import OptionsBackend
from option_backup.exceptions import BackupNotFound
from option_backup.selectors import LATEST, Exact
from option_backup.snapshots import CaptureStatus, SnapshotStore, trim_history
from options.models import Option
from options.services import get_option, update_option

from option_backup.tests.helpers import T1, T2, T3, T4, FakeClock, MemoryBackend, make_settings


class TrimHistoryTests(SimpleTestCase):
    def test_short_history_is_untouched(self):
        kept, evicted = trim_history({T1: "a", T2: "b"}, 3)
        self.assertEqual(kept, {T1: "a", T2: "b"})
        self.assertEqual(evicted, [])

    def test_oldest_entries_are_evicted_first(self):
        kept, evicted = trim_history({T1: "a", T2: "b", T3: "c", T4: "d"}, 2)
        self.assertEqual(list(kept.items()), [(T3, "c"), (T4, "d")])
        self.assertEqual(evicted, [T1, T2])

    def test_eviction_follows_insertion_order_not_key_order(self):
        kept, _ = trim_history({T3: "c", T1: "a", T2: "b"}, 2)
        self.assertEqual(list(kept), [T1, T2])


class SnapshotStoreTests(SimpleTestCase):
    def make_store(self, values=None, clock=None, **settings):
        self.backend = MemoryBackend(values)
        return SnapshotStore(make_settings(**settings), self.backend, clock=clock or FakeClock(T1))

    def test_fourth_capture_evicts_the_first(self):
        store = self.make_store(clock=FakeClock(T1, T2, T3, T4))
        for value in ("a", "b", "c"):
            self.backend.values["siteurl"] = value
            store.capture("siteurl")
        self.assertEqual(self.backend.values["obr_backup_siteurl"], {T1: "a", T2: "b", T3: "c"})

        self.backend.values["siteurl"] = "d"
        result = store.capture("siteurl")

        self.assertEqual(list(self.backend.values["obr_backup_siteurl"].items()), [(T2, "b"), (T3, "c"), (T4, "d")])
        self.assertEqual(result.status, CaptureStatus.CAPTURED)
        self.assertEqual(result.timestamp, T4)
        self.assertEqual(result.retained, 3)
        self.assertEqual(result.evicted, [T1])

    def test_history_never_exceeds_backup_length(self):
        times = [T1 + n for n in range(7)]
        store = self.make_store(values={"siteurl": "x"}, clock=FakeClock(*times), backup_length=2)
        for _ in times:
            store.capture("siteurl")
        self.assertEqual(list(self.backend.values["obr_backup_siteurl"]), times[-2:])

    def test_capture_without_live_value_is_skipped(self):
        store = self.make_store(values={"obr_backup_siteurl": {T1: "a"}})

        result = store.capture("siteurl")

        self.assertEqual(result.status, CaptureStatus.SKIPPED)
        self.assertEqual(self.backend.writes, [])
        self.assertEqual(self.backend.values["obr_backup_siteurl"], {T1: "a"})

    def test_stored_null_is_a_live_value(self):
        store = self.make_store(values={"siteurl": None})
        self.assertEqual(store.capture("siteurl").status, CaptureStatus.CAPTURED)
        self.assertEqual(self.backend.values["obr_backup_siteurl"], {T1: None})

    def test_history_is_written_once_without_autoload(self):
        store = self.make_store(values={"siteurl": "a"})
        store.capture("siteurl")
        self.assertEqual(self.backend.writes, [("obr_backup_siteurl", {T1: "a"}, False)])

    def test_same_second_capture_overwrites_in_place(self):
        store = self.make_store(values={"siteurl": "a"}, clock=FakeClock(T1, T2, T1))
        store.capture("siteurl")
        store.capture("siteurl")
        self.backend.values["siteurl"] = "z"
        store.capture("siteurl")

        self.assertEqual(list(self.backend.values["obr_backup_siteurl"].items()), [(T1, "z"), (T2, "a")])

    def test_latest_is_last_inserted_not_largest_key(self):
        store = self.make_store(values={"obr_backup_siteurl": {T3: "c", T1: "a"}})
        self.assertEqual(store.get_snapshot("siteurl", LATEST), (T1, "a"))

    def test_get_exact_snapshot(self):
        store = self.make_store(values={"obr_backup_siteurl": {T2: "b", T3: "c", T4: "d"}})
        self.assertEqual(store.get_snapshot("siteurl", Exact(T2)), (T2, "b"))

    def test_missing_time_key_raises(self):
        store = self.make_store(values={"obr_backup_siteurl": {T2: "b"}})
        with self.assertRaisesMessage(BackupNotFound, "Specified backup time_key not found."):
            store.get_snapshot("siteurl", Exact(999))

    def test_missing_history_raises(self):
        store = self.make_store()
        with self.assertRaisesMessage(BackupNotFound, "Option siteurl not specified."):
            store.get_snapshot("siteurl", LATEST)

    def test_empty_history_has_no_latest(self):
        store = self.make_store(values={"obr_backup_siteurl": {}})
        with self.assertRaises(BackupNotFound):
            store.get_snapshot("siteurl", LATEST)

    def test_history_with_non_integer_keys_is_ignored(self):
        store = self.make_store(values={"siteurl": "x", "obr_backup_siteurl": {"yesterday": "a"}})

        with self.assertLogs("option_backup.snapshots", level="WARNING"):
            self.assertEqual(store.list_snapshots("siteurl"), (False, []))
        with self.assertRaises(BackupNotFound):
            store.get_snapshot("siteurl", LATEST)
        self.assertEqual(store.count("siteurl"), 0)

    def test_list_snapshots(self):
        store = self.make_store(values={"obr_backup_siteurl": {T2: "b", T3: "c"}})
        self.assertEqual(store.list_snapshots("siteurl"), (True, [T2, T3]))
        self.assertEqual(store.list_snapshots("sidebars_widgets"), (False, []))
        self.assertEqual(store.count("siteurl"), 2)
        self.assertEqual(store.count("sidebars_widgets"), 0)


class OptionsBackedSnapshotStoreTests(TestCase):
    def setUp(self):
        self.store = SnapshotStore(make_settings(), OptionsBackend(), clock=FakeClock(T3, T1, T2))

    def test_history_order_survives_json_storage(self):
        update_option("sidebars_widgets", {"sidebar-1": ["search-2"]})
        for _ in range(3):
            self.store.capture("sidebars_widgets")

        exists, time_keys = self.store.list_snapshots("sidebars_widgets")

        self.assertTrue(exists)
        self.assertEqual(time_keys, [T3, T1, T2])
        self.assertEqual(self.store.get_snapshot("sidebars_widgets", LATEST), (T2, {"sidebar-1": ["search-2"]}))
        self.assertFalse(Option.objects.get(name="obr_backup_sidebars_widgets").autoload)

    def test_capture_does_not_touch_live_value(self):
        update_option("siteurl", "http://example.com")
        self.store.capture("siteurl")
        self.assertEqual(get_option("siteurl"), "http://example.com")
        self.assertEqual(Option.objects.get(name="siteurl").version, 1)
