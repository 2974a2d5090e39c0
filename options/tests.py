from datetime import timedelta

from django.core.cache import cache
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from options.models import Option
from options.services import delete_option, get_option, update_option


class OptionServiceTests(TestCase):
    def setUp(self):
        cache.clear()

    def test_get_option_returns_default_when_missing(self):
        self.assertIsNone(get_option("missing"))
        self.assertEqual(get_option("missing", "fallback"), "fallback")

    def test_update_option_round_trips_json_values(self):
        value = {"sidebar-1": ["search-2", "recent-posts-2"], "array_version": 3}
        _, created = update_option("sidebars_widgets", value)
        self.assertTrue(created)
        self.assertEqual(get_option("sidebars_widgets"), value)

    def test_update_option_increments_version_and_invalidates_cache(self):
        update_option("siteurl", "http://a.example")
        self.assertEqual(get_option("siteurl"), "http://a.example")

        entry, created = update_option("siteurl", "http://b.example")
        self.assertFalse(created)
        self.assertEqual(entry.version, 2)
        self.assertEqual(get_option("siteurl"), "http://b.example")

    def test_update_option_refreshes_updated_at(self):
        entry, _ = update_option("siteurl", "http://a.example")
        Option.objects.filter(pk=entry.pk).update(updated_at=entry.updated_at - timedelta(days=1))
        stale = Option.objects.get(pk=entry.pk).updated_at

        entry, _ = update_option("siteurl", "http://b.example")

        self.assertGreater(entry.updated_at, stale)

    def test_autoload_is_kept_unless_given(self):
        update_option("blogname", "Blog", autoload=False)
        update_option("blogname", "Renamed")
        self.assertFalse(Option.objects.get(name="blogname").autoload)

    def test_stored_null_is_distinct_from_missing(self):
        update_option("empty", None)
        sentinel = object()
        self.assertIsNone(get_option("empty", sentinel))
        self.assertIs(get_option("absent", sentinel), sentinel)

    def test_delete_option(self):
        update_option("temp", "old")
        self.assertTrue(delete_option("temp"))
        self.assertFalse(delete_option("temp"))
        self.assertIsNone(get_option("temp"))


class OptionApiTests(APITestCase):
    def setUp(self):
        cache.clear()

    def test_put_and_read_option(self):
        url = reverse("options:option-detail", args=["siteurl"])
        response = self.client.put(url, {"value": "http://example.com"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["value"], "http://example.com")

        response = self.client.get(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["name"], "siteurl")
        self.assertEqual(response.data["value"], "http://example.com")

    def test_put_structured_value(self):
        url = reverse("options:option-detail", args=["sidebars_widgets"])
        payload = {"value": {"sidebar-1": ["search-2"]}, "autoload": False}
        response = self.client.put(url, payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["value"], {"sidebar-1": ["search-2"]})
        self.assertFalse(response.data["autoload"])

    def test_missing_option_returns_404(self):
        url = reverse("options:option-detail", args=["missing"])
        response = self.client.get(url)
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_list_filters_by_autoload(self):
        update_option("siteurl", "http://example.com")
        update_option("obr_backup_siteurl", {"1": "http://example.com"}, autoload=False)

        response = self.client.get(reverse("options:option-list"), {"autoload": "false"})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item["name"] for item in response.data], ["obr_backup_siteurl"])

    def test_delete_removes_option(self):
        update_option("temp", "old")
        url = reverse("options:option-detail", args=["temp"])
        response = self.client.delete(url)
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)

        response = self.client.get(url)
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
