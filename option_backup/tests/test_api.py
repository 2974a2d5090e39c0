from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from options.services import update_option

from option_backup.tests.helpers import T2, T3, T4


class BackupApiTests(APITestCase):
    def setUp(self):
        update_option("siteurl", "d")
        update_option("obr_backup_siteurl", {T2: "b", T3: "c", T4: "d"}, autoload=False)

    def test_list_backups(self):
        response = self.client.get(reverse("option_backup:backup-list"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(
            response.json(),
            [{"name": "siteurl", "backup_key": "obr_backup_siteurl", "count": 3, "time_keys": [T2, T3, T4]}],
        )

    def test_view_latest_backup(self):
        response = self.client.get(reverse("option_backup:backup-detail", args=["siteurl"]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["time_key"], T4)
        self.assertEqual(response.data["value"], "d")
        self.assertEqual(response.data["date"], "2023-11-17 22:13:20")

    def test_view_backup_by_time_key(self):
        url = reverse("option_backup:backup-detail", args=["siteurl"])
        response = self.client.get(url, {"time_key": T2})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["value"], "b")

    def test_unknown_time_key_returns_404(self):
        url = reverse("option_backup:backup-detail", args=["siteurl"])
        response = self.client.get(url, {"time_key": 999})
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_option_without_history_returns_404(self):
        url = reverse("option_backup:backup-detail", args=["blogname"])
        response = self.client.get(url)
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
