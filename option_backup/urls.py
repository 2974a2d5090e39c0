from django.urls import path

from option_backup.views import BackupDetailView, BackupListView

app_name = "option_backup"

urlpatterns = [
    path("<str:name>/", BackupDetailView.as_view(), name="backup-detail"),
    path("", BackupListView.as_view(), name="backup-list"),
]
