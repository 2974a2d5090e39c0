from rest_framework import serializers


class BackupListingSerializer(serializers.Serializer):
    """Snapshot history summary for one configured option."""

    name = serializers.CharField(help_text="The configured option name")
    backup_key = serializers.CharField(help_text="Option name the history is stored under")
    count = serializers.IntegerField(help_text="Number of retained backups")
    time_keys = serializers.ListField(
        child=serializers.IntegerField(),
        help_text="Capture times (seconds since epoch), oldest first",
    )


class BackupSnapshotSerializer(serializers.Serializer):
    """A single resolved backup."""

    name = serializers.CharField()
    backup_key = serializers.CharField()
    time_key = serializers.IntegerField(source="timestamp", help_text="Capture time of this backup")
    date = serializers.CharField(help_text="Capture time as a UTC date")
    value = serializers.JSONField(help_text="The backed-up option value")
