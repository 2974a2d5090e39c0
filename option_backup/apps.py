from django.apps import AppConfig, apps as global_apps
from django.db.models.signals import post_migrate


def schedule_backups(sender, apps=global_apps, **kwargs):
    """Register the daily backup event once the cron tables exist."""
    try:
        apps.get_model("cron", "ScheduledEvent")
    except LookupError:
        return
    get_components().scheduler.ensure_scheduled()


class OptionBackupConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "option_backup"
    verbose_name = "Option backups"

    def ready(self):
        from cron.hooks import registry
        from option_backup.conf import load_backup_settings
        from option_backup.runtime import build_components

        self.backup_settings = load_backup_settings()
        self.components = build_components(self.backup_settings)

        registry.register(self.backup_settings.hook, self.components.scheduler.on_trigger)
        # post_migrate is only sent for apps with models, so listen for cron's.
        post_migrate.connect(schedule_backups, sender=self.apps.get_app_config("cron"))


def get_components():
    return global_apps.get_app_config("option_backup").components
