from django.core.management.base import BaseCommand, CommandError
from rich.prompt import Confirm

from option_backup.apps import get_components
from option_backup.backends import MISSING
from option_backup.controller import RestoreStatus
from option_backup.exceptions import OptionBackupError
from option_backup.formatting import ITEM_FORMATS, VALUE_FORMATS, format_items, format_value
from option_backup.selectors import parse_selector
from option_backup.snapshots import CaptureStatus

LIST_FIELDS = ["name", "backup_key", "count", "time_keys"]
COMPARISON_FIELDS = ["current_value", "backup_value"]
COMPARISON_FORMATS = ("table", "json", "csv", "yaml")


class Command(BaseCommand):
    help = "List, view and restore backups of configured options, or back them up now."

    def add_arguments(self, parser):
        subparsers = parser.add_subparsers(dest="subcommand", required=True, metavar="{list,view,restore,now}")

        list_parser = subparsers.add_parser("list", help="List backed-up options.")
        list_parser.add_argument("--format", choices=ITEM_FORMATS, default="table")

        view_parser = subparsers.add_parser("view", help="View a specific backup.")
        view_parser.add_argument("option_name", nargs="?", help="The name of the option to view.")
        view_parser.add_argument(
            "time_key", nargs="?", default="latest",
            help="Capture time from `option_backup list`. Defaults to latest.",
        )
        view_parser.add_argument("--format", choices=VALUE_FORMATS, default="var_export")

        restore_parser = subparsers.add_parser("restore", help="Restore a backup.")
        restore_parser.add_argument("option_name", nargs="?", help="The name of the option to restore.")
        restore_parser.add_argument(
            "time_key", nargs="?", default="latest",
            help="Capture time from `option_backup list`. Defaults to latest.",
        )
        restore_parser.add_argument("--yes", action="store_true", help="Skip confirmation prompt.")
        restore_parser.add_argument("--format", choices=COMPARISON_FORMATS, default="table")

        now_parser = subparsers.add_parser("now", help="Back up current option values now.")
        now_parser.add_argument("--yes", action="store_true", help="Skip confirmation prompt.")

    def handle(self, *args, **options):
        self.components = get_components()
        self.components.scheduler.ensure_scheduled()

        handler = getattr(self, f"handle_{options['subcommand']}")
        try:
            handler(options)
        except OptionBackupError as exc:
            raise CommandError(str(exc)) from exc

    def confirm(self, question: str) -> bool:
        return Confirm.ask(question, default=False)

    def handle_list(self, options):
        listings = self.components.controller.list_backups()
        rows = [listing.as_row() for listing in listings]
        self.stdout.write(format_items(rows, LIST_FIELDS, options["format"]))

    def handle_view(self, options):
        selector = parse_selector(options["time_key"])
        snapshot = self.components.controller.view(options["option_name"], selector)
        self.stdout.write(format_value(snapshot.value, options["format"]))

    def handle_restore(self, options):
        selector = parse_selector(options["time_key"])

        def confirm_restore(plan):
            current = plan.current_value if plan.current_value is not MISSING else None
            self.stdout.write(f"Backup of {plan.name} taken {plan.date} UTC ({plan.snapshot.timestamp})")
            self.stdout.write(
                format_items(
                    [{"current_value": current, "backup_value": plan.backup_value}],
                    COMPARISON_FIELDS,
                    options["format"],
                )
            )
            return options["yes"] or self.confirm("Okay to proceed with restoration?")

        result = self.components.controller.restore(options["option_name"], selector, confirm=confirm_restore)

        if result.status == RestoreStatus.NOOP:
            self.stdout.write("Selected backup matches existing value.")
        elif result.status == RestoreStatus.ABORTED:
            self.stdout.write("Aborted.")
        else:
            self.stdout.write(
                self.style.SUCCESS(
                    f"Success: Restored {result.plan.name} option from backup ({result.plan.date} UTC)"
                )
            )

    def handle_now(self, options):
        def confirm_eviction(name):
            return options["yes"] or self.confirm(f"This will remove the oldest {name} backup. Ok?")

        results = self.components.controller.backup_now(confirm=confirm_eviction)

        failed = []
        for result in results:
            if result.status == CaptureStatus.CAPTURED:
                self.stdout.write(self.style.SUCCESS(f"Success: Current option:{result.name} backed up."))
            elif result.status == CaptureStatus.SKIPPED:
                self.stdout.write(self.style.WARNING(f"Warning: Option {result.name} has no value; skipped."))
            elif result.status == CaptureStatus.DECLINED:
                self.stdout.write("Aborted.")
            else:
                failed.append(result.name)
                self.stderr.write(f"Error: Backup of {result.name} failed: {result.error}")

        if failed:
            raise CommandError(f"Backup failed for: {', '.join(failed)}")
