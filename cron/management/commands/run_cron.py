from django.core.management.base import BaseCommand

from cron.services import run_due_events


class Command(BaseCommand):
    help = "Run scheduled events that are due. Intended to be called from the system crontab."

    def add_arguments(self, parser):
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="List due events without running them.",
        )

    def handle(self, *args, **options):
        dry_run = options["dry_run"]
        fired = run_due_events(dry_run=dry_run)

        if not fired:
            self.stdout.write("No events due.")
            return

        verb = "Due" if dry_run else "Ran"
        for hook in fired:
            self.stdout.write(f"{verb}: {hook}")
        self.stdout.write(self.style.SUCCESS(f"Success: {len(fired)} event(s) processed."))
