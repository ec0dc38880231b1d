"""
deadlines/management/commands/send_deadline_reminders.py

Scheduled command (daily by default, see DEADLINE_NOTIFICATIONS).

- Scans every open Task / Project with a deadline
- Sends 7 day, 3 day, 1 day and overdue notifications
- Safe to run repeatedly: the deadline ledger deduplicates sends
"""

from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from deadlines.services.scanner import scan_deadlines, sweep_overdue


class Command(BaseCommand):
    help = "Send deadline threshold and overdue notifications"

    def add_arguments(self, parser):
        parser.add_argument(
            "--overdue-only",
            action="store_true",
            help="Only send overdue notifications (lighter sweep)",
        )
        parser.add_argument(
            "--now",
            help="ISO timestamp to scan as of (defaults to the current time)",
        )

    def handle(self, *args, **options):
        now = timezone.now()

        if options.get("now"):
            now = parse_datetime(options["now"])
            if now is None:
                raise CommandError(f"Invalid --now timestamp: {options['now']!r}")
            if timezone.is_naive(now):
                now = timezone.make_aware(now)

        self.stdout.write(
            self.style.NOTICE(
                f"[{now:%Y-%m-%d %H:%M:%S}] Starting deadline scan"
            )
        )

        if options.get("overdue_only"):
            result = sweep_overdue(now=now)
        else:
            result = scan_deadlines(now=now)

        for error in result.errors:
            self.stderr.write(self.style.WARNING(error))

        self.stdout.write(
            self.style.SUCCESS(
                f"[{now:%Y-%m-%d %H:%M:%S}] Completed in {result.duration_ms}ms: "
                f"{result.sent} notifications sent, "
                f"{len(result.errors)} errors"
            )
        )
