"""
management command: sync_reservation_statuses

Moves reservations along the calendar:
  CONFIRMED   → IN_PROGRESS  on the pick-up date
  IN_PROGRESS → COMPLETED    once the return date has passed

Run via OS cron once a day, shortly after midnight:
  5 0 * * *  /path/to/venv/bin/python manage.py sync_reservation_statuses
"""
from django.core.management.base import BaseCommand, CommandError
from django.utils.dateparse import parse_date

from apps.reservations.engine import sync_statuses


class Command(BaseCommand):
    help = 'Start reservations whose pick-up date is reached and complete those whose return date has passed'

    def add_arguments(self, parser):
        parser.add_argument(
            '--date', default='',
            help='Run as if today were this date (YYYY-MM-DD)',
        )

    def handle(self, *args, **options):
        today = None
        if options['date']:
            today = parse_date(options['date'])
            if today is None:
                raise CommandError(f"Invalid --date '{options['date']}', expected YYYY-MM-DD.")

        result = sync_statuses(today=today)

        self.stdout.write(
            self.style.SUCCESS(
                f"sync_reservation_statuses: started {result['started']}, "
                f"completed {result['completed']} reservations"
            )
        )
