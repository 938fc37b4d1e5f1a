import signal

from django.core.management.base import BaseCommand

from sosach.services.scheduler import ReminderScheduler


class Command(BaseCommand):
    help = "Run the reminder and overdue sweeps in the foreground until interrupted"

    def add_arguments(self, parser):
        parser.add_argument("--reminder-interval", type=int, help="Seconds between reminder sweeps")
        parser.add_argument("--overdue-interval", type=int, help="Seconds between overdue sweeps")
        parser.add_argument(
            "--skip-initial-run", action="store_true", help="Wait one interval before the first sweep"
        )

    def handle(self, *args, **options):
        scheduler = ReminderScheduler(
            reminder_interval=options.get("reminder_interval"),
            overdue_interval=options.get("overdue_interval"),
            run_on_start=False if options.get("skip_initial_run") else None,
        )

        def shutdown(signum, frame):
            self.stdout.write(self.style.WARNING("Stopping reminder scheduler..."))
            scheduler.stop()

        signal.signal(signal.SIGINT, shutdown)
        signal.signal(signal.SIGTERM, shutdown)

        scheduler.start()
        self.stdout.write(self.style.SUCCESS("Reminder scheduler running. Press Ctrl+C to stop."))
        scheduler.wait()
