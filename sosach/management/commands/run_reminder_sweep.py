from django.core.management.base import BaseCommand

from sosach.services.reminder_service import ReminderService


class Command(BaseCommand):
    help = "Send every due, unsent task reminder once"

    def handle(self, *args, **options):
        fired = ReminderService.check_and_send_reminders()
        self.stdout.write(self.style.SUCCESS(f"{fired} reminder(s) sent"))
