from django.core.management.base import BaseCommand

from sosach.services.reminder_service import ReminderService


class Command(BaseCommand):
    help = "Mark task assignments past their deadline as overdue and notify assignees and assigners"

    def handle(self, *args, **options):
        result = ReminderService.check_overdue_tasks()
        self.stdout.write(
            self.style.SUCCESS(
                f"{result.overdueCount} task(s) marked overdue, {result.notificationsSent} notification(s) sent"
            )
        )
