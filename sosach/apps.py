from django.apps import AppConfig
from django.conf import settings
import logging
import os
import sys

logger = logging.getLogger(__name__)


def _is_serving_process() -> bool:
    """True under a WSGI server or the reloaded runserver child; False for other manage.py commands."""
    if not sys.argv[0].endswith("manage.py"):
        return True
    if len(sys.argv) > 1 and sys.argv[1] == "runserver":
        return os.environ.get("RUN_MAIN") == "true" or "--noreload" in sys.argv
    return False


class SosachConfig(AppConfig):
    name = "sosach"
    scheduler = None

    def ready(self):
        """Start the reminder scheduler when REMINDER_SCHEDULER["AUTOSTART"] is set."""

        if settings.TESTING or "test" in sys.argv:
            logger.info("Test mode detected - skipping reminder scheduler")
            return

        if not settings.REMINDER_SCHEDULER["AUTOSTART"] or not _is_serving_process():
            return

        from sosach.services.scheduler import ReminderScheduler

        SosachConfig.scheduler = ReminderScheduler()
        SosachConfig.scheduler.start()
