import logging
import threading
from typing import Callable, List

from django.conf import settings

from sosach.services.reminder_service import ReminderService

logger = logging.getLogger(__name__)


class ReminderScheduler:
    """
    Owns the periodic reminder and overdue sweeps. Nothing runs until `start()`;
    each job gets its own daemon thread and `stop()` wakes and joins them.
    """

    def __init__(
        self,
        reminder_interval: float | None = None,
        overdue_interval: float | None = None,
        run_on_start: bool | None = None,
    ):
        config = settings.REMINDER_SCHEDULER
        self.reminder_interval = reminder_interval or config["REMINDER_INTERVAL_SECONDS"]
        self.overdue_interval = overdue_interval or config["OVERDUE_INTERVAL_SECONDS"]
        self.run_on_start = config["RUN_ON_START"] if run_on_start is None else run_on_start
        self._stop_event = threading.Event()
        self._threads: List[threading.Thread] = []
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        return any(thread.is_alive() for thread in self._threads)

    def start(self) -> None:
        with self._lock:
            if self.is_running:
                logger.warning("Reminder scheduler already running")
                return

            self._stop_event.clear()
            self._threads = [
                self._spawn("reminder-sweep", self.reminder_interval, ReminderService.check_and_send_reminders),
                self._spawn("overdue-sweep", self.overdue_interval, ReminderService.check_overdue_tasks),
            ]
        logger.info(
            f"Reminder scheduler started (reminders every {self.reminder_interval}s, "
            f"overdue check every {self.overdue_interval}s)"
        )

    def stop(self, timeout: float | None = None) -> None:
        with self._lock:
            self._stop_event.set()
            for thread in self._threads:
                thread.join(timeout)
            self._threads = []
        logger.info("Reminder scheduler stopped")

    def wait(self) -> None:
        """Block until `stop()` is called from another thread or a signal handler."""
        self._stop_event.wait()

    def _spawn(self, name: str, interval: float, job: Callable) -> threading.Thread:
        thread = threading.Thread(target=self._run_periodically, args=(name, interval, job), name=name, daemon=True)
        thread.start()
        return thread

    def _run_periodically(self, name: str, interval: float, job: Callable) -> None:
        if self.run_on_start:
            self._run_job(name, job)
        while not self._stop_event.wait(interval):
            self._run_job(name, job)

    def _run_job(self, name: str, job: Callable) -> None:
        try:
            job()
        except Exception:
            logger.exception(f"Scheduled job {name} failed")
