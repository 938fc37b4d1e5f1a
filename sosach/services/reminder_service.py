import logging
import math
from datetime import datetime, timedelta, timezone
from typing import Iterable, List

from sosach.constants.audit import UNKNOWN_VALUE
from sosach.constants.notification import (
    NotificationMessages,
    NotificationPriority,
    NotificationTitles,
    NotificationType,
)
from sosach.constants.task import (
    AUTOMATIC_REMINDER_OFFSETS,
    CONFIGURED_REMINDER_MESSAGE,
    ReminderType,
    TaskPriority,
)
from sosach.dto.task_assignment_dto import OverdueSweepResultDTO, UpcomingReminderDTO, ensure_utc
from sosach.models.task_assignment import ReminderModel, TaskAssignmentModel
from sosach.repositories.reference_repository import BookRepository
from sosach.repositories.task_assignment_repository import TaskAssignmentRepository
from sosach.repositories.user_repository import UserRepository
from sosach.services.notification_service import NotificationService
from sosach.services.reminder_channels import send_email_reminder, send_sms_reminder

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60


def days_overdue(deadline: datetime, now: datetime) -> int:
    return math.ceil((now - deadline).total_seconds() / SECONDS_PER_DAY)


def build_automatic_reminders(task: TaskAssignmentModel, now: datetime) -> List[ReminderModel]:
    """24h, 2h and 30min before the deadline, keeping only instants still in the future."""
    reminders = []
    for offset, template in AUTOMATIC_REMINDER_OFFSETS:
        scheduled_at = task.deadline - timedelta(**offset)
        if scheduled_at > now:
            reminders.append(
                ReminderModel(
                    type=ReminderType.NOTIFICATION,
                    message=template.format(task.title),
                    scheduledAt=scheduled_at,
                )
            )
    return reminders


def build_configured_reminders(task: TaskAssignmentModel, hours: Iterable[float], now: datetime) -> List[ReminderModel]:
    reminders = []
    for hours_before in hours:
        scheduled_at = task.deadline - timedelta(hours=hours_before)
        if scheduled_at > now:
            reminders.append(
                ReminderModel(
                    type=ReminderType.NOTIFICATION,
                    message=CONFIGURED_REMINDER_MESSAGE.format(task.title),
                    scheduledAt=scheduled_at,
                )
            )
    return reminders


class ReminderService:
    @classmethod
    def check_and_send_reminders(cls, now: datetime | None = None) -> int:
        """
        Reminder sweep. Each due reminder is claimed with a conditional write
        before anything is sent, so overlapping sweeps fire it at most once.
        Returns the number of reminders fired.
        """
        now = now or datetime.now(timezone.utc)
        fired = 0

        for task in TaskAssignmentRepository.find_with_due_reminders(now):
            for reminder in task.reminders:
                if reminder.sent or reminder.scheduledAt > now:
                    continue
                try:
                    if not TaskAssignmentRepository.claim_reminder(task.id, reminder.id, now):
                        continue
                    cls._send_reminder(task, reminder, now)
                    fired += 1
                except Exception as e:
                    logger.error(f"Error sending reminder {reminder.id} for task {task.id}: {e}")

        logger.info(f"Reminder sweep fired {fired} reminder(s)")
        return fired

    @classmethod
    def _send_reminder(cls, task: TaskAssignmentModel, reminder: ReminderModel, now: datetime) -> None:
        priority = NotificationPriority.HIGH if task.priority == TaskPriority.URGENT.value else NotificationPriority.MEDIUM
        NotificationService.create_notification(
            recipient=task.assignedTo,
            type=NotificationType.REMINDER,
            title=NotificationTitles.TASK_REMINDER,
            message=reminder.message,
            priority=priority,
            related_data={"taskId": task.id, "bookId": task.bookId, "entryId": task.bookEntryId},
            metadata={"taskTitle": task.title, "deadline": task.deadline, "priority": task.priority},
            now=now,
        )

        if reminder.type in (ReminderType.EMAIL.value, ReminderType.SMS.value):
            assignee = UserRepository.get_by_id(task.assignedTo)
            if not assignee:
                logger.warning(f"Assignee {task.assignedTo} not found, skipping {reminder.type} for task {task.id}")
            elif reminder.type == ReminderType.EMAIL.value:
                send_email_reminder(task, reminder, assignee)
            else:
                send_sms_reminder(task, reminder, assignee)

        logger.info(f"Reminder sent for task: {task.title}")

    @classmethod
    def check_overdue_tasks(cls, now: datetime | None = None) -> OverdueSweepResultDTO:
        """
        Overdue sweep. The status change is a compare-and-swap on the shared
        overdue predicate; only the caller that wins it sends notifications.
        """
        now = now or datetime.now(timezone.utc)
        result = OverdueSweepResultDTO(overdueCount=0, notificationsSent=0)

        for task in TaskAssignmentRepository.find_overdue_candidates(now):
            try:
                updated = TaskAssignmentRepository.mark_overdue(task.id, now)
                if not updated:
                    continue
                result.overdueCount += 1
                result.notificationsSent += cls._notify_overdue(updated, now)
                result.details.append({"taskId": str(updated.id), "title": updated.title})
            except Exception as e:
                logger.error(f"Error processing overdue task {task.id}: {e}")

        logger.info(f"Overdue sweep marked {result.overdueCount} task(s) overdue")
        return result

    @classmethod
    def _notify_overdue(cls, task: TaskAssignmentModel, now: datetime) -> int:
        overdue_days = days_overdue(task.deadline, now)
        assignee = UserRepository.get_by_id(task.assignedTo)
        assignee_name = assignee.fullName if assignee else UNKNOWN_VALUE

        NotificationService.create_notification(
            recipient=task.assignedTo,
            type=NotificationType.DEADLINE_MISSED,
            title=NotificationTitles.TASK_OVERDUE,
            message=NotificationMessages.TASK_OVERDUE_ASSIGNEE.format(task.title),
            priority=NotificationPriority.HIGH,
            related_data={"taskId": task.id, "bookId": task.bookId, "entryId": task.bookEntryId},
            metadata={"taskTitle": task.title, "deadline": task.deadline, "daysOverdue": overdue_days},
            now=now,
        )
        NotificationService.create_notification(
            recipient=task.assignedBy,
            type=NotificationType.ESCALATION,
            title=NotificationTitles.TASK_OVERDUE,
            message=NotificationMessages.TASK_OVERDUE_ASSIGNER.format(task.title, assignee_name),
            priority=NotificationPriority.MEDIUM,
            related_data={"taskId": task.id, "userId": task.assignedTo},
            metadata={
                "taskTitle": task.title,
                "assignedTo": assignee_name,
                "deadline": task.deadline,
                "daysOverdue": overdue_days,
            },
            now=now,
        )
        logger.info(f"Overdue task notification sent: {task.title}")
        return 2

    @classmethod
    def create_automatic_reminders(cls, task_id, now: datetime | None = None) -> List[ReminderModel]:
        now = now or datetime.now(timezone.utc)
        task = TaskAssignmentRepository.get_by_id(task_id)
        if not task:
            logger.warning(f"Task {task_id} not found, no automatic reminders created")
            return []

        reminders = build_automatic_reminders(task, now)
        TaskAssignmentRepository.push_reminders(task.id, reminders)
        logger.info(f"Automatic reminders created for task: {task.title}")
        return reminders

    @classmethod
    def send_manual_reminder(cls, task_id, message: str, scheduled_at: datetime) -> bool:
        """Append one reminder without touching existing ones. False if the task is missing or the write fails."""
        try:
            task = TaskAssignmentRepository.get_by_id(task_id)
            if not task:
                logger.warning(f"Task {task_id} not found, manual reminder not scheduled")
                return False

            reminder = ReminderModel(
                type=ReminderType.NOTIFICATION, message=message, scheduledAt=ensure_utc(scheduled_at)
            )
            scheduled = TaskAssignmentRepository.push_reminders(task.id, [reminder])
        except Exception as e:
            logger.error(f"Error scheduling manual reminder for task {task_id}: {e}")
            return False

        if scheduled:
            logger.info(f"Manual reminder scheduled for task: {task.title}")
        return scheduled

    @classmethod
    def get_upcoming_reminders(cls, user_id, limit: int = 10, now: datetime | None = None) -> List[UpcomingReminderDTO]:
        now = now or datetime.now(timezone.utc)
        book_titles = {}
        upcoming = []

        for task in TaskAssignmentRepository.find_with_upcoming_reminders(user_id, now):
            if task.bookId not in book_titles:
                book = BookRepository.find_by_id(task.bookId)
                book_titles[task.bookId] = book.get("title") if book else None

            for reminder in task.reminders:
                if reminder.sent or reminder.scheduledAt < now:
                    continue
                upcoming.append(
                    UpcomingReminderDTO(
                        id=str(reminder.id),
                        taskId=str(task.id),
                        taskTitle=task.title,
                        bookTitle=book_titles[task.bookId],
                        message=reminder.message,
                        scheduledAt=reminder.scheduledAt,
                        type=reminder.type,
                    )
                )

        upcoming.sort(key=lambda reminder: reminder.scheduledAt)
        return upcoming[:limit]
