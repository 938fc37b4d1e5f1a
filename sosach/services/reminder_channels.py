"""Out-of-band reminder delivery. Callers log failures; nothing here retries."""

import logging

import requests
from django.conf import settings
from django.core.mail import send_mail

from sosach.constants.notification import NotificationTitles
from sosach.exceptions.notification_exceptions import ReminderDeliveryException
from sosach.models.task_assignment import ReminderModel, TaskAssignmentModel
from sosach.models.user import UserModel

logger = logging.getLogger(__name__)


def send_email_reminder(task: TaskAssignmentModel, reminder: ReminderModel, recipient: UserModel) -> None:
    if not recipient.email:
        logger.info(f"No email address for user {recipient.id}, skipping email reminder for task {task.id}")
        return

    send_mail(
        subject=f"{NotificationTitles.TASK_REMINDER}: {task.title}",
        message=reminder.message,
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[recipient.email],
        fail_silently=False,
    )
    logger.info(f"Email reminder sent for task {task.id} to {recipient.email}")


def send_sms_reminder(task: TaskAssignmentModel, reminder: ReminderModel, recipient: UserModel) -> None:
    gateway = settings.SMS_GATEWAY
    if not gateway.get("URL"):
        logger.info(f"SMS gateway not configured, skipping SMS reminder for task {task.id}")
        return
    if not recipient.phone:
        logger.info(f"No phone number for user {recipient.id}, skipping SMS reminder for task {task.id}")
        return

    headers = {"Authorization": f"Bearer {gateway['TOKEN']}"} if gateway.get("TOKEN") else {}
    try:
        response = requests.post(
            gateway["URL"],
            json={"to": recipient.phone, "message": reminder.message},
            headers=headers,
            timeout=gateway.get("TIMEOUT", 10),
        )
    except requests.exceptions.RequestException as e:
        raise ReminderDeliveryException("SMS", str(e))

    if response.status_code >= 400:
        raise ReminderDeliveryException("SMS", f"HTTP {response.status_code}")
    logger.info(f"SMS reminder sent for task {task.id}")
