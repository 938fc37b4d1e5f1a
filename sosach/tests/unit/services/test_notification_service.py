from datetime import datetime, timedelta, timezone
from unittest.mock import patch

from bson import ObjectId
from django.test import SimpleTestCase, override_settings
from rest_framework.exceptions import PermissionDenied

from sosach.constants.messages import AppMessages
from sosach.constants.notification import NotificationPriority, NotificationType
from sosach.exceptions.notification_exceptions import NotificationNotFoundException
from sosach.models.notification import NotificationModel
from sosach.services.notification_service import NotificationService
from sosach.tests.fixtures.user import admin_actor, commander_actor, staff_actor

REPOSITORY = "sosach.services.notification_service.NotificationRepository"
NOW = datetime(2025, 3, 10, 8, 0, tzinfo=timezone.utc)


def notification_model(**overrides) -> NotificationModel:
    values = {
        "_id": ObjectId(),
        "recipient": ObjectId(),
        "type": "reminder",
        "title": "Nhắc nhở công việc",
        "message": "Sắp đến hạn",
        "relatedData": {"taskId": ObjectId()},
        "createdAt": NOW,
    }
    values.update(overrides)
    return NotificationModel(**values)


class CreateNotificationTests(SimpleTestCase):
    @override_settings(NOTIFICATIONS={"DEFAULT_TTL_DAYS": None})
    @patch(f"{REPOSITORY}.create")
    def test_create_without_ttl(self, mock_create):
        mock_create.side_effect = lambda notification: notification
        recipient = ObjectId()
        task_id = ObjectId()

        notification = NotificationService.create_notification(
            recipient=recipient,
            type=NotificationType.DEADLINE_MISSED,
            title="Công việc quá hạn",
            message="Đã quá hạn",
            priority=NotificationPriority.HIGH,
            related_data={"taskId": task_id},
            metadata={"daysOverdue": 2},
            now=NOW,
        )

        self.assertEqual(notification.recipient, recipient)
        self.assertEqual(notification.type, NotificationType.DEADLINE_MISSED.value)
        self.assertEqual(notification.priority, NotificationPriority.HIGH.value)
        self.assertFalse(notification.isRead)
        self.assertEqual(notification.relatedData.taskId, task_id)
        self.assertIsNone(notification.expiresAt)
        self.assertEqual(notification.createdAt, NOW)

    @override_settings(NOTIFICATIONS={"DEFAULT_TTL_DAYS": 30})
    @patch(f"{REPOSITORY}.create")
    def test_create_with_ttl(self, mock_create):
        mock_create.side_effect = lambda notification: notification

        notification = NotificationService.create_notification(
            recipient=ObjectId(), type=NotificationType.REMINDER, title="t", message="m", now=NOW
        )

        self.assertEqual(notification.expiresAt, NOW + timedelta(days=30))
        self.assertEqual(notification.priority, NotificationPriority.MEDIUM.value)


class NotificationReadSideTests(SimpleTestCase):
    @patch(f"{REPOSITORY}.count_unread")
    @patch(f"{REPOSITORY}.get_for_recipient")
    def test_get_notifications(self, mock_get, mock_count):
        notification = notification_model()
        mock_get.return_value = [notification]
        mock_count.return_value = 4
        user_id = str(notification.recipient)

        response = NotificationService.get_notifications(user_id, unread_only=True, limit=10)

        mock_get.assert_called_once_with(user_id, unread_only=True, limit=10)
        self.assertEqual(response.unreadCount, 4)
        self.assertEqual(response.notifications[0].id, str(notification.id))
        self.assertEqual(response.notifications[0].relatedData, {"taskId": str(notification.relatedData.taskId)})

    @patch(f"{REPOSITORY}.mark_read")
    def test_mark_as_read(self, mock_mark_read):
        mock_mark_read.return_value = notification_model(isRead=True, readAt=NOW)

        dto = NotificationService.mark_as_read(str(ObjectId()), str(ObjectId()))

        self.assertTrue(dto.isRead)

    @patch(f"{REPOSITORY}.mark_read")
    def test_mark_someone_elses_notification(self, mock_mark_read):
        mock_mark_read.return_value = None

        with self.assertRaises(NotificationNotFoundException):
            NotificationService.mark_as_read(str(ObjectId()), str(ObjectId()))

    @patch(f"{REPOSITORY}.mark_all_read")
    def test_mark_all_as_read(self, mock_mark_all):
        mock_mark_all.return_value = 7

        self.assertEqual(NotificationService.mark_all_as_read(str(ObjectId())).modifiedCount, 7)

    @patch(f"{REPOSITORY}.delete_for_recipient")
    def test_delete_missing_notification(self, mock_delete):
        mock_delete.return_value = False

        with self.assertRaises(NotificationNotFoundException):
            NotificationService.delete_notification(str(ObjectId()), str(ObjectId()))

    @patch(f"{REPOSITORY}.delete_many_for_recipient")
    def test_delete_notifications_by_filter(self, mock_delete_many):
        mock_delete_many.return_value = 3
        user_id = str(ObjectId())

        response = NotificationService.delete_notifications(user_id, type="reminder", is_read=True)

        mock_delete_many.assert_called_once_with(user_id, type="reminder", is_read=True)
        self.assertEqual(response.deletedCount, 3)
        self.assertEqual(response.message, AppMessages.NOTIFICATIONS_DELETED.format(3))


@override_settings(NOTIFICATIONS={"DEFAULT_TTL_DAYS": 30})
@patch(f"{REPOSITORY}.create")
class AdminNotificationTests(SimpleTestCase):
    def setUp(self):
        self.data = {
            "recipient": str(staff_actor["_id"]),
            "type": "system",
            "title": "Bảo trì hệ thống",
            "message": "Hệ thống tạm dừng lúc 22h",
            "priority": "high",
            "relatedData": {"bookId": str(ObjectId())},
        }

    def test_admin_sends_notification(self, mock_create):
        mock_create.side_effect = lambda notification: notification

        dto = NotificationService.create_admin_notification(self.data, admin_actor)

        created = mock_create.call_args.args[0]
        self.assertEqual(created.sender, admin_actor["_id"])
        self.assertEqual(created.recipient, staff_actor["_id"])
        self.assertEqual(created.type, NotificationType.SYSTEM.value)
        self.assertEqual(created.relatedData.bookId, ObjectId(self.data["relatedData"]["bookId"]))
        self.assertIsNotNone(created.expiresAt)
        self.assertEqual(dto.priority, NotificationPriority.HIGH.value)
        self.assertEqual(dto.sender, str(admin_actor["_id"]))

    def test_explicit_expiry_wins_over_ttl(self, mock_create):
        mock_create.side_effect = lambda notification: notification
        expires_at = NOW + timedelta(days=2)

        dto = NotificationService.create_admin_notification({**self.data, "expiresAt": expires_at}, admin_actor)

        self.assertEqual(dto.expiresAt, expires_at)

    def test_non_admin_is_rejected(self, mock_create):
        for actor in (commander_actor, staff_actor):
            with self.subTest(role=actor["role"]):
                with self.assertRaises(PermissionDenied):
                    NotificationService.create_admin_notification(self.data, actor)
        mock_create.assert_not_called()
