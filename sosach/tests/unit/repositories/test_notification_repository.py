from datetime import datetime, timezone
from unittest import TestCase
from unittest.mock import MagicMock, patch

from bson import ObjectId
from pymongo import DESCENDING
from pymongo.collection import ReturnDocument

from sosach.repositories.notification_repository import NotificationRepository

NOW = datetime(2025, 3, 10, tzinfo=timezone.utc)


@patch("sosach.repositories.common.mongo_repository.DatabaseManager")
class NotificationRepositoryTests(TestCase):
    def setUp(self) -> None:
        self.mock_collection = MagicMock()
        self.mock_db_manager = MagicMock()
        self.mock_db_manager.get_collection.return_value = self.mock_collection
        self.recipient_id = ObjectId()

    def test_unread_only_listing(self, mock_db_manager):
        mock_db_manager.return_value = self.mock_db_manager
        cursor = self.mock_collection.find.return_value
        cursor.sort.return_value.limit.return_value = []

        NotificationRepository.get_for_recipient(str(self.recipient_id), unread_only=True, limit=5)

        self.mock_collection.find.assert_called_once_with({"recipient": self.recipient_id, "isRead": False})
        cursor.sort.assert_called_once_with("createdAt", DESCENDING)
        cursor.sort.return_value.limit.assert_called_once_with(5)

    def test_mark_read_is_scoped_to_recipient(self, mock_db_manager):
        mock_db_manager.return_value = self.mock_db_manager
        notification_id = ObjectId()
        self.mock_collection.find_one_and_update.return_value = None

        result = NotificationRepository.mark_read(str(notification_id), str(self.recipient_id), NOW)

        self.assertIsNone(result)
        self.mock_collection.find_one_and_update.assert_called_once_with(
            {"_id": notification_id, "recipient": self.recipient_id},
            {"$set": {"isRead": True, "readAt": NOW}},
            return_document=ReturnDocument.AFTER,
        )

    def test_mark_all_read_returns_modified_count(self, mock_db_manager):
        mock_db_manager.return_value = self.mock_db_manager
        self.mock_collection.update_many.return_value.modified_count = 3

        self.assertEqual(NotificationRepository.mark_all_read(self.recipient_id, NOW), 3)
        self.mock_collection.update_many.assert_called_once_with(
            {"recipient": self.recipient_id, "isRead": False},
            {"$set": {"isRead": True, "readAt": NOW}},
        )

    def test_delete_for_recipient(self, mock_db_manager):
        mock_db_manager.return_value = self.mock_db_manager
        self.mock_collection.delete_one.return_value.deleted_count = 0

        self.assertFalse(NotificationRepository.delete_for_recipient(ObjectId(), self.recipient_id))

    def test_bulk_delete_with_filters(self, mock_db_manager):
        mock_db_manager.return_value = self.mock_db_manager
        self.mock_collection.delete_many.return_value.deleted_count = 2

        deleted = NotificationRepository.delete_many_for_recipient(
            str(self.recipient_id), type="reminder", is_read=False
        )

        self.assertEqual(deleted, 2)
        self.mock_collection.delete_many.assert_called_once_with(
            {"recipient": self.recipient_id, "type": "reminder", "isRead": False}
        )

    def test_bulk_delete_without_filters(self, mock_db_manager):
        mock_db_manager.return_value = self.mock_db_manager
        self.mock_collection.delete_many.return_value.deleted_count = 0

        NotificationRepository.delete_many_for_recipient(self.recipient_id)

        self.mock_collection.delete_many.assert_called_once_with({"recipient": self.recipient_id})
