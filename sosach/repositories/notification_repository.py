from datetime import datetime
from typing import List, Optional

from pymongo import DESCENDING
from pymongo.collection import ReturnDocument

from sosach.models.notification import NotificationModel
from sosach.repositories.common.mongo_repository import MongoRepository


class NotificationRepository(MongoRepository):
    collection_name = NotificationModel.collection_name

    @classmethod
    def create(cls, notification: NotificationModel) -> NotificationModel:
        notification.id = cls.insert(notification.to_document())
        return notification

    @classmethod
    def get_for_recipient(cls, recipient_id, unread_only: bool = False, limit: int = 50) -> List[NotificationModel]:
        filters = {"recipient": cls.to_object_id(recipient_id)}
        if unread_only:
            filters["isRead"] = False
        cursor = cls.get_collection().find(filters).sort("createdAt", DESCENDING).limit(limit)
        return [NotificationModel(**doc) for doc in cursor]

    @classmethod
    def count_unread(cls, recipient_id) -> int:
        return cls.get_collection().count_documents({"recipient": cls.to_object_id(recipient_id), "isRead": False})

    @classmethod
    def mark_read(cls, notification_id, recipient_id, now: datetime) -> Optional[NotificationModel]:
        doc = cls.get_collection().find_one_and_update(
            {"_id": cls.to_object_id(notification_id), "recipient": cls.to_object_id(recipient_id)},
            {"$set": {"isRead": True, "readAt": now}},
            return_document=ReturnDocument.AFTER,
        )
        return NotificationModel(**doc) if doc else None

    @classmethod
    def mark_all_read(cls, recipient_id, now: datetime) -> int:
        result = cls.get_collection().update_many(
            {"recipient": cls.to_object_id(recipient_id), "isRead": False},
            {"$set": {"isRead": True, "readAt": now}},
        )
        return result.modified_count

    @classmethod
    def delete_for_recipient(cls, notification_id, recipient_id) -> bool:
        result = cls.get_collection().delete_one(
            {"_id": cls.to_object_id(notification_id), "recipient": cls.to_object_id(recipient_id)}
        )
        return result.deleted_count == 1

    @classmethod
    def delete_many_for_recipient(cls, recipient_id, type: str | None = None, is_read: bool | None = None) -> int:
        filters = {"recipient": cls.to_object_id(recipient_id)}
        if type:
            filters["type"] = type
        if is_read is not None:
            filters["isRead"] = is_read
        return cls.get_collection().delete_many(filters).deleted_count
