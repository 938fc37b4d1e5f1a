import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from django.conf import settings
from rest_framework.exceptions import PermissionDenied

from sosach.constants.messages import AppMessages, PermissionErrors
from sosach.constants.notification import NotificationPriority, NotificationType
from sosach.constants.role import UserRole
from sosach.dto.notification_dto import (
    DeleteNotificationsResponse,
    GetNotificationsResponse,
    MarkAllReadResponse,
    NotificationDTO,
)
from sosach.exceptions.notification_exceptions import NotificationNotFoundException
from sosach.models.notification import NotificationModel, NotificationRelatedDataModel
from sosach.repositories.notification_repository import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationService:
    @classmethod
    def create_notification(
        cls,
        recipient,
        type: NotificationType,
        title: str,
        message: str,
        priority: NotificationPriority = NotificationPriority.MEDIUM,
        sender=None,
        related_data: Dict[str, Any] | None = None,
        metadata: Dict[str, Any] | None = None,
        expires_at: datetime | None = None,
        now: datetime | None = None,
    ) -> NotificationModel:
        """Fire-and-forget creation. `expires_at` defaults to NOTIFICATIONS["DEFAULT_TTL_DAYS"] when set."""
        now = now or datetime.now(timezone.utc)
        ttl_days = settings.NOTIFICATIONS.get("DEFAULT_TTL_DAYS")
        if expires_at is None and ttl_days:
            expires_at = now + timedelta(days=ttl_days)

        notification = NotificationModel(
            recipient=recipient,
            sender=sender,
            type=type,
            title=title,
            message=message,
            priority=priority,
            relatedData=NotificationRelatedDataModel(**(related_data or {})),
            expiresAt=expires_at,
            metadata=metadata,
            createdAt=now,
        )
        return NotificationRepository.create(notification)

    @classmethod
    def create_admin_notification(cls, data: Dict[str, Any], actor: Dict[str, Any]) -> NotificationDTO:
        if actor["role"] != UserRole.ADMIN.value:
            raise PermissionDenied(PermissionErrors.ADMIN_ONLY)

        notification = cls.create_notification(
            recipient=data["recipient"],
            type=NotificationType(data["type"]),
            title=data["title"],
            message=data["message"],
            priority=NotificationPriority(data.get("priority", NotificationPriority.MEDIUM.value)),
            sender=actor["_id"],
            related_data=data.get("relatedData"),
            expires_at=data.get("expiresAt"),
        )
        logger.info(f"Admin {actor['_id']} sent a {notification.type} notification to {notification.recipient}")
        return cls.prepare_notification_dto(notification)

    @classmethod
    def get_notifications(cls, user_id: str, unread_only: bool = False, limit: int = 50) -> GetNotificationsResponse:
        notifications = NotificationRepository.get_for_recipient(user_id, unread_only=unread_only, limit=limit)
        return GetNotificationsResponse(
            notifications=[cls.prepare_notification_dto(notification) for notification in notifications],
            unreadCount=NotificationRepository.count_unread(user_id),
        )

    @classmethod
    def mark_as_read(cls, notification_id: str, user_id: str) -> NotificationDTO:
        notification = NotificationRepository.mark_read(notification_id, user_id, datetime.now(timezone.utc))
        if not notification:
            raise NotificationNotFoundException(notification_id)
        return cls.prepare_notification_dto(notification)

    @classmethod
    def mark_all_as_read(cls, user_id: str) -> MarkAllReadResponse:
        modified = NotificationRepository.mark_all_read(user_id, datetime.now(timezone.utc))
        return MarkAllReadResponse(message=AppMessages.NOTIFICATIONS_MARKED_READ, modifiedCount=modified)

    @classmethod
    def delete_notification(cls, notification_id: str, user_id: str) -> None:
        if not NotificationRepository.delete_for_recipient(notification_id, user_id):
            raise NotificationNotFoundException(notification_id)

    @classmethod
    def delete_notifications(
        cls, user_id: str, type: str | None = None, is_read: bool | None = None
    ) -> DeleteNotificationsResponse:
        deleted = NotificationRepository.delete_many_for_recipient(user_id, type=type, is_read=is_read)
        return DeleteNotificationsResponse(
            message=AppMessages.NOTIFICATIONS_DELETED.format(deleted), deletedCount=deleted
        )

    @classmethod
    def prepare_notification_dto(cls, notification: NotificationModel) -> NotificationDTO:
        related = notification.relatedData.model_dump(exclude_none=True)
        return NotificationDTO(
            _id=str(notification.id),
            recipient=str(notification.recipient),
            sender=str(notification.sender) if notification.sender else None,
            type=notification.type,
            title=notification.title,
            message=notification.message,
            priority=notification.priority,
            isRead=notification.isRead,
            readAt=notification.readAt,
            relatedData={key: str(value) for key, value in related.items()},
            expiresAt=notification.expiresAt,
            metadata=notification.metadata,
            createdAt=notification.createdAt,
        )
