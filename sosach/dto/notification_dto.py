from datetime import datetime
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field


class NotificationDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    recipient: str
    sender: str | None = None
    type: str
    title: str
    message: str
    priority: str
    isRead: bool
    readAt: datetime | None = None
    relatedData: Dict[str, str] = {}
    expiresAt: datetime | None = None
    metadata: Dict[str, Any] | None = None
    createdAt: datetime


class GetNotificationsResponse(BaseModel):
    notifications: List[NotificationDTO] = []
    unreadCount: int = 0


class MarkAllReadResponse(BaseModel):
    message: str
    modifiedCount: int


class DeleteNotificationsResponse(BaseModel):
    message: str
    deletedCount: int
