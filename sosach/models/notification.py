from datetime import datetime, timezone
from typing import Any, ClassVar, Dict

from pydantic import BaseModel, ConfigDict, Field

from sosach.constants.notification import NotificationPriority, NotificationType
from sosach.models.common.document import Document
from sosach.models.common.pyobjectid import PyObjectId


class NotificationRelatedDataModel(BaseModel):
    bookId: PyObjectId | None = None
    entryId: PyObjectId | None = None
    userId: PyObjectId | None = None
    taskId: PyObjectId | None = None

    model_config = ConfigDict(arbitrary_types_allowed=True)


class NotificationModel(Document):
    collection_name: ClassVar[str] = "notifications"

    recipient: PyObjectId
    sender: PyObjectId | None = None
    type: NotificationType
    title: str
    message: str
    priority: NotificationPriority = NotificationPriority.MEDIUM
    isRead: bool = False
    readAt: datetime | None = None
    relatedData: NotificationRelatedDataModel = Field(default_factory=NotificationRelatedDataModel)
    # Documents are removed by the TTL index once this instant passes.
    expiresAt: datetime | None = None
    metadata: Dict[str, Any] | None = None
    createdAt: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
