from datetime import datetime, timezone
from typing import ClassVar, List

from pydantic import BaseModel, ConfigDict, Field

from sosach.constants.task import ReminderType, TaskPriority, TaskStatus
from sosach.models.common.document import Document
from sosach.models.common.pyobjectid import PyObjectId


class TaskNoteModel(BaseModel):
    content: str
    author: PyObjectId
    createdAt: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(arbitrary_types_allowed=True)


class ReminderModel(BaseModel):
    """A one-shot reminder. `sent` flips to True exactly once and the entry is never removed."""

    id: PyObjectId = Field(default_factory=PyObjectId, alias="_id")
    type: ReminderType = ReminderType.NOTIFICATION
    message: str
    scheduledAt: datetime
    sent: bool = False
    sentAt: datetime | None = None

    model_config = ConfigDict(
        populate_by_name=True, arbitrary_types_allowed=True, use_enum_values=True, validate_default=True
    )


class TaskAssignmentModel(Document):
    """
    A unit of work linking an assignee to a book entry with a deadline.
    Status changes go through sosach.services.task_state_machine.
    """

    collection_name: ClassVar[str] = "task_assignments"

    title: str
    description: str | None = None
    bookId: PyObjectId
    bookEntryId: PyObjectId
    assignedBy: PyObjectId
    assignedTo: PyObjectId
    assignedAt: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    deadline: datetime
    completedAt: datetime | None = None
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    progress: int = 0
    notes: List[TaskNoteModel] = []
    reminders: List[ReminderModel] = []
    requiresApproval: bool = False
    approvedBy: PyObjectId | None = None
    approvedAt: datetime | None = None
    approvalNotes: str | None = None
    unit: PyObjectId
    department: PyObjectId
    tags: List[str] = []
    createdBy: PyObjectId
    updatedBy: PyObjectId | None = None
    createdAt: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updatedAt: datetime | None = None
