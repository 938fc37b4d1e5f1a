from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from sosach.constants.messages import ValidationErrors
from sosach.constants.task import TaskPriority


def ensure_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC."""
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


class ReminderTimeDTO(BaseModel):
    hours: float = Field(gt=0)


class ReminderSettingsDTO(BaseModel):
    enabled: bool = False
    times: List[ReminderTimeDTO] = []


class CreateTaskAssignmentDTO(BaseModel):
    title: str
    description: str | None = None
    bookId: str
    bookEntryId: str
    assignedTo: str
    assignedAt: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    deadline: datetime
    priority: TaskPriority = TaskPriority.MEDIUM
    requiresApproval: bool = False
    tags: List[str] = []
    unit: str | None = None
    department: str | None = None
    reminderSettings: ReminderSettingsDTO | None = None

    @field_validator("bookId", "bookEntryId", "assignedTo", "unit", "department")
    def validate_object_ids(cls, value):
        if value is not None and not ObjectId.is_valid(value):
            raise ValueError(ValidationErrors.INVALID_OBJECT_ID.format(value))
        return value

    @field_validator("title")
    def validate_title(cls, value: str):
        if not value or not value.strip():
            raise ValueError(ValidationErrors.BLANK_TITLE)
        return value.strip()

    @field_validator("assignedAt", "deadline")
    def normalize_timezone(cls, value: datetime):
        return ensure_utc(value)

    @model_validator(mode="after")
    def validate_deadline_after_assigned_at(self):
        if self.deadline <= self.assignedAt:
            raise ValueError(ValidationErrors.DEADLINE_BEFORE_ASSIGNED_AT)
        return self


class TaskNoteDTO(BaseModel):
    content: str
    author: str
    createdAt: datetime


class ReminderDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    type: str
    message: str
    scheduledAt: datetime
    sent: bool
    sentAt: datetime | None = None


class TaskAssignmentDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    title: str
    description: str | None = None
    bookId: str
    bookEntryId: str
    assignedBy: str
    assignedTo: str
    assignedAt: datetime
    deadline: datetime
    completedAt: datetime | None = None
    status: str
    priority: str
    progress: int
    notes: List[TaskNoteDTO] = []
    reminders: List[ReminderDTO] = []
    requiresApproval: bool
    approvedBy: str | None = None
    approvedAt: datetime | None = None
    approvalNotes: str | None = None
    unit: str
    department: str
    tags: List[str] = []
    createdBy: str
    updatedBy: str | None = None
    createdAt: datetime
    updatedAt: datetime | None = None


class UpcomingReminderDTO(BaseModel):
    id: str
    taskId: str
    taskTitle: str
    bookTitle: Optional[str] = None
    message: str
    scheduledAt: datetime
    type: str


class TaskAssignmentStatsDTO(BaseModel):
    total: int
    byStatus: Dict[str, int]
    overdue: int
    completionRate: float


class OverdueSweepResultDTO(BaseModel):
    overdueCount: int
    notificationsSent: int
    details: List[Dict[str, Any]] = []
