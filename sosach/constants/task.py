from enum import Enum


class TaskStatus(Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


class TaskPriority(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class ReminderType(Enum):
    EMAIL = "email"
    NOTIFICATION = "notification"
    SMS = "sms"


# Statuses the deadline check is allowed to move to OVERDUE.
OVERDUE_CANDIDATE_STATUSES = [TaskStatus.PENDING.value, TaskStatus.IN_PROGRESS.value]

# No automatic transition ever leaves these.
TERMINAL_STATUSES = [TaskStatus.COMPLETED.value, TaskStatus.CANCELLED.value]

MIN_PROGRESS = 0
MAX_PROGRESS = 100

# Offsets before the deadline for the default reminder schedule, with the
# message template used for each.
AUTOMATIC_REMINDER_OFFSETS = [
    ({"hours": 24}, 'Nhắc nhở: Công việc "{0}" sẽ hết hạn trong 24 giờ'),
    ({"hours": 2}, 'Nhắc nhở khẩn cấp: Công việc "{0}" sẽ hết hạn trong 2 giờ'),
    ({"minutes": 30}, 'Nhắc nhở khẩn cấp: Công việc "{0}" sẽ hết hạn trong 30 phút'),
]

CONFIGURED_REMINDER_MESSAGE = 'Nhắc nhở: Công việc "{0}" sắp đến hạn'
