from enum import Enum


class NotificationType(Enum):
    REMINDER = "reminder"
    DEADLINE_WARNING = "deadline_warning"
    DEADLINE_MISSED = "deadline_missed"
    SUBMISSION = "submission"
    APPROVAL = "approval"
    REJECTION = "rejection"
    ESCALATION = "escalation"
    SYSTEM = "system"


class NotificationPriority(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class NotificationTitles:
    TASK_REMINDER = "Nhắc nhở công việc"
    TASK_OVERDUE = "Công việc quá hạn"


class NotificationMessages:
    TASK_OVERDUE_ASSIGNEE = 'Công việc "{0}" đã quá hạn. Vui lòng hoàn thành sớm nhất có thể.'
    TASK_OVERDUE_ASSIGNER = 'Công việc "{0}" được giao cho {1} đã quá hạn.'
