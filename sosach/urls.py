from django.urls import path
from sosach.views.health import HealthView
from sosach.views.task_assignment import (
    CheckOverdueView,
    OverdueTaskAssignmentsView,
    TaskAssignmentApproveView,
    TaskAssignmentDetailView,
    TaskAssignmentListView,
    TaskAssignmentNotesView,
    TaskAssignmentProgressView,
    TaskAssignmentRemindersView,
    TaskAssignmentStatsView,
    TaskAssignmentStatusView,
    UpcomingRemindersView,
)
from sosach.views.audit_log import AuditLogListView, AuditLogStatsView, UserAuditActivityView
from sosach.views.notification import (
    NotificationDetailView,
    NotificationListView,
    NotificationReadAllView,
    NotificationReadView,
)

urlpatterns = [
    path("health", HealthView.as_view(), name="health"),
    path("task-assignments", TaskAssignmentListView.as_view(), name="task_assignments"),
    path("task-assignments/overdue", OverdueTaskAssignmentsView.as_view(), name="task_assignments_overdue"),
    path("task-assignments/stats", TaskAssignmentStatsView.as_view(), name="task_assignments_stats"),
    path("task-assignments/check-overdue", CheckOverdueView.as_view(), name="task_assignments_check_overdue"),
    path("task-assignments/reminders/upcoming", UpcomingRemindersView.as_view(), name="upcoming_reminders"),
    path("task-assignments/<str:id>", TaskAssignmentDetailView.as_view(), name="task_assignment_detail"),
    path("task-assignments/<str:id>/progress", TaskAssignmentProgressView.as_view(), name="task_assignment_progress"),
    path("task-assignments/<str:id>/status", TaskAssignmentStatusView.as_view(), name="task_assignment_status"),
    path("task-assignments/<str:id>/notes", TaskAssignmentNotesView.as_view(), name="task_assignment_notes"),
    path("task-assignments/<str:id>/approve", TaskAssignmentApproveView.as_view(), name="task_assignment_approve"),
    path("task-assignments/<str:id>/reminders", TaskAssignmentRemindersView.as_view(), name="task_assignment_reminders"),
    path("audit-logs", AuditLogListView.as_view(), name="audit_logs"),
    path("audit-logs/stats", AuditLogStatsView.as_view(), name="audit_log_stats"),
    path("audit-logs/user/<str:userId>", UserAuditActivityView.as_view(), name="user_audit_activity"),
    path("notifications", NotificationListView.as_view(), name="notifications"),
    path("notifications/read-all", NotificationReadAllView.as_view(), name="notifications_read_all"),
    path("notifications/<str:id>/read", NotificationReadView.as_view(), name="notification_read"),
    path("notifications/<str:id>", NotificationDetailView.as_view(), name="notification_detail"),
]
