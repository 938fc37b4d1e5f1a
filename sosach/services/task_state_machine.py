"""
Task assignment state machine.

    pending -> in_progress -> completed
    pending | in_progress -> overdue          (deadline passed)
    pending | in_progress | overdue -> completed | cancelled

completed and cancelled are terminal, and a completed task keeps progress at
100. Every write path (API handlers and the scheduler sweep) derives its
status patch from the functions below, so the deadline predicate lives in
exactly one place.
"""

from datetime import datetime
from typing import Any, Dict

from sosach.constants.messages import TaskStateErrors
from sosach.constants.task import (
    MAX_PROGRESS,
    MIN_PROGRESS,
    OVERDUE_CANDIDATE_STATUSES,
    TERMINAL_STATUSES,
    TaskStatus,
)
from sosach.exceptions.task_exceptions import TaskStateConflictException
from sosach.models.task_assignment import TaskAssignmentModel

ALLOWED_TRANSITIONS = {
    TaskStatus.PENDING.value: {TaskStatus.IN_PROGRESS.value, TaskStatus.COMPLETED.value, TaskStatus.CANCELLED.value},
    TaskStatus.IN_PROGRESS.value: {TaskStatus.COMPLETED.value, TaskStatus.CANCELLED.value},
    TaskStatus.OVERDUE.value: {TaskStatus.COMPLETED.value, TaskStatus.CANCELLED.value},
    TaskStatus.COMPLETED.value: set(),
    TaskStatus.CANCELLED.value: set(),
}


def clamp_progress(progress: int) -> int:
    return max(MIN_PROGRESS, min(MAX_PROGRESS, int(progress)))


def is_overdue(status: str, deadline: datetime, now: datetime) -> bool:
    return status in OVERDUE_CANDIDATE_STATUSES and deadline < now


def overdue_filter(now: datetime) -> Dict[str, Any]:
    """Mongo filter equivalent of `is_overdue`, used for sweeps and compare-and-swap updates."""
    return {"status": {"$in": OVERDUE_CANDIDATE_STATUSES}, "deadline": {"$lt": now}}


def _finalize(task: TaskAssignmentModel, patch: Dict[str, Any], now: datetime) -> Dict[str, Any]:
    status = patch.get("status", task.status)

    if is_overdue(status, task.deadline, now):
        status = TaskStatus.OVERDUE.value

    if status == TaskStatus.COMPLETED.value:
        patch["progress"] = MAX_PROGRESS
        if not task.completedAt:
            patch["completedAt"] = now

    patch["status"] = status
    patch["updatedAt"] = now
    return patch


def deadline_check(task: TaskAssignmentModel, now: datetime) -> Dict[str, Any]:
    """Patch for a plain write with no status intent: only the deadline rule applies."""
    return _finalize(task, {}, now)


def progress_transition(task: TaskAssignmentModel, progress: int, now: datetime) -> Dict[str, Any]:
    if task.status == TaskStatus.CANCELLED.value:
        raise TaskStateConflictException(TaskStateErrors.TERMINAL_STATUS.format(task.status))

    progress = clamp_progress(progress)
    if task.status == TaskStatus.COMPLETED.value and progress < MAX_PROGRESS:
        raise TaskStateConflictException(TaskStateErrors.COMPLETED_PROGRESS_LOCKED)
    patch: Dict[str, Any] = {"progress": progress}

    if progress == MAX_PROGRESS and task.status != TaskStatus.COMPLETED.value:
        patch["status"] = TaskStatus.COMPLETED.value
    elif progress > MIN_PROGRESS and task.status == TaskStatus.PENDING.value:
        patch["status"] = TaskStatus.IN_PROGRESS.value

    return _finalize(task, patch, now)


def status_transition(task: TaskAssignmentModel, target_status: str, now: datetime) -> Dict[str, Any]:
    if task.status in TERMINAL_STATUSES:
        raise TaskStateConflictException(TaskStateErrors.TERMINAL_STATUS.format(task.status))
    if target_status not in ALLOWED_TRANSITIONS[task.status]:
        raise TaskStateConflictException(TaskStateErrors.INVALID_TRANSITION.format(task.status, target_status))

    return _finalize(task, {"status": target_status}, now)
