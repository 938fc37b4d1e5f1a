import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from sosach.constants.messages import ApiErrors, PermissionErrors, TaskStateErrors
from sosach.constants.role import TASK_MANAGER_ROLES, UserRole
from sosach.constants.task import TaskStatus
from sosach.dto.responses.create_task_assignment_response import CreateTaskAssignmentResponse
from sosach.dto.task_assignment_dto import (
    CreateTaskAssignmentDTO,
    ReminderDTO,
    TaskAssignmentDTO,
    TaskAssignmentStatsDTO,
    TaskNoteDTO,
)
from sosach.exceptions.task_exceptions import (
    TaskAssignmentNotFoundException,
    TaskPermissionDeniedException,
    TaskReferenceNotFoundException,
    TaskStateConflictException,
)
from sosach.models.task_assignment import TaskAssignmentModel, TaskNoteModel
from sosach.repositories.reference_repository import BookEntryRepository, BookRepository
from sosach.repositories.task_assignment_repository import TaskAssignmentRepository
from sosach.repositories.user_repository import UserRepository
from sosach.services.reminder_service import ReminderService, build_configured_reminders
from sosach.services.task_state_machine import (
    deadline_check,
    overdue_filter,
    progress_transition,
    status_transition,
)

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("title", "description", "priority", "requiresApproval", "tags")


class TaskAssignmentService:
    @classmethod
    def create_task_assignment(
        cls, dto: CreateTaskAssignmentDTO, actor: Dict[str, Any], now: datetime | None = None
    ) -> CreateTaskAssignmentResponse:
        now = now or datetime.now(timezone.utc)
        if actor["role"] not in TASK_MANAGER_ROLES:
            raise TaskPermissionDeniedException(PermissionErrors.CANNOT_CREATE_TASK)

        if not BookRepository.find_by_id(dto.bookId):
            raise TaskReferenceNotFoundException(ApiErrors.BOOK_NOT_FOUND)
        if not BookEntryRepository.find_by_id(dto.bookEntryId):
            raise TaskReferenceNotFoundException(ApiErrors.BOOK_ENTRY_NOT_FOUND)
        if not UserRepository.get_by_id(dto.assignedTo):
            raise TaskReferenceNotFoundException(ApiErrors.ASSIGNEE_NOT_FOUND)

        task = TaskAssignmentModel(
            title=dto.title,
            description=dto.description,
            bookId=dto.bookId,
            bookEntryId=dto.bookEntryId,
            assignedBy=actor["_id"],
            assignedTo=dto.assignedTo,
            assignedAt=dto.assignedAt,
            deadline=dto.deadline,
            priority=dto.priority,
            requiresApproval=dto.requiresApproval,
            unit=dto.unit or actor.get("unitId"),
            department=dto.department or actor.get("departmentId"),
            tags=dto.tags,
            createdBy=actor["_id"],
            createdAt=now,
        )
        task = task.model_copy(update=deadline_check(task, now))
        task = TaskAssignmentRepository.create(task)

        settings = dto.reminderSettings
        if settings and settings.enabled:
            reminders = build_configured_reminders(task, [time.hours for time in settings.times], now)
            TaskAssignmentRepository.push_reminders(task.id, reminders)
            task.reminders = reminders
        else:
            try:
                task.reminders = ReminderService.create_automatic_reminders(task.id, now)
            except Exception as e:
                logger.warning(f"Could not create automatic reminders for task {task.id}: {e}")

        return CreateTaskAssignmentResponse(data=cls.prepare_task_assignment_dto(task))

    @classmethod
    def get_task_assignment(cls, task_id: str, actor: Dict[str, Any]) -> TaskAssignmentDTO:
        task = cls._get_accessible_task(task_id, actor)
        return cls.prepare_task_assignment_dto(task)

    @classmethod
    def get_task_assignments(
        cls, actor: Dict[str, Any], status: str | None = None, priority: str | None = None, limit: int = 50
    ) -> List[TaskAssignmentDTO]:
        filters = cls._scope_filter(actor)
        if status:
            filters["status"] = status
        if priority:
            filters["priority"] = priority
        tasks = TaskAssignmentRepository.list_by_filters(filters)[:limit]
        return [cls.prepare_task_assignment_dto(task) for task in tasks]

    @classmethod
    def update_progress(
        cls, task_id: str, progress: int, actor: Dict[str, Any], now: datetime | None = None
    ) -> TaskAssignmentDTO:
        now = now or datetime.now(timezone.utc)
        task = cls._get_accessible_task(task_id, actor)
        if str(task.assignedTo) != str(actor["_id"]):
            raise TaskPermissionDeniedException(PermissionErrors.CANNOT_UPDATE_PROGRESS)

        patch = progress_transition(task, progress, now)
        patch["updatedBy"] = actor["_id"]
        return cls._apply(task, patch)

    @classmethod
    def update_task_assignment(
        cls, task_id: str, fields: Dict[str, Any], actor: Dict[str, Any], now: datetime | None = None
    ) -> TaskAssignmentDTO:
        """Edit the descriptive fields. Deadline and status have their own rules and are not editable here."""
        now = now or datetime.now(timezone.utc)
        task = TaskAssignmentRepository.get_by_id(task_id)
        if not task:
            raise TaskAssignmentNotFoundException(task_id)
        if not cls.can_edit(task, actor):
            raise TaskPermissionDeniedException(PermissionErrors.CANNOT_UPDATE_TASK)

        patch = {field: value for field, value in fields.items() if field in EDITABLE_FIELDS}
        patch.update(deadline_check(task, now))
        patch["updatedBy"] = actor["_id"]
        return cls._apply(task, patch)

    @classmethod
    def update_status(
        cls, task_id: str, target_status: str, actor: Dict[str, Any], now: datetime | None = None
    ) -> TaskAssignmentDTO:
        now = now or datetime.now(timezone.utc)
        task = cls._get_accessible_task(task_id, actor)
        if target_status == TaskStatus.CANCELLED.value and not (
            actor["role"] == UserRole.ADMIN.value or str(task.assignedBy) == str(actor["_id"])
        ):
            raise TaskPermissionDeniedException(PermissionErrors.CANNOT_CANCEL_TASK)

        patch = status_transition(task, target_status, now)
        patch["updatedBy"] = actor["_id"]
        return cls._apply(task, patch)

    @classmethod
    def add_note(
        cls, task_id: str, content: str, actor: Dict[str, Any], now: datetime | None = None
    ) -> TaskAssignmentDTO:
        now = now or datetime.now(timezone.utc)
        task = cls._get_accessible_task(task_id, actor)

        note = TaskNoteModel(content=content, author=actor["_id"], createdAt=now)
        patch = deadline_check(task, now)
        patch["updatedBy"] = actor["_id"]
        updated = TaskAssignmentRepository.push_note(task.id, note, patch)
        if not updated:
            raise TaskAssignmentNotFoundException(task_id)
        return cls.prepare_task_assignment_dto(updated)

    @classmethod
    def approve(
        cls, task_id: str, approval_notes: str | None, actor: Dict[str, Any], now: datetime | None = None
    ) -> TaskAssignmentDTO:
        now = now or datetime.now(timezone.utc)
        task = TaskAssignmentRepository.get_by_id(task_id)
        if not task:
            raise TaskAssignmentNotFoundException(task_id)
        if not task.requiresApproval:
            raise TaskStateConflictException(TaskStateErrors.APPROVAL_NOT_REQUIRED)
        if actor["role"] not in TASK_MANAGER_ROLES:
            raise TaskPermissionDeniedException(PermissionErrors.CANNOT_APPROVE)

        patch = deadline_check(task, now)
        patch.update(
            {"approvedBy": actor["_id"], "approvedAt": now, "approvalNotes": approval_notes, "updatedBy": actor["_id"]}
        )
        return cls._apply(task, patch)

    @classmethod
    def delete_task_assignment(cls, task_id: str, actor: Dict[str, Any]) -> None:
        task = cls._get_accessible_task(task_id, actor)
        if actor["role"] != UserRole.ADMIN.value and str(task.createdBy) != str(actor["_id"]):
            raise TaskPermissionDeniedException(PermissionErrors.CANNOT_DELETE_TASK)

        if not TaskAssignmentRepository.delete(task.id):
            raise TaskAssignmentNotFoundException(task_id)

    @classmethod
    def get_overdue_tasks(cls, actor: Dict[str, Any], now: datetime | None = None) -> List[TaskAssignmentDTO]:
        now = now or datetime.now(timezone.utc)
        filters = cls._scope_filter(actor)
        filters["$or"] = [{"status": TaskStatus.OVERDUE.value}, overdue_filter(now)]
        return [cls.prepare_task_assignment_dto(task) for task in TaskAssignmentRepository.list_by_filters(filters)]

    @classmethod
    def get_stats(cls, actor: Dict[str, Any]) -> TaskAssignmentStatsDTO:
        by_status = TaskAssignmentRepository.count_by_status(cls._scope_filter(actor))
        total = sum(by_status.values())
        completed = by_status.get(TaskStatus.COMPLETED.value, 0)
        return TaskAssignmentStatsDTO(
            total=total,
            byStatus=by_status,
            overdue=by_status.get(TaskStatus.OVERDUE.value, 0),
            completionRate=round(completed / total * 100, 2) if total else 0.0,
        )

    @classmethod
    def ensure_can_run_overdue_check(cls, actor: Dict[str, Any]) -> None:
        if actor["role"] not in TASK_MANAGER_ROLES:
            raise TaskPermissionDeniedException(PermissionErrors.CANNOT_RUN_OVERDUE_CHECK)

    @classmethod
    def _get_accessible_task(cls, task_id: str, actor: Dict[str, Any]) -> TaskAssignmentModel:
        task = TaskAssignmentRepository.get_by_id(task_id)
        if not task:
            raise TaskAssignmentNotFoundException(task_id)
        if not cls.can_access(task, actor):
            raise TaskPermissionDeniedException(PermissionErrors.CANNOT_ACCESS_TASK)
        return task

    @classmethod
    def can_access(cls, task: TaskAssignmentModel, actor: Dict[str, Any]) -> bool:
        """Admins see everything; others need to be the assignee, the assigner, or in the task's unit."""
        if actor["role"] == UserRole.ADMIN.value:
            return True
        actor_id = str(actor["_id"])
        return (
            str(task.assignedTo) == actor_id
            or str(task.assignedBy) == actor_id
            or (actor.get("unitId") is not None and str(task.unit) == str(actor["unitId"]))
        )

    @classmethod
    def can_edit(cls, task: TaskAssignmentModel, actor: Dict[str, Any]) -> bool:
        if actor["role"] == UserRole.ADMIN.value or str(task.assignedBy) == str(actor["_id"]):
            return True
        return (
            actor["role"] == UserRole.COMMANDER.value
            and actor.get("unitId") is not None
            and str(task.unit) == str(actor["unitId"])
        )

    @classmethod
    def _scope_filter(cls, actor: Dict[str, Any]) -> Dict[str, Any]:
        if actor["role"] == UserRole.ADMIN.value:
            return {}
        if actor["role"] == UserRole.COMMANDER.value and actor.get("unitId") is not None:
            return {"unit": actor["unitId"]}
        # Commanders without a unit only see their own tasks.
        return {"assignedTo": TaskAssignmentRepository.to_object_id(actor["_id"])}

    @classmethod
    def _apply(cls, task: TaskAssignmentModel, patch: Dict[str, Any]) -> TaskAssignmentDTO:
        updated = TaskAssignmentRepository.update_fields(task.id, patch)
        if not updated:
            raise TaskAssignmentNotFoundException(str(task.id))
        return cls.prepare_task_assignment_dto(updated)

    @classmethod
    def prepare_task_assignment_dto(cls, task: TaskAssignmentModel) -> TaskAssignmentDTO:
        def optional_str(value):
            return str(value) if value is not None else None

        return TaskAssignmentDTO(
            _id=str(task.id),
            title=task.title,
            description=task.description,
            bookId=str(task.bookId),
            bookEntryId=str(task.bookEntryId),
            assignedBy=str(task.assignedBy),
            assignedTo=str(task.assignedTo),
            assignedAt=task.assignedAt,
            deadline=task.deadline,
            completedAt=task.completedAt,
            status=task.status,
            priority=task.priority,
            progress=task.progress,
            notes=[
                TaskNoteDTO(content=note.content, author=str(note.author), createdAt=note.createdAt)
                for note in task.notes
            ],
            reminders=[
                ReminderDTO(
                    _id=str(reminder.id),
                    type=reminder.type,
                    message=reminder.message,
                    scheduledAt=reminder.scheduledAt,
                    sent=reminder.sent,
                    sentAt=reminder.sentAt,
                )
                for reminder in task.reminders
            ],
            requiresApproval=task.requiresApproval,
            approvedBy=optional_str(task.approvedBy),
            approvedAt=task.approvedAt,
            approvalNotes=task.approvalNotes,
            unit=str(task.unit),
            department=str(task.department),
            tags=task.tags,
            createdBy=str(task.createdBy),
            updatedBy=optional_str(task.updatedBy),
            createdAt=task.createdAt,
            updatedAt=task.updatedAt,
        )
