from datetime import timedelta
from unittest import TestCase
from unittest.mock import patch

from bson import ObjectId

from sosach.constants.task import TaskStatus
from sosach.dto.task_assignment_dto import CreateTaskAssignmentDTO
from sosach.exceptions.task_exceptions import (
    TaskAssignmentNotFoundException,
    TaskPermissionDeniedException,
    TaskReferenceNotFoundException,
    TaskStateConflictException,
)
from sosach.models.task_assignment import TaskAssignmentModel
from sosach.models.user import UserModel
from sosach.services.task_assignment_service import TaskAssignmentService
from sosach.tests.fixtures.task_assignment import NOW, task_assignment_doc, task_assignment_model
from sosach.tests.fixtures.user import admin_actor, commander_actor, staff_actor, users_db_data

SERVICE = "sosach.services.task_assignment_service"


def apply_patch(task: TaskAssignmentModel):
    """update_fields stand-in that returns the task with the patch applied."""

    def update_fields(task_id, patch):
        return task.model_copy(update=patch)

    return update_fields


class CreateTaskAssignmentTests(TestCase):
    def setUp(self):
        self.dto = CreateTaskAssignmentDTO(
            title="Kiểm tra sổ trực ban",
            bookId=str(ObjectId()),
            bookEntryId=str(ObjectId()),
            assignedTo=str(staff_actor["_id"]),
            assignedAt=NOW,
            deadline=NOW + timedelta(hours=48),
        )
        patchers = {
            "book": patch(f"{SERVICE}.BookRepository.find_by_id", return_value={"title": "Sổ trực ban"}),
            "entry": patch(f"{SERVICE}.BookEntryRepository.find_by_id", return_value={"_id": ObjectId()}),
            "assignee": patch(f"{SERVICE}.UserRepository.get_by_id", return_value=UserModel(**users_db_data[2])),
            "create": patch(f"{SERVICE}.TaskAssignmentRepository.create"),
            "push": patch(f"{SERVICE}.TaskAssignmentRepository.push_reminders", return_value=True),
            "auto": patch(f"{SERVICE}.ReminderService.create_automatic_reminders"),
        }
        self.mocks = {name: patcher.start() for name, patcher in patchers.items()}
        for patcher in patchers.values():
            self.addCleanup(patcher.stop)

        def create(task):
            task.id = ObjectId()
            return task

        self.mocks["create"].side_effect = create
        self.mocks["auto"].side_effect = lambda task_id, now: []

    def test_create_with_automatic_reminders(self):
        response = TaskAssignmentService.create_task_assignment(self.dto, commander_actor, NOW)

        created = self.mocks["create"].call_args.args[0]
        self.assertEqual(created.assignedBy, commander_actor["_id"])
        self.assertEqual(created.createdBy, commander_actor["_id"])
        self.assertEqual(created.unit, commander_actor["unitId"])
        self.assertEqual(created.department, commander_actor["departmentId"])
        self.assertEqual(created.status, TaskStatus.PENDING.value)
        self.mocks["auto"].assert_called_once_with(created.id, NOW)
        self.mocks["push"].assert_not_called()
        self.assertEqual(response.data.title, "Kiểm tra sổ trực ban")
        self.assertEqual(response.data.assignedTo, str(staff_actor["_id"]))

    def test_create_with_configured_reminders(self):
        dto = CreateTaskAssignmentDTO(
            **{
                **self.dto.model_dump(),
                "reminderSettings": {"enabled": True, "times": [{"hours": 12}, {"hours": 1}]},
            }
        )

        response = TaskAssignmentService.create_task_assignment(dto, admin_actor, NOW)

        self.mocks["auto"].assert_not_called()
        _, reminders = self.mocks["push"].call_args.args
        self.assertEqual(
            [reminder.scheduledAt for reminder in reminders],
            [dto.deadline - timedelta(hours=12), dto.deadline - timedelta(hours=1)],
        )
        self.assertEqual(len(response.data.reminders), 2)

    def test_staff_cannot_create(self):
        with self.assertRaises(TaskPermissionDeniedException):
            TaskAssignmentService.create_task_assignment(self.dto, staff_actor, NOW)
        self.mocks["create"].assert_not_called()

    def test_missing_assignee_is_rejected(self):
        self.mocks["assignee"].return_value = None

        with self.assertRaises(TaskReferenceNotFoundException):
            TaskAssignmentService.create_task_assignment(self.dto, commander_actor, NOW)
        self.mocks["create"].assert_not_called()

    def test_missing_book_is_rejected(self):
        self.mocks["book"].return_value = None

        with self.assertRaises(TaskReferenceNotFoundException):
            TaskAssignmentService.create_task_assignment(self.dto, commander_actor, NOW)

    def test_explicit_unit_overrides_actor_unit(self):
        unit = str(ObjectId())
        dto = self.dto.model_copy(update={"unit": unit})

        TaskAssignmentService.create_task_assignment(dto, commander_actor, NOW)

        self.assertEqual(self.mocks["create"].call_args.args[0].unit, ObjectId(unit))

    def test_automatic_reminder_failure_does_not_fail_creation(self):
        self.mocks["auto"].side_effect = Exception("push failed")

        with self.assertLogs(SERVICE, level="WARNING"):
            response = TaskAssignmentService.create_task_assignment(self.dto, commander_actor, NOW)

        self.assertEqual(response.data.reminders, [])


class UpdateTaskAssignmentTests(TestCase):
    @patch(f"{SERVICE}.TaskAssignmentRepository.update_fields")
    @patch(f"{SERVICE}.TaskAssignmentRepository.get_by_id")
    def test_assignee_completes_task_with_full_progress(self, mock_get, mock_update):
        task = task_assignment_model(status="in_progress", progress=40)
        mock_get.return_value = task
        mock_update.side_effect = apply_patch(task)

        result = TaskAssignmentService.update_progress(str(task.id), 100, staff_actor, NOW)

        task_id, patch_fields = mock_update.call_args.args
        self.assertEqual(task_id, task.id)
        self.assertEqual(patch_fields["status"], TaskStatus.COMPLETED.value)
        self.assertEqual(patch_fields["completedAt"], NOW)
        self.assertEqual(patch_fields["updatedBy"], staff_actor["_id"])
        self.assertEqual(result.status, TaskStatus.COMPLETED.value)
        self.assertEqual(result.progress, 100)
        self.assertEqual(result.completedAt, NOW)

    @patch(f"{SERVICE}.TaskAssignmentRepository.update_fields")
    @patch(f"{SERVICE}.TaskAssignmentRepository.get_by_id")
    def test_only_assignee_updates_progress(self, mock_get, mock_update):
        mock_get.return_value = task_assignment_model()

        with self.assertRaises(TaskPermissionDeniedException):
            TaskAssignmentService.update_progress("id", 50, commander_actor, NOW)
        mock_update.assert_not_called()

    @patch(f"{SERVICE}.TaskAssignmentRepository.get_by_id")
    def test_missing_task(self, mock_get):
        mock_get.return_value = None

        with self.assertRaises(TaskAssignmentNotFoundException):
            TaskAssignmentService.update_progress(str(ObjectId()), 50, staff_actor, NOW)

    @patch(f"{SERVICE}.TaskAssignmentRepository.get_by_id")
    def test_outsider_cannot_read_task(self, mock_get):
        mock_get.return_value = task_assignment_model(unit=ObjectId())
        outsider = {**staff_actor, "_id": ObjectId(), "unitId": ObjectId()}

        with self.assertRaises(TaskPermissionDeniedException):
            TaskAssignmentService.get_task_assignment("id", outsider)

    @patch(f"{SERVICE}.TaskAssignmentRepository.get_by_id")
    def test_same_unit_can_read_task(self, mock_get):
        task = task_assignment_model()
        mock_get.return_value = task
        colleague = {**staff_actor, "_id": ObjectId()}

        self.assertEqual(TaskAssignmentService.get_task_assignment(str(task.id), colleague).id, str(task.id))

    @patch(f"{SERVICE}.TaskAssignmentRepository.update_fields")
    @patch(f"{SERVICE}.TaskAssignmentRepository.get_by_id")
    def test_assignee_cannot_cancel(self, mock_get, mock_update):
        mock_get.return_value = task_assignment_model(status="in_progress")

        with self.assertRaises(TaskPermissionDeniedException):
            TaskAssignmentService.update_status("id", TaskStatus.CANCELLED.value, staff_actor, NOW)
        mock_update.assert_not_called()

    @patch(f"{SERVICE}.TaskAssignmentRepository.update_fields")
    @patch(f"{SERVICE}.TaskAssignmentRepository.get_by_id")
    def test_assigner_cancels(self, mock_get, mock_update):
        task = task_assignment_model(status="in_progress")
        mock_get.return_value = task
        mock_update.side_effect = apply_patch(task)

        result = TaskAssignmentService.update_status(str(task.id), TaskStatus.CANCELLED.value, commander_actor, NOW)

        self.assertEqual(result.status, TaskStatus.CANCELLED.value)

    @patch(f"{SERVICE}.TaskAssignmentRepository.get_by_id")
    def test_completed_task_cannot_restart(self, mock_get):
        mock_get.return_value = task_assignment_model(status="completed", progress=100)

        with self.assertRaises(TaskStateConflictException):
            TaskAssignmentService.update_status("id", TaskStatus.IN_PROGRESS.value, staff_actor, NOW)

    @patch(f"{SERVICE}.TaskAssignmentRepository.push_note")
    @patch(f"{SERVICE}.TaskAssignmentRepository.get_by_id")
    def test_add_note_after_deadline_marks_overdue(self, mock_get, mock_push_note):
        task = task_assignment_model(deadline=NOW - timedelta(hours=2))
        mock_get.return_value = task
        mock_push_note.side_effect = lambda task_id, note, patch: task.model_copy(
            update={**patch, "notes": [note]}
        )

        result = TaskAssignmentService.add_note(str(task.id), "Đã liên hệ", staff_actor, NOW)

        _, note, patch_fields = mock_push_note.call_args.args
        self.assertEqual(note.content, "Đã liên hệ")
        self.assertEqual(note.author, staff_actor["_id"])
        self.assertEqual(patch_fields["status"], TaskStatus.OVERDUE.value)
        self.assertEqual(result.notes[0].content, "Đã liên hệ")

    @patch(f"{SERVICE}.TaskAssignmentRepository.update_fields")
    @patch(f"{SERVICE}.TaskAssignmentRepository.get_by_id")
    def test_approve(self, mock_get, mock_update):
        task = task_assignment_model(requiresApproval=True, status="completed", progress=100)
        mock_get.return_value = task
        mock_update.side_effect = apply_patch(task)

        result = TaskAssignmentService.approve(str(task.id), "Đạt", commander_actor, NOW)

        self.assertEqual(result.approvedBy, str(commander_actor["_id"]))
        self.assertEqual(result.approvedAt, NOW)
        self.assertEqual(result.approvalNotes, "Đạt")

    @patch(f"{SERVICE}.TaskAssignmentRepository.get_by_id")
    def test_approve_without_approval_flag(self, mock_get):
        mock_get.return_value = task_assignment_model(requiresApproval=False)

        with self.assertRaises(TaskStateConflictException):
            TaskAssignmentService.approve("id", None, commander_actor, NOW)

    @patch(f"{SERVICE}.TaskAssignmentRepository.get_by_id")
    def test_staff_cannot_approve(self, mock_get):
        mock_get.return_value = task_assignment_model(requiresApproval=True)

        with self.assertRaises(TaskPermissionDeniedException):
            TaskAssignmentService.approve("id", None, staff_actor, NOW)


@patch(f"{SERVICE}.TaskAssignmentRepository.update_fields")
@patch(f"{SERVICE}.TaskAssignmentRepository.get_by_id")
class EditTaskAssignmentTests(TestCase):
    def test_assigner_edits_descriptive_fields(self, mock_get, mock_update):
        task = task_assignment_model()
        mock_get.return_value = task
        mock_update.side_effect = apply_patch(task)

        result = TaskAssignmentService.update_task_assignment(
            str(task.id),
            {"title": "Ghi sổ giao ca", "priority": "urgent", "requiresApproval": True, "tags": ["ca-dem"]},
            commander_actor,
            NOW,
        )

        _, patch_fields = mock_update.call_args.args
        self.assertEqual(patch_fields["title"], "Ghi sổ giao ca")
        self.assertEqual(patch_fields["status"], TaskStatus.PENDING.value)
        self.assertEqual(patch_fields["updatedAt"], NOW)
        self.assertEqual(patch_fields["updatedBy"], commander_actor["_id"])
        self.assertEqual(result.priority, "urgent")
        self.assertTrue(result.requiresApproval)
        self.assertEqual(result.tags, ["ca-dem"])

    def test_deadline_and_status_are_not_editable(self, mock_get, mock_update):
        task = task_assignment_model()
        mock_get.return_value = task
        mock_update.side_effect = apply_patch(task)

        TaskAssignmentService.update_task_assignment(
            str(task.id),
            {"title": "Mới", "deadline": NOW + timedelta(days=30), "status": "completed"},
            admin_actor,
            NOW,
        )

        _, patch_fields = mock_update.call_args.args
        self.assertNotIn("deadline", patch_fields)
        self.assertEqual(patch_fields["status"], TaskStatus.PENDING.value)

    def test_edit_after_deadline_marks_overdue(self, mock_get, mock_update):
        task = task_assignment_model(status="in_progress", deadline=NOW - timedelta(hours=1))
        mock_get.return_value = task
        mock_update.side_effect = apply_patch(task)

        result = TaskAssignmentService.update_task_assignment(str(task.id), {"title": "Mới"}, admin_actor, NOW)

        self.assertEqual(result.status, TaskStatus.OVERDUE.value)

    def test_commander_of_other_unit_cannot_edit(self, mock_get, mock_update):
        mock_get.return_value = task_assignment_model(assignedBy=ObjectId(), unit=ObjectId())

        with self.assertRaises(TaskPermissionDeniedException):
            TaskAssignmentService.update_task_assignment("id", {"title": "Mới"}, commander_actor, NOW)
        mock_update.assert_not_called()

    def test_commander_of_same_unit_edits(self, mock_get, mock_update):
        task = task_assignment_model(assignedBy=ObjectId())
        mock_get.return_value = task
        mock_update.side_effect = apply_patch(task)

        TaskAssignmentService.update_task_assignment(str(task.id), {"title": "Mới"}, commander_actor, NOW)

        mock_update.assert_called_once()

    def test_assignee_cannot_edit(self, mock_get, mock_update):
        mock_get.return_value = task_assignment_model()

        with self.assertRaises(TaskPermissionDeniedException):
            TaskAssignmentService.update_task_assignment("id", {"title": "Mới"}, staff_actor, NOW)
        mock_update.assert_not_called()

    def test_missing_task(self, mock_get, mock_update):
        mock_get.return_value = None

        with self.assertRaises(TaskAssignmentNotFoundException):
            TaskAssignmentService.update_task_assignment("id", {"title": "Mới"}, admin_actor, NOW)


class DeleteAndQueryTaskAssignmentTests(TestCase):
    @patch(f"{SERVICE}.TaskAssignmentRepository.delete")
    @patch(f"{SERVICE}.TaskAssignmentRepository.get_by_id")
    def test_creator_deletes(self, mock_get, mock_delete):
        task = task_assignment_model()
        mock_get.return_value = task
        mock_delete.return_value = True

        TaskAssignmentService.delete_task_assignment(str(task.id), commander_actor)

        mock_delete.assert_called_once_with(task.id)

    @patch(f"{SERVICE}.TaskAssignmentRepository.delete")
    @patch(f"{SERVICE}.TaskAssignmentRepository.get_by_id")
    def test_assignee_cannot_delete(self, mock_get, mock_delete):
        mock_get.return_value = task_assignment_model()

        with self.assertRaises(TaskPermissionDeniedException):
            TaskAssignmentService.delete_task_assignment("id", staff_actor)
        mock_delete.assert_not_called()

    @patch(f"{SERVICE}.TaskAssignmentRepository.list_by_filters")
    def test_overdue_listing_is_scoped(self, mock_list):
        mock_list.return_value = [
            TaskAssignmentModel(**task_assignment_doc(status="overdue", deadline=NOW - timedelta(days=1)))
        ]

        admin_tasks = TaskAssignmentService.get_overdue_tasks(admin_actor, NOW)
        admin_filters = mock_list.call_args.args[0]
        TaskAssignmentService.get_overdue_tasks(commander_actor, NOW)
        commander_filters = mock_list.call_args.args[0]
        TaskAssignmentService.get_overdue_tasks(staff_actor, NOW)
        staff_filters = mock_list.call_args.args[0]

        self.assertEqual(len(admin_tasks), 1)
        self.assertEqual(set(admin_filters), {"$or"})
        self.assertEqual(commander_filters["unit"], commander_actor["unitId"])
        self.assertEqual(staff_filters["assignedTo"], staff_actor["_id"])
        self.assertEqual(
            staff_filters["$or"],
            [
                {"status": TaskStatus.OVERDUE.value},
                {"status": {"$in": ["pending", "in_progress"]}, "deadline": {"$lt": NOW}},
            ],
        )

    @patch(f"{SERVICE}.TaskAssignmentRepository.count_by_status")
    def test_stats(self, mock_count):
        mock_count.return_value = {"completed": 3, "pending": 4, "overdue": 1}

        stats = TaskAssignmentService.get_stats(staff_actor)

        mock_count.assert_called_once_with({"assignedTo": staff_actor["_id"]})
        self.assertEqual(stats.total, 8)
        self.assertEqual(stats.overdue, 1)
        self.assertEqual(stats.completionRate, 37.5)

    @patch(f"{SERVICE}.TaskAssignmentRepository.count_by_status")
    def test_stats_without_tasks(self, mock_count):
        mock_count.return_value = {}

        stats = TaskAssignmentService.get_stats(admin_actor)

        self.assertEqual(stats.total, 0)
        self.assertEqual(stats.completionRate, 0.0)

    @patch(f"{SERVICE}.TaskAssignmentRepository.list_by_filters")
    def test_listing_applies_filters_and_limit(self, mock_list):
        mock_list.return_value = [task_assignment_model(), task_assignment_model(), task_assignment_model()]

        tasks = TaskAssignmentService.get_task_assignments(commander_actor, status="pending", priority="high", limit=2)

        mock_list.assert_called_once_with({"unit": commander_actor["unitId"], "status": "pending", "priority": "high"})
        self.assertEqual(len(tasks), 2)

    @patch(f"{SERVICE}.TaskAssignmentRepository.list_by_filters")
    def test_commander_without_unit_sees_own_tasks(self, mock_list):
        mock_list.return_value = []
        actor = {**commander_actor, "unitId": None}

        TaskAssignmentService.get_task_assignments(actor)

        mock_list.assert_called_once_with({"assignedTo": commander_actor["_id"]})

    def test_only_managers_run_overdue_check(self):
        TaskAssignmentService.ensure_can_run_overdue_check(admin_actor)
        TaskAssignmentService.ensure_can_run_overdue_check(commander_actor)
        with self.assertRaises(TaskPermissionDeniedException):
            TaskAssignmentService.ensure_can_run_overdue_check(staff_actor)
