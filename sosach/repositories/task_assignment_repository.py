from datetime import datetime
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING, DESCENDING
from pymongo.collection import ReturnDocument

from sosach.constants.task import TaskStatus
from sosach.models.task_assignment import ReminderModel, TaskAssignmentModel, TaskNoteModel
from sosach.repositories.common.mongo_repository import MongoRepository
from sosach.services.task_state_machine import overdue_filter


class TaskAssignmentRepository(MongoRepository):
    collection_name = TaskAssignmentModel.collection_name

    @classmethod
    def create(cls, task_assignment: TaskAssignmentModel) -> TaskAssignmentModel:
        task_assignment.id = cls.insert(task_assignment.to_document())
        return task_assignment

    @classmethod
    def get_by_id(cls, task_id) -> Optional[TaskAssignmentModel]:
        try:
            doc = cls.find_by_id(task_id)
        except InvalidId:
            return None
        return TaskAssignmentModel(**doc) if doc else None

    @classmethod
    def list_by_filters(cls, filters: Dict[str, Any]) -> List[TaskAssignmentModel]:
        cursor = cls.get_collection().find(filters).sort("deadline", ASCENDING)
        return [TaskAssignmentModel(**doc) for doc in cursor]

    @classmethod
    def update_fields(cls, task_id, patch: Dict[str, Any]) -> Optional[TaskAssignmentModel]:
        """Apply a `$set` patch. Last write wins at document level."""
        doc = cls.get_collection().find_one_and_update(
            {"_id": cls.to_object_id(task_id)},
            {"$set": patch},
            return_document=ReturnDocument.AFTER,
        )
        return TaskAssignmentModel(**doc) if doc else None

    @classmethod
    def push_note(cls, task_id, note: TaskNoteModel, patch: Dict[str, Any]) -> Optional[TaskAssignmentModel]:
        doc = cls.get_collection().find_one_and_update(
            {"_id": cls.to_object_id(task_id)},
            {"$push": {"notes": note.model_dump()}, "$set": patch},
            return_document=ReturnDocument.AFTER,
        )
        return TaskAssignmentModel(**doc) if doc else None

    @classmethod
    def push_reminders(cls, task_id, reminders: List[ReminderModel]) -> bool:
        """Append reminders without touching existing entries."""
        if not reminders:
            return True
        result = cls.get_collection().update_one(
            {"_id": cls.to_object_id(task_id)},
            {"$push": {"reminders": {"$each": [reminder.model_dump(by_alias=True) for reminder in reminders]}}},
        )
        return result.matched_count == 1

    @classmethod
    def delete(cls, task_id) -> bool:
        result = cls.get_collection().delete_one({"_id": cls.to_object_id(task_id)})
        return result.deleted_count == 1

    @classmethod
    def find_with_due_reminders(cls, now: datetime) -> List[TaskAssignmentModel]:
        cursor = cls.get_collection().find(
            {"reminders": {"$elemMatch": {"sent": False, "scheduledAt": {"$lte": now}}}}
        )
        return [TaskAssignmentModel(**doc) for doc in cursor]

    @classmethod
    def claim_reminder(cls, task_id, reminder_id: ObjectId, now: datetime) -> bool:
        """
        Flip one reminder's `sent` flag. Conditional on `sent: false`, so exactly one
        caller wins even when sweeps overlap.
        """
        result = cls.get_collection().update_one(
            {
                "_id": cls.to_object_id(task_id),
                "reminders": {"$elemMatch": {"_id": reminder_id, "sent": False}},
            },
            {"$set": {"reminders.$.sent": True, "reminders.$.sentAt": now}},
        )
        return result.modified_count == 1

    @classmethod
    def find_overdue_candidates(cls, now: datetime) -> List[TaskAssignmentModel]:
        cursor = cls.get_collection().find(overdue_filter(now))
        return [TaskAssignmentModel(**doc) for doc in cursor]

    @classmethod
    def mark_overdue(cls, task_id, now: datetime) -> Optional[TaskAssignmentModel]:
        """Compare-and-swap to OVERDUE. Returns None when another writer already moved the task."""
        doc = cls.get_collection().find_one_and_update(
            {"_id": cls.to_object_id(task_id), **overdue_filter(now)},
            {"$set": {"status": TaskStatus.OVERDUE.value, "updatedAt": now}},
            return_document=ReturnDocument.AFTER,
        )
        return TaskAssignmentModel(**doc) if doc else None

    @classmethod
    def find_with_upcoming_reminders(cls, user_id, now: datetime) -> List[TaskAssignmentModel]:
        cursor = cls.get_collection().find(
            {
                "assignedTo": cls.to_object_id(user_id),
                "reminders": {"$elemMatch": {"sent": False, "scheduledAt": {"$gte": now}}},
            }
        )
        return [TaskAssignmentModel(**doc) for doc in cursor]

    @classmethod
    def count_by_status(cls, filters: Dict[str, Any]) -> Dict[str, int]:
        pipeline = [
            {"$match": filters},
            {"$group": {"_id": "$status", "count": {"$sum": 1}}},
            {"$sort": {"count": DESCENDING}},
        ]
        return {row["_id"]: row["count"] for row in cls.get_collection().aggregate(pipeline)}
