from typing import Dict, Type

from sosach.constants.audit import AuditResource
from sosach.repositories.common.mongo_repository import MongoRepository
from sosach.repositories.notification_repository import NotificationRepository
from sosach.repositories.reference_repository import (
    BookEntryRepository,
    BookRepository,
    DepartmentRepository,
    PositionRepository,
    RankRepository,
    UnitRepository,
)
from sosach.repositories.task_assignment_repository import TaskAssignmentRepository
from sosach.repositories.user_repository import UserRepository


def build_resource_stores() -> Dict[AuditResource, Type[MongoRepository]]:
    """Resource kinds whose stored state can be snapshotted. AUTH, SYSTEM and REPORT have no store."""
    return {
        AuditResource.USER: UserRepository,
        AuditResource.DEPARTMENT: DepartmentRepository,
        AuditResource.UNIT: UnitRepository,
        AuditResource.RANK: RankRepository,
        AuditResource.POSITION: PositionRepository,
        AuditResource.BOOK: BookRepository,
        AuditResource.BOOK_ENTRY: BookEntryRepository,
        AuditResource.NOTIFICATION: NotificationRepository,
        AuditResource.TASK_ASSIGNMENT: TaskAssignmentRepository,
    }
