from enum import Enum


class UserRole(Enum):
    ADMIN = "admin"
    COMMANDER = "commander"
    STAFF = "staff"


# Roles allowed to create, approve and sweep task assignments.
TASK_MANAGER_ROLES = [UserRole.ADMIN.value, UserRole.COMMANDER.value]
