from sosach.constants.messages import ApiErrors


class TaskAssignmentError(Exception):
    """Base for task assignment failures that the API maps to a 4xx response."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class TaskAssignmentNotFoundException(TaskAssignmentError):
    def __init__(self, task_id: str | None = None):
        super().__init__(
            ApiErrors.TASK_ASSIGNMENT_NOT_FOUND.format(task_id) if task_id else ApiErrors.TASK_ASSIGNMENT_NOT_FOUND_GENERIC
        )


class TaskStateConflictException(TaskAssignmentError):
    """The requested change is not allowed from the task's current status."""


class TaskPermissionDeniedException(TaskAssignmentError):
    pass


class TaskReferenceNotFoundException(TaskAssignmentError):
    """A book, book entry or assignee named in a task assignment does not exist."""
