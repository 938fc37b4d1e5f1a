from pydantic import BaseModel
from sosach.dto.task_assignment_dto import TaskAssignmentDTO
from sosach.constants.messages import AppMessages


class CreateTaskAssignmentResponse(BaseModel):
    data: TaskAssignmentDTO
    message: str = AppMessages.TASK_ASSIGNMENT_CREATED
