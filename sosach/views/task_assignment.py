from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from rest_framework.request import Request
from rest_framework.exceptions import AuthenticationFailed
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiResponse
from drf_spectacular.types import OpenApiTypes

from sosach.middlewares.jwt_auth import get_current_user_info
from sosach.serializers.create_task_assignment_serializer import CreateTaskAssignmentSerializer
from sosach.serializers.update_task_assignment_serializer import (
    AddNoteSerializer,
    ApproveTaskSerializer,
    GetTaskAssignmentsQuerySerializer,
    ManualReminderSerializer,
    UpcomingRemindersQuerySerializer,
    UpdateProgressSerializer,
    UpdateStatusSerializer,
    UpdateTaskAssignmentSerializer,
)
from sosach.services.task_assignment_service import TaskAssignmentService
from sosach.services.reminder_service import ReminderService
from sosach.dto.task_assignment_dto import CreateTaskAssignmentDTO, TaskAssignmentDTO
from sosach.dto.responses.create_task_assignment_response import CreateTaskAssignmentResponse
from sosach.dto.responses.error_response import ApiErrorResponse
from sosach.constants.messages import ApiErrors, AppMessages
from sosach.exceptions.task_exceptions import TaskAssignmentNotFoundException

TASK_ID_PARAMETER = OpenApiParameter(
    name="id", type=OpenApiTypes.STR, location=OpenApiParameter.PATH, description="Task assignment ID"
)


def get_actor(request: Request) -> dict:
    actor = get_current_user_info(request)
    if not actor:
        raise AuthenticationFailed(ApiErrors.AUTHENTICATION_FAILED)
    return actor


def task_response(task: TaskAssignmentDTO, message: str, status_code=status.HTTP_200_OK) -> Response:
    return Response(
        data={"message": message, "data": task.model_dump(mode="json", by_alias=True)},
        status=status_code,
    )


class TaskAssignmentListView(APIView):
    @extend_schema(
        operation_id="get_task_assignments",
        summary="List task assignments",
        description="Admins see every assignment, commanders their unit's, staff their own.",
        tags=["task-assignments"],
        parameters=[GetTaskAssignmentsQuerySerializer],
        responses={200: OpenApiResponse(description="Task assignments")},
    )
    def get(self, request: Request):
        actor = get_actor(request)
        query = GetTaskAssignmentsQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        tasks = TaskAssignmentService.get_task_assignments(
            actor,
            status=query.validated_data.get("status"),
            priority=query.validated_data.get("priority"),
            limit=query.validated_data["limit"],
        )
        return Response(data={"data": [task.model_dump(mode="json", by_alias=True) for task in tasks]})

    @extend_schema(
        operation_id="create_task_assignment",
        summary="Assign a task",
        description="Create a task assignment. Reminders are scheduled from `reminderSettings` when enabled, "
        "otherwise 24h, 2h and 30min before the deadline.",
        tags=["task-assignments"],
        request=CreateTaskAssignmentSerializer,
        responses={
            201: OpenApiResponse(response=CreateTaskAssignmentResponse, description="Task assignment created"),
            400: OpenApiResponse(response=ApiErrorResponse, description="Validation error or missing reference"),
            403: OpenApiResponse(response=ApiErrorResponse, description="Not allowed to create assignments"),
        },
    )
    def post(self, request: Request):
        actor = get_actor(request)
        serializer = CreateTaskAssignmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        dto = CreateTaskAssignmentDTO(**serializer.validated_data)
        response: CreateTaskAssignmentResponse = TaskAssignmentService.create_task_assignment(dto, actor)
        return Response(data=response.model_dump(mode="json", by_alias=True), status=status.HTTP_201_CREATED)


class TaskAssignmentDetailView(APIView):
    @extend_schema(
        operation_id="get_task_assignment",
        summary="Get task assignment",
        tags=["task-assignments"],
        parameters=[TASK_ID_PARAMETER],
        responses={
            200: OpenApiResponse(description="Task assignment"),
            403: OpenApiResponse(response=ApiErrorResponse, description="No access to this assignment"),
            404: OpenApiResponse(response=ApiErrorResponse, description="Task assignment not found"),
        },
    )
    def get(self, request: Request, id: str):
        task = TaskAssignmentService.get_task_assignment(id, get_actor(request))
        return Response(data={"data": task.model_dump(mode="json", by_alias=True)})

    @extend_schema(
        operation_id="update_task_assignment",
        summary="Edit task assignment",
        description="Admins, the assigner, or a commander of the task's unit may edit the title, description, "
        "priority, approval flag and tags. Deadline and status are not editable here.",
        tags=["task-assignments"],
        parameters=[TASK_ID_PARAMETER],
        request=UpdateTaskAssignmentSerializer,
        responses={
            200: OpenApiResponse(description="Task assignment updated"),
            400: OpenApiResponse(response=ApiErrorResponse, description="Validation error"),
            403: OpenApiResponse(response=ApiErrorResponse, description="Not allowed"),
            404: OpenApiResponse(response=ApiErrorResponse, description="Task assignment not found"),
        },
    )
    def put(self, request: Request, id: str):
        actor = get_actor(request)
        serializer = UpdateTaskAssignmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        task = TaskAssignmentService.update_task_assignment(id, serializer.validated_data, actor)
        return task_response(task, AppMessages.TASK_ASSIGNMENT_UPDATED)

    @extend_schema(
        operation_id="delete_task_assignment",
        summary="Delete task assignment",
        description="Only admins and the creator may delete an assignment.",
        tags=["task-assignments"],
        parameters=[TASK_ID_PARAMETER],
        responses={
            200: OpenApiResponse(description="Task assignment deleted"),
            403: OpenApiResponse(response=ApiErrorResponse, description="Not allowed"),
            404: OpenApiResponse(response=ApiErrorResponse, description="Task assignment not found"),
        },
    )
    def delete(self, request: Request, id: str):
        TaskAssignmentService.delete_task_assignment(id, get_actor(request))
        return Response(data={"message": AppMessages.TASK_ASSIGNMENT_DELETED})


class TaskAssignmentProgressView(APIView):
    @extend_schema(
        operation_id="update_task_assignment_progress",
        summary="Update progress",
        description="Assignee only. Progress is clamped to 0-100; 100 completes the task.",
        tags=["task-assignments"],
        parameters=[TASK_ID_PARAMETER],
        request=UpdateProgressSerializer,
        responses={
            200: OpenApiResponse(description="Progress updated"),
            403: OpenApiResponse(response=ApiErrorResponse, description="Not the assignee"),
            409: OpenApiResponse(
                response=ApiErrorResponse, description="Task is cancelled, or completed and progress is below 100"
            ),
        },
    )
    def put(self, request: Request, id: str):
        actor = get_actor(request)
        serializer = UpdateProgressSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        task = TaskAssignmentService.update_progress(id, serializer.validated_data["progress"], actor)
        return task_response(task, AppMessages.PROGRESS_UPDATED)


class TaskAssignmentStatusView(APIView):
    @extend_schema(
        operation_id="update_task_assignment_status",
        summary="Change status",
        tags=["task-assignments"],
        parameters=[TASK_ID_PARAMETER],
        request=UpdateStatusSerializer,
        responses={
            200: OpenApiResponse(description="Status updated"),
            409: OpenApiResponse(response=ApiErrorResponse, description="Transition not allowed"),
        },
    )
    def put(self, request: Request, id: str):
        actor = get_actor(request)
        serializer = UpdateStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        task = TaskAssignmentService.update_status(id, serializer.validated_data["status"], actor)
        return task_response(task, AppMessages.STATUS_UPDATED)


class TaskAssignmentNotesView(APIView):
    @extend_schema(
        operation_id="add_task_assignment_note",
        summary="Add note",
        tags=["task-assignments"],
        parameters=[TASK_ID_PARAMETER],
        request=AddNoteSerializer,
        responses={201: OpenApiResponse(description="Note added")},
    )
    def post(self, request: Request, id: str):
        actor = get_actor(request)
        serializer = AddNoteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        task = TaskAssignmentService.add_note(id, serializer.validated_data["content"], actor)
        return task_response(task, AppMessages.NOTE_ADDED, status.HTTP_201_CREATED)


class TaskAssignmentApproveView(APIView):
    @extend_schema(
        operation_id="approve_task_assignment",
        summary="Approve task assignment",
        tags=["task-assignments"],
        parameters=[TASK_ID_PARAMETER],
        request=ApproveTaskSerializer,
        responses={
            200: OpenApiResponse(description="Task assignment approved"),
            403: OpenApiResponse(response=ApiErrorResponse, description="Not allowed to approve"),
            409: OpenApiResponse(response=ApiErrorResponse, description="Approval not required"),
        },
    )
    def put(self, request: Request, id: str):
        actor = get_actor(request)
        serializer = ApproveTaskSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        task = TaskAssignmentService.approve(id, serializer.validated_data.get("approvalNotes"), actor)
        return task_response(task, AppMessages.TASK_APPROVED)


class TaskAssignmentRemindersView(APIView):
    @extend_schema(
        operation_id="schedule_task_assignment_reminder",
        summary="Schedule a manual reminder",
        tags=["task-assignments"],
        parameters=[TASK_ID_PARAMETER],
        request=ManualReminderSerializer,
        responses={
            201: OpenApiResponse(description="Reminder scheduled"),
            404: OpenApiResponse(response=ApiErrorResponse, description="Task assignment not found"),
        },
    )
    def post(self, request: Request, id: str):
        actor = get_actor(request)
        TaskAssignmentService.get_task_assignment(id, actor)

        serializer = ManualReminderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        scheduled = ReminderService.send_manual_reminder(
            id, serializer.validated_data["message"], serializer.validated_data["scheduledAt"]
        )
        if not scheduled:
            raise TaskAssignmentNotFoundException(id)
        return Response(data={"message": AppMessages.REMINDER_SCHEDULED}, status=status.HTTP_201_CREATED)


class UpcomingRemindersView(APIView):
    @extend_schema(
        operation_id="get_upcoming_reminders",
        summary="Upcoming reminders for the current user",
        tags=["task-assignments"],
        parameters=[UpcomingRemindersQuerySerializer],
        responses={200: OpenApiResponse(description="Unsent reminders, soonest first")},
    )
    def get(self, request: Request):
        actor = get_actor(request)
        query = UpcomingRemindersQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        reminders = ReminderService.get_upcoming_reminders(actor["_id"], query.validated_data["limit"])
        return Response(data={"data": [reminder.model_dump(mode="json") for reminder in reminders]})


class OverdueTaskAssignmentsView(APIView):
    @extend_schema(
        operation_id="get_overdue_task_assignments",
        summary="List overdue task assignments",
        tags=["task-assignments"],
        responses={200: OpenApiResponse(description="Overdue task assignments")},
    )
    def get(self, request: Request):
        tasks = TaskAssignmentService.get_overdue_tasks(get_actor(request))
        return Response(data={"data": [task.model_dump(mode="json", by_alias=True) for task in tasks]})


class TaskAssignmentStatsView(APIView):
    @extend_schema(
        operation_id="get_task_assignment_stats",
        summary="Task assignment counts by status",
        tags=["task-assignments"],
        responses={200: OpenApiResponse(description="Counts for the caller's scope")},
    )
    def get(self, request: Request):
        stats = TaskAssignmentService.get_stats(get_actor(request))
        return Response(data={"data": stats.model_dump(mode="json")})


class CheckOverdueView(APIView):
    @extend_schema(
        operation_id="check_overdue_task_assignments",
        summary="Run the overdue sweep now",
        tags=["task-assignments"],
        request=None,
        responses={
            200: OpenApiResponse(description="Sweep finished"),
            403: OpenApiResponse(response=ApiErrorResponse, description="Not allowed"),
        },
    )
    def post(self, request: Request):
        TaskAssignmentService.ensure_can_run_overdue_check(get_actor(request))
        result = ReminderService.check_overdue_tasks()
        return Response(data={"message": AppMessages.OVERDUE_CHECK_COMPLETED, "data": result.model_dump(mode="json")})
