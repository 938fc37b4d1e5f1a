from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.request import Request
from rest_framework.exceptions import PermissionDenied, ValidationError
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiResponse
from drf_spectacular.types import OpenApiTypes
from bson import ObjectId

from sosach.constants.messages import PermissionErrors, ValidationErrors
from sosach.constants.role import UserRole
from sosach.dto.audit_log_dto import AuditLogStatsResponse, GetAuditLogsResponse, UserActivitySummaryResponse
from sosach.dto.responses.error_response import ApiErrorResponse
from sosach.serializers.get_audit_logs_serializer import (
    AuditLogPeriodQuerySerializer,
    GetAuditLogsQueryParamsSerializer,
)
from sosach.services.audit_log_service import AuditLogService
from sosach.views.task_assignment import get_actor


def require_admin(request: Request) -> dict:
    actor = get_actor(request)
    if actor["role"] != UserRole.ADMIN.value:
        raise PermissionDenied(PermissionErrors.ADMIN_ONLY)
    return actor


class AuditLogListView(APIView):
    @extend_schema(
        operation_id="get_audit_logs",
        summary="List audit logs",
        description="Newest first, filtered by action, resource, status, user and time range. Admin only.",
        tags=["audit-logs"],
        parameters=[GetAuditLogsQueryParamsSerializer],
        responses={
            200: OpenApiResponse(response=GetAuditLogsResponse, description="Audit logs"),
            403: OpenApiResponse(response=ApiErrorResponse, description="Admin only"),
        },
    )
    def get(self, request: Request):
        require_admin(request)
        query = GetAuditLogsQueryParamsSerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        data = query.validated_data

        response = AuditLogService.get_logs(
            page=data["page"],
            limit=data["limit"],
            action=data.get("action"),
            resource=data.get("resource"),
            status=data.get("status"),
            user_id=data.get("userId"),
            start_date=data.get("startDate"),
            end_date=data.get("endDate"),
        )
        return Response(data=response.model_dump(mode="json", by_alias=True))


class AuditLogStatsView(APIView):
    @extend_schema(
        operation_id="get_audit_log_stats",
        summary="Audit log statistics",
        tags=["audit-logs"],
        parameters=[AuditLogPeriodQuerySerializer],
        responses={
            200: OpenApiResponse(response=AuditLogStatsResponse, description="Counts over the last `days` days"),
            403: OpenApiResponse(response=ApiErrorResponse, description="Admin only"),
        },
    )
    def get(self, request: Request):
        require_admin(request)
        query = AuditLogPeriodQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        stats = AuditLogService.get_stats(query.validated_data["days"])
        return Response(data=stats.model_dump(mode="json", by_alias=True))


class UserAuditActivityView(APIView):
    @extend_schema(
        operation_id="get_user_audit_activity",
        summary="Activity summary of one user",
        tags=["audit-logs"],
        parameters=[
            OpenApiParameter(name="userId", type=OpenApiTypes.STR, location=OpenApiParameter.PATH),
            AuditLogPeriodQuerySerializer,
        ],
        responses={
            200: OpenApiResponse(response=UserActivitySummaryResponse, description="Grouped by action and resource"),
            403: OpenApiResponse(response=ApiErrorResponse, description="Admin only"),
        },
    )
    def get(self, request: Request, userId: str):
        require_admin(request)
        if not ObjectId.is_valid(userId):
            raise ValidationError({"userId": ValidationErrors.INVALID_OBJECT_ID.format(userId)})
        query = AuditLogPeriodQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        summary = AuditLogService.get_user_activity(userId, query.validated_data["days"])
        return Response(data=summary.model_dump(mode="json"))
