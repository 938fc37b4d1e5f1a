import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from bson import ObjectId

from sosach.constants.audit import (
    ACTION_NAMES_VI,
    LOGIN_DESCRIPTION,
    LOGOUT_DESCRIPTION,
    RESOURCE_NAMES_VI,
    UNKNOWN_ERROR_MESSAGE,
    UNKNOWN_VALUE,
    AuditAction,
    AuditResource,
    AuditStatus,
)
from sosach.dto.audit_log_dto import (
    AuditLogDTO,
    AuditLogStatsResponse,
    GetAuditLogsResponse,
    UserActivityDTO,
    UserActivitySummaryResponse,
)
from sosach.models.audit_log import AuditLogModel, AuditMetadataModel, AuditUserInfoModel
from sosach.repositories.audit_log_repository import AuditLogRepository
from sosach.services.change_detector import ChangeDetector, parse_payload
from sosach.services.request_classifier import DEFAULT_TARGET, AuditTarget, classify

logger = logging.getLogger(__name__)


@dataclass
class AuditEvent:
    """Everything post-processing needs, copied off the request and response before dispatch."""

    actor: Dict[str, Any]
    method: str
    path: str
    url: str
    status_code: int
    execution_time: int
    ip_address: str
    user_agent: str
    body: Any = None
    params: Dict[str, Any] = field(default_factory=dict)
    query: Dict[str, Any] = field(default_factory=dict)
    response_body: Any = None
    old_data: Optional[Dict[str, Any]] = None


def build_description(action: AuditAction, resource: AuditResource, resource_name: str | None = None) -> str:
    if action == AuditAction.LOGIN:
        return LOGIN_DESCRIPTION
    if action == AuditAction.LOGOUT:
        return LOGOUT_DESCRIPTION

    description = f"{ACTION_NAMES_VI.get(action, action.value)} {RESOURCE_NAMES_VI.get(resource, resource.value)}"
    if resource_name:
        description += f' "{resource_name}"'
    return description


def derive_status(status_code: int) -> AuditStatus:
    return AuditStatus.SUCCESS if 200 <= status_code < 300 else AuditStatus.FAILED


def extract_error_message(response_body: Any) -> str:
    try:
        parsed = parse_payload(response_body)
        message = parsed.get("message") or parsed.get("error")
    except Exception:
        return UNKNOWN_ERROR_MESSAGE
    return str(message) if message else UNKNOWN_ERROR_MESSAGE


def safe_classify(method: str, path: str, route_params: Dict[str, Any] | None = None) -> AuditTarget:
    try:
        return classify(method, path, route_params)
    except Exception as e:
        logger.warning(f"Could not classify {method} {path} for audit log, using defaults: {e}")
        return DEFAULT_TARGET


class AuditLogService:
    def __init__(self, change_detector: ChangeDetector):
        self.change_detector = change_detector

    def capture_before_state(self, method: str, path: str, route_params: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Snapshot of the target record taken before the handler runs, for UPDATE and DELETE."""
        target = safe_classify(method, path, route_params)
        return self.change_detector.fetch_snapshot(target.action, target.resource, target.resource_id)

    def record(self, event: AuditEvent) -> Optional[AuditLogModel]:
        """
        Build and persist one audit record. Best-effort and at-most-once:
        failures are logged and swallowed, never retried.
        """
        try:
            target = safe_classify(event.method, event.path, event.params)
            changes = self.change_detector.capture_changes(
                target.action,
                target.resource,
                target.resource_id,
                event.body,
                event.response_body,
                old_data=event.old_data,
            )
            status = derive_status(event.status_code)
            actor = event.actor

            audit_log = AuditLogModel(
                user=actor["_id"],
                userInfo=AuditUserInfoModel(
                    fullName=actor.get("fullName") or UNKNOWN_VALUE,
                    email=actor.get("email") or UNKNOWN_VALUE,
                    role=actor.get("role") or UNKNOWN_VALUE,
                    department=actor.get("department"),
                    unit=actor.get("unit"),
                ),
                action=target.action,
                resource=target.resource,
                resourceId=changes.resource_id,
                resourceName=target.resource_name,
                description=build_description(target.action, target.resource, target.resource_name),
                oldData=changes.old_data,
                newData=changes.new_data,
                ipAddress=event.ip_address or UNKNOWN_VALUE,
                userAgent=event.user_agent or UNKNOWN_VALUE,
                status=status,
                errorMessage=extract_error_message(event.response_body) if status == AuditStatus.FAILED else None,
                executionTime=event.execution_time,
                metadata=AuditMetadataModel(
                    method=event.method,
                    url=event.url,
                    statusCode=event.status_code,
                    params=event.params,
                    query=event.query,
                ),
            )
            return AuditLogRepository.create(audit_log)
        except Exception:
            logger.exception(f"Failed to write audit log for {event.method} {event.url}")
            return None

    @classmethod
    def get_logs(
        cls,
        page: int,
        limit: int,
        action: str | None = None,
        resource: str | None = None,
        status: str | None = None,
        user_id: str | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> GetAuditLogsResponse:
        filters: Dict[str, Any] = {}
        if action:
            filters["action"] = action
        if resource:
            filters["resource"] = resource
        if status:
            filters["status"] = status
        if user_id:
            filters["user"] = ObjectId(user_id)
        if start_date or end_date:
            filters["createdAt"] = {}
            if start_date:
                filters["createdAt"]["$gte"] = start_date
            if end_date:
                filters["createdAt"]["$lte"] = end_date

        logs, total = AuditLogRepository.get_logs(filters, page, limit)
        return GetAuditLogsResponse(
            logs=[cls.prepare_audit_log_dto(log) for log in logs],
            total=total,
            page=page,
            limit=limit,
        )

    @classmethod
    def get_stats(cls, days: int, now: datetime | None = None) -> AuditLogStatsResponse:
        now = now or datetime.now(timezone.utc)
        stats = AuditLogRepository.get_stats(now - timedelta(days=days))
        stats["topUsers"] = [{**row, "_id": str(row["_id"])} for row in stats["topUsers"]]
        return AuditLogStatsResponse(days=days, **stats)

    @classmethod
    def get_user_activity(cls, user_id: str, days: int, now: datetime | None = None) -> UserActivitySummaryResponse:
        now = now or datetime.now(timezone.utc)
        rows = AuditLogRepository.get_user_activity_summary(user_id, now - timedelta(days=days))
        return UserActivitySummaryResponse(
            userId=user_id,
            days=days,
            activities=[
                UserActivityDTO(
                    action=row["_id"]["action"],
                    resource=row["_id"]["resource"],
                    count=row["count"],
                    lastActivity=row["lastActivity"],
                )
                for row in rows
            ],
        )

    @classmethod
    def prepare_audit_log_dto(cls, audit_log: AuditLogModel) -> AuditLogDTO:
        return AuditLogDTO(
            _id=str(audit_log.id),
            user=str(audit_log.user),
            userInfo=audit_log.userInfo.model_dump(),
            action=audit_log.action,
            resource=audit_log.resource,
            resourceId=audit_log.resourceId,
            resourceName=audit_log.resourceName,
            description=audit_log.description,
            oldData=_jsonable(audit_log.oldData),
            newData=_jsonable(audit_log.newData),
            ipAddress=audit_log.ipAddress,
            userAgent=audit_log.userAgent,
            status=audit_log.status,
            errorMessage=audit_log.errorMessage,
            executionTime=audit_log.executionTime,
            metadata=audit_log.metadata.model_dump(),
            createdAt=audit_log.createdAt,
        )


def _jsonable(data: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if data is None:
        return None
    return json.loads(json.dumps(data, default=str))
