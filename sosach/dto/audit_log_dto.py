from datetime import datetime
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field

from sosach.dto.responses.paginated_response import PaginatedResponse


class AuditLogDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    user: str
    userInfo: Dict[str, Any]
    action: str
    resource: str
    resourceId: str | None = None
    resourceName: str | None = None
    description: str
    oldData: Dict[str, Any] | None = None
    newData: Dict[str, Any] | None = None
    ipAddress: str
    userAgent: str
    status: str
    errorMessage: str | None = None
    executionTime: int
    metadata: Dict[str, Any]
    createdAt: datetime


class GetAuditLogsResponse(PaginatedResponse):
    logs: List[AuditLogDTO] = []


class CountBucketDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    key: Any = Field(alias="_id")
    count: int


class AuditLogStatsResponse(BaseModel):
    days: int
    totalLogs: int
    logsByAction: List[CountBucketDTO] = []
    logsByResource: List[CountBucketDTO] = []
    logsByStatus: List[CountBucketDTO] = []
    logsByDay: List[CountBucketDTO] = []
    topUsers: List[CountBucketDTO] = []


class UserActivityDTO(BaseModel):
    action: str
    resource: str
    count: int
    lastActivity: datetime


class UserActivitySummaryResponse(BaseModel):
    userId: str
    days: int
    activities: List[UserActivityDTO] = []
