from datetime import datetime, timezone
from typing import Any, ClassVar, Dict

from pydantic import BaseModel, Field

from sosach.constants.audit import AuditAction, AuditResource, AuditStatus
from sosach.models.common.document import Document
from sosach.models.common.pyobjectid import PyObjectId


class AuditUserInfoModel(BaseModel):
    """Snapshot of the actor at write time; survives later edits or deletion of the user."""

    fullName: str
    email: str
    role: str
    department: str | None = None
    unit: str | None = None


class AuditMetadataModel(BaseModel):
    method: str
    url: str
    statusCode: int
    params: Dict[str, Any] = {}
    query: Dict[str, Any] = {}


class AuditLogModel(Document):
    """Append-only record of one API operation. Never updated or deleted here."""

    collection_name: ClassVar[str] = "audit_logs"

    user: PyObjectId
    userInfo: AuditUserInfoModel
    action: AuditAction
    resource: AuditResource
    resourceId: str | None = None
    resourceName: str | None = None
    description: str
    oldData: Dict[str, Any] | None = None
    newData: Dict[str, Any] | None = None
    ipAddress: str
    userAgent: str
    status: AuditStatus = AuditStatus.SUCCESS
    errorMessage: str | None = None
    executionTime: int = 0
    metadata: AuditMetadataModel
    createdAt: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
