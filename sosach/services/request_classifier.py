from dataclasses import dataclass
from typing import Any, Dict, Optional

from sosach.constants.audit import (
    METHOD_ACTIONS,
    PATH_ACTION_OVERRIDES,
    PATH_RESOURCES,
    AuditAction,
    AuditResource,
)

RESOURCE_ID_PARAM = "id"


@dataclass(frozen=True)
class AuditTarget:
    action: AuditAction
    resource: AuditResource
    resource_id: Optional[str] = None
    resource_name: Optional[str] = None


DEFAULT_TARGET = AuditTarget(action=AuditAction.VIEW, resource=AuditResource.SYSTEM)


def classify(method: str, path: str, route_params: Dict[str, Any] | None = None) -> AuditTarget:
    """
    Map an HTTP method and path to (action, resource, resourceId).
    Pure: callers substitute DEFAULT_TARGET if this raises.
    """
    for fragment, action, resource in PATH_ACTION_OVERRIDES:
        if fragment in path:
            return AuditTarget(action=action, resource=resource)

    action = METHOD_ACTIONS.get(method.upper(), AuditAction.VIEW)

    for fragment, resource in PATH_RESOURCES:
        if fragment in path:
            resource_id = (route_params or {}).get(RESOURCE_ID_PARAM)
            return AuditTarget(
                action=action,
                resource=resource,
                resource_id=str(resource_id) if resource_id is not None else None,
            )

    return AuditTarget(action=action, resource=AuditResource.SYSTEM)
