import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Type

from sosach.constants.audit import (
    BODY_CAPTURE_ACTIONS,
    REDACTED_FIELDS,
    SNAPSHOT_ACTIONS,
    AuditAction,
    AuditResource,
)
from sosach.repositories.common.mongo_repository import MongoRepository

logger = logging.getLogger(__name__)


@dataclass
class ChangeSet:
    old_data: Optional[Dict[str, Any]] = None
    new_data: Optional[Dict[str, Any]] = None
    resource_id: Optional[str] = None


def redact(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Shallow copy without credential fields."""
    return {key: value for key, value in data.items() if key not in REDACTED_FIELDS}


def parse_payload(payload: Any) -> Any:
    if isinstance(payload, (bytes, bytearray)):
        payload = payload.decode("utf-8")
    if isinstance(payload, str):
        return json.loads(payload)
    return payload


def extract_created_id(response_body: Any) -> Optional[str]:
    """Find the id of a created record at `data._id` or top-level `_id` of the response payload."""
    try:
        parsed = parse_payload(response_body)
    except (ValueError, UnicodeDecodeError):
        return None
    if not isinstance(parsed, dict):
        return None

    data = parsed.get("data")
    if isinstance(data, dict) and data.get("_id"):
        return str(data["_id"])
    if parsed.get("_id"):
        return str(parsed["_id"])
    return None


class ChangeDetector:
    """
    Reconstructs before/after state for an audited operation.
    Never raises: lookup failures degrade to oldData=None.
    """

    def __init__(self, stores: Dict[AuditResource, Type[MongoRepository]]):
        self.stores = stores

    def fetch_snapshot(
        self, action: AuditAction, resource: AuditResource, resource_id: Optional[str]
    ) -> Optional[Dict[str, Any]]:
        if action not in SNAPSHOT_ACTIONS or not resource_id:
            return None

        store = self.stores.get(resource)
        if store is None:
            return None

        try:
            record = store.find_by_id(resource_id)
        except Exception as e:
            logger.warning(f"Could not load {resource.value} {resource_id} for audit snapshot: {e}")
            return None

        return redact(record) if record else None

    def capture_changes(
        self,
        action: AuditAction,
        resource: AuditResource,
        resource_id: Optional[str],
        request_body: Any,
        response_body: Any,
        old_data: Optional[Dict[str, Any]] = None,
    ) -> ChangeSet:
        """
        `old_data` is the snapshot taken before the handler ran, if any. Without it the
        lookup happens now, which only reflects the prior state if the handler left it untouched.
        """
        changes = ChangeSet(resource_id=resource_id)

        try:
            if action in BODY_CAPTURE_ACTIONS and isinstance(request_body, Mapping):
                changes.new_data = redact(request_body)

            if action == AuditAction.CREATE and response_body:
                changes.resource_id = extract_created_id(response_body) or resource_id

            if old_data is not None:
                changes.old_data = redact(old_data)
            else:
                changes.old_data = self.fetch_snapshot(action, resource, changes.resource_id)
        except Exception as e:
            logger.warning(f"Error getting data changes for {resource.value}: {e}")

        return changes
