import json
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional

from django.conf import settings

from sosach.constants.audit import DEFAULT_SKIP_PATHS, SKIP_METHODS
from sosach.middlewares.jwt_auth import get_current_user_info
from sosach.repositories.resource_stores import build_resource_stores
from sosach.services.audit_log_service import AuditEvent, AuditLogService
from sosach.services.change_detector import ChangeDetector

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


@dataclass
class RequestSnapshot:
    """Request state frozen on arrival, before any handler can mutate it."""

    started_at: float
    body: Any = None
    query: Dict[str, Any] = field(default_factory=dict)
    params: Dict[str, Any] = field(default_factory=dict)
    old_data: Optional[Dict[str, Any]] = None


class AuditLogMiddleware:
    """
    Writes one audit record per authenticated request.

    The record is built after the response is produced and persisted on a
    background executor, so the client never waits on it. Anonymous requests,
    OPTIONS and skip-listed paths are not recorded.
    """

    def __init__(self, get_response, skip_paths: Iterable[str] | None = None) -> None:
        self.get_response = get_response
        config = getattr(settings, "AUDIT_LOG", {})
        self.enabled = config.get("ENABLED", True)
        extra_paths = skip_paths if skip_paths is not None else config.get("SKIP_PATHS", [])
        self.skip_paths = [*DEFAULT_SKIP_PATHS, *extra_paths]
        self.audit_service = AuditLogService(ChangeDetector(build_resource_stores()))
        self.executor = ThreadPoolExecutor(
            max_workers=config.get("MAX_WORKERS", 4), thread_name_prefix="audit-log"
        )

    def __call__(self, request):
        if not self.enabled or self._should_skip(request):
            return self.get_response(request)

        snapshot = RequestSnapshot(
            started_at=time.monotonic(),
            body=self._read_body(request),
            query=self._read_query(request),
        )
        request._audit_snapshot = snapshot

        response = self.get_response(request)

        execution_time = int((time.monotonic() - snapshot.started_at) * 1000)
        try:
            self._dispatch(request, response, snapshot, execution_time)
        except Exception:
            logger.exception(f"Failed to schedule audit log for {request.method} {request.path}")

        return response

    def process_view(self, request, view_func, view_args, view_kwargs):
        snapshot = getattr(request, "_audit_snapshot", None)
        if snapshot is None:
            return None

        snapshot.params = {key: str(value) for key, value in view_kwargs.items()}
        if get_current_user_info(request):
            try:
                snapshot.old_data = self.audit_service.capture_before_state(
                    request.method, request.path, snapshot.params
                )
            except Exception as e:
                logger.warning(f"Could not capture state before {request.method} {request.path}: {e}")
        return None

    def _dispatch(self, request, response, snapshot: RequestSnapshot, execution_time: int):
        actor = get_current_user_info(request)
        if not actor:
            return

        event = AuditEvent(
            actor=dict(actor),
            method=request.method,
            path=request.path,
            url=request.get_full_path(),
            status_code=response.status_code,
            execution_time=execution_time,
            ip_address=self._get_client_ip(request),
            user_agent=request.META.get("HTTP_USER_AGENT", ""),
            body=snapshot.body,
            params=snapshot.params,
            query=snapshot.query,
            response_body=None if getattr(response, "streaming", False) else response.content,
            old_data=snapshot.old_data,
        )
        self.executor.submit(self.audit_service.record, event)

    def _should_skip(self, request) -> bool:
        if request.method in SKIP_METHODS:
            return True
        return any(request.path.startswith(skip_path) for skip_path in self.skip_paths)

    def _read_body(self, request) -> Any:
        if request.method in ("GET", "HEAD"):
            return None
        try:
            if request.content_type == JSON_CONTENT_TYPE:
                return json.loads(request.body) if request.body else None
            if request.content_type == FORM_CONTENT_TYPE:
                return request.POST.dict()
        except (ValueError, UnicodeDecodeError):
            return None
        return None

    def _read_query(self, request) -> Dict[str, Any]:
        return {key: values if len(values) > 1 else values[0] for key, values in request.GET.lists()}

    def _get_client_ip(self, request) -> str:
        """Extract client IP address from request"""
        x_forwarded_for = request.META.get("HTTP_X_FORWARDED_FOR")
        if x_forwarded_for:
            ip = x_forwarded_for.split(",")[0].strip()
        else:
            ip = request.META.get("HTTP_X_REAL_IP")

        if not ip:
            ip = request.META.get("REMOTE_ADDR")

        return ip or ""


def with_audit(skip_paths: Iterable[str] | None = None):
    """Middleware factory with an explicit extra skip-list, for stacks not configured through settings."""

    def middleware(get_response):
        return AuditLogMiddleware(get_response, skip_paths=skip_paths)

    return middleware
