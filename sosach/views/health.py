from django.apps import apps
from django.conf import settings
from rest_framework.views import APIView
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiResponse
from sosach.constants.health import AppHealthStatus, ComponentHealthStatus
from sosach_project.db.config import DatabaseManager


def reminder_scheduler_status() -> ComponentHealthStatus:
    if not settings.REMINDER_SCHEDULER["AUTOSTART"]:
        return ComponentHealthStatus.DISABLED
    scheduler = apps.get_app_config("sosach").scheduler
    return ComponentHealthStatus.UP if scheduler and scheduler.is_running else ComponentHealthStatus.DOWN


class HealthView(APIView):
    @extend_schema(
        operation_id="health_check",
        summary="Health check",
        description="MongoDB reachability and, when autostarted, the reminder scheduler threads",
        tags=["health"],
        responses={
            200: OpenApiResponse(description="Application is healthy"),
            503: OpenApiResponse(description="MongoDB is unreachable or the scheduler has stopped"),
        },
    )
    def get(self, request):
        mongo_status = (
            ComponentHealthStatus.UP if DatabaseManager().check_database_health() else ComponentHealthStatus.DOWN
        )
        scheduler_status = reminder_scheduler_status()

        is_healthy = ComponentHealthStatus.DOWN not in (mongo_status, scheduler_status)
        overall_status = AppHealthStatus.UP if is_healthy else AppHealthStatus.DOWN

        response = {
            "status": overall_status.name,
            "components": {
                "mongodb": {"status": mongo_status.name},
                "reminderScheduler": {"status": scheduler_status.name},
            },
        }
        return Response(response, overall_status.http_status)
