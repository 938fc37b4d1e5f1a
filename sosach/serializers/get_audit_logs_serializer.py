from rest_framework import serializers
from django.conf import settings
from bson import ObjectId

from sosach.constants.audit import AuditAction, AuditResource, AuditStatus
from sosach.constants.messages import ValidationErrors


class GetAuditLogsQueryParamsSerializer(serializers.Serializer):
    page = serializers.IntegerField(
        required=False,
        default=1,
        min_value=1,
        error_messages={"min_value": ValidationErrors.PAGE_POSITIVE},
    )
    limit = serializers.IntegerField(
        required=False,
        default=settings.REST_FRAMEWORK["DEFAULT_PAGINATION_SETTINGS"]["DEFAULT_PAGE_LIMIT"],
        min_value=1,
        max_value=settings.REST_FRAMEWORK["DEFAULT_PAGINATION_SETTINGS"]["MAX_PAGE_LIMIT"],
        error_messages={
            "min_value": ValidationErrors.LIMIT_POSITIVE,
            "max_value": ValidationErrors.MAX_LIMIT_EXCEEDED.format(
                settings.REST_FRAMEWORK["DEFAULT_PAGINATION_SETTINGS"]["MAX_PAGE_LIMIT"]
            ),
        },
    )
    action = serializers.ChoiceField(choices=[action.value for action in AuditAction], required=False)
    resource = serializers.ChoiceField(choices=[resource.value for resource in AuditResource], required=False)
    status = serializers.ChoiceField(choices=[status.value for status in AuditStatus], required=False)
    userId = serializers.CharField(required=False)
    startDate = serializers.DateTimeField(required=False)
    endDate = serializers.DateTimeField(required=False)

    def validate_userId(self, value):
        if not ObjectId.is_valid(value):
            raise serializers.ValidationError(ValidationErrors.INVALID_OBJECT_ID.format(value))
        return value


class AuditLogPeriodQuerySerializer(serializers.Serializer):
    days = serializers.IntegerField(required=False, default=30, min_value=1, max_value=365)
