from rest_framework import serializers

from sosach.constants.messages import ValidationErrors


class GetNotificationsQueryParamsSerializer(serializers.Serializer):
    unreadOnly = serializers.BooleanField(required=False, default=False)
    limit = serializers.IntegerField(
        required=False,
        default=50,
        min_value=1,
        max_value=200,
        error_messages={"min_value": ValidationErrors.LIMIT_POSITIVE},
    )
