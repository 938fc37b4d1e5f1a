from bson import ObjectId
from rest_framework import serializers

from sosach.constants.messages import ValidationErrors
from sosach.constants.notification import NotificationPriority, NotificationType

NOTIFICATION_TYPES = [notification_type.value for notification_type in NotificationType]


def validate_object_id(value):
    if not ObjectId.is_valid(value):
        raise serializers.ValidationError(ValidationErrors.INVALID_OBJECT_ID.format(value))
    return value


class NotificationRelatedDataSerializer(serializers.Serializer):
    bookId = serializers.CharField(required=False, validators=[validate_object_id])
    entryId = serializers.CharField(required=False, validators=[validate_object_id])
    userId = serializers.CharField(required=False, validators=[validate_object_id])
    taskId = serializers.CharField(required=False, validators=[validate_object_id])


class CreateNotificationSerializer(serializers.Serializer):
    recipient = serializers.CharField(required=True, validators=[validate_object_id])
    type = serializers.ChoiceField(required=True, choices=NOTIFICATION_TYPES)
    title = serializers.CharField(required=True, allow_blank=False, max_length=200)
    message = serializers.CharField(required=True, allow_blank=False, max_length=1000)
    priority = serializers.ChoiceField(
        required=False,
        choices=[priority.value for priority in NotificationPriority],
        default=NotificationPriority.MEDIUM.value,
    )
    relatedData = NotificationRelatedDataSerializer(required=False)
    expiresAt = serializers.DateTimeField(required=False, help_text="Defaults to the configured TTL, if any")

    def validate_message(self, value):
        if not value.strip():
            raise serializers.ValidationError(ValidationErrors.BLANK_NOTIFICATION_MESSAGE)
        return value


class DeleteNotificationsQuerySerializer(serializers.Serializer):
    type = serializers.ChoiceField(required=False, choices=NOTIFICATION_TYPES)
    # allow_null keeps an absent flag from reading as False.
    isRead = serializers.BooleanField(required=False, allow_null=True, default=None)
