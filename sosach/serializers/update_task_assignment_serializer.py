from rest_framework import serializers

from sosach.constants.messages import ValidationErrors
from sosach.constants.task import TaskPriority, TaskStatus

EXPLICIT_STATUSES = [TaskStatus.IN_PROGRESS.value, TaskStatus.COMPLETED.value, TaskStatus.CANCELLED.value]


class UpdateTaskAssignmentSerializer(serializers.Serializer):
    title = serializers.CharField(required=False, allow_blank=False)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    priority = serializers.ChoiceField(required=False, choices=[priority.value for priority in TaskPriority])
    requiresApproval = serializers.BooleanField(required=False)
    tags = serializers.ListField(child=serializers.CharField(), required=False)

    def validate_title(self, value):
        if not value.strip():
            raise serializers.ValidationError(ValidationErrors.BLANK_TITLE)
        return value

    def validate(self, data):
        if not data:
            raise serializers.ValidationError(ValidationErrors.EMPTY_UPDATE)
        return data


class UpdateProgressSerializer(serializers.Serializer):
    # Out-of-range values are clamped by the state machine, not rejected here.
    progress = serializers.IntegerField(required=True, help_text="Progress percentage, clamped to 0-100")


class UpdateStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=EXPLICIT_STATUSES, required=True)


class AddNoteSerializer(serializers.Serializer):
    content = serializers.CharField(required=True, allow_blank=False)

    def validate_content(self, value):
        if not value.strip():
            raise serializers.ValidationError(ValidationErrors.BLANK_NOTE)
        return value.strip()


class ApproveTaskSerializer(serializers.Serializer):
    approvalNotes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class ManualReminderSerializer(serializers.Serializer):
    message = serializers.CharField(required=True, allow_blank=False)
    scheduledAt = serializers.DateTimeField(required=True)

    def validate_message(self, value):
        if not value.strip():
            raise serializers.ValidationError(ValidationErrors.BLANK_REMINDER_MESSAGE)
        return value


class UpcomingRemindersQuerySerializer(serializers.Serializer):
    limit = serializers.IntegerField(
        required=False,
        default=10,
        min_value=1,
        max_value=100,
        error_messages={"min_value": ValidationErrors.LIMIT_POSITIVE},
    )


class GetTaskAssignmentsQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[status.value for status in TaskStatus], required=False)
    priority = serializers.CharField(required=False)
    limit = serializers.IntegerField(required=False, default=50, min_value=1, max_value=200)
