from rest_framework import serializers
from bson import ObjectId

from sosach.constants.messages import ValidationErrors
from sosach.constants.task import TaskPriority


class ReminderTimeSerializer(serializers.Serializer):
    hours = serializers.FloatField(min_value=0, help_text="Hours before the deadline")


class ReminderSettingsSerializer(serializers.Serializer):
    enabled = serializers.BooleanField(required=False, default=False)
    times = ReminderTimeSerializer(many=True, required=False, default=list)


class CreateTaskAssignmentSerializer(serializers.Serializer):
    title = serializers.CharField(required=True, allow_blank=False, help_text="Title of the task")
    description = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, help_text="Description of the task"
    )
    bookId = serializers.CharField(required=True, help_text="Book the task belongs to")
    bookEntryId = serializers.CharField(required=True, help_text="Book entry to be completed")
    assignedTo = serializers.CharField(required=True, help_text="User ID of the assignee")
    assignedAt = serializers.DateTimeField(required=False, help_text="Assignment time, defaults to now (UTC)")
    deadline = serializers.DateTimeField(required=True, help_text="Deadline in ISO format (UTC)")
    priority = serializers.ChoiceField(
        required=False,
        choices=[priority.value for priority in TaskPriority],
        default=TaskPriority.MEDIUM.value,
    )
    requiresApproval = serializers.BooleanField(required=False, default=False)
    unit = serializers.CharField(required=False, allow_null=True, help_text="Defaults to the creator's unit")
    department = serializers.CharField(required=False, allow_null=True, help_text="Defaults to the creator's department")
    tags = serializers.ListField(child=serializers.CharField(), required=False, default=list)
    reminderSettings = ReminderSettingsSerializer(required=False)

    def validate_title(self, value):
        if not value.strip():
            raise serializers.ValidationError(ValidationErrors.BLANK_TITLE)
        return value

    def validate(self, data):
        for field in ("bookId", "bookEntryId", "assignedTo", "unit", "department"):
            value = data.get(field)
            if value is not None and not ObjectId.is_valid(value):
                raise serializers.ValidationError({field: ValidationErrors.INVALID_OBJECT_ID.format(value)})

        assigned_at = data.get("assignedAt")
        if assigned_at is not None and data["deadline"] <= assigned_at:
            raise serializers.ValidationError({"deadline": ValidationErrors.DEADLINE_BEFORE_ASSIGNED_AT})
        return data
