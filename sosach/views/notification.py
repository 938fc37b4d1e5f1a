from rest_framework.views import APIView
from rest_framework import status
from rest_framework.response import Response
from rest_framework.request import Request
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiResponse
from drf_spectacular.types import OpenApiTypes

from sosach.constants.messages import AppMessages
from sosach.dto.notification_dto import (
    DeleteNotificationsResponse,
    GetNotificationsResponse,
    MarkAllReadResponse,
    NotificationDTO,
)
from sosach.dto.responses.error_response import ApiErrorResponse
from sosach.serializers.create_notification_serializer import (
    CreateNotificationSerializer,
    DeleteNotificationsQuerySerializer,
)
from sosach.serializers.get_notifications_serializer import GetNotificationsQueryParamsSerializer
from sosach.services.notification_service import NotificationService
from sosach.views.task_assignment import get_actor

NOTIFICATION_ID_PARAMETER = OpenApiParameter(
    name="id", type=OpenApiTypes.STR, location=OpenApiParameter.PATH, description="Notification ID"
)


class NotificationListView(APIView):
    @extend_schema(
        operation_id="get_notifications",
        summary="List the current user's notifications",
        tags=["notifications"],
        parameters=[GetNotificationsQueryParamsSerializer],
        responses={200: OpenApiResponse(response=GetNotificationsResponse, description="Newest first")},
    )
    def get(self, request: Request):
        actor = get_actor(request)
        query = GetNotificationsQueryParamsSerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        response = NotificationService.get_notifications(
            actor["_id"], unread_only=query.validated_data["unreadOnly"], limit=query.validated_data["limit"]
        )
        return Response(data=response.model_dump(mode="json", by_alias=True))

    @extend_schema(
        operation_id="create_notification",
        summary="Send a notification",
        description="Admin only.",
        tags=["notifications"],
        request=CreateNotificationSerializer,
        responses={
            201: OpenApiResponse(response=NotificationDTO, description="Notification created"),
            400: OpenApiResponse(response=ApiErrorResponse, description="Validation error"),
            403: OpenApiResponse(response=ApiErrorResponse, description="Not an admin"),
        },
    )
    def post(self, request: Request):
        actor = get_actor(request)
        serializer = CreateNotificationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        notification = NotificationService.create_admin_notification(serializer.validated_data, actor)
        return Response(
            data={
                "message": AppMessages.NOTIFICATION_CREATED,
                "data": notification.model_dump(mode="json", by_alias=True),
            },
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(
        operation_id="delete_notifications",
        summary="Delete the current user's notifications",
        description="Optionally restricted by `type` and `isRead`.",
        tags=["notifications"],
        parameters=[DeleteNotificationsQuerySerializer],
        responses={200: OpenApiResponse(response=DeleteNotificationsResponse, description="Notifications deleted")},
    )
    def delete(self, request: Request):
        actor = get_actor(request)
        query = DeleteNotificationsQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        response = NotificationService.delete_notifications(
            actor["_id"], type=query.validated_data.get("type"), is_read=query.validated_data.get("isRead")
        )
        return Response(data=response.model_dump(mode="json"))


class NotificationReadView(APIView):
    @extend_schema(
        operation_id="mark_notification_read",
        summary="Mark one notification as read",
        tags=["notifications"],
        parameters=[NOTIFICATION_ID_PARAMETER],
        request=None,
        responses={
            200: OpenApiResponse(description="Marked as read"),
            404: OpenApiResponse(response=ApiErrorResponse, description="Notification not found"),
        },
    )
    def put(self, request: Request, id: str):
        notification = NotificationService.mark_as_read(id, get_actor(request)["_id"])
        return Response(
            data={
                "message": AppMessages.NOTIFICATION_MARKED_READ,
                "data": notification.model_dump(mode="json", by_alias=True),
            }
        )


class NotificationReadAllView(APIView):
    @extend_schema(
        operation_id="mark_all_notifications_read",
        summary="Mark all notifications as read",
        tags=["notifications"],
        request=None,
        responses={200: OpenApiResponse(response=MarkAllReadResponse, description="Marked as read")},
    )
    def put(self, request: Request):
        response = NotificationService.mark_all_as_read(get_actor(request)["_id"])
        return Response(data=response.model_dump(mode="json"))


class NotificationDetailView(APIView):
    @extend_schema(
        operation_id="delete_notification",
        summary="Delete a notification",
        tags=["notifications"],
        parameters=[NOTIFICATION_ID_PARAMETER],
        responses={
            200: OpenApiResponse(description="Notification deleted"),
            404: OpenApiResponse(response=ApiErrorResponse, description="Notification not found"),
        },
    )
    def delete(self, request: Request, id: str):
        NotificationService.delete_notification(id, get_actor(request)["_id"])
        return Response(data={"message": AppMessages.NOTIFICATION_DELETED})
