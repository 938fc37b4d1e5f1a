import logging
from typing import List
from rest_framework.exceptions import AuthenticationFailed, NotAuthenticated, ValidationError as DRFValidationError
from rest_framework.response import Response
from rest_framework import status
from rest_framework.views import exception_handler as drf_exception_handler
from rest_framework.utils.serializer_helpers import ReturnDict
from django.conf import settings
from bson.errors import InvalidId as BsonInvalidId
from pydantic import ValidationError as PydanticValidationError

from sosach.dto.responses.error_response import ApiErrorDetail, ApiErrorResponse, ApiErrorSource
from sosach.constants.messages import ApiErrors, ValidationErrors, AuthErrorMessages
from sosach.exceptions.task_exceptions import (
    TaskAssignmentNotFoundException,
    TaskPermissionDeniedException,
    TaskReferenceNotFoundException,
    TaskStateConflictException,
)
from sosach.exceptions.notification_exceptions import NotificationNotFoundException
from .auth_exceptions import AuthenticationError, TokenExpiredError, TokenMissingError

logger = logging.getLogger(__name__)

AUTH_ERROR_TITLES = {
    TokenExpiredError: AuthErrorMessages.TOKEN_EXPIRED_TITLE,
    TokenMissingError: AuthErrorMessages.AUTHENTICATION_REQUIRED,
}


def format_validation_errors(errors) -> List[ApiErrorDetail]:
    formatted_errors = []
    if isinstance(errors, ReturnDict | dict):
        for field, messages in errors.items():
            details = messages if isinstance(messages, list) else [messages]
            for message_detail in details:
                if isinstance(message_detail, dict):
                    nested_errors = format_validation_errors(message_detail)
                    formatted_errors.extend(nested_errors)
                else:
                    formatted_errors.append(
                        ApiErrorDetail(detail=str(message_detail), source={ApiErrorSource.PARAMETER: field})
                    )
    elif isinstance(errors, list):
        for message_detail in errors:
            formatted_errors.append(ApiErrorDetail(detail=str(message_detail)))
    return formatted_errors


def format_pydantic_errors(exc: PydanticValidationError) -> List[ApiErrorDetail]:
    formatted_errors = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ()))
        detail = str(error.get("msg", "")).removeprefix("Value error, ")
        formatted_errors.append(
            ApiErrorDetail(
                source={ApiErrorSource.PARAMETER: field} if field else None,
                title=ApiErrors.VALIDATION_ERROR,
                detail=detail,
            )
        )
    return formatted_errors


def handle_exception(exc, context):
    response = drf_exception_handler(exc, context)
    resource_id = context.get("kwargs", {}).get("id")

    error_list = []
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    if isinstance(exc, AuthenticationError):
        status_code = status.HTTP_401_UNAUTHORIZED
        error_list.append(
            ApiErrorDetail(
                source={ApiErrorSource.HEADER: "Authorization"},
                title=AUTH_ERROR_TITLES.get(type(exc), AuthErrorMessages.INVALID_TOKEN_TITLE),
                detail=exc.message,
            )
        )
    elif isinstance(exc, (AuthenticationFailed, NotAuthenticated)):
        # Views without authenticators would otherwise turn this into a 403.
        status_code = status.HTTP_401_UNAUTHORIZED
        error_list.append(ApiErrorDetail(title=ApiErrors.AUTHENTICATION_FAILED, detail=str(exc.detail)))
    elif isinstance(exc, (TaskAssignmentNotFoundException, NotificationNotFoundException)):
        status_code = status.HTTP_404_NOT_FOUND
        error_list.append(
            ApiErrorDetail(
                source={ApiErrorSource.PATH: "id"} if resource_id else None,
                title=ApiErrors.RESOURCE_NOT_FOUND_TITLE,
                detail=str(exc),
            )
        )
    elif isinstance(exc, TaskPermissionDeniedException):
        status_code = status.HTTP_403_FORBIDDEN
        error_list.append(ApiErrorDetail(title=ApiErrors.FORBIDDEN, detail=str(exc)))
    elif isinstance(exc, TaskStateConflictException):
        status_code = status.HTTP_409_CONFLICT
        error_list.append(ApiErrorDetail(title=ApiErrors.CONFLICT, detail=str(exc)))
    elif isinstance(exc, TaskReferenceNotFoundException):
        status_code = status.HTTP_400_BAD_REQUEST
        error_list.append(ApiErrorDetail(title=ApiErrors.VALIDATION_ERROR, detail=str(exc)))
    elif isinstance(exc, BsonInvalidId):
        status_code = status.HTTP_400_BAD_REQUEST
        error_list.append(
            ApiErrorDetail(
                source={ApiErrorSource.PATH: "id"} if resource_id else None,
                title=ApiErrors.VALIDATION_ERROR,
                detail=ValidationErrors.INVALID_OBJECT_ID.format(resource_id or ""),
            )
        )
    elif isinstance(exc, PydanticValidationError):
        status_code = status.HTTP_400_BAD_REQUEST
        error_list = format_pydantic_errors(exc)
    elif isinstance(exc, DRFValidationError):
        status_code = status.HTTP_400_BAD_REQUEST
        error_list = format_validation_errors(exc.detail)
        if not error_list and exc.detail:
            error_list.append(ApiErrorDetail(detail=str(exc.detail), title=ApiErrors.VALIDATION_ERROR))

    else:
        if response is not None:
            status_code = response.status_code
            if isinstance(response.data, dict) and "detail" in response.data:
                detail_str = str(response.data["detail"])
                error_list.append(ApiErrorDetail(detail=detail_str, title=detail_str))
            elif isinstance(response.data, list):
                for item_error in response.data:
                    error_list.append(ApiErrorDetail(detail=str(item_error), title=str(exc)))
            else:
                error_list.append(
                    ApiErrorDetail(
                        detail=str(response.data) if settings.DEBUG else ApiErrors.INTERNAL_SERVER_ERROR,
                        title=str(exc),
                    )
                )
        else:
            logger.exception(f"Unhandled exception in {context.get('view').__class__.__name__}: {exc}")
            error_list.append(
                ApiErrorDetail(
                    detail=str(exc) if settings.DEBUG else ApiErrors.INTERNAL_SERVER_ERROR,
                    title=ApiErrors.UNEXPECTED_ERROR_OCCURRED,
                )
            )

    final_response_data = ApiErrorResponse(
        statusCode=status_code,
        message=str(exc) if not error_list else error_list[0].detail,
        errors=error_list,
    )
    return Response(data=final_response_data.model_dump(mode="json", exclude_none=True), status=status_code)
