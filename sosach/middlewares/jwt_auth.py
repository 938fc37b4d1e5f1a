from django.conf import settings
from django.http import JsonResponse
from rest_framework import status

from sosach.constants.messages import ApiErrors
from sosach.dto.responses.error_response import ApiErrorDetail, ApiErrorResponse, ApiErrorSource
from sosach.exceptions.auth_exceptions import AuthenticationError, TokenMissingError, UserNotFoundException
from sosach.repositories.user_repository import UserRepository
from sosach.utils.jwt_utils import validate_access_token

BEARER_PREFIX = "Bearer "


class JWTAuthenticationMiddleware:
    """
    Resolves the acting user for every non-public request.

    On success `request.user_id` and `request.user_info` are set; `user_info`
    carries the department and unit names so downstream audit records do not
    need another lookup. Any failure short-circuits with a 401 envelope.
    """

    def __init__(self, get_response) -> None:
        self.get_response = get_response

    def __call__(self, request):
        if self._is_public_path(request.path):
            return self.get_response(request)

        try:
            claims = validate_access_token(self._get_token(request))
            self._attach_actor(request, claims["user_id"])
        except AuthenticationError as e:
            return self._unauthorized(e)

        return self.get_response(request)

    def _get_token(self, request) -> str:
        """Bearer header first, then the access cookie."""
        header = request.META.get("HTTP_AUTHORIZATION", "")
        if header.startswith(BEARER_PREFIX):
            return header[len(BEARER_PREFIX) :].strip()

        token = request.COOKIES.get(settings.COOKIE_SETTINGS.get("ACCESS_COOKIE_NAME"))
        if not token:
            raise TokenMissingError()
        return token

    def _attach_actor(self, request, user_id: str) -> None:
        actor = UserRepository.get_actor_info(user_id)
        if not actor:
            raise UserNotFoundException(user_id)

        request.user_id = user_id
        request.user_info = actor

    def _is_public_path(self, path: str) -> bool:
        return any(path.startswith(public_path) for public_path in settings.PUBLIC_PATHS)

    def _unauthorized(self, exception: AuthenticationError) -> JsonResponse:
        error_response = ApiErrorResponse(
            statusCode=status.HTTP_401_UNAUTHORIZED,
            message=exception.message,
            errors=[
                ApiErrorDetail(
                    source={ApiErrorSource.HEADER: "Authorization"},
                    title=ApiErrors.AUTHENTICATION_FAILED,
                    detail=exception.message,
                )
            ],
        )
        return JsonResponse(
            data=error_response.model_dump(mode="json", exclude_none=True),
            status=status.HTTP_401_UNAUTHORIZED,
        )


def get_current_user_info(request) -> dict | None:
    """The acting user {_id, fullName, email, role, department, unit}, or None when unauthenticated."""
    return getattr(request, "user_info", None)
