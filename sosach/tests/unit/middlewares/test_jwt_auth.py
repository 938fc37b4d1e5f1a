import json
from unittest import TestCase
from unittest.mock import Mock, patch

import jwt
from bson import ObjectId
from django.conf import settings
from django.http import HttpRequest, JsonResponse
from rest_framework import status

from sosach.constants.messages import ApiErrors, AuthErrorMessages
from sosach.exceptions.auth_exceptions import TokenExpiredError, TokenInvalidError
from sosach.middlewares.jwt_auth import JWTAuthenticationMiddleware, get_current_user_info
from sosach.tests.fixtures.user import staff_actor
from sosach.utils.jwt_utils import generate_access_token, validate_access_token


class JWTAuthenticationMiddlewareTests(TestCase):
    def setUp(self):
        self.get_response = Mock(return_value=JsonResponse({"data": "test"}))
        self.middleware = JWTAuthenticationMiddleware(self.get_response)
        self.request = Mock(spec=HttpRequest)
        self.request.path = "/api/task-assignments"
        self.request.META = {}
        self.request.COOKIES = {}

    def test_public_path_authentication_bypass(self):
        """Test that requests to public paths bypass authentication"""
        self.request.path = "/api/health"
        response = self.middleware(self.request)
        self.get_response.assert_called_once_with(self.request)
        self.assertEqual(response.status_code, 200)

    @patch("sosach.middlewares.jwt_auth.UserRepository.get_actor_info")
    @patch("sosach.middlewares.jwt_auth.validate_access_token")
    def test_bearer_token_sets_user_info(self, mock_validate, mock_actor_info):
        """Test successful authentication from the Authorization header"""
        user_id = str(staff_actor["_id"])
        mock_validate.return_value = {"user_id": user_id, "token_type": "access"}
        mock_actor_info.return_value = staff_actor
        self.request.META = {"HTTP_AUTHORIZATION": "Bearer valid_token"}

        response = self.middleware(self.request)

        mock_validate.assert_called_once_with("valid_token")
        mock_actor_info.assert_called_once_with(user_id)
        self.assertEqual(self.request.user_id, user_id)
        self.assertEqual(get_current_user_info(self.request), staff_actor)
        self.get_response.assert_called_once_with(self.request)
        self.assertEqual(response.status_code, 200)

    @patch("sosach.middlewares.jwt_auth.UserRepository.get_actor_info")
    @patch("sosach.middlewares.jwt_auth.validate_access_token")
    def test_cookie_token_is_used_without_header(self, mock_validate, mock_actor_info):
        mock_validate.return_value = {"user_id": "123", "token_type": "access"}
        mock_actor_info.return_value = staff_actor
        self.request.COOKIES = {settings.COOKIE_SETTINGS.get("ACCESS_COOKIE_NAME"): "cookie_token"}

        self.middleware(self.request)

        mock_validate.assert_called_once_with("cookie_token")
        self.get_response.assert_called_once_with(self.request)

    def test_no_token_provided(self):
        """Test handling of request with no tokens"""
        response = self.middleware(self.request)

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        response_data = json.loads(response.content)
        self.assertEqual(response_data["message"], AuthErrorMessages.TOKEN_MISSING)
        self.assertEqual(response_data["errors"][0]["title"], ApiErrors.AUTHENTICATION_FAILED)
        self.get_response.assert_not_called()

    @patch("sosach.middlewares.jwt_auth.validate_access_token")
    def test_expired_token(self, mock_validate):
        mock_validate.side_effect = TokenExpiredError()
        self.request.META = {"HTTP_AUTHORIZATION": "Bearer expired"}

        response = self.middleware(self.request)

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(json.loads(response.content)["message"], AuthErrorMessages.TOKEN_EXPIRED)
        self.get_response.assert_not_called()

    @patch("sosach.middlewares.jwt_auth.UserRepository.get_actor_info")
    @patch("sosach.middlewares.jwt_auth.validate_access_token")
    def test_token_for_deleted_user_is_rejected(self, mock_validate, mock_actor_info):
        user_id = str(ObjectId())
        mock_validate.return_value = {"user_id": user_id, "token_type": "access"}
        mock_actor_info.return_value = None
        self.request.META = {"HTTP_AUTHORIZATION": "Bearer valid_token"}

        response = self.middleware(self.request)

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(json.loads(response.content)["message"], ApiErrors.USER_NOT_FOUND.format(user_id))
        self.get_response.assert_not_called()

    def test_get_current_user_info_without_authentication(self):
        self.assertIsNone(get_current_user_info(HttpRequest()))


class JWTUtilsTests(TestCase):
    def test_generated_token_validates(self):
        token = generate_access_token({"user_id": "65f0c0ffee0000000000abcd", "role": "staff"})

        payload = validate_access_token(token)

        self.assertEqual(payload["user_id"], "65f0c0ffee0000000000abcd")
        self.assertEqual(payload["role"], "staff")
        self.assertEqual(payload["token_type"], "access")

    def test_foreign_issuer_is_invalid(self):
        token = jwt.encode(
            {"iss": "someone-else", "user_id": "1", "token_type": "access", "exp": 4102444800},
            settings.JWT_CONFIG["PRIVATE_KEY"],
            algorithm=settings.JWT_CONFIG["ALGORITHM"],
        )

        with self.assertRaises(TokenInvalidError):
            validate_access_token(token)

    def test_blank_token_is_invalid(self):
        with self.assertRaises(TokenInvalidError):
            validate_access_token("  ")

    def test_garbage_token_is_invalid(self):
        with self.assertRaises(TokenInvalidError):
            validate_access_token("not.a.jwt")

    @patch("sosach.utils.jwt_utils.jwt.decode")
    def test_expired_signature(self, mock_decode):
        mock_decode.side_effect = jwt.ExpiredSignatureError()

        with self.assertRaises(TokenExpiredError):
            validate_access_token("expired")

    @patch("sosach.utils.jwt_utils.jwt.decode")
    def test_wrong_token_type_is_invalid(self, mock_decode):
        mock_decode.return_value = {"user_id": "1", "token_type": "refresh"}

        with self.assertRaises(TokenInvalidError):
            validate_access_token("refresh-token")
