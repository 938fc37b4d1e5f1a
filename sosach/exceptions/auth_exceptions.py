from sosach.constants.messages import ApiErrors, AuthErrorMessages


class AuthenticationError(Exception):
    """Raised while resolving the acting user; the JWT middleware turns it into a 401."""

    default_message = AuthErrorMessages.TOKEN_INVALID

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class TokenExpiredError(AuthenticationError):
    default_message = AuthErrorMessages.TOKEN_EXPIRED


class TokenMissingError(AuthenticationError):
    default_message = AuthErrorMessages.TOKEN_MISSING


class TokenInvalidError(AuthenticationError):
    pass


class UserNotFoundException(AuthenticationError):
    """The token is valid but its user no longer exists."""

    def __init__(self, user_id: str | None = None):
        super().__init__(ApiErrors.USER_NOT_FOUND.format(user_id or ""))
