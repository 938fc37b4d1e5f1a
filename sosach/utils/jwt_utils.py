from datetime import datetime, timedelta, timezone

import jwt
from django.conf import settings

from sosach.constants.messages import AuthErrorMessages
from sosach.exceptions.auth_exceptions import TokenExpiredError, TokenInvalidError

ACCESS_TOKEN_TYPE = "access"


def generate_access_token(user_data: dict) -> str:
    """Sign an access token for `user_data["user_id"]` with the configured issuer and lifetime."""
    config = settings.JWT_CONFIG
    issued_at = datetime.now(timezone.utc)
    user_id = str(user_data["user_id"])
    claims = {
        "iss": config.get("ISSUER"),
        "sub": user_id,
        "user_id": user_id,
        "role": user_data.get("role"),
        "token_type": ACCESS_TOKEN_TYPE,
        "iat": issued_at,
        "exp": issued_at + timedelta(seconds=config.get("ACCESS_TOKEN_LIFETIME")),
    }
    try:
        return jwt.encode(claims, config.get("PRIVATE_KEY"), algorithm=config.get("ALGORITHM"))
    except (jwt.PyJWTError, TypeError, ValueError) as e:
        raise TokenInvalidError(f"Token generation failed: {e}")


def validate_access_token(token: str) -> dict:
    """Verify signature, expiry and issuer; return the claims of a usable access token."""
    if not token or not token.strip():
        raise TokenInvalidError()

    config = settings.JWT_CONFIG
    try:
        claims = jwt.decode(
            token,
            config.get("PUBLIC_KEY"),
            algorithms=[config.get("ALGORITHM")],
            issuer=config.get("ISSUER"),
            options={"require": ["exp", "iss"]},
        )
    except jwt.ExpiredSignatureError:
        raise TokenExpiredError()
    except jwt.InvalidTokenError as e:
        raise TokenInvalidError(f"Invalid token: {e}")

    if claims.get("token_type") != ACCESS_TOKEN_TYPE or not claims.get("user_id"):
        raise TokenInvalidError(AuthErrorMessages.TOKEN_INVALID)
    return claims
