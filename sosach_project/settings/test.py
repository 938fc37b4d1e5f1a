from .settings import *

TESTING = True

DATABASES = {}

# Tests never talk to a real MongoDB; repositories and DatabaseManager are patched.
MONGODB_URI = "mongodb://localhost:27017"
DB_NAME = "sosach_test"

EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"

AUDIT_LOG = {**AUDIT_LOG, "ENABLED": True, "SKIP_PATHS": [], "MAX_WORKERS": 1}
REMINDER_SCHEDULER = {**REMINDER_SCHEDULER, "AUTOSTART": False}
NOTIFICATIONS = {"DEFAULT_TTL_DAYS": None}
SMS_GATEWAY = {"URL": None, "TOKEN": None, "TIMEOUT": 5}

JWT_CONFIG = {
    "ALGORITHM": "HS256",
    "PRIVATE_KEY": "test-secret-key-for-jwt-signing-very-long-key-needed-for-security",
    "PUBLIC_KEY": "test-secret-key-for-jwt-signing-very-long-key-needed-for-security",
    "ACCESS_TOKEN_LIFETIME": 3600,
    "ISSUER": "sosach-auth",
}
