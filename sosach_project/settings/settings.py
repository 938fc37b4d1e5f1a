import os
import sys
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = os.getenv(
    "SECRET_KEY",
    "django-insecure-3v!o8m_c$k2#x^f7q1z0w@b9t&h5n6y4r+e-a=d*j%lpsu",
)

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = os.getenv("DEBUG", "True").lower() == "true"

# Allowed hosts configuration
ALLOWED_HOSTS = os.getenv("ALLOWED_HOSTS", "localhost,127.0.0.1").split(",")

# Database configuration
MONGODB_URI = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
DB_NAME = os.getenv("DB_NAME", "sosach")

INSTALLED_APPS = [
    "django.contrib.staticfiles",
    "corsheaders",
    "rest_framework",
    "drf_spectacular",
    "sosach",
    "django.contrib.auth",
    "django.contrib.contenttypes",
]

# The audit logger is the outer layer so it observes the identity resolved
# by JWTAuthenticationMiddleware and the final response.
MIDDLEWARE = [
    "corsheaders.middleware.CorsMiddleware",
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
    "sosach.middlewares.audit_logger.AuditLogMiddleware",
    "sosach.middlewares.jwt_auth.JWTAuthenticationMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "sosach_project.urls"
WSGI_APPLICATION = "sosach_project.wsgi.application"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
            ],
        },
    },
]

LANGUAGE_CODE = "vi"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

REST_FRAMEWORK = {
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
    "UNAUTHENTICATED_USER": None,
    "EXCEPTION_HANDLER": "sosach.exceptions.exception_handler.handle_exception",
    "DEFAULT_PAGINATION_SETTINGS": {
        "DEFAULT_PAGE_LIMIT": 20,
        "MAX_PAGE_LIMIT": 200,
    },
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.AllowAny",
    ],
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
}

# Testing configuration
TESTING = "test" in sys.argv or "pytest" in sys.modules or os.getenv("TESTING") == "True"

if TESTING:
    # Test JWT configuration (HS256 - simpler for tests)
    JWT_CONFIG = {
        "ALGORITHM": "HS256",
        "PRIVATE_KEY": "test-secret-key-for-jwt-signing-very-long-key-needed-for-security",
        "PUBLIC_KEY": "test-secret-key-for-jwt-signing-very-long-key-needed-for-security",
        "ACCESS_TOKEN_LIFETIME": 3600,
        "ISSUER": "sosach-auth",
    }
else:
    JWT_CONFIG = {
        "ALGORITHM": os.getenv("JWT_ALGORITHM", "RS256"),
        "PRIVATE_KEY": os.getenv("JWT_PRIVATE_KEY"),
        "PUBLIC_KEY": os.getenv("JWT_PUBLIC_KEY"),
        "ACCESS_TOKEN_LIFETIME": int(os.getenv("JWT_ACCESS_LIFETIME", "3600")),
        "ISSUER": os.getenv("JWT_ISSUER", "sosach-auth"),
    }

COOKIE_SETTINGS = {
    "ACCESS_COOKIE_NAME": os.getenv("ACCESS_COOKIE_NAME", "sosach-access"),
}

PUBLIC_PATHS = [
    "/favicon.ico",
    "/api/health",
    "/api-docs",
    "/api/schema",
    "/static/",
    "/api/auth/login",
]

# Audit logging
AUDIT_LOG = {
    "ENABLED": os.getenv("AUDIT_LOG_ENABLED", "True").lower() == "true",
    # Extra path prefixes never audited, on top of health, docs and favicon.
    "SKIP_PATHS": [path for path in os.getenv("AUDIT_LOG_SKIP_PATHS", "/static/").split(",") if path],
    "MAX_WORKERS": int(os.getenv("AUDIT_LOG_MAX_WORKERS", "4")),
}

# Reminder and overdue sweeps
REMINDER_SCHEDULER = {
    "AUTOSTART": not TESTING and os.getenv("REMINDER_SCHEDULER_AUTOSTART", "False").lower() == "true",
    "REMINDER_INTERVAL_SECONDS": int(os.getenv("REMINDER_INTERVAL_SECONDS", "1800")),
    "OVERDUE_INTERVAL_SECONDS": int(os.getenv("OVERDUE_INTERVAL_SECONDS", "86400")),
    "RUN_ON_START": os.getenv("REMINDER_SCHEDULER_RUN_ON_START", "True").lower() == "true",
}

NOTIFICATIONS = {
    "DEFAULT_TTL_DAYS": int(os.getenv("NOTIFICATION_TTL_DAYS")) if os.getenv("NOTIFICATION_TTL_DAYS") else None,
}

# Out-of-band reminder channels
EMAIL_BACKEND = os.getenv("EMAIL_BACKEND", "django.core.mail.backends.console.EmailBackend")
EMAIL_HOST = os.getenv("EMAIL_HOST", "localhost")
EMAIL_PORT = int(os.getenv("EMAIL_PORT", "25"))
EMAIL_HOST_USER = os.getenv("EMAIL_HOST_USER", "")
EMAIL_HOST_PASSWORD = os.getenv("EMAIL_HOST_PASSWORD", "")
EMAIL_USE_TLS = os.getenv("EMAIL_USE_TLS", "False").lower() == "true"
DEFAULT_FROM_EMAIL = os.getenv("DEFAULT_FROM_EMAIL", "no-reply@sosach.local")

SMS_GATEWAY = {
    "URL": os.getenv("SMS_GATEWAY_URL"),
    "TOKEN": os.getenv("SMS_GATEWAY_TOKEN"),
    "TIMEOUT": int(os.getenv("SMS_GATEWAY_TIMEOUT", "10")),
}

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{asctime} {levelname} {name} {threadName}: {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
    "loggers": {
        "sosach": {
            "handlers": ["console"],
            "level": os.getenv("LOG_LEVEL", "INFO"),
            "propagate": False,
        },
        "sosach_project": {
            "handlers": ["console"],
            "level": os.getenv("LOG_LEVEL", "INFO"),
            "propagate": False,
        },
    },
}

DATABASES = {}

# CORS Configuration
CORS_ALLOW_CREDENTIALS = os.getenv("CORS_ALLOW_CREDENTIALS", "True").lower() == "true"
CORS_ALLOW_ALL_ORIGINS = os.getenv("CORS_ALLOW_ALL_ORIGINS", "True").lower() == "true"

if not CORS_ALLOW_ALL_ORIGINS:
    CORS_ALLOWED_ORIGINS = os.getenv("CORS_ALLOWED_ORIGINS", "").split(",")

CORS_ALLOWED_HEADERS = [
    "accept",
    "accept-encoding",
    "authorization",
    "content-type",
    "dnt",
    "origin",
    "user-agent",
    "x-csrftoken",
    "x-requested-with",
]

# Security Settings
SECURE_SSL_REDIRECT = os.getenv("SECURE_SSL_REDIRECT", "False").lower() == "true"

# Swagger/OpenAPI Configuration
SPECTACULAR_SETTINGS = {
    "TITLE": "Sổ sách API",
    "DESCRIPTION": "Record-keeping backend: task assignments, reminders, notifications and audit logs",
    "VERSION": "1.0.0",
    "SERVE_INCLUDE_SCHEMA": False,
    "COMPONENT_SPLIT_REQUEST": True,
    "SCHEMA_PATH_PREFIX": "/api/",
    "TAGS": [
        {"name": "task-assignments", "description": "Task assignment, progress and reminders"},
        {"name": "audit-logs", "description": "Audit trail (admin only)"},
        {"name": "notifications", "description": "Notifications of the current user"},
        {"name": "health", "description": "Health check endpoints"},
    ],
}

STATIC_URL = "/static/"
