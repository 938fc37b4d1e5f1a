import os
from dotenv import load_dotenv

load_dotenv()

SETTINGS_MODULE = "sosach_project.settings.settings"


def configure_settings_module():
    """
    Point DJANGO_SETTINGS_MODULE at the consolidated settings file unless the caller already chose one.
    All environment-specific configuration is handled through environment variables.
    """
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", SETTINGS_MODULE)
