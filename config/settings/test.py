# config/settings/test.py
import tempfile

from .base import *  # noqa

DEBUG = False
SECRET_KEY = "test-secret-key"

if os.getenv("TEST_DB_ENGINE", "sqlite").lower() == "sqlite":
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": ":memory:",
        }
    }

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]
MEDIA_ROOT = tempfile.mkdtemp(prefix="tc-media-")

LOGGING["loggers"]["tc_core"]["level"] = "WARNING"
