# config/settings/prod.py
from .base import *  # noqa

DEBUG = False

if SECRET_KEY == "unsafe-dev-key":
    raise RuntimeError("DJANGO_SECRET_KEY must be set in production.")

CORS_ALLOW_ALL_ORIGINS = False
CORS_ALLOWED_ORIGINS = [o.strip() for o in os.getenv("CORS_ALLOWED_ORIGINS", "").split(",") if o.strip()]
CSRF_TRUSTED_ORIGINS = CORS_ALLOWED_ORIGINS

SIMPLE_JWT["AUTH_COOKIE_SECURE"] = True
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
