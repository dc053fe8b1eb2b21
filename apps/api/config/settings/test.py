# PATH: apps/api/config/settings/test.py
from .base import *

DEBUG = False

# pytest-django 전용: in-memory sqlite (select_for_update 는 no-op, 제약조건은 동일하게 검사)
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]

LOGGING["loggers"]["academy"]["level"] = "DEBUG"
