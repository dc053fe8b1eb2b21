from .base import *

DEBUG = True
ALLOWED_HOSTS = ["*"]

# 로컬은 DB_NAME 없으면 sqlite 파일로
if not os.getenv("DB_NAME"):
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": BASE_DIR / "db.sqlite3",
        }
    }

LOGGING["loggers"]["academy"]["level"] = os.getenv("ACADEMY_LOG_LEVEL", "DEBUG")
