# apps/api/config/settings/base.py

from pathlib import Path
import os

# ==================================================
# BASE
# ==================================================

BASE_DIR = Path(__file__).resolve().parents[4]

SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "dev-secret-key")
DEBUG = True
ALLOWED_HOSTS = ["*"]

# ==================================================
# INSTALLED APPS
# ==================================================
# 엔진은 transport 가 없으므로 admin / session / DRF 없음

INSTALLED_APPS = [
    # Django
    "django.contrib.auth",
    "django.contrib.contenttypes",

    # Domain Apps
    "apps.domains.courses.apps.CoursesConfig",
    "apps.domains.assessments.apps.AssessmentsConfig",
    "apps.domains.enrollment.apps.EnrollmentConfig",
]

MIDDLEWARE = []

# ==================================================
# DATABASE
# ==================================================

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": os.getenv("DB_NAME"),
        "USER": os.getenv("DB_USER"),
        "PASSWORD": os.getenv("DB_PASSWORD"),
        "HOST": os.getenv("DB_HOST"),
        "PORT": os.getenv("DB_PORT", "5432"),
        # attempt / progress 경로는 UoW 가 transaction.atomic 으로 직접 감싼다
        "ATOMIC_REQUESTS": False,
    }
}

# ==================================================
# GLOBAL
# ==================================================

LANGUAGE_CODE = "ko-kr"
TIME_ZONE = "Asia/Seoul"

USE_I18N = True
USE_TZ = True

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# ==================================================
# ASSESSMENT ENGINE
# ==================================================
# 새 Quiz 의 필드 기본값 (기존 quiz 에는 영향 없음)

ASSESSMENT_DEFAULT_PASSING_SCORE = int(os.getenv("ASSESSMENT_DEFAULT_PASSING_SCORE", "70"))
ASSESSMENT_DEFAULT_MAX_ATTEMPTS = int(os.getenv("ASSESSMENT_DEFAULT_MAX_ATTEMPTS", "3"))

# ==================================================
# LOGGING
# ==================================================

ACADEMY_LOG_LEVEL = os.getenv("ACADEMY_LOG_LEVEL", "INFO")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {
            "format": "[{levelname}] {asctime} {name}: {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "simple",
        },
    },
    "loggers": {
        # handler 는 root 것을 그대로 사용 (propagate)
        "academy": {
            "level": ACADEMY_LOG_LEVEL,
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
}
