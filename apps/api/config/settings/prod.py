# PATH: apps/api/config/settings/prod.py
from .base import *
import os

# ==================================================
# PROD MODE
# ==================================================

DEBUG = False

SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "")

ALLOWED_HOSTS = [h for h in os.getenv("DJANGO_ALLOWED_HOSTS", "").split(",") if h]

# ==================================================
# DATABASE
# ==================================================
# 연결 재사용 (요청당 짧은 트랜잭션 전제)

DATABASES["default"]["CONN_MAX_AGE"] = int(os.getenv("DB_CONN_MAX_AGE", "60"))

# ==================================================
# FINAL ASSERTIONS (운영 안정성)
# ==================================================

assert DEBUG is False, "prod.py must run with DEBUG=False"
if not SECRET_KEY or SECRET_KEY == "dev-secret-key":
    raise RuntimeError("DJANGO_SECRET_KEY must be set in prod.")
if not os.getenv("DB_NAME"):
    raise RuntimeError("DB_NAME must be set in prod (PostgreSQL).")
