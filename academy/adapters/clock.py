"""
Clock 어댑터 - 시스템 시각 (UTC)
"""
from __future__ import annotations

from datetime import datetime, timezone


class SystemClock:

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


SYSTEM_CLOCK = SystemClock()
