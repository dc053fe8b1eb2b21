"""
Clock 포트 - 현재 시각 주입 (테스트에서 경과 시간 제어)
"""
from __future__ import annotations

from datetime import datetime
from typing import Protocol


class Clock(Protocol):

    def now(self) -> datetime:
        """timezone-aware UTC."""
        ...
