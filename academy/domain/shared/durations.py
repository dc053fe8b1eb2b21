"""
도메인 공통: 시간(분) 계산/표시 헬퍼
"""
from __future__ import annotations

import math
from datetime import datetime


def elapsed_minutes(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 60.0


def rounded_minutes(start: datetime, end: datetime) -> int:
    """Elapsed minutes rounded half-up, never negative."""
    seconds = max((end - start).total_seconds(), 0.0)
    return int(math.floor(seconds / 60.0 + 0.5))


def format_minutes(total: int) -> str:
    """125 -> "2h 5m", 5 -> "5m"."""
    hours, minutes = divmod(max(int(total), 0), 60)
    return f"{hours}h {minutes}m" if hours > 0 else f"{minutes}m"
