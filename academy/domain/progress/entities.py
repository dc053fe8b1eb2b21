"""
Progress 도메인 엔티티 - 순수 파이썬 (Django/ORM 미사용)

Enrollment.progress 는 항상 파생값: completed / total * 100 (소수 2자리).
Completed 전이는 단방향 (Active -> Completed, 되돌리지 않음).
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Optional

from academy.domain.shared.durations import format_minutes
from academy.domain.shared.errors import EngineValidationError

HUNDRED = Decimal("100")
TWO_PLACES = Decimal("0.01")


class EnrollmentStatus(str, Enum):
    """apps.domains.enrollment.models.Enrollment.Status 와 동기화."""
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    DROPPED = "DROPPED"
    SUSPENDED = "SUSPENDED"


@dataclass(frozen=True)
class Lesson:
    id: int
    course_id: int
    title: str
    order_index: int = 0


def progress_percentage(completed: int, total: int) -> Decimal:
    """0..100, 소수 2자리 (half-up). total == 0 이면 0."""
    if total <= 0:
        return Decimal("0.00")
    completed = max(0, min(int(completed), int(total)))
    value = Decimal(completed) / Decimal(total) * HUNDRED
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


@dataclass
class Enrollment:
    id: int
    user_id: int
    course_id: int
    enrollment_date: datetime
    status: EnrollmentStatus = EnrollmentStatus.ACTIVE
    progress: Decimal = Decimal("0.00")
    completion_date: Optional[datetime] = None

    def is_completed(self) -> bool:
        return self.status == EnrollmentStatus.COMPLETED

    def apply_lesson_counts(self, completed: int, total: int, now: datetime) -> bool:
        """
        progress 재계산 + 필요 시 Completed 전이.
        Returns: 이번 호출로 Completed 가 되었으면 True.
        total == 0 이면 아무것도 바꾸지 않음.
        """
        if total <= 0:
            return False

        self.progress = progress_percentage(completed, total)

        if self.progress >= HUNDRED and self.status == EnrollmentStatus.ACTIVE:
            self.status = EnrollmentStatus.COMPLETED
            self.completion_date = now
            return True
        return False


@dataclass
class LessonProgress:
    """(enrollment, lesson) 당 1개. 최초 접근 시 생성, 삭제하지 않음."""
    enrollment_id: int
    lesson_id: int
    last_access_date: datetime
    id: Optional[int] = None
    is_completed: bool = False
    completion_date: Optional[datetime] = None
    time_spent: int = 0  # minutes

    def mark_completed(self, now: datetime) -> bool:
        """멱등: 이미 완료면 completion_date 유지. Returns: 새로 완료됐으면 True."""
        self.last_access_date = now
        if self.is_completed:
            return False
        self.is_completed = True
        self.completion_date = now
        return True

    def add_time_spent(self, minutes: int, now: datetime) -> None:
        if minutes < 0:
            raise EngineValidationError(
                "Time spent must not be negative",
                {"minutes": minutes, "lesson_id": self.lesson_id},
            )
        self.time_spent += int(minutes)
        self.last_access_date = now

    def formatted_time_spent(self) -> str:
        return format_minutes(self.time_spent)
