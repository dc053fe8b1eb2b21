# academy/application/dto/progress.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class LessonProgressView:
    lesson_id: int
    lesson_title: str
    enrollment_id: int
    is_completed: bool
    completion_date: Optional[datetime]
    time_spent: int
    formatted_time_spent: str
    last_access_date: Optional[datetime]


@dataclass(frozen=True)
class ProgressView:
    """RecordLessonProgress 결과: lesson row + 갱신된 enrollment 집계. 재계산만 한 경우 lesson=None."""
    lesson: Optional[LessonProgressView]
    enrollment_id: int
    enrollment_progress: Decimal
    enrollment_status: str
    enrollment_completion_date: Optional[datetime]
    enrollment_completed_now: bool


@dataclass(frozen=True)
class EnrollmentProgressView:
    enrollment_id: int
    user_id: int
    course_id: int
    course_title: str
    status: str
    lessons: list[LessonProgressView]
    overall_progress: Decimal
    completed_lessons: int
    total_lessons: int
    total_time_spent: int
    formatted_total_time: str
    last_access_date: datetime
    completion_date: Optional[datetime]
