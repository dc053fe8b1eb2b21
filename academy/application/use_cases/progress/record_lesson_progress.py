"""
Progress aggregator Use Case - 도메인/포트만 사용 (Django 미사용)

lesson 완료/학습시간 기록 -> enrollment progress 재계산 -> 100% 면 Completed 전이.
enrollment row lock 을 먼저 잡아 같은 enrollment 의 read-modify-write 를 직렬화한다.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from academy.application.dto.progress import LessonProgressView, ProgressView
from academy.application.ports.clock import Clock
from academy.application.ports.unit_of_work import UnitOfWork
from academy.application.use_cases.common import resolve_now, to_err
from academy.domain.progress.entities import Enrollment, Lesson, LessonProgress
from academy.domain.shared.errors import (
    EngineError,
    EngineValidationError,
    InvalidStateError,
    NotFoundError,
)
from academy.domain.shared.result import Ok, Result

logger = logging.getLogger(__name__)


def lesson_progress_view(row: LessonProgress, lesson: Lesson) -> LessonProgressView:
    return LessonProgressView(
        lesson_id=lesson.id,
        lesson_title=lesson.title,
        enrollment_id=row.enrollment_id,
        is_completed=row.is_completed,
        completion_date=row.completion_date,
        time_spent=row.time_spent,
        formatted_time_spent=row.formatted_time_spent(),
        last_access_date=row.last_access_date,
    )


def load_enrollment_and_lesson(
    uow: UnitOfWork,
    enrollment_id: int,
    lesson_id: int,
    *,
    for_update: bool = False,
) -> tuple[Enrollment, Lesson]:
    repo = uow.enrollments
    enrollment = repo.get_for_update(enrollment_id) if for_update else repo.get_by_id(enrollment_id)
    if enrollment is None:
        raise NotFoundError(
            f"Enrollment with ID {enrollment_id} not found",
            {"enrollment_id": enrollment_id},
        )

    lesson = uow.lessons.get_lesson(lesson_id)
    if lesson is None:
        raise NotFoundError(f"Lesson with ID {lesson_id} not found", {"lesson_id": lesson_id})

    if lesson.course_id != enrollment.course_id:
        raise InvalidStateError(
            "Lesson does not belong to the enrolled course",
            {
                "lesson_id": lesson_id,
                "lesson_course_id": lesson.course_id,
                "enrollment_course_id": enrollment.course_id,
            },
        )
    return enrollment, lesson


def _whole_minutes(value) -> int:
    """minutes_delta 검증. 소수 분은 잘라내지 않고 거절 (학습시간 유실 방지)."""
    try:
        minutes = float(value)
    except (TypeError, ValueError):
        raise EngineValidationError(
            "Time spent must be a number of minutes",
            {"minutes_delta": value},
        ) from None
    if not minutes.is_integer():
        raise EngineValidationError(
            "Time spent must be a whole number of minutes",
            {"minutes_delta": value},
        )
    if minutes < 0:
        raise EngineValidationError(
            "Time spent must not be negative",
            {"minutes_delta": value},
        )
    return int(minutes)


def _recompute(uow: UnitOfWork, enrollment: Enrollment, now: datetime) -> bool:
    total = uow.lessons.get_lesson_count(enrollment.course_id)
    completed = uow.lesson_progress.count_completed(enrollment.id, enrollment.course_id)
    completed_now = enrollment.apply_lesson_counts(completed, total, now)
    uow.enrollments.save(enrollment)
    logger.debug(
        "[progress] enrollment_id=%s completed=%s total=%s progress=%s status=%s",
        enrollment.id,
        completed,
        total,
        enrollment.progress,
        enrollment.status.value,
    )
    return completed_now


def record_lesson_progress(
    uow: UnitOfWork,
    enrollment_id: int,
    lesson_id: int,
    *,
    completed: bool = False,
    minutes_delta: int = 0,
    clock: Optional[Clock] = None,
) -> Result[ProgressView]:
    now = resolve_now(clock)

    try:
        minutes = _whole_minutes(minutes_delta)

        with uow:
            enrollment, lesson = load_enrollment_and_lesson(uow, enrollment_id, lesson_id, for_update=True)

            row = uow.lesson_progress.get_or_create(enrollment_id, lesson_id, now)
            newly_completed = row.mark_completed(now) if completed else False
            row.add_time_spent(minutes, now)
            uow.lesson_progress.save(row)

            completed_now = _recompute(uow, enrollment, now)
    except EngineError as e:
        return to_err(e, logger=logger, tag="record_progress", enrollment_id=enrollment_id, lesson_id=lesson_id)

    if newly_completed:
        logger.info(
            "[record_progress] lesson completed enrollment_id=%s lesson_id=%s progress=%s",
            enrollment_id,
            lesson_id,
            enrollment.progress,
        )
    if completed_now:
        logger.info("[record_progress] enrollment completed enrollment_id=%s", enrollment_id)

    return Ok(
        ProgressView(
            lesson=lesson_progress_view(row, lesson),
            enrollment_id=enrollment.id,
            enrollment_progress=enrollment.progress,
            enrollment_status=enrollment.status.value,
            enrollment_completion_date=enrollment.completion_date,
            enrollment_completed_now=completed_now,
        )
    )


def recompute_enrollment_progress(
    uow: UnitOfWork,
    enrollment_id: int,
    *,
    clock: Optional[Clock] = None,
) -> Result[ProgressView]:
    """저장된 row 기준 재계산 (lesson 카탈로그 변경 후 관리 명령에서 사용). 단방향 완료 규칙 동일."""
    now = resolve_now(clock)
    try:
        with uow:
            enrollment = uow.enrollments.get_for_update(enrollment_id)
            if enrollment is None:
                raise NotFoundError(
                    f"Enrollment with ID {enrollment_id} not found",
                    {"enrollment_id": enrollment_id},
                )
            completed_now = _recompute(uow, enrollment, now)
    except EngineError as e:
        return to_err(e, logger=logger, tag="recompute_progress", enrollment_id=enrollment_id)

    if completed_now:
        logger.info("[recompute_progress] enrollment completed enrollment_id=%s", enrollment_id)

    return Ok(
        ProgressView(
            lesson=None,
            enrollment_id=enrollment.id,
            enrollment_progress=enrollment.progress,
            enrollment_status=enrollment.status.value,
            enrollment_completion_date=enrollment.completion_date,
            enrollment_completed_now=completed_now,
        )
    )
