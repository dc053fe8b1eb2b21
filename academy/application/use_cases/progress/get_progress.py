"""
Progress 조회 Use Case (읽기 전용, 재계산 없음)
"""
from __future__ import annotations

import logging

from academy.application.dto.progress import EnrollmentProgressView, LessonProgressView
from academy.application.ports.unit_of_work import UnitOfWork
from academy.application.use_cases.common import to_err
from academy.application.use_cases.progress.record_lesson_progress import (
    lesson_progress_view,
    load_enrollment_and_lesson,
)
from academy.domain.progress.entities import progress_percentage
from academy.domain.shared.durations import format_minutes
from academy.domain.shared.errors import EngineError, NotFoundError
from academy.domain.shared.result import Ok, Result

logger = logging.getLogger(__name__)


def _default_view(enrollment_id: int, lesson) -> LessonProgressView:
    return LessonProgressView(
        lesson_id=lesson.id,
        lesson_title=lesson.title,
        enrollment_id=enrollment_id,
        is_completed=False,
        completion_date=None,
        time_spent=0,
        formatted_time_spent=format_minutes(0),
        last_access_date=None,
    )


def get_lesson_progress(uow: UnitOfWork, enrollment_id: int, lesson_id: int) -> Result[LessonProgressView]:
    try:
        with uow:
            _, lesson = load_enrollment_and_lesson(uow, enrollment_id, lesson_id)
            row = uow.lesson_progress.get(enrollment_id, lesson_id)
    except EngineError as e:
        return to_err(e, logger=logger, tag="lesson_progress", enrollment_id=enrollment_id, lesson_id=lesson_id)

    if row is None:
        return Ok(_default_view(enrollment_id, lesson))
    return Ok(lesson_progress_view(row, lesson))


def get_enrollment_progress(uow: UnitOfWork, enrollment_id: int) -> Result[EnrollmentProgressView]:
    """
    course 의 모든 lesson(order_index 순)에 대해 row 또는 기본값.
    overall_progress 는 화면용 계산값이며 enrollment.progress 를 덮어쓰지 않는다.
    """
    try:
        with uow:
            enrollment = uow.enrollments.get_by_id(enrollment_id)
            if enrollment is None:
                raise NotFoundError(
                    f"Enrollment with ID {enrollment_id} not found",
                    {"enrollment_id": enrollment_id},
                )
            course_title = uow.lessons.get_course_title(enrollment.course_id)
            if course_title is None:
                raise NotFoundError(
                    "Associated course not found",
                    {"enrollment_id": enrollment_id, "course_id": enrollment.course_id},
                )
            lessons = sorted(uow.lessons.list_for_course(enrollment.course_id), key=lambda l: l.order_index)
            rows = {r.lesson_id: r for r in uow.lesson_progress.list_for_enrollment(enrollment_id)}
    except EngineError as e:
        return to_err(e, logger=logger, tag="enrollment_progress", enrollment_id=enrollment_id)

    views: list[LessonProgressView] = []
    completed = 0
    total_time = 0
    for lesson in lessons:
        row = rows.get(lesson.id)
        if row is None:
            views.append(_default_view(enrollment_id, lesson))
            continue
        views.append(lesson_progress_view(row, lesson))
        total_time += row.time_spent
        if row.is_completed:
            completed += 1

    last_access = max((r.last_access_date for r in rows.values()), default=None)

    return Ok(
        EnrollmentProgressView(
            enrollment_id=enrollment.id,
            user_id=enrollment.user_id,
            course_id=enrollment.course_id,
            course_title=course_title,
            status=enrollment.status.value,
            lessons=views,
            overall_progress=progress_percentage(completed, len(lessons)),
            completed_lessons=completed,
            total_lessons=len(lessons),
            total_time_spent=total_time,
            formatted_total_time=format_minutes(total_time),
            last_access_date=last_access or enrollment.enrollment_date,
            completion_date=enrollment.completion_date,
        )
    )
