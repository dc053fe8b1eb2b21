"""
Lesson catalog / Enrollment / LessonProgress Repository - Django ORM 구현
.objects 접근은 adapters 내부로 한정 (메서드 내부 lazy import).
"""
from __future__ import annotations

from typing import Optional

from academy.domain.progress.entities import (
    Enrollment,
    EnrollmentStatus,
    Lesson,
    LessonProgress,
)


def _lesson_to_entity(m) -> Optional[Lesson]:
    if m is None:
        return None
    return Lesson(
        id=m.id,
        course_id=m.course_id,
        title=m.title,
        order_index=int(m.order_index),
    )


def _enrollment_to_entity(m) -> Optional[Enrollment]:
    if m is None:
        return None
    return Enrollment(
        id=m.id,
        user_id=int(m.user_id),
        course_id=m.course_id,
        enrollment_date=m.enrollment_date,
        status=EnrollmentStatus(m.status),
        progress=m.progress,
        completion_date=m.completion_date,
    )


def _progress_to_entity(m) -> Optional[LessonProgress]:
    if m is None:
        return None
    return LessonProgress(
        id=m.id,
        enrollment_id=m.enrollment_id,
        lesson_id=m.lesson_id,
        is_completed=bool(m.is_completed),
        completion_date=m.completion_date,
        time_spent=int(m.time_spent or 0),
        last_access_date=m.last_access_date,
    )


class DjangoLessonCatalog:

    def get_lesson(self, lesson_id: int) -> Optional[Lesson]:
        from apps.domains.courses.models import Lesson as LessonModel
        return _lesson_to_entity(LessonModel.objects.filter(id=lesson_id).first())

    def get_lesson_count(self, course_id: int) -> int:
        from apps.domains.courses.models import Lesson as LessonModel
        return LessonModel.objects.filter(course_id=course_id).count()

    def list_for_course(self, course_id: int) -> list[Lesson]:
        from apps.domains.courses.models import Lesson as LessonModel
        qs = LessonModel.objects.filter(course_id=course_id).order_by("order_index", "id")
        return [_lesson_to_entity(m) for m in qs]

    def get_course_title(self, course_id: int) -> Optional[str]:
        from apps.domains.courses.models import Course
        return Course.objects.filter(id=course_id).values_list("title", flat=True).first()


class DjangoEnrollmentRepository:

    def get_by_id(self, enrollment_id: int) -> Optional[Enrollment]:
        from apps.domains.enrollment.models import Enrollment as EnrollmentModel
        return _enrollment_to_entity(EnrollmentModel.objects.filter(id=enrollment_id).first())

    def get_for_update(self, enrollment_id: int) -> Optional[Enrollment]:
        """호출자가 이미 UoW 트랜잭션 내에 있어야 함 (select_for_update 락 유지)."""
        from apps.domains.enrollment.models import Enrollment as EnrollmentModel
        m = EnrollmentModel.objects.select_for_update().filter(id=enrollment_id).first()
        return _enrollment_to_entity(m)

    def save(self, enrollment: Enrollment) -> None:
        from django.utils import timezone
        from apps.domains.enrollment.models import Enrollment as EnrollmentModel

        # 엔진이 쓰는 필드만 갱신 (생성/취소는 범위 밖)
        EnrollmentModel.objects.filter(id=enrollment.id).update(
            status=enrollment.status.value,
            progress=enrollment.progress,
            completion_date=enrollment.completion_date,
            updated_at=timezone.now(),
        )


class DjangoLessonProgressRepository:

    def get(self, enrollment_id: int, lesson_id: int) -> Optional[LessonProgress]:
        from apps.domains.enrollment.models import LessonProgress as LessonProgressModel
        m = LessonProgressModel.objects.filter(enrollment_id=enrollment_id, lesson_id=lesson_id).first()
        return _progress_to_entity(m)

    def get_or_create(self, enrollment_id: int, lesson_id: int, now) -> LessonProgress:
        from apps.domains.enrollment.models import LessonProgress as LessonProgressModel
        m, _ = LessonProgressModel.objects.get_or_create(
            enrollment_id=enrollment_id,
            lesson_id=lesson_id,
            defaults={"last_access_date": now},
        )
        return _progress_to_entity(m)

    def save(self, progress: LessonProgress) -> None:
        from django.utils import timezone
        from apps.domains.enrollment.models import LessonProgress as LessonProgressModel

        LessonProgressModel.objects.filter(id=progress.id).update(
            is_completed=progress.is_completed,
            completion_date=progress.completion_date,
            time_spent=progress.time_spent,
            last_access_date=progress.last_access_date,
            updated_at=timezone.now(),
        )

    def list_for_enrollment(self, enrollment_id: int) -> list[LessonProgress]:
        from apps.domains.enrollment.models import LessonProgress as LessonProgressModel
        qs = LessonProgressModel.objects.filter(enrollment_id=enrollment_id).order_by("lesson__order_index", "id")
        return [_progress_to_entity(m) for m in qs]

    def count_completed(self, enrollment_id: int, course_id: int) -> int:
        from apps.domains.enrollment.models import LessonProgress as LessonProgressModel
        return LessonProgressModel.objects.filter(
            enrollment_id=enrollment_id,
            lesson__course_id=course_id,
            is_completed=True,
        ).count()
