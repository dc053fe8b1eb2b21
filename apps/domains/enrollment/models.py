from django.db import models
from django.db.models import Q
from django.utils import timezone

from apps.api.common.models import TimestampModel
from apps.domains.courses.models import Course, Lesson


# ========================================================
# Enrollment (강좌 단위 수강 등록)
# ========================================================

class Enrollment(TimestampModel):
    """
    사용자가 특정 강좌를 수강하는 행위.
    progress 는 항상 파생값 (완료 lesson 수 / course lesson 수 * 100).
    생성/취소는 범위 밖이며 엔진은 progress/status/completion_date 만 갱신한다.
    """

    class Status(models.TextChoices):
        ACTIVE = "ACTIVE", "활성"
        COMPLETED = "COMPLETED", "완료"
        DROPPED = "DROPPED", "중도포기"
        SUSPENDED = "SUSPENDED", "정지"

    user_id = models.PositiveIntegerField(db_index=True)
    course = models.ForeignKey(
        Course,
        on_delete=models.CASCADE,
        related_name="enrollments",
    )

    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.ACTIVE,
    )
    progress = models.DecimalField(max_digits=5, decimal_places=2, default=0)

    enrollment_date = models.DateTimeField(default=timezone.now)
    completion_date = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "enrollment_enrollment"
        constraints = [
            models.UniqueConstraint(
                fields=["user_id", "course"],
                name="unique_enrollment_per_course",
            ),
            models.CheckConstraint(
                condition=Q(progress__gte=0) & Q(progress__lte=100),
                name="enrollment_progress_range",
            ),
        ]

    def __str__(self):
        return f"user={self.user_id} -> course={self.course_id} ({self.status})"


# ========================================================
# LessonProgress ((enrollment, lesson) 당 1 row)
# ========================================================

class LessonProgress(TimestampModel):
    """
    최초 접근 시 생성, 삭제하지 않음.
    is_completed 는 되돌리지 않고 time_spent 는 누적만 한다.
    """

    enrollment = models.ForeignKey(
        Enrollment,
        on_delete=models.CASCADE,
        related_name="lesson_progress",
    )
    lesson = models.ForeignKey(
        Lesson,
        on_delete=models.CASCADE,
        related_name="progress_rows",
    )

    is_completed = models.BooleanField(default=False)
    completion_date = models.DateTimeField(null=True, blank=True)
    time_spent = models.PositiveIntegerField(default=0)  # minutes
    last_access_date = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "enrollment_lesson_progress"
        unique_together = ("enrollment", "lesson")

    def __str__(self):
        return f"{self.enrollment_id} / lesson={self.lesson_id} done={self.is_completed}"
