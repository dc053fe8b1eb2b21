# PATH: apps/domains/courses/models.py
from django.db import models

from apps.api.common.models import TimestampModel


# ========================================================
# Course
# ========================================================

class Course(TimestampModel):
    """
    강좌 정의. 엔진은 title 과 lesson 목록만 읽는다 (CRUD 는 범위 밖).
    """

    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    is_published = models.BooleanField(default=False)

    class Meta:
        db_table = "courses_course"

    def __str__(self):
        return self.title


# ========================================================
# Lesson
# ========================================================

class Lesson(TimestampModel):
    """
    course 내 학습 단위. progress 의 분모 = course 에 속한 lesson 수.
    """

    course = models.ForeignKey(
        Course,
        on_delete=models.CASCADE,
        related_name="lessons",
    )
    title = models.CharField(max_length=255)
    content = models.TextField(blank=True, default="")
    order_index = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "courses_lesson"
        ordering = ["order_index", "id"]
        indexes = [
            models.Index(fields=["course", "order_index"], name="courses_lesson_course_ord_idx"),
        ]

    def __str__(self):
        return f"{self.course_id}:{self.order_index} {self.title}"
