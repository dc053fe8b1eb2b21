# PATH: apps/domains/assessments/models.py
from django.conf import settings
from django.db import models
from django.db.models import Q

from apps.api.common.models import TimestampModel
from apps.domains.courses.models import Course, Lesson


def default_passing_score():
    return int(getattr(settings, "ASSESSMENT_DEFAULT_PASSING_SCORE", 70))


def default_max_attempts():
    return int(getattr(settings, "ASSESSMENT_DEFAULT_MAX_ATTEMPTS", 3))


# ========================================================
# Quiz / Question / Answer (카탈로그, 엔진은 읽기만)
# ========================================================

class Quiz(TimestampModel):
    course = models.ForeignKey(
        Course,
        on_delete=models.CASCADE,
        related_name="quizzes",
    )
    lesson = models.ForeignKey(
        Lesson,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="quizzes",
    )

    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")

    # 분 단위, null 이면 무제한
    time_limit = models.PositiveIntegerField(null=True, blank=True)
    passing_score = models.PositiveSmallIntegerField(default=default_passing_score)  # 0~100 (%)
    max_attempts = models.PositiveIntegerField(default=default_max_attempts)

    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "assessments_quiz"
        constraints = [
            models.CheckConstraint(
                condition=Q(time_limit__isnull=True) | Q(time_limit__gt=0),
                name="quiz_time_limit_positive",
            ),
            models.CheckConstraint(
                condition=Q(passing_score__gte=0) & Q(passing_score__lte=100),
                name="quiz_passing_score_range",
            ),
            models.CheckConstraint(
                condition=Q(max_attempts__gte=1),
                name="quiz_max_attempts_min_1",
            ),
        ]

    def __str__(self):
        return self.title


class Question(TimestampModel):

    class QuestionType(models.TextChoices):
        MULTIPLE_CHOICE = "multiple_choice", "Multiple choice"
        TRUE_FALSE = "true_false", "True / False"
        SHORT_ANSWER = "short_answer", "Short answer"
        ESSAY = "essay", "Essay"

    quiz = models.ForeignKey(
        Quiz,
        on_delete=models.CASCADE,
        related_name="questions",
    )
    text = models.TextField()
    question_type = models.CharField(
        max_length=20,
        choices=QuestionType.choices,
        default=QuestionType.MULTIPLE_CHOICE,
    )
    points = models.PositiveIntegerField(default=1)
    order_index = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "assessments_question"
        ordering = ["order_index", "id"]
        constraints = [
            models.CheckConstraint(
                condition=Q(points__gt=0),
                name="question_points_positive",
            ),
        ]

    def __str__(self):
        return f"Q{self.order_index} ({self.question_type})"


class Answer(TimestampModel):
    """문항 선택지. is_correct 는 완료 후 결과 화면에서만 노출."""

    question = models.ForeignKey(
        Question,
        on_delete=models.CASCADE,
        related_name="answers",
    )
    text = models.CharField(max_length=1000)
    is_correct = models.BooleanField(default=False)
    order_index = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "assessments_answer"
        ordering = ["order_index", "id"]

    def __str__(self):
        return self.text[:50]


# ========================================================
# QuizAttempt / AttemptAnswer (엔진이 쓰는 테이블)
# ========================================================

class QuizAttempt(models.Model):
    """
    (quiz, user) 1회 응시.

    - completed_at IS NULL 이면 진행 중
    - 진행 중 attempt 는 (quiz, user_id) 당 최대 1개 (partial unique)
    - 완료 후 score/is_passed/time_spent 는 다시 쓰지 않는다
    """

    quiz = models.ForeignKey(
        Quiz,
        on_delete=models.CASCADE,
        related_name="attempts",
    )
    user_id = models.PositiveIntegerField(db_index=True)

    score = models.PositiveIntegerField(default=0)
    max_score = models.PositiveIntegerField(default=0)

    started_at = models.DateTimeField()
    completed_at = models.DateTimeField(null=True, blank=True)

    time_spent = models.PositiveIntegerField(default=0)  # minutes
    is_passed = models.BooleanField(default=False)

    class Meta:
        db_table = "assessments_quiz_attempt"
        ordering = ["-started_at", "-id"]
        constraints = [
            models.UniqueConstraint(
                fields=["quiz", "user_id"],
                condition=Q(completed_at__isnull=True),
                name="uniq_in_progress_attempt_per_user_quiz",
            ),
        ]
        indexes = [
            models.Index(fields=["user_id", "quiz"], name="attempt_user_quiz_idx"),
        ]

    def __str__(self):
        state = "done" if self.completed_at else "in_progress"
        return f"QuizAttempt({self.id}) quiz={self.quiz_id} user={self.user_id} {state}"


class AttemptAnswer(models.Model):
    """제출 시 문항별 채점 결과 (선택 id 는 제출 그대로)."""

    attempt = models.ForeignKey(
        QuizAttempt,
        on_delete=models.CASCADE,
        related_name="answers",
    )
    question = models.ForeignKey(
        Question,
        on_delete=models.CASCADE,
        related_name="attempt_answers",
    )
    selected_answer_ids = models.JSONField(default=list, blank=True)
    is_correct = models.BooleanField(default=False)
    points_earned = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "assessments_attempt_answer"
        constraints = [
            models.UniqueConstraint(
                fields=["attempt", "question"],
                name="uniq_attempt_answer_per_question",
            ),
        ]
