"""
Quiz catalog / QuizAttempt Repository - Django ORM 구현 (메서드 내부에서만 apps.domains import)
"""
from __future__ import annotations

import logging
from typing import Optional

from academy.domain.assessments.entities import (
    AnswerOption,
    AttemptAnswer,
    Question,
    QuestionType,
    Quiz,
    QuizAttempt,
)
from academy.domain.shared.errors import (
    AttemptAlreadyCompletedError,
    AttemptAlreadyInProgressError,
)

logger = logging.getLogger(__name__)


def _quiz_to_entity(m) -> Optional[Quiz]:
    if m is None:
        return None
    return Quiz(
        id=m.id,
        course_id=m.course_id,
        lesson_id=m.lesson_id,
        title=m.title,
        description=m.description or "",
        time_limit=m.time_limit,
        passing_score=int(m.passing_score),
        max_attempts=int(m.max_attempts),
        is_active=bool(m.is_active),
    )


def _question_to_entity(m) -> Optional[Question]:
    if m is None:
        return None
    return Question(
        id=m.id,
        quiz_id=m.quiz_id,
        text=m.text,
        question_type=QuestionType(m.question_type),
        points=int(m.points),
        order_index=int(m.order_index),
        is_active=bool(m.is_active),
    )


def _answer_to_entity(m) -> AnswerOption:
    return AnswerOption(
        id=m.id,
        question_id=m.question_id,
        text=m.text,
        is_correct=bool(m.is_correct),
        order_index=int(m.order_index),
    )


def _attempt_to_entity(m) -> Optional[QuizAttempt]:
    if m is None:
        return None
    return QuizAttempt(
        id=m.id,
        quiz_id=m.quiz_id,
        user_id=int(m.user_id),
        max_score=int(m.max_score),
        started_at=m.started_at,
        score=int(m.score or 0),
        completed_at=m.completed_at,
        time_spent=int(m.time_spent or 0),
        is_passed=bool(m.is_passed),
        answers=[
            AttemptAnswer(
                question_id=a.question_id,
                selected_answer_ids=frozenset(int(x) for x in (a.selected_answer_ids or [])),
                is_correct=bool(a.is_correct),
                points_earned=int(a.points_earned or 0),
            )
            for a in m.answers.all()
        ],
    )


class DjangoQuizCatalog:
    """QuizCatalog 구현. 읽기 전용."""

    def get_quiz(self, quiz_id: int) -> Optional[Quiz]:
        from apps.domains.assessments.models import Quiz as QuizModel
        return _quiz_to_entity(QuizModel.objects.filter(id=quiz_id).first())

    def get_question(self, question_id: int) -> Optional[Question]:
        from apps.domains.assessments.models import Question as QuestionModel
        return _question_to_entity(QuestionModel.objects.filter(id=question_id).first())

    def get_active_questions(self, quiz_id: int) -> list[Question]:
        from apps.domains.assessments.models import Question as QuestionModel
        qs = QuestionModel.objects.filter(quiz_id=quiz_id, is_active=True).order_by("order_index", "id")
        return [_question_to_entity(m) for m in qs]

    def get_answers(self, question_id: int) -> list[AnswerOption]:
        from apps.domains.assessments.models import Answer
        qs = Answer.objects.filter(question_id=question_id).order_by("order_index", "id")
        return [_answer_to_entity(m) for m in qs]


class DjangoQuizAttemptRepository:
    """QuizAttemptRepository 구현. lock 계열 메서드는 UoW 트랜잭션 안에서만 의미가 있다."""

    def _queryset(self):
        from apps.domains.assessments.models import QuizAttempt as QuizAttemptModel
        return QuizAttemptModel.objects.prefetch_related("answers")

    def get_by_id(self, attempt_id: int) -> Optional[QuizAttempt]:
        return _attempt_to_entity(self._queryset().filter(id=attempt_id).first())

    def get_for_update(self, attempt_id: int) -> Optional[QuizAttempt]:
        from apps.domains.assessments.models import QuizAttempt as QuizAttemptModel
        m = QuizAttemptModel.objects.select_for_update().filter(id=attempt_id).first()
        return _attempt_to_entity(m)

    def lock_user_attempts(self, user_id: int, quiz_id: int) -> None:
        from apps.domains.assessments.models import QuizAttempt as QuizAttemptModel
        # 평가를 강제해야 lock 이 잡힌다
        list(
            QuizAttemptModel.objects.select_for_update()
            .filter(user_id=user_id, quiz_id=quiz_id)
            .values_list("id", flat=True)
        )

    def count_for_user(self, user_id: int, quiz_id: int) -> int:
        from apps.domains.assessments.models import QuizAttempt as QuizAttemptModel
        return QuizAttemptModel.objects.filter(user_id=user_id, quiz_id=quiz_id).count()

    def get_in_progress(self, user_id: int, quiz_id: int) -> Optional[QuizAttempt]:
        m = (
            self._queryset()
            .filter(user_id=user_id, quiz_id=quiz_id, completed_at__isnull=True)
            .first()
        )
        return _attempt_to_entity(m)

    def list_for_user(self, user_id: int, quiz_id: Optional[int] = None) -> list[QuizAttempt]:
        qs = self._queryset().filter(user_id=user_id)
        if quiz_id is not None:
            qs = qs.filter(quiz_id=quiz_id)
        return [_attempt_to_entity(m) for m in qs.order_by("-started_at", "-id")]

    def create(self, attempt: QuizAttempt) -> QuizAttempt:
        from django.db import IntegrityError, transaction
        from apps.domains.assessments.models import QuizAttempt as QuizAttemptModel

        try:
            # savepoint: 실패해도 바깥 UoW 트랜잭션은 계속 사용 가능
            with transaction.atomic():
                m = QuizAttemptModel.objects.create(
                    quiz_id=attempt.quiz_id,
                    user_id=attempt.user_id,
                    max_score=attempt.max_score,
                    started_at=attempt.started_at,
                )
        except IntegrityError as e:
            logger.warning(
                "[attempt_repo] in-progress conflict user_id=%s quiz_id=%s err=%s",
                attempt.user_id,
                attempt.quiz_id,
                e,
            )
            raise AttemptAlreadyInProgressError(
                "An attempt is already in progress for this quiz",
                {"user_id": attempt.user_id, "quiz_id": attempt.quiz_id},
            ) from e

        attempt.id = m.id
        return attempt

    def save_completed(self, attempt: QuizAttempt) -> None:
        from apps.domains.assessments.models import AttemptAnswer as AttemptAnswerModel
        from apps.domains.assessments.models import QuizAttempt as QuizAttemptModel

        # compare-and-set: 진행 중일 때만 완료 필드 기록
        updated = QuizAttemptModel.objects.filter(
            id=attempt.id,
            completed_at__isnull=True,
        ).update(
            score=attempt.score,
            completed_at=attempt.completed_at,
            time_spent=attempt.time_spent,
            is_passed=attempt.is_passed,
        )
        if updated == 0:
            raise AttemptAlreadyCompletedError(
                "Quiz attempt has already been completed",
                {"attempt_id": attempt.id},
            )

        AttemptAnswerModel.objects.bulk_create(
            [
                AttemptAnswerModel(
                    attempt_id=attempt.id,
                    question_id=a.question_id,
                    selected_answer_ids=sorted(a.selected_answer_ids),
                    is_correct=a.is_correct,
                    points_earned=a.points_earned,
                )
                for a in attempt.answers
            ]
        )
