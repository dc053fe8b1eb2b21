"""
Attempt constraint enforcer - 순수 규칙

check_can_start 는 조회 결과만 받아서 판단한다. 원자성(check-then-insert)은
어댑터의 row lock + partial unique constraint가 보장.
"""
from __future__ import annotations

from typing import Optional, Sequence

from academy.domain.assessments.entities import Question, Quiz, QuizAttempt
from academy.domain.shared.errors import (
    AttemptAlreadyInProgressError,
    AttemptLimitExceededError,
    InvalidStateError,
    NoQuestionsError,
    NotFoundError,
)


def check_can_start(
    *,
    quiz_id: int,
    quiz: Optional[Quiz],
    attempt_count: int,
    in_progress: Optional[QuizAttempt],
    active_questions: Sequence[Question],
) -> Quiz:
    """
    순서 고정:
    1) quiz 존재 + active
    2) attempt_count < max_attempts
    3) 진행 중 attempt 없음
    4) active question 1개 이상
    통과하면 quiz 반환, 아니면 EngineError.
    """
    if quiz is None:
        raise NotFoundError(f"Quiz with ID {quiz_id} not found", {"quiz_id": quiz_id})

    if not quiz.is_active:
        raise InvalidStateError("Quiz is not active", {"quiz_id": quiz.id})

    if attempt_count >= quiz.max_attempts:
        raise AttemptLimitExceededError(
            f"User has exceeded maximum attempts ({quiz.max_attempts}) for this quiz",
            {"quiz_id": quiz.id, "max_attempts": quiz.max_attempts, "attempt_count": attempt_count},
        )

    if in_progress is not None:
        raise AttemptAlreadyInProgressError(
            "User already has an active attempt for this quiz",
            {"quiz_id": quiz.id, "attempt_id": in_progress.id},
        )

    if not active_questions:
        raise NoQuestionsError("Quiz has no active questions", {"quiz_id": quiz.id})

    return quiz
