"""
Attempt 조회 Use Case 모음 (읽기 전용)

- get_attempt_by_id: include_answers 이면 저장된 제출로 문항별 결과 재구성
- get_user_best_attempt / get_user_latest_attempt / list_user_quiz_attempts
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from academy.application.dto.assessments import AttemptDetailView
from academy.application.ports.clock import Clock
from academy.application.ports.unit_of_work import UnitOfWork
from academy.application.use_cases.assessments.presenters import (
    UNKNOWN_USER,
    graded_questions,
    load_options,
)
from academy.application.use_cases.common import resolve_now, to_err
from academy.domain.assessments.entities import Quiz, QuizAttempt
from academy.domain.shared.errors import EngineError, NotFoundError
from academy.domain.shared.result import Ok, Result

logger = logging.getLogger(__name__)


def _detail_view(
    uow: UnitOfWork,
    attempt: QuizAttempt,
    quiz: Quiz,
    now: datetime,
    include_answers: bool = False,
) -> AttemptDetailView:
    completed = attempt.is_completed()

    answers = None
    if include_answers and completed:
        # 비활성화된 문항도 당시 제출 기준으로 보여준다
        questions = [uow.quizzes.get_question(a.question_id) for a in attempt.answers]
        questions = sorted((q for q in questions if q is not None), key=lambda q: q.order_index)
        answers = graded_questions(questions, load_options(uow.quizzes, questions), attempt.answers)

    return AttemptDetailView(
        attempt_id=int(attempt.id),
        quiz_id=quiz.id,
        quiz_title=quiz.title,
        user_id=attempt.user_id,
        user_name=uow.users.get_display_name(attempt.user_id) or UNKNOWN_USER,
        started_at=attempt.started_at,
        completed_at=attempt.completed_at,
        score=attempt.score if completed else None,
        max_score=attempt.max_score,
        score_percentage=attempt.rounded_percentage() if completed else 0,
        is_completed=completed,
        is_passed=attempt.is_passed,
        time_spent=attempt.time_spent,
        formatted_time_spent=attempt.formatted_time_spent(),
        time_remaining_minutes=attempt.time_remaining_minutes(quiz, now),
        answers=answers,
    )


def _quiz_or_raise(uow: UnitOfWork, quiz_id: int) -> Quiz:
    quiz = uow.quizzes.get_quiz(quiz_id)
    if quiz is None:
        raise NotFoundError(f"Quiz with ID {quiz_id} not found", {"quiz_id": quiz_id})
    return quiz


def get_attempt_by_id(
    uow: UnitOfWork,
    attempt_id: int,
    *,
    include_answers: bool = False,
    clock: Optional[Clock] = None,
) -> Result[AttemptDetailView]:
    now = resolve_now(clock)
    try:
        with uow:
            attempt = uow.attempts.get_by_id(attempt_id)
            if attempt is None:
                raise NotFoundError(
                    f"Quiz attempt with ID {attempt_id} not found",
                    {"attempt_id": attempt_id},
                )
            quiz = _quiz_or_raise(uow, attempt.quiz_id)
            view = _detail_view(uow, attempt, quiz, now, include_answers=include_answers)
    except EngineError as e:
        return to_err(e, logger=logger, tag="get_attempt", attempt_id=attempt_id)
    return Ok(view)


def get_user_best_attempt(
    uow: UnitOfWork,
    user_id: int,
    quiz_id: int,
    *,
    clock: Optional[Clock] = None,
) -> Result[AttemptDetailView]:
    """완료 attempt 중 최고 점수, 동점이면 최근 started_at."""
    now = resolve_now(clock)
    try:
        with uow:
            quiz = _quiz_or_raise(uow, quiz_id)
            completed = [a for a in uow.attempts.list_for_user(user_id, quiz_id) if a.is_completed()]
            if not completed:
                raise NotFoundError(
                    "No completed attempt for this quiz",
                    {"user_id": user_id, "quiz_id": quiz_id},
                )
            best = max(completed, key=lambda a: (a.score, a.started_at))
            view = _detail_view(uow, best, quiz, now)
    except EngineError as e:
        return to_err(e, logger=logger, tag="best_attempt", user_id=user_id, quiz_id=quiz_id)
    return Ok(view)


def get_user_latest_attempt(
    uow: UnitOfWork,
    user_id: int,
    quiz_id: int,
    *,
    clock: Optional[Clock] = None,
) -> Result[AttemptDetailView]:
    now = resolve_now(clock)
    try:
        with uow:
            quiz = _quiz_or_raise(uow, quiz_id)
            attempts = uow.attempts.list_for_user(user_id, quiz_id)
            if not attempts:
                raise NotFoundError(
                    "No attempt for this quiz",
                    {"user_id": user_id, "quiz_id": quiz_id},
                )
            latest = max(attempts, key=lambda a: a.started_at)
            view = _detail_view(uow, latest, quiz, now)
    except EngineError as e:
        return to_err(e, logger=logger, tag="latest_attempt", user_id=user_id, quiz_id=quiz_id)
    return Ok(view)


def list_user_quiz_attempts(
    uow: UnitOfWork,
    user_id: int,
    quiz_id: int,
    *,
    clock: Optional[Clock] = None,
) -> Result[list[AttemptDetailView]]:
    now = resolve_now(clock)
    try:
        with uow:
            quiz = _quiz_or_raise(uow, quiz_id)
            attempts = sorted(uow.attempts.list_for_user(user_id, quiz_id), key=lambda a: a.started_at, reverse=True)
            views = [_detail_view(uow, a, quiz, now) for a in attempts]
    except EngineError as e:
        return to_err(e, logger=logger, tag="list_attempts", user_id=user_id, quiz_id=quiz_id)
    return Ok(views)
