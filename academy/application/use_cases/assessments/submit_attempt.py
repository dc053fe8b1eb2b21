"""
SubmitAttempt Use Case - 도메인/포트만 사용 (Django 미사용)

검증 순서 고정: NotFound -> AlreadyCompleted -> TimeExpired -> 입력 검증(형식/누락/중복/미지 문항).
attempt row lock 후 판단하므로 동시 submit 은 하나만 완료된다.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from academy.application.dto.assessments import AnswerSubmission, GradedAttemptView
from academy.application.ports.clock import Clock
from academy.application.ports.unit_of_work import UnitOfWork
from academy.application.use_cases.assessments.presenters import (
    UNKNOWN_USER,
    graded_questions,
    load_options,
)
from academy.application.use_cases.common import resolve_now, to_err
from academy.domain.assessments.entities import Question
from academy.domain.assessments.grading import grade_submission
from academy.domain.shared.errors import (
    AttemptAlreadyCompletedError,
    EngineError,
    EngineValidationError,
    NotFoundError,
    TimeExpiredError,
)
from academy.domain.shared.result import Ok, Result

logger = logging.getLogger(__name__)


def _positive_id(value, field_name: str, **context) -> int:
    try:
        ident = int(value)
    except (TypeError, ValueError):
        raise EngineValidationError(
            f"Invalid {field_name}: {value!r}",
            {field_name: value, **context},
        ) from None
    if ident <= 0:
        raise EngineValidationError(
            f"{field_name} must be greater than 0",
            {field_name: value, **context},
        )
    return ident


def _selected_ids(submission: AnswerSubmission, qid: int) -> list[int]:
    raw = submission.selected_answer_ids or []
    if isinstance(raw, (str, bytes)):
        raise EngineValidationError(
            "selected_answer_ids must be a list of ids",
            {"selected_answer_ids": raw, "question_id": qid},
        )
    try:
        items = list(raw)
    except TypeError:
        raise EngineValidationError(
            "selected_answer_ids must be a list of ids",
            {"selected_answer_ids": raw, "question_id": qid},
        ) from None
    return [_positive_id(x, "selected_answer_id", question_id=qid) for x in items]


def _selections(
    submissions: Iterable[AnswerSubmission],
    questions: list[Question],
) -> dict[int, list[int]]:
    """제출 -> {question_id: selected ids}. 형식 오류/누락/중복/미지 문항이면 EngineValidationError."""
    selections: dict[int, list[int]] = {}
    duplicates: set[int] = set()
    for s in submissions:
        qid = _positive_id(s.question_id, "question_id")
        if qid in selections:
            duplicates.add(qid)
            continue
        selections[qid] = _selected_ids(s, qid)

    required = {q.id for q in questions}
    missing = sorted(required - set(selections))
    if missing:
        raise EngineValidationError(
            f"Missing answers for questions: {', '.join(str(x) for x in missing)}",
            {"missing_question_ids": missing},
        )

    if duplicates:
        raise EngineValidationError(
            f"Duplicate answers for questions: {', '.join(str(x) for x in sorted(duplicates))}",
            {"duplicate_question_ids": sorted(duplicates)},
        )

    unknown = sorted(set(selections) - required)
    if unknown:
        raise EngineValidationError(
            f"Questions not found in quiz: {', '.join(str(x) for x in unknown)}",
            {"unknown_question_ids": unknown},
        )
    return selections


def submit_attempt(
    uow: UnitOfWork,
    attempt_id: int,
    answers: Iterable[AnswerSubmission],
    *,
    clock: Optional[Clock] = None,
) -> Result[GradedAttemptView]:
    now = resolve_now(clock)
    answers = list(answers)

    try:
        with uow:
            attempt = uow.attempts.get_for_update(attempt_id)
            if attempt is None:
                raise NotFoundError(
                    f"Quiz attempt with ID {attempt_id} not found",
                    {"attempt_id": attempt_id},
                )

            if attempt.is_completed():
                raise AttemptAlreadyCompletedError(
                    "Quiz attempt has already been completed",
                    {"attempt_id": attempt_id, "completed_at": attempt.completed_at.isoformat()},
                )

            quiz = uow.quizzes.get_quiz(attempt.quiz_id)
            if quiz is None:
                raise NotFoundError(
                    "Associated quiz not found",
                    {"attempt_id": attempt_id, "quiz_id": attempt.quiz_id},
                )

            if attempt.is_time_expired(quiz, now):
                raise TimeExpiredError(
                    "Time limit exceeded for this quiz attempt",
                    {
                        "attempt_id": attempt_id,
                        "time_limit": quiz.time_limit,
                        "expired_at": quiz.expires_at(attempt.started_at).isoformat(),
                    },
                )

            questions = sorted(uow.quizzes.get_active_questions(quiz.id), key=lambda q: q.order_index)
            selections = _selections(answers, questions)

            options = load_options(uow.quizzes, questions)
            graded = grade_submission(questions, options, selections)

            attempt.complete(graded, quiz.passing_score, now)
            uow.attempts.save_completed(attempt)

            user_name = uow.users.get_display_name(attempt.user_id) or UNKNOWN_USER
    except EngineError as e:
        return to_err(e, logger=logger, tag="submit_attempt", attempt_id=attempt_id)

    logger.info(
        "[submit_attempt] attempt_id=%s quiz_id=%s user_id=%s score=%s/%s passed=%s time_spent=%s",
        attempt.id,
        quiz.id,
        attempt.user_id,
        attempt.score,
        attempt.max_score,
        attempt.is_passed,
        attempt.time_spent,
    )

    return Ok(
        GradedAttemptView(
            attempt_id=int(attempt.id),
            quiz_id=quiz.id,
            quiz_title=quiz.title,
            user_id=attempt.user_id,
            user_name=user_name,
            started_at=attempt.started_at,
            completed_at=attempt.completed_at,
            score=attempt.score,
            max_score=attempt.max_score,
            score_percentage=attempt.rounded_percentage(),
            is_passed=attempt.is_passed,
            time_spent=attempt.time_spent,
            formatted_time_spent=attempt.formatted_time_spent(),
            answers=graded_questions(questions, options, attempt.answers),
        )
    )
