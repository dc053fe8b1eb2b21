"""
사용자 quiz 통계 / 문항 카탈로그 점검 (읽기 전용)
"""
from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal

from academy.application.dto.assessments import AnswerValidationView, QuizAttemptStatsView
from academy.application.ports.unit_of_work import UnitOfWork
from academy.application.use_cases.common import to_err
from academy.domain.assessments.grading import catalog_problems
from academy.domain.shared.durations import format_minutes
from academy.domain.shared.errors import EngineError, NotFoundError
from academy.domain.shared.result import Ok, Result

logger = logging.getLogger(__name__)


def get_user_quiz_stats(uow: UnitOfWork, user_id: int) -> Result[QuizAttemptStatsView]:
    try:
        with uow:
            if uow.users.get_display_name(user_id) is None:
                raise NotFoundError(
                    f"User with ID {user_id} not found",
                    {"user_id": user_id},
                )
            attempts = list(uow.attempts.list_for_user(user_id))
    except EngineError as e:
        return to_err(e, logger=logger, tag="quiz_stats", user_id=user_id)

    completed = [a for a in attempts if a.is_completed()]
    passed = sum(1 for a in completed if a.is_passed)
    percentages = [a.rounded_percentage() for a in completed]

    average = 0.0
    if percentages:
        avg = Decimal(sum(percentages)) / Decimal(len(percentages))
        average = float(avg.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))

    total_time = sum(a.time_spent for a in attempts)

    return Ok(
        QuizAttemptStatsView(
            total_attempts=len(attempts),
            completed_attempts=len(completed),
            passed_attempts=passed,
            failed_attempts=len(completed) - passed,
            average_score=average,
            best_score=max(percentages) if percentages else None,
            total_time_spent=total_time,
            formatted_total_time=format_minutes(total_time),
        )
    )


def validate_question_answers(uow: UnitOfWork, question_id: int) -> Result[AnswerValidationView]:
    try:
        with uow:
            question = uow.quizzes.get_question(question_id)
            if question is None:
                raise NotFoundError(
                    f"Question with ID {question_id} not found",
                    {"question_id": question_id},
                )
            problems = catalog_problems(question, list(uow.quizzes.get_answers(question_id)))
    except EngineError as e:
        return to_err(e, logger=logger, tag="validate_answers", question_id=question_id)

    if problems:
        logger.info("[validate_answers] question_id=%s problems=%s", question_id, len(problems))

    return Ok(AnswerValidationView(question_id=question_id, is_valid=not problems, problems=problems))
