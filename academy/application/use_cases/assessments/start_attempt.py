"""
StartAttempt Use Case - 도메인/포트만 사용 (Django 미사용)

Constraint enforcer 통과 -> 진행 중 attempt 생성 -> 정답 플래그 없는 문항 세트 반환.
check-then-insert 는 한 UoW 트랜잭션 안에서 수행하고, 어댑터의 partial unique
constraint 가 마지막 방어선 (동시 start 는 AttemptAlreadyInProgress 로 실패).
"""
from __future__ import annotations

import logging
from typing import Optional

from academy.application.dto.assessments import AttemptView
from academy.application.ports.clock import Clock
from academy.application.ports.unit_of_work import UnitOfWork
from academy.application.use_cases.assessments.presenters import load_options, sanitized_questions
from academy.application.use_cases.common import resolve_now, to_err
from academy.domain.assessments.attempt_rules import check_can_start
from academy.domain.assessments.entities import QuizAttempt
from academy.domain.shared.errors import EngineError
from academy.domain.shared.result import Ok, Result

logger = logging.getLogger(__name__)


def start_attempt(
    uow: UnitOfWork,
    user_id: int,
    quiz_id: int,
    *,
    clock: Optional[Clock] = None,
) -> Result[AttemptView]:
    now = resolve_now(clock)

    try:
        with uow:
            uow.attempts.lock_user_attempts(user_id, quiz_id)

            quiz = uow.quizzes.get_quiz(quiz_id)
            questions = list(uow.quizzes.get_active_questions(quiz_id)) if quiz else []
            questions.sort(key=lambda q: q.order_index)

            check_can_start(
                quiz_id=quiz_id,
                quiz=quiz,
                attempt_count=uow.attempts.count_for_user(user_id, quiz_id),
                in_progress=uow.attempts.get_in_progress(user_id, quiz_id),
                active_questions=questions,
            )

            attempt = uow.attempts.create(
                QuizAttempt(
                    quiz_id=quiz.id,
                    user_id=user_id,
                    max_score=sum(q.points for q in questions),
                    started_at=now,
                )
            )
            options = load_options(uow.quizzes, questions)
    except EngineError as e:
        return to_err(e, logger=logger, tag="start_attempt", user_id=user_id, quiz_id=quiz_id)

    logger.info(
        "[start_attempt] user_id=%s quiz_id=%s attempt_id=%s max_score=%s",
        user_id,
        quiz_id,
        attempt.id,
        attempt.max_score,
    )

    return Ok(
        AttemptView(
            attempt_id=int(attempt.id),
            quiz_id=quiz.id,
            quiz_title=quiz.title,
            user_id=user_id,
            started_at=attempt.started_at,
            max_score=attempt.max_score,
            time_limit=quiz.time_limit,
            expires_at=quiz.expires_at(attempt.started_at),
            questions=sanitized_questions(questions, options),
        )
    )
