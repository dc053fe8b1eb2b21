"""
Assessment / Progress engine - Hexagonal 프레임워크 계층 (thin)

- Use Case + Adapter 조립만 한다. 비즈니스 규칙 없음.
- 호출마다 새 UoW (transaction.atomic 경계 1개).
- transport(HTTP 등)는 이 객체를 감싸서 사용.
"""
from __future__ import annotations

from typing import Callable, Iterable, Optional

from academy.adapters.clock import SYSTEM_CLOCK
from academy.application.dto.assessments import AnswerSubmission
from academy.application.ports.clock import Clock
from academy.application.ports.unit_of_work import UnitOfWork
from academy.application.use_cases.assessments.attempt_stats import (
    get_user_quiz_stats,
    validate_question_answers,
)
from academy.application.use_cases.assessments.get_attempt import (
    get_attempt_by_id,
    get_user_best_attempt,
    get_user_latest_attempt,
    list_user_quiz_attempts,
)
from academy.application.use_cases.assessments.start_attempt import start_attempt
from academy.application.use_cases.assessments.submit_attempt import submit_attempt
from academy.application.use_cases.progress.get_progress import (
    get_enrollment_progress,
    get_lesson_progress,
)
from academy.application.use_cases.progress.record_lesson_progress import (
    recompute_enrollment_progress,
    record_lesson_progress,
)


def _default_uow_factory() -> UnitOfWork:
    from academy.adapters.db.django.uow import DjangoUnitOfWork
    return DjangoUnitOfWork()


class AcademyEngine:

    def __init__(
        self,
        uow_factory: Optional[Callable[[], UnitOfWork]] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self._uow_factory = uow_factory or _default_uow_factory
        self._clock = clock or SYSTEM_CLOCK

    # ---------- attempts ----------

    def start_attempt(self, user_id: int, quiz_id: int):
        return start_attempt(self._uow_factory(), user_id, quiz_id, clock=self._clock)

    def submit_attempt(self, attempt_id: int, answers: Iterable[AnswerSubmission]):
        return submit_attempt(self._uow_factory(), attempt_id, answers, clock=self._clock)

    def get_attempt(self, attempt_id: int, *, include_answers: bool = False):
        return get_attempt_by_id(
            self._uow_factory(),
            attempt_id,
            include_answers=include_answers,
            clock=self._clock,
        )

    def get_best_attempt(self, user_id: int, quiz_id: int):
        return get_user_best_attempt(self._uow_factory(), user_id, quiz_id, clock=self._clock)

    def get_latest_attempt(self, user_id: int, quiz_id: int):
        return get_user_latest_attempt(self._uow_factory(), user_id, quiz_id, clock=self._clock)

    def list_attempts(self, user_id: int, quiz_id: int):
        return list_user_quiz_attempts(self._uow_factory(), user_id, quiz_id, clock=self._clock)

    def get_quiz_stats(self, user_id: int):
        return get_user_quiz_stats(self._uow_factory(), user_id)

    def validate_question(self, question_id: int):
        return validate_question_answers(self._uow_factory(), question_id)

    # ---------- progress ----------

    def record_lesson_progress(
        self,
        enrollment_id: int,
        lesson_id: int,
        *,
        completed: bool = False,
        minutes_delta: int = 0,
    ):
        return record_lesson_progress(
            self._uow_factory(),
            enrollment_id,
            lesson_id,
            completed=completed,
            minutes_delta=minutes_delta,
            clock=self._clock,
        )

    def get_lesson_progress(self, enrollment_id: int, lesson_id: int):
        return get_lesson_progress(self._uow_factory(), enrollment_id, lesson_id)

    def get_enrollment_progress(self, enrollment_id: int):
        return get_enrollment_progress(self._uow_factory(), enrollment_id)

    def recompute_progress(self, enrollment_id: int):
        return recompute_enrollment_progress(self._uow_factory(), enrollment_id, clock=self._clock)
