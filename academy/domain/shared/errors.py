"""
엔진 공통 오류 - 순수 파이썬

code 값은 호출자 계약이다 (Err.code 로 그대로 노출).
"""
from __future__ import annotations

from typing import Any, Optional


class EngineError(Exception):
    """Assessment / progress 규칙 위반."""

    code = "error"

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = dict(details or {})


class NotFoundError(EngineError):
    """quiz / question / attempt / enrollment / lesson id가 없음."""
    code = "not_found"


class InvalidStateError(EngineError):
    """비활성 quiz, 이미 완료된 attempt, 다른 course의 lesson 등."""
    code = "invalid_state"


class AttemptLimitExceededError(EngineError):
    code = "attempt_limit_exceeded"


class AttemptAlreadyInProgressError(EngineError):
    code = "attempt_already_in_progress"


class TimeExpiredError(EngineError):
    code = "time_expired"


class EngineValidationError(EngineError):
    """누락 답안, 잘못된 입력."""
    code = "validation_error"


class NoQuestionsError(InvalidStateError):
    """quiz에 active question이 없음."""
    code = "no_questions"


class AttemptAlreadyCompletedError(InvalidStateError):
    code = "already_completed"
