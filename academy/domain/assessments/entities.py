"""
Assessment 도메인 엔티티 - 순수 파이썬 (Django/ORM 미사용)

Attempt 상태 전이(InProgress -> Completed)는 엔티티 메서드로 표현.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from academy.domain.shared.durations import elapsed_minutes, format_minutes, rounded_minutes
from academy.domain.shared.errors import AttemptAlreadyCompletedError

logger = logging.getLogger(__name__)


class QuestionType(str, Enum):
    """apps.domains.assessments.models.Question choices와 동기화."""
    MULTIPLE_CHOICE = "multiple_choice"
    TRUE_FALSE = "true_false"
    SHORT_ANSWER = "short_answer"
    ESSAY = "essay"


# 정답이 정확히 1개여야 하는 유형
SINGLE_CORRECT_TYPES = (QuestionType.MULTIPLE_CHOICE, QuestionType.TRUE_FALSE)


@dataclass(frozen=True)
class Quiz:
    id: int
    course_id: int
    title: str
    passing_score: int
    max_attempts: int
    lesson_id: Optional[int] = None
    description: str = ""
    time_limit: Optional[int] = None  # minutes
    is_active: bool = True

    def has_time_limit(self) -> bool:
        return self.time_limit is not None

    def expires_at(self, started_at: datetime) -> Optional[datetime]:
        if not self.has_time_limit():
            return None
        return started_at + timedelta(minutes=int(self.time_limit))


@dataclass(frozen=True)
class Question:
    id: int
    quiz_id: int
    text: str
    question_type: QuestionType
    points: int
    order_index: int
    is_active: bool = True


@dataclass(frozen=True)
class AnswerOption:
    id: int
    question_id: int
    text: str
    is_correct: bool
    order_index: int


@dataclass(frozen=True)
class AttemptAnswer:
    """채점된 문항 1개 (selected_answer_ids는 제출 그대로 저장)."""
    question_id: int
    selected_answer_ids: frozenset[int]
    is_correct: bool
    points_earned: int


def score_percentage(score: int, max_score: int) -> float:
    if max_score <= 0:
        return 0.0
    return score / max_score * 100.0


def is_passing(score: int, max_score: int, passing_score: int) -> bool:
    """maxScore == 0 이면 percentage는 0 -> 항상 불합격."""
    if max_score <= 0:
        return False
    return score_percentage(score, max_score) >= passing_score


@dataclass
class QuizAttempt:
    """
    (quiz, user) 1회 응시.
    completed_at is None 이면 진행 중.
    """
    quiz_id: int
    user_id: int
    max_score: int
    started_at: datetime
    id: Optional[int] = None
    score: int = 0
    completed_at: Optional[datetime] = None
    time_spent: int = 0
    is_passed: bool = False
    answers: list[AttemptAnswer] = field(default_factory=list)

    def is_completed(self) -> bool:
        return self.completed_at is not None

    def is_in_progress(self) -> bool:
        return self.completed_at is None

    def rounded_percentage(self) -> int:
        """표시용 정수 percentage (half-up)."""
        return int(math.floor(score_percentage(self.score, self.max_score) + 0.5))

    def formatted_time_spent(self) -> str:
        return format_minutes(self.time_spent)

    def is_time_expired(self, quiz: Quiz, now: datetime) -> bool:
        """한도와 같은 시점은 허용 (strict >)."""
        if not quiz.has_time_limit():
            return False
        return now - self.started_at > timedelta(minutes=int(quiz.time_limit))

    def time_remaining_minutes(self, quiz: Quiz, now: datetime) -> Optional[int]:
        if self.is_completed() or not quiz.has_time_limit():
            return None
        remaining = int(quiz.time_limit) - elapsed_minutes(self.started_at, now)
        return int(math.ceil(remaining)) if remaining > 0 else 0

    def complete(self, answers: list[AttemptAnswer], passing_score: int, now: datetime) -> None:
        """InProgress -> Completed. 한 번만 가능."""
        if self.is_completed():
            raise AttemptAlreadyCompletedError(
                f"Quiz attempt {self.id} has already been completed",
                {"attempt_id": self.id},
            )
        score = sum(a.points_earned for a in answers)
        clamped = max(0, min(score, self.max_score))
        if clamped != score:
            # start 이후 문항/배점 변경 시 발생
            logger.warning(
                "[grading] score clamped attempt_id=%s quiz_id=%s raw_score=%s max_score=%s",
                self.id,
                self.quiz_id,
                score,
                self.max_score,
            )
        self.answers = list(answers)
        self.score = clamped
        self.completed_at = now
        self.time_spent = rounded_minutes(self.started_at, now)
        self.is_passed = is_passing(self.score, self.max_score, passing_score)
