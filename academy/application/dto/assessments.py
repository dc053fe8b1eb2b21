# academy/application/dto/assessments.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


# ------------------------------------------------------------
# Start (정답 플래그 없음)
# ------------------------------------------------------------

@dataclass(frozen=True)
class AnswerOptionView:
    id: int
    text: str
    order_index: int


@dataclass(frozen=True)
class QuestionView:
    id: int
    text: str
    question_type: str
    points: int
    order_index: int
    answers: list[AnswerOptionView]


@dataclass(frozen=True)
class AttemptView:
    attempt_id: int
    quiz_id: int
    quiz_title: str
    user_id: int
    started_at: datetime
    max_score: int
    time_limit: Optional[int]
    expires_at: Optional[datetime]
    questions: list[QuestionView]


# ------------------------------------------------------------
# Submit / detail (채점 결과 포함)
# ------------------------------------------------------------

@dataclass(frozen=True)
class GradedOptionView:
    id: int
    text: str
    is_selected: bool
    is_correct: bool


@dataclass(frozen=True)
class GradedQuestionView:
    question_id: int
    text: str
    question_type: str
    points: int
    selected_answer_ids: list[int]
    options: list[GradedOptionView]
    is_correct: bool
    points_earned: int


@dataclass(frozen=True)
class GradedAttemptView:
    attempt_id: int
    quiz_id: int
    quiz_title: str
    user_id: int
    user_name: str
    started_at: datetime
    completed_at: datetime
    score: int
    max_score: int
    score_percentage: int
    is_passed: bool
    time_spent: int
    formatted_time_spent: str
    answers: list[GradedQuestionView]


@dataclass(frozen=True)
class AttemptDetailView:
    """
    진행 중 attempt: score=None, score_percentage=0, answers=None.
    완료 attempt + include_answers: 저장된 제출로 answers 재구성.
    """
    attempt_id: int
    quiz_id: int
    quiz_title: str
    user_id: int
    user_name: str
    started_at: datetime
    completed_at: Optional[datetime]
    score: Optional[int]
    max_score: int
    score_percentage: int
    is_completed: bool
    is_passed: bool
    time_spent: int
    formatted_time_spent: str
    time_remaining_minutes: Optional[int] = None
    answers: Optional[list[GradedQuestionView]] = None


@dataclass(frozen=True)
class QuizAttemptStatsView:
    total_attempts: int
    completed_attempts: int
    passed_attempts: int
    failed_attempts: int
    average_score: float
    best_score: Optional[int]
    total_time_spent: int
    formatted_total_time: str


@dataclass(frozen=True)
class AnswerValidationView:
    question_id: int
    is_valid: bool
    problems: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class AnswerSubmission:
    """제출 입력: 문항 1개에 대해 선택한 option id 들 (빈 선택 허용 -> 오답)."""
    question_id: int
    selected_answer_ids: list[int] = field(default_factory=list)
