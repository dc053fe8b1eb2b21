"""
Scoring engine - 순수 파이썬

문항 유형별 채점기를 QuestionType으로 dispatch 한다.
새 유형을 QuestionType에 추가하고 _GRADERS에 등록하지 않으면 import 시점에 실패.
부분 점수 없음: 정답이면 question.points, 아니면 0.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Mapping, Sequence

from academy.domain.assessments.entities import (
    SINGLE_CORRECT_TYPES,
    AnswerOption,
    AttemptAnswer,
    Question,
    QuestionType,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuestionGrade:
    question_id: int
    is_correct: bool
    points_earned: int


def _correct_ids(options: Iterable[AnswerOption]) -> frozenset[int]:
    return frozenset(o.id for o in options if o.is_correct)


def _grade_single_correct(question: Question, selected: frozenset[int], correct: frozenset[int]) -> bool:
    # 정답 옵션이 1개가 아니면 카탈로그 결함: 선택과 무관하게 오답 처리
    if len(correct) != 1:
        logger.warning(
            "[grading] catalog defect question_id=%s type=%s correct_count=%s",
            question.id,
            question.question_type.value,
            len(correct),
        )
        return False
    return len(selected) == 1 and selected == correct


def _grade_set_equality(question: Question, selected: frozenset[int], correct: frozenset[int]) -> bool:
    # short answer / essay: free-text 채점은 범위 밖, 옵션 id 집합 비교만
    return selected == correct


_GRADERS: dict[QuestionType, Callable[[Question, frozenset[int], frozenset[int]], bool]] = {
    QuestionType.MULTIPLE_CHOICE: _grade_single_correct,
    QuestionType.TRUE_FALSE: _grade_single_correct,
    QuestionType.SHORT_ANSWER: _grade_set_equality,
    QuestionType.ESSAY: _grade_set_equality,
}

_missing = set(QuestionType) - set(_GRADERS)
if _missing:
    raise RuntimeError(f"no grader registered for question types: {sorted(t.value for t in _missing)}")


def grade_question(
    question: Question,
    options: Sequence[AnswerOption],
    selected_answer_ids: Iterable[int],
) -> QuestionGrade:
    selected = frozenset(int(x) for x in selected_answer_ids)
    is_correct = _GRADERS[question.question_type](question, selected, _correct_ids(options))
    return QuestionGrade(
        question_id=question.id,
        is_correct=is_correct,
        points_earned=question.points if is_correct else 0,
    )


def grade_submission(
    questions: Sequence[Question],
    options_by_question: Mapping[int, Sequence[AnswerOption]],
    selections: Mapping[int, Iterable[int]],
) -> list[AttemptAnswer]:
    """
    questions 순서(order_index)대로 AttemptAnswer 목록을 만든다.
    selections에 없는 문항은 빈 선택으로 채점된다 (호출자가 누락 검증).
    """
    results: list[AttemptAnswer] = []
    for q in questions:
        selected = frozenset(int(x) for x in selections.get(q.id, ()))
        grade = grade_question(q, options_by_question.get(q.id, ()), selected)
        results.append(
            AttemptAnswer(
                question_id=q.id,
                selected_answer_ids=selected,
                is_correct=grade.is_correct,
                points_earned=grade.points_earned,
            )
        )
    return results


def total_points(answers: Iterable[AttemptAnswer]) -> int:
    return sum(a.points_earned for a in answers)


def catalog_problems(question: Question, options: Sequence[AnswerOption]) -> list[str]:
    """문항 1개의 카탈로그 정합성 점검 (채점 전 운영 확인용)."""
    problems: list[str] = []
    for o in options:
        text = (o.text or "").strip()
        if not text:
            problems.append(f"Answer {o.id} text cannot be empty")
        elif len(o.text) > 1000:
            problems.append(f"Answer {o.id} text cannot exceed 1000 characters")

    correct_count = len(_correct_ids(options))
    if question.question_type == QuestionType.TRUE_FALSE and len(options) > 2:
        problems.append("True/False questions cannot have more than 2 answers")
    if question.question_type in SINGLE_CORRECT_TYPES and correct_count != 1:
        problems.append(
            f"{question.question_type.value} questions must have exactly one correct answer (found {correct_count})"
        )
    return problems
