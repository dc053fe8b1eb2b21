"""
Attempt 응답 조립 - 엔티티 -> DTO

진행 중 attempt 에는 정답 플래그가 절대 나가지 않도록 sanitized_questions 만 사용.
"""
from __future__ import annotations

from typing import Mapping, Sequence

from academy.application.dto.assessments import (
    AnswerOptionView,
    GradedOptionView,
    GradedQuestionView,
    QuestionView,
)
from academy.application.ports.catalog import QuizCatalog
from academy.domain.assessments.entities import AnswerOption, AttemptAnswer, Question

UNKNOWN_USER = "Unknown User"


def load_options(catalog: QuizCatalog, questions: Sequence[Question]) -> dict[int, list[AnswerOption]]:
    return {q.id: list(catalog.get_answers(q.id)) for q in questions}


def sanitized_questions(
    questions: Sequence[Question],
    options_by_question: Mapping[int, Sequence[AnswerOption]],
) -> list[QuestionView]:
    return [
        QuestionView(
            id=q.id,
            text=q.text,
            question_type=q.question_type.value,
            points=q.points,
            order_index=q.order_index,
            answers=[
                AnswerOptionView(id=o.id, text=o.text, order_index=o.order_index)
                for o in options_by_question.get(q.id, ())
            ],
        )
        for q in questions
    ]


def graded_questions(
    questions: Sequence[Question],
    options_by_question: Mapping[int, Sequence[AnswerOption]],
    answers: Sequence[AttemptAnswer],
) -> list[GradedQuestionView]:
    """questions 순서(order_index) 유지. 저장된 answer 가 없는 문항은 건너뜀."""
    by_question = {a.question_id: a for a in answers}
    views: list[GradedQuestionView] = []
    for q in questions:
        a = by_question.get(q.id)
        if a is None:
            continue
        views.append(
            GradedQuestionView(
                question_id=q.id,
                text=q.text,
                question_type=q.question_type.value,
                points=q.points,
                selected_answer_ids=sorted(a.selected_answer_ids),
                options=[
                    GradedOptionView(
                        id=o.id,
                        text=o.text,
                        is_selected=o.id in a.selected_answer_ids,
                        is_correct=o.is_correct,
                    )
                    for o in options_by_question.get(q.id, ())
                ],
                is_correct=a.is_correct,
                points_earned=a.points_earned,
            )
        )
    return views
