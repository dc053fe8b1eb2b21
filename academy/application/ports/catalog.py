"""
Catalog 포트 - quiz/question/answer, lesson, user 읽기 전용 조회 (Django/ORM 미사용)
"""
from __future__ import annotations

from abc import abstractmethod
from typing import Optional, Protocol, Sequence

from academy.domain.assessments.entities import AnswerOption, Question, Quiz
from academy.domain.progress.entities import Lesson


class QuizCatalog(Protocol):

    @abstractmethod
    def get_quiz(self, quiz_id: int) -> Optional[Quiz]:
        ...

    @abstractmethod
    def get_question(self, question_id: int) -> Optional[Question]:
        ...

    @abstractmethod
    def get_active_questions(self, quiz_id: int) -> Sequence[Question]:
        """is_active 문항만, order_index 순."""
        ...

    @abstractmethod
    def get_answers(self, question_id: int) -> Sequence[AnswerOption]:
        """order_index 순."""
        ...


class LessonCatalog(Protocol):

    @abstractmethod
    def get_lesson(self, lesson_id: int) -> Optional[Lesson]:
        ...

    @abstractmethod
    def get_lesson_count(self, course_id: int) -> int:
        ...

    @abstractmethod
    def list_for_course(self, course_id: int) -> Sequence[Lesson]:
        """order_index 순."""
        ...

    @abstractmethod
    def get_course_title(self, course_id: int) -> Optional[str]:
        ...


class UserDirectory(Protocol):
    """표시용 이름 조회만. 채점 로직은 의존하지 않음."""

    @abstractmethod
    def get_display_name(self, user_id: int) -> Optional[str]:
        ...
