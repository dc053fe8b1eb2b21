"""
Repository 포트 - 영속화 추상화 (Django/ORM 미사용)

select_for_update / atomic 은 어댑터에서 수행.
"""
from __future__ import annotations

from abc import abstractmethod
from typing import Optional, Protocol, Sequence

from academy.domain.assessments.entities import QuizAttempt
from academy.domain.progress.entities import Enrollment, LessonProgress


class QuizAttemptRepository(Protocol):

    @abstractmethod
    def get_by_id(self, attempt_id: int) -> Optional[QuizAttempt]:
        """attempt + 저장된 answers. 없으면 None."""
        ...

    @abstractmethod
    def get_for_update(self, attempt_id: int) -> Optional[QuizAttempt]:
        """row lock 조회. 호출자가 UoW 트랜잭션 내에 있어야 함."""
        ...

    @abstractmethod
    def lock_user_attempts(self, user_id: int, quiz_id: int) -> None:
        """(user, quiz) attempt rows lock."""
        ...

    @abstractmethod
    def count_for_user(self, user_id: int, quiz_id: int) -> int:
        ...

    @abstractmethod
    def get_in_progress(self, user_id: int, quiz_id: int) -> Optional[QuizAttempt]:
        ...

    @abstractmethod
    def list_for_user(self, user_id: int, quiz_id: Optional[int] = None) -> Sequence[QuizAttempt]:
        """started_at 최신순."""
        ...

    @abstractmethod
    def create(self, attempt: QuizAttempt) -> QuizAttempt:
        """
        진행 중 attempt insert. id 채워서 반환.
        같은 (user, quiz)에 진행 중 attempt가 이미 있으면 AttemptAlreadyInProgressError.
        """
        ...

    @abstractmethod
    def save_completed(self, attempt: QuizAttempt) -> None:
        """완료 필드 + answers 저장."""
        ...


class EnrollmentRepository(Protocol):

    @abstractmethod
    def get_by_id(self, enrollment_id: int) -> Optional[Enrollment]:
        ...

    @abstractmethod
    def get_for_update(self, enrollment_id: int) -> Optional[Enrollment]:
        """row lock. 같은 enrollment 의 progress 재계산을 직렬화."""
        ...

    @abstractmethod
    def save(self, enrollment: Enrollment) -> None:
        ...


class LessonProgressRepository(Protocol):

    @abstractmethod
    def get(self, enrollment_id: int, lesson_id: int) -> Optional[LessonProgress]:
        ...

    @abstractmethod
    def get_or_create(self, enrollment_id: int, lesson_id: int, now) -> LessonProgress:
        ...

    @abstractmethod
    def save(self, progress: LessonProgress) -> None:
        ...

    @abstractmethod
    def list_for_enrollment(self, enrollment_id: int) -> Sequence[LessonProgress]:
        ...

    @abstractmethod
    def count_completed(self, enrollment_id: int, course_id: int) -> int:
        """해당 course 에 현재 속한 lesson 중 완료된 row 수."""
        ...
