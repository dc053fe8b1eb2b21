"""
Unit of Work 포트 - 트랜잭션 경계 (Django 미사용)
"""
from __future__ import annotations

from typing import Protocol

from academy.application.ports.catalog import LessonCatalog, QuizCatalog, UserDirectory
from academy.application.ports.repositories import (
    EnrollmentRepository,
    LessonProgressRepository,
    QuizAttemptRepository,
)


class UnitOfWork(Protocol):
    """트랜잭션 단위. __enter__에서 시작, __exit__에서 commit/rollback (예외 시 rollback)."""

    @property
    def quizzes(self) -> QuizCatalog:
        ...

    @property
    def attempts(self) -> QuizAttemptRepository:
        ...

    @property
    def lessons(self) -> LessonCatalog:
        ...

    @property
    def enrollments(self) -> EnrollmentRepository:
        ...

    @property
    def lesson_progress(self) -> LessonProgressRepository:
        ...

    @property
    def users(self) -> UserDirectory:
        ...

    def __enter__(self) -> "UnitOfWork":
        ...

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        ...

    def commit(self) -> None:
        ...

    def rollback(self) -> None:
        ...
