"""
Django Unit of Work - transaction.atomic 래퍼 (lazy import)
"""
from __future__ import annotations


class DjangoUnitOfWork:
    """
    Django transaction.atomic으로 트랜잭션 경계. 메서드 내부에서 Django import.
    repository 는 처음 접근할 때 생성한다.
    """

    def __init__(self) -> None:
        self._atomic = None
        self._quizzes = None
        self._attempts = None
        self._lessons = None
        self._enrollments = None
        self._lesson_progress = None
        self._users = None

    @property
    def quizzes(self):
        from academy.adapters.db.django.repositories_assessments import DjangoQuizCatalog
        if self._quizzes is None:
            self._quizzes = DjangoQuizCatalog()
        return self._quizzes

    @property
    def attempts(self):
        from academy.adapters.db.django.repositories_assessments import DjangoQuizAttemptRepository
        if self._attempts is None:
            self._attempts = DjangoQuizAttemptRepository()
        return self._attempts

    @property
    def lessons(self):
        from academy.adapters.db.django.repositories_enrollment import DjangoLessonCatalog
        if self._lessons is None:
            self._lessons = DjangoLessonCatalog()
        return self._lessons

    @property
    def enrollments(self):
        from academy.adapters.db.django.repositories_enrollment import DjangoEnrollmentRepository
        if self._enrollments is None:
            self._enrollments = DjangoEnrollmentRepository()
        return self._enrollments

    @property
    def lesson_progress(self):
        from academy.adapters.db.django.repositories_enrollment import DjangoLessonProgressRepository
        if self._lesson_progress is None:
            self._lesson_progress = DjangoLessonProgressRepository()
        return self._lesson_progress

    @property
    def users(self):
        from academy.adapters.db.django.repositories_users import DjangoUserDirectory
        if self._users is None:
            self._users = DjangoUserDirectory()
        return self._users

    def __enter__(self) -> DjangoUnitOfWork:
        from django.db import transaction
        self._atomic = transaction.atomic()
        self._atomic.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._atomic is not None:
            atomic, self._atomic = self._atomic, None
            atomic.__exit__(exc_type, exc_val, exc_tb)

    def commit(self) -> None:
        # atomic() 블록 내에서는 명시적 commit 없음; __exit__ 시 자동
        pass

    def rollback(self) -> None:
        from django.db import transaction
        transaction.set_rollback(True)
