from academy.application.ports.unit_of_work import UnitOfWork
from academy.application.ports.repositories import (
    EnrollmentRepository,
    LessonProgressRepository,
    QuizAttemptRepository,
)
from academy.application.ports.catalog import LessonCatalog, QuizCatalog, UserDirectory
from academy.application.ports.clock import Clock

__all__ = [
    "UnitOfWork",
    "QuizAttemptRepository",
    "EnrollmentRepository",
    "LessonProgressRepository",
    "QuizCatalog",
    "LessonCatalog",
    "UserDirectory",
    "Clock",
]
