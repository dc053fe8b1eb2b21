"""
In-memory port 구현 - use case 테스트용 (Django 미사용)

InMemoryStore 하나를 여러 FakeUnitOfWork 가 공유한다.
UoW 블록이 예외로 끝나면 진입 시점 snapshot 으로 되돌린다 (transaction.atomic 흉내).
"""
from __future__ import annotations

import copy
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from typing import Optional

from academy.domain.assessments.entities import (
    AnswerOption,
    Question,
    QuestionType,
    Quiz,
    QuizAttempt,
)
from academy.domain.progress.entities import (
    Enrollment,
    Lesson,
    LessonProgress,
)
from academy.domain.shared.errors import (
    AttemptAlreadyCompletedError,
    AttemptAlreadyInProgressError,
)

T0 = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


class FixedClock:

    def __init__(self, now: datetime = T0) -> None:
        self._now = now

    def now(self) -> datetime:
        return self._now

    def set(self, now: datetime) -> None:
        self._now = now

    def advance(self, *, minutes: float = 0, seconds: float = 0) -> datetime:
        self._now = self._now + timedelta(minutes=minutes, seconds=seconds)
        return self._now


@dataclass
class InMemoryStore:
    quizzes: dict[int, Quiz] = field(default_factory=dict)
    questions: dict[int, Question] = field(default_factory=dict)
    options: dict[int, AnswerOption] = field(default_factory=dict)
    attempts: dict[int, QuizAttempt] = field(default_factory=dict)
    courses: dict[int, str] = field(default_factory=dict)
    lessons: dict[int, Lesson] = field(default_factory=dict)
    enrollments: dict[int, Enrollment] = field(default_factory=dict)
    progress: dict[tuple[int, int], LessonProgress] = field(default_factory=dict)
    users: dict[int, str] = field(default_factory=dict)
    _seq: int = 0

    def next_id(self) -> int:
        self._seq += 1
        return self._seq

    # ---------- builders ----------

    def add_quiz(self, *, course_id: int = 1, title: str = "Quiz", **kwargs) -> Quiz:
        kwargs.setdefault("passing_score", 70)
        kwargs.setdefault("max_attempts", 3)
        quiz = Quiz(id=self.next_id(), course_id=course_id, title=title, **kwargs)
        self.quizzes[quiz.id] = quiz
        return quiz

    def add_question(
        self,
        quiz: Quiz,
        *,
        question_type: QuestionType = QuestionType.MULTIPLE_CHOICE,
        points: int = 1,
        order_index: Optional[int] = None,
        options: tuple = (("A", True), ("B", False)),
        is_active: bool = True,
        text: str = "Question",
    ) -> tuple[Question, list[AnswerOption]]:
        if order_index is None:
            order_index = sum(1 for q in self.questions.values() if q.quiz_id == quiz.id)
        question = Question(
            id=self.next_id(),
            quiz_id=quiz.id,
            text=text,
            question_type=question_type,
            points=points,
            order_index=order_index,
            is_active=is_active,
        )
        self.questions[question.id] = question
        created = []
        for idx, (opt_text, is_correct) in enumerate(options):
            option = AnswerOption(
                id=self.next_id(),
                question_id=question.id,
                text=opt_text,
                is_correct=is_correct,
                order_index=idx,
            )
            self.options[option.id] = option
            created.append(option)
        return question, created

    def add_course(self, *, title: str = "Course", lessons: int = 0) -> tuple[int, list[Lesson]]:
        course_id = self.next_id()
        self.courses[course_id] = title
        created = [self.add_lesson(course_id, order_index=i) for i in range(lessons)]
        return course_id, created

    def add_lesson(self, course_id: int, *, order_index: int = 0, title: Optional[str] = None) -> Lesson:
        lesson = Lesson(
            id=self.next_id(),
            course_id=course_id,
            title=title or f"Lesson {order_index + 1}",
            order_index=order_index,
        )
        self.lessons[lesson.id] = lesson
        return lesson

    def add_enrollment(self, *, user_id: int, course_id: int, enrolled_at: datetime = T0, **kwargs) -> Enrollment:
        enrollment = Enrollment(
            id=self.next_id(),
            user_id=user_id,
            course_id=course_id,
            enrollment_date=enrolled_at,
            **kwargs,
        )
        self.enrollments[enrollment.id] = enrollment
        return enrollment

    def set_quiz(self, quiz_id: int, **changes) -> Quiz:
        self.quizzes[quiz_id] = replace(self.quizzes[quiz_id], **changes)
        return self.quizzes[quiz_id]


class FakeQuizCatalog:

    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    def get_quiz(self, quiz_id):
        return self.store.quizzes.get(quiz_id)

    def get_question(self, question_id):
        return self.store.questions.get(question_id)

    def get_active_questions(self, quiz_id):
        qs = [q for q in self.store.questions.values() if q.quiz_id == quiz_id and q.is_active]
        return sorted(qs, key=lambda q: (q.order_index, q.id))

    def get_answers(self, question_id):
        opts = [o for o in self.store.options.values() if o.question_id == question_id]
        return sorted(opts, key=lambda o: (o.order_index, o.id))


class FakeQuizAttemptRepository:

    def __init__(self, store: InMemoryStore) -> None:
        self.store = store
        self.lock_calls: list[tuple[int, int]] = []

    def _for_user(self, user_id, quiz_id=None):
        return [
            a for a in self.store.attempts.values()
            if a.user_id == user_id and (quiz_id is None or a.quiz_id == quiz_id)
        ]

    def get_by_id(self, attempt_id):
        a = self.store.attempts.get(attempt_id)
        return copy.deepcopy(a) if a else None

    def get_for_update(self, attempt_id):
        return self.get_by_id(attempt_id)

    def lock_user_attempts(self, user_id, quiz_id):
        self.lock_calls.append((user_id, quiz_id))

    def count_for_user(self, user_id, quiz_id):
        return len(self._for_user(user_id, quiz_id))

    def get_in_progress(self, user_id, quiz_id):
        for a in self._for_user(user_id, quiz_id):
            if a.is_in_progress():
                return copy.deepcopy(a)
        return None

    def list_for_user(self, user_id, quiz_id=None):
        rows = sorted(self._for_user(user_id, quiz_id), key=lambda a: (a.started_at, a.id), reverse=True)
        return [copy.deepcopy(a) for a in rows]

    def create(self, attempt):
        # partial unique constraint 와 동일한 규칙
        if any(a.is_in_progress() for a in self._for_user(attempt.user_id, attempt.quiz_id)):
            raise AttemptAlreadyInProgressError(
                "An attempt is already in progress for this quiz",
                {"user_id": attempt.user_id, "quiz_id": attempt.quiz_id},
            )
        attempt.id = self.store.next_id()
        self.store.attempts[attempt.id] = copy.deepcopy(attempt)
        return attempt

    def save_completed(self, attempt):
        stored = self.store.attempts[attempt.id]
        if stored.is_completed():
            raise AttemptAlreadyCompletedError("Quiz attempt has already been completed", {"attempt_id": attempt.id})
        self.store.attempts[attempt.id] = copy.deepcopy(attempt)


class FakeLessonCatalog:

    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    def get_lesson(self, lesson_id):
        return self.store.lessons.get(lesson_id)

    def get_lesson_count(self, course_id):
        return len(self.list_for_course(course_id))

    def list_for_course(self, course_id):
        rows = [l for l in self.store.lessons.values() if l.course_id == course_id]
        return sorted(rows, key=lambda l: (l.order_index, l.id))

    def get_course_title(self, course_id):
        return self.store.courses.get(course_id)


class FakeEnrollmentRepository:

    def __init__(self, store: InMemoryStore) -> None:
        self.store = store
        self.locked: list[int] = []

    def get_by_id(self, enrollment_id):
        e = self.store.enrollments.get(enrollment_id)
        return copy.deepcopy(e) if e else None

    def get_for_update(self, enrollment_id):
        self.locked.append(enrollment_id)
        return self.get_by_id(enrollment_id)

    def save(self, enrollment):
        self.store.enrollments[enrollment.id] = copy.deepcopy(enrollment)


class FakeLessonProgressRepository:

    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    def get(self, enrollment_id, lesson_id):
        row = self.store.progress.get((enrollment_id, lesson_id))
        return copy.deepcopy(row) if row else None

    def get_or_create(self, enrollment_id, lesson_id, now):
        key = (enrollment_id, lesson_id)
        if key not in self.store.progress:
            self.store.progress[key] = LessonProgress(
                id=self.store.next_id(),
                enrollment_id=enrollment_id,
                lesson_id=lesson_id,
                last_access_date=now,
            )
        return copy.deepcopy(self.store.progress[key])

    def save(self, progress):
        self.store.progress[(progress.enrollment_id, progress.lesson_id)] = copy.deepcopy(progress)

    def list_for_enrollment(self, enrollment_id):
        return [copy.deepcopy(r) for (eid, _), r in self.store.progress.items() if eid == enrollment_id]

    def count_completed(self, enrollment_id, course_id):
        return sum(
            1
            for (eid, lid), r in self.store.progress.items()
            if eid == enrollment_id
            and r.is_completed
            and lid in self.store.lessons
            and self.store.lessons[lid].course_id == course_id
        )


class FakeUserDirectory:

    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    def get_display_name(self, user_id):
        return self.store.users.get(user_id)


class FakeUnitOfWork:

    def __init__(self, store: InMemoryStore) -> None:
        self.store = store
        self.quizzes = FakeQuizCatalog(store)
        self.attempts = FakeQuizAttemptRepository(store)
        self.lessons = FakeLessonCatalog(store)
        self.enrollments = FakeEnrollmentRepository(store)
        self.lesson_progress = FakeLessonProgressRepository(store)
        self.users = FakeUserDirectory(store)
        self.committed = False
        self.rolled_back = False
        self._snapshot = None

    def __enter__(self):
        self._snapshot = copy.deepcopy(self.store.__dict__)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None:
            self.rollback()
        else:
            self.commit()
        self._snapshot = None

    def commit(self):
        self.committed = True

    def rollback(self):
        if self._snapshot is not None:
            self.store.__dict__.update(self._snapshot)
        self.rolled_back = True
