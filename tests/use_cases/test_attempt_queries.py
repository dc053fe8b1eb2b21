import pytest

from academy.application.dto.assessments import AnswerSubmission
from academy.application.use_cases.assessments.attempt_stats import (
    get_user_quiz_stats,
    validate_question_answers,
)
from academy.application.use_cases.assessments.get_attempt import (
    get_attempt_by_id,
    get_user_best_attempt,
    get_user_latest_attempt,
    list_user_quiz_attempts,
)
from academy.application.use_cases.assessments.start_attempt import start_attempt
from academy.application.use_cases.assessments.submit_attempt import submit_attempt
from academy.domain.assessments.entities import QuestionType

USER = 7


@pytest.fixture
def quiz_setup(store):
    """2문항 (각 5점), 시간 제한 20분, 최대 5회."""
    quiz = store.add_quiz(title="Weekly", passing_score=50, max_attempts=5, time_limit=20)
    q1, q1_opts = store.add_question(quiz, points=5)
    q2, q2_opts = store.add_question(quiz, points=5)
    return quiz, (q1, q1_opts), (q2, q2_opts)


def take(uow, clock, quiz_setup, *, correct: int, minutes: int = 3):
    """correct 개수만큼 정답 제출하고 attempt_id 반환."""
    quiz, (q1, q1_opts), (q2, q2_opts) = quiz_setup
    attempt_id = start_attempt(uow, USER, quiz.id, clock=clock).value.attempt_id
    clock.advance(minutes=minutes)
    picks = [
        AnswerSubmission(q1.id, [q1_opts[0].id if correct >= 1 else q1_opts[1].id]),
        AnswerSubmission(q2.id, [q2_opts[0].id if correct >= 2 else q2_opts[1].id]),
    ]
    result = submit_attempt(uow, attempt_id, picks, clock=clock)
    assert result.ok
    clock.advance(minutes=60)
    return attempt_id


class TestGetAttemptById:
    def test_in_progress_attempt_hides_results(self, uow, clock, quiz_setup):
        quiz = quiz_setup[0]
        attempt_id = start_attempt(uow, USER, quiz.id, clock=clock).value.attempt_id
        clock.advance(minutes=5, seconds=20)

        view = get_attempt_by_id(uow, attempt_id, include_answers=True, clock=clock).value

        assert view.is_completed is False
        assert view.score is None
        assert view.score_percentage == 0
        assert view.answers is None
        assert view.time_remaining_minutes == 15

    def test_completed_attempt_reconstructs_submission(self, uow, clock, quiz_setup):
        _, (q1, q1_opts), (q2, q2_opts) = quiz_setup
        attempt_id = take(uow, clock, quiz_setup, correct=1, minutes=13)

        view = get_attempt_by_id(uow, attempt_id, include_answers=True, clock=clock).value

        assert view.is_completed is True
        assert view.score == 5
        assert view.score_percentage == 50
        assert view.is_passed is True
        assert view.time_remaining_minutes is None
        assert [a.question_id for a in view.answers] == [q1.id, q2.id]
        assert view.answers[0].selected_answer_ids == [q1_opts[0].id]
        assert view.answers[1].selected_answer_ids == [q2_opts[1].id]
        assert view.answers[1].is_correct is False

    def test_without_include_answers(self, uow, clock, quiz_setup):
        attempt_id = take(uow, clock, quiz_setup, correct=2)
        view = get_attempt_by_id(uow, attempt_id, clock=clock).value
        assert view.answers is None
        assert view.score == 10

    def test_unknown_attempt(self, uow, clock):
        assert get_attempt_by_id(uow, 12345, clock=clock).code == "not_found"


class TestBestAndLatest:
    def test_best_is_highest_score(self, uow, clock, quiz_setup):
        take(uow, clock, quiz_setup, correct=1)
        best_id = take(uow, clock, quiz_setup, correct=2)
        take(uow, clock, quiz_setup, correct=0)

        best = get_user_best_attempt(uow, USER, quiz_setup[0].id, clock=clock).value
        assert best.attempt_id == best_id

    def test_best_tie_prefers_latest_start(self, uow, clock, quiz_setup):
        take(uow, clock, quiz_setup, correct=1)
        later_id = take(uow, clock, quiz_setup, correct=1)

        best = get_user_best_attempt(uow, USER, quiz_setup[0].id, clock=clock).value
        assert best.attempt_id == later_id

    def test_best_ignores_in_progress(self, uow, clock, quiz_setup):
        start_attempt(uow, USER, quiz_setup[0].id, clock=clock)
        result = get_user_best_attempt(uow, USER, quiz_setup[0].id, clock=clock)
        assert result.code == "not_found"

    def test_latest_includes_in_progress(self, uow, clock, quiz_setup):
        take(uow, clock, quiz_setup, correct=2)
        in_progress_id = start_attempt(uow, USER, quiz_setup[0].id, clock=clock).value.attempt_id

        latest = get_user_latest_attempt(uow, USER, quiz_setup[0].id, clock=clock).value
        assert latest.attempt_id == in_progress_id
        assert latest.is_completed is False

    def test_list_is_newest_first(self, uow, clock, quiz_setup):
        first = take(uow, clock, quiz_setup, correct=0)
        second = take(uow, clock, quiz_setup, correct=2)

        views = list_user_quiz_attempts(uow, USER, quiz_setup[0].id, clock=clock).value
        assert [v.attempt_id for v in views] == [second, first]

    def test_unknown_quiz(self, uow, clock):
        assert get_user_latest_attempt(uow, USER, 999, clock=clock).code == "not_found"


class TestQuizStats:
    @pytest.fixture(autouse=True)
    def known_user(self, store):
        store.users[USER] = "Kim Minji"

    def test_stats_over_completed_attempts(self, uow, clock, quiz_setup):
        take(uow, clock, quiz_setup, correct=2, minutes=10)
        take(uow, clock, quiz_setup, correct=0, minutes=4)
        take(uow, clock, quiz_setup, correct=1, minutes=5)
        start_attempt(uow, USER, quiz_setup[0].id, clock=clock)

        stats = get_user_quiz_stats(uow, USER).value

        assert stats.total_attempts == 4
        assert stats.completed_attempts == 3
        assert stats.passed_attempts == 2
        assert stats.failed_attempts == 1
        assert stats.average_score == 50.0
        assert stats.best_score == 100
        assert stats.total_time_spent == 19
        assert stats.formatted_total_time == "19m"

    def test_no_attempts(self, uow):
        stats = get_user_quiz_stats(uow, USER).value
        assert stats.total_attempts == 0
        assert stats.average_score == 0.0
        assert stats.best_score is None

    def test_unknown_user(self, uow):
        result = get_user_quiz_stats(uow, 404)
        assert result.code == "not_found"
        assert result.details == {"user_id": 404}


class TestValidateQuestionAnswers:
    def test_reports_catalog_defect(self, store, uow):
        quiz = store.add_quiz()
        question, _ = store.add_question(quiz, options=(("a", True), ("b", True)))

        view = validate_question_answers(uow, question.id).value

        assert view.is_valid is False
        assert view.problems == ["multiple_choice questions must have exactly one correct answer (found 2)"]

    def test_valid_true_false(self, store, uow):
        quiz = store.add_quiz()
        question, _ = store.add_question(
            quiz,
            question_type=QuestionType.TRUE_FALSE,
            options=(("True", False), ("False", True)),
        )
        assert validate_question_answers(uow, question.id).value.is_valid is True

    def test_unknown_question(self, uow):
        assert validate_question_answers(uow, 5).code == "not_found"
