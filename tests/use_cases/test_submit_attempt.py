from datetime import timedelta

import pytest

from academy.application.dto.assessments import AnswerSubmission
from academy.application.use_cases.assessments.start_attempt import start_attempt
from academy.application.use_cases.assessments.submit_attempt import submit_attempt
from academy.domain.assessments.entities import QuestionType
from tests.fakes import T0

USER = 7


@pytest.fixture
def two_question_quiz(store):
    """Q1: multiple choice 6점, Q2: true/false 4점."""
    quiz = store.add_quiz(title="Intro", passing_score=60, time_limit=10)
    q1, q1_opts = store.add_question(
        quiz,
        points=6,
        options=(("a", False), ("b", True), ("c", False)),
    )
    q2, q2_opts = store.add_question(
        quiz,
        question_type=QuestionType.TRUE_FALSE,
        points=4,
        options=(("True", True), ("False", False)),
    )
    return quiz, (q1, q1_opts), (q2, q2_opts)


def start(uow, quiz, clock):
    return start_attempt(uow, USER, quiz.id, clock=clock).value


class TestSubmitGrading:
    def test_all_correct(self, store, uow, clock, two_question_quiz):
        quiz, (q1, q1_opts), (q2, q2_opts) = two_question_quiz
        store.users[USER] = "Kim Minji"
        attempt = start(uow, quiz, clock)
        clock.advance(minutes=4, seconds=31)

        result = submit_attempt(
            uow,
            attempt.attempt_id,
            [
                AnswerSubmission(q2.id, [q2_opts[0].id]),
                AnswerSubmission(q1.id, [q1_opts[1].id]),
            ],
            clock=clock,
        )

        assert result.ok
        view = result.value
        assert view.score == 10
        assert view.score_percentage == 100
        assert view.is_passed is True
        assert view.time_spent == 5
        assert view.formatted_time_spent == "5m"
        assert view.user_name == "Kim Minji"
        assert view.completed_at == T0 + timedelta(minutes=4, seconds=31)
        assert [a.question_id for a in view.answers] == [q1.id, q2.id]

    def test_per_question_breakdown(self, store, uow, clock, two_question_quiz):
        quiz, (q1, q1_opts), (q2, q2_opts) = two_question_quiz
        attempt = start(uow, quiz, clock)

        view = submit_attempt(
            uow,
            attempt.attempt_id,
            [
                AnswerSubmission(q1.id, [q1_opts[0].id, q1_opts[1].id]),
                AnswerSubmission(q2.id, [q2_opts[0].id]),
            ],
            clock=clock,
        ).value

        first = view.answers[0]
        assert first.is_correct is False
        assert first.points_earned == 0
        assert first.selected_answer_ids == sorted([q1_opts[0].id, q1_opts[1].id])
        assert [(o.is_selected, o.is_correct) for o in first.options] == [
            (True, False),
            (True, True),
            (False, False),
        ]
        assert view.score == 4
        assert view.score_percentage == 40
        assert view.is_passed is False
        assert view.user_name == "Unknown User"

    def test_empty_selection_is_wrong_not_missing(self, store, uow, clock, two_question_quiz):
        quiz, (q1, _), (q2, q2_opts) = two_question_quiz
        attempt = start(uow, quiz, clock)

        view = submit_attempt(
            uow,
            attempt.attempt_id,
            [AnswerSubmission(q1.id, []), AnswerSubmission(q2.id, [q2_opts[0].id])],
            clock=clock,
        ).value

        assert view.score == 4

    def test_completion_is_persisted(self, store, uow, clock, two_question_quiz):
        quiz, (q1, q1_opts), (q2, q2_opts) = two_question_quiz
        attempt = start(uow, quiz, clock)
        submit_attempt(
            uow,
            attempt.attempt_id,
            [AnswerSubmission(q1.id, [q1_opts[1].id]), AnswerSubmission(q2.id, [q2_opts[1].id])],
            clock=clock,
        )

        stored = store.attempts[attempt.attempt_id]
        assert stored.is_completed()
        assert stored.score == 6
        assert [a.selected_answer_ids for a in stored.answers] == [
            frozenset({q1_opts[1].id}),
            frozenset({q2_opts[1].id}),
        ]

    def test_deactivated_question_is_not_required(self, store, uow, clock, two_question_quiz):
        quiz, (q1, q1_opts), (q2, q2_opts) = two_question_quiz
        store.add_question(quiz, points=50, is_active=False)
        attempt = start(uow, quiz, clock)

        result = submit_attempt(
            uow,
            attempt.attempt_id,
            [AnswerSubmission(q1.id, [q1_opts[1].id]), AnswerSubmission(q2.id, [q2_opts[0].id])],
            clock=clock,
        )

        assert result.ok
        assert result.value.max_score == 10
        assert len(result.value.answers) == 2


class TestSubmitTimeLimit:
    def test_submit_after_limit_fails(self, store, uow, clock, two_question_quiz):
        quiz, (q1, q1_opts), (q2, q2_opts) = two_question_quiz
        attempt = start(uow, quiz, clock)
        clock.advance(minutes=11)

        result = submit_attempt(
            uow,
            attempt.attempt_id,
            [AnswerSubmission(q1.id, [q1_opts[1].id]), AnswerSubmission(q2.id, [q2_opts[0].id])],
            clock=clock,
        )

        assert not result.ok
        assert result.code == "time_expired"
        assert store.attempts[attempt.attempt_id].is_in_progress()

    def test_submit_exactly_at_limit_succeeds(self, store, uow, clock, two_question_quiz):
        quiz, (q1, q1_opts), (q2, q2_opts) = two_question_quiz
        attempt = start(uow, quiz, clock)
        clock.advance(minutes=10)

        result = submit_attempt(
            uow,
            attempt.attempt_id,
            [AnswerSubmission(q1.id, [q1_opts[1].id]), AnswerSubmission(q2.id, [q2_opts[0].id])],
            clock=clock,
        )

        assert result.ok
        assert result.value.time_spent == 10


class TestSubmitRejections:
    def test_unknown_attempt(self, uow, clock):
        result = submit_attempt(uow, 404, [], clock=clock)
        assert result.code == "not_found"

    def test_missing_answers_name_the_questions(self, store, uow, clock, two_question_quiz):
        quiz, (q1, q1_opts), (q2, _) = two_question_quiz
        attempt = start(uow, quiz, clock)

        result = submit_attempt(uow, attempt.attempt_id, [AnswerSubmission(q1.id, [q1_opts[1].id])], clock=clock)

        assert result.code == "validation_error"
        assert result.message == f"Missing answers for questions: {q2.id}"
        assert result.details == {"missing_question_ids": [q2.id]}
        assert store.attempts[attempt.attempt_id].is_in_progress()

    def test_unknown_question_ids(self, store, uow, clock, two_question_quiz):
        quiz, (q1, q1_opts), (q2, q2_opts) = two_question_quiz
        attempt = start(uow, quiz, clock)

        result = submit_attempt(
            uow,
            attempt.attempt_id,
            [
                AnswerSubmission(q1.id, [q1_opts[1].id]),
                AnswerSubmission(q2.id, [q2_opts[0].id]),
                AnswerSubmission(9999, [1]),
            ],
            clock=clock,
        )

        assert result.code == "validation_error"
        assert result.details == {"unknown_question_ids": [9999]}

    def test_duplicate_question_entries(self, store, uow, clock, two_question_quiz):
        quiz, (q1, q1_opts), (q2, q2_opts) = two_question_quiz
        attempt = start(uow, quiz, clock)

        result = submit_attempt(
            uow,
            attempt.attempt_id,
            [
                AnswerSubmission(q1.id, [q1_opts[1].id]),
                AnswerSubmission(q1.id, [q1_opts[0].id]),
                AnswerSubmission(q2.id, [q2_opts[0].id]),
            ],
            clock=clock,
        )

        assert result.code == "validation_error"
        assert result.details == {"duplicate_question_ids": [q1.id]}

    def test_non_numeric_question_id(self, store, uow, clock, two_question_quiz):
        quiz, (q1, q1_opts), (q2, q2_opts) = two_question_quiz
        attempt = start(uow, quiz, clock)

        result = submit_attempt(
            uow,
            attempt.attempt_id,
            [AnswerSubmission("abc", [q1_opts[1].id]), AnswerSubmission(q2.id, [q2_opts[0].id])],
            clock=clock,
        )

        assert result.code == "validation_error"
        assert result.details == {"question_id": "abc"}
        assert store.attempts[attempt.attempt_id].is_in_progress()

    def test_non_positive_question_id(self, uow, clock, two_question_quiz):
        quiz, (q1, q1_opts), _ = two_question_quiz
        attempt = start(uow, quiz, clock)

        result = submit_attempt(uow, attempt.attempt_id, [AnswerSubmission(0, [q1_opts[1].id])], clock=clock)

        assert result.code == "validation_error"
        assert result.details == {"question_id": 0}

    def test_non_numeric_selected_answer_id(self, store, uow, clock, two_question_quiz):
        quiz, (q1, _), (q2, q2_opts) = two_question_quiz
        attempt = start(uow, quiz, clock)

        result = submit_attempt(
            uow,
            attempt.attempt_id,
            [AnswerSubmission(q1.id, ["x"]), AnswerSubmission(q2.id, [q2_opts[0].id])],
            clock=clock,
        )

        assert result.code == "validation_error"
        assert result.details == {"selected_answer_id": "x", "question_id": q1.id}
        assert store.attempts[attempt.attempt_id].is_in_progress()

    def test_selected_ids_must_be_a_list(self, uow, clock, two_question_quiz):
        quiz, (q1, _), (q2, q2_opts) = two_question_quiz
        attempt = start(uow, quiz, clock)

        result = submit_attempt(
            uow,
            attempt.attempt_id,
            [AnswerSubmission(q1.id, 5), AnswerSubmission(q2.id, [q2_opts[0].id])],
            clock=clock,
        )

        assert result.code == "validation_error"
        assert result.details["question_id"] == q1.id

    def test_second_submit_is_rejected_and_keeps_first_result(self, store, uow, clock, two_question_quiz):
        quiz, (q1, q1_opts), (q2, q2_opts) = two_question_quiz
        attempt = start(uow, quiz, clock)
        answers = [AnswerSubmission(q1.id, [q1_opts[1].id]), AnswerSubmission(q2.id, [q2_opts[0].id])]
        first = submit_attempt(uow, attempt.attempt_id, answers, clock=clock).value

        clock.advance(minutes=30)
        second = submit_attempt(uow, attempt.attempt_id, [AnswerSubmission(q1.id, [])], clock=clock)

        assert second.code == "already_completed"
        stored = store.attempts[attempt.attempt_id]
        assert stored.score == first.score
        assert stored.completed_at == first.completed_at
