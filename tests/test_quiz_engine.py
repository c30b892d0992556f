import random

import pytest

from conftest import correct_answer_for, wrong_answer_for
from core.errors import (
    EmptyBankError,
    InvalidPositionError,
    ResumeError,
    SessionCompletedError,
)
from models import Question, SessionStatus
from quiz_engine import QuizEngine, is_correct, shuffled_indices


def test_shuffled_indices_is_a_permutation() -> None:
    rng = random.Random(5)
    for count in (0, 1, 2, 10):
        assert sorted(shuffled_indices(count, rng)) == list(range(count))


def test_shuffled_indices_covers_all_orders() -> None:
    rng = random.Random(99)
    seen = {tuple(shuffled_indices(3, rng)) for _ in range(300)}
    assert len(seen) == 6


def test_create_session_picks_distinct_subset(engine: QuizEngine) -> None:
    session = engine.create_session(3, is_test=False)

    assert session.total_questions == 3
    assert len(set(session.question_ids)) == 3
    assert all(0 <= index < 5 for index in session.question_ids)
    assert session.current_question_index == 0
    assert session.score == 0
    assert session.answered_questions == set()
    assert not session.completed
    assert not session.is_test


def test_create_session_clamps_to_bank_size(engine: QuizEngine) -> None:
    session = engine.create_session(50, is_test=True)
    assert session.total_questions == 5
    assert sorted(session.question_ids) == [0, 1, 2, 3, 4]
    assert session.is_test


def test_create_session_ids_are_unique(engine: QuizEngine) -> None:
    ids = {engine.create_session(2).id for _ in range(20)}
    assert len(ids) == 20


def test_create_session_refuses_empty_bank() -> None:
    with pytest.raises(EmptyBankError):
        QuizEngine([]).create_session(10)


def test_free_text_is_case_insensitive() -> None:
    question = Question("Two processes waiting forever?", (), "Deadlock")
    assert is_correct(question, "deadlock")
    assert is_correct(question, "DEADLOCK")
    assert not is_correct(question, "dead lock")


def test_choice_answers_are_exact() -> None:
    question = Question("True or false?", ("True", "False"), "True")
    assert is_correct(question, "True")
    assert not is_correct(question, "true")


def test_full_correct_run_completes(engine: QuizEngine) -> None:
    session = engine.create_session(3)
    state = engine.new_state()

    for _ in range(3):
        result = engine.submit_answer(session, state, correct_answer_for(engine, session))
        assert result is not None and result.is_correct and result.scored
        engine.advance(session, state)

    assert session.score == 3
    assert session.completed
    assert engine.status(session, state) is SessionStatus.COMPLETED
    with pytest.raises(SessionCompletedError):
        engine.current_question(session)


def test_advance_on_last_position_completes(engine: QuizEngine) -> None:
    session = engine.create_session(1)
    state = engine.new_state()

    engine.advance(session, state)

    assert session.completed
    assert session.current_question_index == 0
    # further navigation is ignored
    engine.advance(session, state)
    engine.retreat(session, state)
    assert session.completed
    assert session.current_question_index == 0


def test_submit_twice_scores_once(engine: QuizEngine) -> None:
    session = engine.create_session(5)
    state = engine.new_state()

    first = engine.submit_answer(session, state, wrong_answer_for(engine, session))
    second = engine.submit_answer(session, state, correct_answer_for(engine, session))

    assert first is not None and not first.is_correct
    assert second is None
    assert session.score == 0
    assert session.answered_questions == {0}
    assert len(state.wrong_answers) == 1


def test_revisited_position_is_not_rescored(engine: QuizEngine) -> None:
    session = engine.create_session(5)
    state = engine.new_state()
    engine.submit_answer(session, state, wrong_answer_for(engine, session))
    engine.advance(session, state)
    engine.retreat(session, state)

    result = engine.submit_answer(session, state, correct_answer_for(engine, session))

    assert result is not None
    assert result.is_correct
    assert not result.scored
    assert session.score == 0
    assert session.answered_questions == {0}


def test_retreat_keeps_score(engine: QuizEngine) -> None:
    session = engine.create_session(5)
    state = engine.new_state()
    engine.submit_answer(session, state, correct_answer_for(engine, session))
    engine.advance(session, state)

    engine.retreat(session, state)

    assert session.current_question_index == 0
    assert session.score == 1
    assert session.answered_questions == {0}


def test_retreat_at_first_question_is_noop(engine: QuizEngine) -> None:
    session = engine.create_session(5)
    state = engine.new_state()
    engine.retreat(session, state)
    assert session.current_question_index == 0


def test_empty_answer_is_ignored(engine: QuizEngine) -> None:
    session = engine.create_session(5)
    state = engine.new_state()

    assert engine.submit_answer(session, state, "") is None
    assert engine.submit_answer(session, state) is None
    assert session.answered_questions == set()
    assert not state.submitted


def test_submit_uses_selected_answer(engine: QuizEngine) -> None:
    session = engine.create_session(5)
    state = engine.new_state()
    engine.select_answer(session, state, correct_answer_for(engine, session))

    result = engine.submit_answer(session, state)

    assert result is not None and result.is_correct
    assert session.score == 1


def test_advance_clears_transient_selection(engine: QuizEngine) -> None:
    session = engine.create_session(5)
    state = engine.new_state()
    engine.submit_answer(session, state, correct_answer_for(engine, session))

    engine.advance(session, state)

    assert state.selected_answer == ""
    assert not state.submitted


def test_resume_completed_session_fails(engine: QuizEngine) -> None:
    session = engine.create_session(1)
    engine.advance(session, engine.new_state())
    with pytest.raises(ResumeError):
        engine.resume(session)


def test_resume_keeps_progress(engine: QuizEngine) -> None:
    session = engine.create_session(5)
    state = engine.new_state()
    engine.submit_answer(session, state, correct_answer_for(engine, session))
    engine.advance(session, state)

    resumed = engine.resume(session)

    assert resumed.wrong_answers == []
    assert session.current_question_index == 1
    assert session.score == 1


def test_jump_to_does_not_move_progress(engine: QuizEngine) -> None:
    session = engine.create_session(5)
    state = engine.new_state()
    engine.advance(session, state)

    view = engine.jump_to(session, state, 3)

    assert view.view_only
    assert view.position == 3
    assert view.question == engine.questions[session.question_ids[3]]
    assert session.current_question_index == 1
    assert state.previous_index == 1
    assert engine.submit_answer(session, state, "anything") is None
    assert session.answered_questions == set()

    engine.jump_to(session, state, 0)
    assert state.previous_index == 1

    back = engine.leave_view(session, state)
    assert back is not None and back.position == 1
    assert not state.in_view_mode


def test_navigation_in_view_mode_moves_the_view(engine: QuizEngine) -> None:
    session = engine.create_session(5)
    state = engine.new_state()
    engine.jump_to(session, state, 4)

    engine.advance(session, state)
    assert state.view_index == 4
    assert not session.completed

    engine.retreat(session, state)
    assert state.view_index == 3
    assert session.current_question_index == 0


def test_submit_while_viewing_completed_session_is_ignored(engine: QuizEngine) -> None:
    session = engine.create_session(2)
    state = engine.new_state()
    engine.advance(session, state)
    engine.advance(session, state)
    assert session.completed

    engine.jump_to(session, state, 0)

    assert engine.submit_answer(session, state, "anything") is None
    assert session.score == 0

    assert engine.leave_view(session, state) is None
    with pytest.raises(SessionCompletedError):
        engine.submit_answer(session, state, "anything")


def test_jump_to_out_of_range(engine: QuizEngine) -> None:
    session = engine.create_session(3)
    with pytest.raises(InvalidPositionError):
        engine.jump_to(session, engine.new_state(), 3)


def test_review_only_after_completion(engine: QuizEngine) -> None:
    session = engine.create_session(2)
    state = engine.new_state()
    engine.submit_answer(session, state, wrong_answer_for(engine, session))
    assert engine.open_review(session, state) == []

    engine.advance(session, state)
    engine.advance(session, state)
    missed = engine.open_review(session, state)

    assert len(missed) == 1
    assert engine.status(session, state) is SessionStatus.REVIEWING
    engine.close_review(state)
    assert engine.status(session, state) is SessionStatus.COMPLETED


def test_build_report(engine: QuizEngine) -> None:
    session = engine.create_session(3)
    state = engine.new_state()
    engine.submit_answer(session, state, correct_answer_for(engine, session))
    engine.advance(session, state)
    wrong = wrong_answer_for(engine, session)
    missed_question = engine.current_question(session)
    engine.submit_answer(session, state, wrong)
    engine.advance(session, state)
    engine.advance(session, state)

    report = engine.build_report(session, state)

    assert report.total_questions == 3
    assert report.correct == 1
    assert report.wrong == 1
    assert report.unanswered == 1
    assert report.percentage == 33.3
    assert len(report.missed) == 1
    assert report.missed[0].question == missed_question.question
    assert report.missed[0].given_answer == wrong
    assert report.missed[0].correct_answer == missed_question.correct


def test_score_matches_correct_positions_after_random_operations(bank: list[Question]) -> None:
    rng = random.Random(2024)
    for seed in range(25):
        engine = QuizEngine(bank, rng=random.Random(seed))
        session = engine.create_session(rng.randint(1, 6))
        state = engine.new_state()
        correct_positions: set[int] = set()

        for _ in range(40):
            if session.completed:
                break
            action = rng.choice(["right", "wrong", "empty", "next", "prev"])
            position = session.current_question_index
            if action == "right":
                result = engine.submit_answer(session, state, correct_answer_for(engine, session))
                if result is not None and result.scored:
                    correct_positions.add(position)
            elif action == "wrong":
                engine.submit_answer(session, state, wrong_answer_for(engine, session))
            elif action == "empty":
                engine.submit_answer(session, state, "")
            elif action == "next":
                engine.advance(session, state)
            else:
                engine.retreat(session, state)

            assert session.score == len(correct_positions)
            assert correct_positions <= session.answered_questions
            assert session.answered_questions <= set(range(session.total_questions))
            if not session.completed:
                assert 0 <= session.current_question_index < session.total_questions
