"""
Unit tests for the DrillEngine state machine.

Uses a tiny arithmetic drill so scoring is obvious: the answer is always
the question number doubled.
"""

import random

import pytest

from src.core.errors import InvalidStateTransition
from src.engine.base import EngineEvents, EngineState, Question, Validation
from src.engine.drill_engine import DrillEngine
from src.engine.sampling import pick_excluding, weighted_choice


def double_generator(view, rng):
    n = view.question_number
    return Question(
        category="even" if n % 2 == 0 else "odd",
        prompt=f"{n} x 2?",
        payload={"answer": str(n * 2)},
    )


def double_validator(answer, question):
    expected = question.payload["answer"]
    return Validation(correct=str(answer).strip() == expected, correct_answer=expected)


def make_engine(clock, total=4, strict=False, events=None, threshold=75.0):
    return DrillEngine(
        unit_id="doubles",
        total_questions=total,
        generate_question=double_generator,
        validate_answer=double_validator,
        explain=lambda q, v: f"It is {v.correct_answer}",
        pass_threshold=threshold,
        clock=clock,
        rng=random.Random(0),
        events=events,
        strict=strict,
    )


def answer_all(engine, clock, answers, seconds=1.5):
    """Answer every question in order; returns the final summary."""
    summary = None
    for given in answers:
        clock.advance(seconds)
        engine.submit_answer(given)
        summary = engine.next_question()
    return summary


class TestLifecycle:
    """Test state transitions."""

    def test_starts_idle(self, clock):
        engine = make_engine(clock)
        assert engine.state is EngineState.IDLE
        assert engine.current_question is None

    def test_start_presents_first_question(self, clock):
        engine = make_engine(clock)
        question = engine.start()
        assert engine.state is EngineState.QUESTION_READY
        assert engine.question_number == 1
        assert question.prompt == "1 x 2?"

    def test_submit_then_next(self, clock):
        engine = make_engine(clock)
        engine.start()
        result = engine.submit_answer("2")
        assert result.correct
        assert engine.state is EngineState.ANSWERED
        assert engine.next_question() is None
        assert engine.question_number == 2
        assert engine.state is EngineState.QUESTION_READY

    def test_ends_after_last_question(self, clock):
        engine = make_engine(clock, total=2)
        engine.start()
        summary = answer_all(engine, clock, ["2", "4"])
        assert summary is not None
        assert engine.state is EngineState.ENDED
        assert engine.summary is summary
        assert summary.total_questions == 2

    def test_invalid_total(self, clock):
        with pytest.raises(ValueError):
            make_engine(clock, total=0)

    def test_restart_resets_counters(self, clock):
        engine = make_engine(clock, total=2)
        engine.start()
        answer_all(engine, clock, ["2", "4"])
        engine.start()
        assert engine.question_number == 1
        assert engine.answers == ()
        assert engine.summary is None


class TestRejectedTransitions:
    """Wrong-state calls are ignored, or raise in strict mode."""

    def test_double_submit_ignored(self, clock):
        engine = make_engine(clock)
        engine.start()
        engine.submit_answer("2")
        assert engine.submit_answer("2") is None
        assert len(engine.answers) == 1
        assert engine.snapshot().correct == 1

    def test_next_before_answer_ignored(self, clock):
        engine = make_engine(clock)
        engine.start()
        assert engine.next_question() is None
        assert engine.question_number == 1

    def test_submit_before_start_ignored(self, clock):
        engine = make_engine(clock)
        assert engine.submit_answer("2") is None

    def test_strict_double_submit_raises(self, clock):
        engine = make_engine(clock, strict=True)
        engine.start()
        engine.submit_answer("2")
        with pytest.raises(InvalidStateTransition):
            engine.submit_answer("2")

    def test_strict_next_before_answer_raises(self, clock):
        engine = make_engine(clock, strict=True)
        engine.start()
        with pytest.raises(InvalidStateTransition):
            engine.next_question()


class TestScoring:
    """Test streaks, accuracy, timing and categories."""

    def test_streaks(self, clock):
        engine = make_engine(clock, total=6)
        engine.start()
        summary = answer_all(engine, clock, ["2", "4", "x", "8", "10", "12"])
        assert summary.correct == 5
        assert summary.best_streak == 3
        assert engine.snapshot().streak == 3

    def test_wrong_answer_resets_streak(self, clock):
        engine = make_engine(clock)
        engine.start()
        engine.submit_answer("2")
        engine.next_question()
        result = engine.submit_answer("nope")
        assert not result.correct
        assert result.stats.streak == 0
        assert result.stats.best_streak == 1
        assert result.correct_answer == "4"
        assert result.explanation == "It is 4"

    def test_accuracy_and_pass(self, clock):
        engine = make_engine(clock, total=4, threshold=75)
        engine.start()
        summary = answer_all(engine, clock, ["2", "4", "6", "x"])
        assert summary.accuracy == 75.0
        assert summary.passed is True

    def test_below_threshold_fails(self, clock):
        engine = make_engine(clock, total=4, threshold=75)
        engine.start()
        summary = answer_all(engine, clock, ["2", "4", "x", "x"])
        assert summary.accuracy == 50.0
        assert summary.passed is False

    def test_elapsed_time_from_injected_clock(self, clock):
        engine = make_engine(clock, total=2)
        engine.start()
        clock.advance(1.2)
        result = engine.submit_answer("2")
        assert result.elapsed_ms == pytest.approx(1200)
        engine.next_question()
        clock.advance(0.8)
        engine.submit_answer("4")
        summary = engine.next_question()
        assert summary.avg_time_ms == pytest.approx(1000)
        assert summary.fastest_time_ms == pytest.approx(800)

    def test_thinking_time_after_answer_not_counted(self, clock):
        engine = make_engine(clock, total=2)
        engine.start()
        clock.advance(1.0)
        engine.submit_answer("2")
        clock.advance(30.0)  # reading the explanation
        engine.next_question()
        clock.advance(2.0)
        result = engine.submit_answer("4")
        assert result.elapsed_ms == pytest.approx(2000)

    def test_category_stats(self, clock):
        engine = make_engine(clock, total=4)
        engine.start()
        summary = answer_all(engine, clock, ["2", "x", "6", "8"])
        assert summary.category_stats["odd"].total == 2
        assert summary.category_stats["odd"].correct == 2
        assert summary.category_stats["even"].correct == 1
        assert summary.category_stats["even"].accuracy == 50.0

    def test_answer_log(self, clock):
        engine = make_engine(clock, total=2)
        engine.start()
        summary = answer_all(engine, clock, ["2", "5"])
        assert [a.question_number for a in summary.answers] == [1, 2]
        assert [a.correct for a in summary.answers] == [True, False]
        assert summary.answers[1].player_answer == "5"


class TestStop:
    """Test early stops."""

    def test_stop_has_no_verdict(self, clock):
        engine = make_engine(clock, total=4)
        engine.start()
        answer_all(engine, clock, ["2", "4"])
        summary = engine.stop()
        assert engine.state is EngineState.STOPPED
        assert summary.stopped
        assert summary.passed is None
        assert summary.answered == 2

    def test_accuracy_uses_full_question_count(self, clock):
        engine = make_engine(clock, total=4)
        engine.start()
        answer_all(engine, clock, ["2", "4"])
        assert engine.stop().accuracy == 50.0

    def test_stop_is_idempotent(self, clock):
        engine = make_engine(clock)
        engine.start()
        assert engine.stop() is engine.stop()

    def test_stop_does_not_fire_session_end(self, clock):
        ended = []
        engine = make_engine(clock, events=EngineEvents(on_session_end=ended.append))
        engine.start()
        engine.stop()
        assert ended == []


class TestEvents:
    """Test outward notifications."""

    def test_all_events_fire(self, clock):
        ready, results, ended = [], [], []
        events = EngineEvents(
            on_question_ready=ready.append,
            on_answer_result=results.append,
            on_session_end=ended.append,
        )
        engine = make_engine(clock, total=2, events=events)
        engine.start()
        summary = answer_all(engine, clock, ["2", "4"])
        assert [r.question_number for r in ready] == [1, 2]
        assert len(results) == 2
        assert ended == [summary]


class TestSampling:
    """Test the weighted roll and fold-pool helpers."""

    def test_last_option_absorbs_remainder(self):
        class FixedRng:
            def __init__(self, value):
                self.value = value

            def random(self):
                return self.value

        weights = [("a", 0.25), ("b", 0.35), ("c", 0.0)]
        assert weighted_choice(FixedRng(0.1), weights) == "a"
        assert weighted_choice(FixedRng(0.5), weights) == "b"
        assert weighted_choice(FixedRng(0.9), weights) == "c"

    def test_empty_weights(self):
        with pytest.raises(ValueError):
            weighted_choice(random.Random(), [])

    def test_pick_excluding(self):
        rng = random.Random(3)
        for _ in range(50):
            assert pick_excluding(rng, ["a", "b", "c"], {"a", "b"}, ["z"]) == "c"

    def test_pick_excluding_fallback(self):
        assert pick_excluding(random.Random(3), ["a"], {"a"}, ["z"]) == "z"
