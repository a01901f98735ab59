"""
Tests for the round state machine: activation order, completion, finalization.
"""

from unittest.mock import MagicMock

import pytest
from sqlalchemy import update

from app.agents.content_generator import ContentGenerator
from app.core.exceptions import InvalidInputError, NotFoundError, UpstreamServiceError
from app.crud import crud_interview, crud_question
from app.models.interview import InterviewRound, RoundStatus
from app.services.interview_engine import InterviewSessionEngine


def _statuses(snapshot):
    return [r.status for r in snapshot.rounds]


def _add_answered_questions(db, interview_id, round_id, scores):
    for i, score in enumerate(scores):
        q = crud_question.save_question(db, interview_id, round_id, f"{round_id} question {i}", "OPEN", position=i)
        crud_question.save_answer(db, interview_id, round_id, q.id, "an answer", score, "fine")


def test_start_interview_creates_pending_rounds_in_plan_order(make_interview):
    interview = make_interview()

    assert interview.status == "STARTED"
    assert [r.roundType for r in interview.rounds] == ["TECHNICAL", "CODING", "BEHAVIORAL"]
    assert [r.status for r in interview.rounds] == ["PENDING"] * 3
    assert [r.durationMinutes for r in interview.rounds] == [10, 20, 10]


def test_start_interview_requires_resume_and_role(session_engine, parsed_resume):
    with pytest.raises(InvalidInputError):
        session_engine.start_interview("user-1", parsed_resume.id, None, [{"round_type": "X", "duration_minutes": 1}])
    with pytest.raises(InvalidInputError):
        session_engine.start_interview("user-1", "", "Backend Developer", [{"round_type": "X", "duration_minutes": 1}])
    with pytest.raises(NotFoundError):
        session_engine.start_interview("user-1", "missing", "Backend Developer", [{"round_type": "X", "duration_minutes": 1}])


def test_status_activates_rounds_one_at_a_time_in_creation_order(session_engine, make_interview, clock):
    interview = make_interview()

    snapshot = session_engine.get_status(interview.id)
    assert _statuses(snapshot) == ["ACTIVE", "PENDING", "PENDING"]
    assert snapshot.activeRound.roundType == "TECHNICAL"
    assert snapshot.activeRound.startedAt == clock.now

    # Nothing answered and the timer is still running: no change
    clock.advance(minutes=5)
    assert _statuses(session_engine.get_status(interview.id)) == ["ACTIVE", "PENDING", "PENDING"]

    clock.advance(minutes=6)
    snapshot = session_engine.get_status(interview.id)
    assert _statuses(snapshot) == ["COMPLETED", "ACTIVE", "PENDING"]
    assert snapshot.activeRound.roundType == "CODING"

    clock.advance(minutes=21)
    snapshot = session_engine.get_status(interview.id)
    assert _statuses(snapshot) == ["COMPLETED", "COMPLETED", "ACTIVE"]
    assert snapshot.activeRound.roundType == "BEHAVIORAL"


def test_never_more_than_one_active_round(session_engine, make_interview, clock):
    interview = make_interview()

    for _ in range(8):
        snapshot = session_engine.get_status(interview.id)
        assert _statuses(snapshot).count("ACTIVE") <= 1
        clock.advance(minutes=7)

    assert snapshot.status == "COMPLETED"


def test_timer_expiry_completes_round_with_zero_answers(session_engine, make_interview, clock):
    interview = make_interview()
    session_engine.get_status(interview.id)

    clock.advance(minutes=10, seconds=1)
    snapshot = session_engine.get_status(interview.id)

    assert snapshot.rounds[0].status == "COMPLETED"
    assert snapshot.rounds[0].completedAt == clock.now


def test_round_exactly_at_duration_is_not_expired(session_engine, make_interview, clock):
    interview = make_interview()
    session_engine.get_status(interview.id)

    clock.advance(minutes=10)
    assert session_engine.get_status(interview.id).rounds[0].status == "ACTIVE"


def test_round_with_unanswered_questions_waits_for_timer(session_engine, make_interview, db, clock):
    interview = make_interview()
    first = session_engine.get_status(interview.id).activeRound
    crud_question.save_question(db, interview.id, first.roundId, "Explain closures.", "OPEN")

    clock.advance(minutes=3)
    assert session_engine.get_status(interview.id).rounds[0].status == "ACTIVE"


def test_all_questions_answered_completes_round_and_never_reopens(session_engine, make_interview, db):
    interview = make_interview()
    first = session_engine.get_status(interview.id).activeRound
    _add_answered_questions(db, interview.id, first.roundId, [5, 7])

    snapshot = session_engine.get_status(interview.id)
    assert _statuses(snapshot) == ["COMPLETED", "ACTIVE", "PENDING"]

    for _ in range(3):
        assert session_engine.get_status(interview.id).rounds[0].status == "COMPLETED"


def test_try_complete_round_is_idempotent(session_engine, make_interview, db, clock):
    interview = make_interview()
    session_engine.get_status(interview.id)
    rnd = crud_interview.get_interview(db, interview.id).rounds[0]
    _add_answered_questions(db, interview.id, rnd.id, [6])

    assert session_engine.try_complete_round(rnd) is True
    completed_at = rnd.completedAt
    assert completed_at == clock.now

    clock.advance(minutes=1)
    assert session_engine.try_complete_round(rnd) is True
    db.refresh(rnd)
    assert rnd.status == "COMPLETED"
    assert rnd.completedAt == completed_at


def test_activation_is_refused_while_another_round_is_active(session_engine, make_interview, db, clock):
    interview = make_interview()
    session_engine.get_status(interview.id)
    second = crud_interview.get_interview(db, interview.id).rounds[1]

    assert crud_interview.activate_round(db, interview.id, second.id, clock.now) is False
    db.refresh(second)
    assert second.status == "PENDING"


def test_complete_round_does_not_touch_pending_round(make_interview, db, clock):
    interview = make_interview()
    pending = interview.rounds[0]

    assert crud_interview.complete_round(db, pending.id, clock.now) is False
    db.refresh(pending)
    assert pending.status == "PENDING"


def test_finalization_averages_only_rounds_with_answers(db, question_cache, clock, parsed_resume):
    generator = MagicMock(spec=ContentGenerator)
    generator.generate_feedback_summary.return_value = "Solid technical round."
    engine = InterviewSessionEngine(db=db, generator=generator, question_cache=question_cache, clock=clock)
    plan = [{"round_type": f"round_{i}", "duration_minutes": 10} for i in (1, 2, 3)]
    interview = engine.start_interview("user-1", parsed_resume.id, "Backend Developer", plan)

    first = engine.get_status(interview.id).activeRound
    _add_answered_questions(db, interview.id, first.roundId, [8, 6])
    assert _statuses(engine.get_status(interview.id)) == ["COMPLETED", "ACTIVE", "PENDING"]

    # Rounds 2 and 3 are closed from outside (e.g. timers) without answers
    db.execute(
        update(InterviewRound)
        .where(InterviewRound.interviewId == interview.id, InterviewRound.status != RoundStatus.COMPLETED.value)
        .values(status=RoundStatus.COMPLETED.value, completedAt=clock.now)
    )
    db.commit()

    snapshot = engine.get_status(interview.id)

    assert snapshot.status == "COMPLETED"
    assert snapshot.totalScore == 7.0
    assert snapshot.feedback == "Solid technical round."
    assert snapshot.activeRound is None
    generator.generate_feedback_summary.assert_called_once_with("Backend Developer", {"round_1": "7.0"}, 7.0)

    # Finalization happens once
    engine.get_status(interview.id)
    generator.generate_feedback_summary.assert_called_once()


def test_finalization_without_answers_reports_zero(session_engine, make_interview, clock):
    interview = make_interview(plan=[{"round_type": "TECHNICAL", "duration_minutes": 1}])
    session_engine.get_status(interview.id)
    clock.advance(minutes=2)

    # Completing the last round finalizes in the same call
    snapshot = session_engine.get_status(interview.id)

    assert snapshot.status == "COMPLETED"
    assert snapshot.totalScore == 0
    assert "No answers were recorded" in snapshot.feedback


def test_feedback_failure_leaves_interview_open(db, question_cache, clock, parsed_resume):
    generator = MagicMock(spec=ContentGenerator)
    generator.generate_feedback_summary.side_effect = RuntimeError("model offline")
    engine = InterviewSessionEngine(db=db, generator=generator, question_cache=question_cache, clock=clock)
    interview = engine.start_interview("user-1", parsed_resume.id, "Backend Developer", [{"round_type": "TECHNICAL", "duration_minutes": 1}])
    engine.get_status(interview.id)
    clock.advance(minutes=2)

    with pytest.raises(UpstreamServiceError):
        engine.get_status(interview.id)

    db.expire_all()
    stored = crud_interview.get_interview(db, interview.id)
    assert stored.rounds[0].status == "COMPLETED"
    assert stored.status == "STARTED"
    assert stored.totalScore is None

    # The next status call retries finalization
    generator.generate_feedback_summary.side_effect = None
    generator.generate_feedback_summary.return_value = "Recovered."
    assert engine.get_status(interview.id).status == "COMPLETED"


def test_status_of_unknown_interview_raises_not_found(session_engine):
    with pytest.raises(NotFoundError):
        session_engine.get_status("does-not-exist")
