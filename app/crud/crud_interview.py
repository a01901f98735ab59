from datetime import datetime
from typing import Any, Dict, Iterable, Optional

from sqlalchemy import exists, update
from sqlalchemy.orm import Session, aliased, selectinload

from app.models.interview import Interview, InterviewRound, InterviewStatus, RoundStatus


def create_interview_session(
    db: Session,
    user_id: str,
    resume_id: str,
    job_role: str,
    round_plan: Iterable[Dict[str, Any]],
) -> Interview:
    """
    Create an interview together with all of its rounds, in plan order.
    Every round starts out PENDING.
    """
    interview = Interview(
        userId=user_id,
        resumeId=resume_id,
        jobRole=job_role,
        status=InterviewStatus.STARTED.value,
    )
    for position, spec in enumerate(round_plan):
        interview.rounds.append(
            InterviewRound(
                position=position,
                roundType=spec["round_type"],
                durationMinutes=int(spec["duration_minutes"]),
                status=RoundStatus.PENDING.value,
            )
        )

    db.add(interview)
    db.commit()
    db.refresh(interview)
    return interview


def get_interview(db: Session, interview_id: str) -> Optional[Interview]:
    return (
        db.query(Interview)
        .options(selectinload(Interview.rounds))
        .filter(Interview.id == interview_id)
        .first()
    )


def get_round(db: Session, interview_id: str, round_id: str) -> Optional[InterviewRound]:
    return (
        db.query(InterviewRound)
        .filter(InterviewRound.id == round_id, InterviewRound.interviewId == interview_id)
        .first()
    )


# Round transitions are compare-and-set updates: each returns True only for
# the caller that actually moved the row, so repeating one is harmless.

def activate_round(db: Session, interview_id: str, round_id: str, started_at: datetime) -> bool:
    """PENDING -> ACTIVE, only while no other round of the interview is ACTIVE."""
    other = aliased(InterviewRound)
    another_active = exists().where(
        other.interviewId == interview_id,
        other.status == RoundStatus.ACTIVE.value,
    )
    stmt = (
        update(InterviewRound)
        .where(
            InterviewRound.id == round_id,
            InterviewRound.interviewId == interview_id,
            InterviewRound.status == RoundStatus.PENDING.value,
            ~another_active,
        )
        .values(status=RoundStatus.ACTIVE.value, startedAt=started_at)
        .execution_options(synchronize_session=False)
    )
    result = db.execute(stmt)
    db.commit()
    return result.rowcount == 1


def complete_round(db: Session, round_id: str, completed_at: datetime) -> bool:
    """ACTIVE -> COMPLETED."""
    stmt = (
        update(InterviewRound)
        .where(
            InterviewRound.id == round_id,
            InterviewRound.status == RoundStatus.ACTIVE.value,
        )
        .values(status=RoundStatus.COMPLETED.value, completedAt=completed_at)
        .execution_options(synchronize_session=False)
    )
    result = db.execute(stmt)
    db.commit()
    return result.rowcount == 1


def update_interview_result(
    db: Session,
    interview_id: str,
    total_score: float,
    feedback: str,
    completed_at: datetime,
) -> bool:
    """STARTED -> COMPLETED with the final score and feedback."""
    stmt = (
        update(Interview)
        .where(
            Interview.id == interview_id,
            Interview.status != InterviewStatus.COMPLETED.value,
        )
        .values(
            status=InterviewStatus.COMPLETED.value,
            totalScore=total_score,
            feedback=feedback,
            completedAt=completed_at,
        )
        .execution_options(synchronize_session=False)
    )
    result = db.execute(stmt)
    db.commit()
    return result.rowcount == 1
