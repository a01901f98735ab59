import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.db.session import utcnow
from app.models.question import Answer, Question

logger = logging.getLogger(__name__)


def save_question(
    db: Session,
    interview_id: str,
    round_id: str,
    question_text: str,
    question_type: str,
    options: Optional[List[str]] = None,
    correct_answer: Optional[str] = None,
    position: int = 0,
) -> Optional[Question]:
    """
    Persist one question. Returns None when the interview already holds the
    same text, e.g. written by a concurrent generate for the same round.
    """
    question = Question(
        interviewId=interview_id,
        roundId=round_id,
        position=position,
        questionText=question_text,
        questionType=question_type,
        options=list(options) if options else None,
        correctAnswer=correct_answer,
    )
    db.add(question)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info(f"Question already stored for interview {interview_id}: \"{question_text}\"")
        return None
    db.refresh(question)
    return question


def get_question(db: Session, question_id: str) -> Optional[Question]:
    return db.query(Question).filter(Question.id == question_id).first()


def get_questions(db: Session, interview_id: str, round_id: str) -> List[Question]:
    return (
        db.query(Question)
        .filter(Question.interviewId == interview_id, Question.roundId == round_id)
        .order_by(Question.position, Question.createdAt)
        .all()
    )


def get_all_questions(db: Session, interview_id: str) -> List[Question]:
    """Every question of the interview, across all rounds."""
    return (
        db.query(Question)
        .filter(Question.interviewId == interview_id)
        .order_by(Question.createdAt, Question.id)
        .all()
    )


def count_questions(db: Session, interview_id: str, round_id: str) -> int:
    return (
        db.query(func.count(Question.id))
        .filter(Question.interviewId == interview_id, Question.roundId == round_id)
        .scalar()
    )


def save_answer(
    db: Session,
    interview_id: str,
    round_id: str,
    question_id: str,
    answer_text: str,
    score: float,
    feedback: str,
) -> Answer:
    """
    Create or replace the answer to a question. There is at most one answer
    per question; resubmitting overwrites text, score and feedback.
    """
    existing = db.query(Answer).filter(Answer.questionId == question_id).first()
    if existing is None:
        answer = Answer(
            interviewId=interview_id,
            roundId=round_id,
            questionId=question_id,
            answerText=answer_text,
            score=score,
            feedback=feedback,
        )
        db.add(answer)
        try:
            db.commit()
            db.refresh(answer)
            return answer
        except IntegrityError:
            # A concurrent submission inserted first; fall through and overwrite it
            db.rollback()
            logger.info(f"Answer for question {question_id} already exists, replacing it")
            existing = db.query(Answer).filter(Answer.questionId == question_id).one()

    existing.answerText = answer_text
    existing.score = score
    existing.feedback = feedback
    existing.submittedAt = utcnow()
    db.commit()
    db.refresh(existing)
    return existing


def get_answers(db: Session, interview_id: str, round_id: Optional[str] = None) -> List[Answer]:
    """All answers of an interview, optionally narrowed to one round."""
    query = db.query(Answer).filter(Answer.interviewId == interview_id)
    if round_id is not None:
        query = query.filter(Answer.roundId == round_id)
    return query.order_by(Answer.submittedAt, Answer.id).all()


def count_answers(db: Session, interview_id: str, round_id: str) -> int:
    return (
        db.query(func.count(Answer.id))
        .filter(Answer.interviewId == interview_id, Answer.roundId == round_id)
        .scalar()
    )
