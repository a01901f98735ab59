from sqlalchemy import Column, String, DateTime, Float, Integer, Text, JSON, ForeignKey, Index, UniqueConstraint
import uuid

from app.db.session import Base, utcnow


def generate_uuid():
    return str(uuid.uuid4())


MCQ_QUESTION_TYPE = "MCQ"


class Question(Base):
    __tablename__ = "questions"

    id = Column(String, primary_key=True, default=generate_uuid)
    interviewId = Column(String, ForeignKey("interviews.id", ondelete="CASCADE"), nullable=False)
    roundId = Column(String, ForeignKey("interview_rounds.id", ondelete="CASCADE"), nullable=False)
    # Order within the round as generated
    position = Column(Integer, nullable=False, default=0)
    questionText = Column(Text, nullable=False)
    questionType = Column(String, nullable=False)
    options = Column(JSON, nullable=True)
    # Never part of the candidate-facing projection
    correctAnswer = Column(String, nullable=True)
    createdAt = Column(DateTime, default=utcnow)

    __table_args__ = (
        Index("idx_question_interview_round", "interviewId", "roundId"),
        UniqueConstraint("interviewId", "questionText", name="uq_question_interview_text"),
    )


class Answer(Base):
    __tablename__ = "answers"

    id = Column(String, primary_key=True, default=generate_uuid)
    # interviewId/roundId are denormalized for batch filtering
    interviewId = Column(String, ForeignKey("interviews.id", ondelete="CASCADE"), index=True, nullable=False)
    roundId = Column(String, ForeignKey("interview_rounds.id", ondelete="CASCADE"), nullable=False)
    questionId = Column(String, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False)
    answerText = Column(Text, nullable=False, default="")
    score = Column(Float, nullable=False, default=0.0)
    feedback = Column(Text, nullable=True)
    submittedAt = Column(DateTime, default=utcnow)

    __table_args__ = (
        UniqueConstraint("questionId", name="uq_answer_question"),
    )
