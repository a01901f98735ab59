from sqlalchemy import Column, String, DateTime, Float, Integer, Text, ForeignKey, Index
from sqlalchemy.orm import relationship
import enum
import uuid

from app.db.session import Base, utcnow


def generate_uuid():
    return str(uuid.uuid4())


class InterviewStatus(str, enum.Enum):
    STARTED = "STARTED"
    COMPLETED = "COMPLETED"


class RoundStatus(str, enum.Enum):
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"


class Interview(Base):
    __tablename__ = "interviews"

    id = Column(String, primary_key=True, default=generate_uuid)
    userId = Column(String, index=True, nullable=False)
    resumeId = Column(String, ForeignKey("resumes.id"), index=True, nullable=False)
    jobRole = Column(String, nullable=False)
    status = Column(String, nullable=False, default=InterviewStatus.STARTED.value)
    totalScore = Column(Float, nullable=True)
    feedback = Column(Text, nullable=True)
    startedAt = Column(DateTime, default=utcnow)
    completedAt = Column(DateTime, nullable=True)

    # Rounds live and die with their interview, always in creation order
    rounds = relationship(
        "InterviewRound",
        back_populates="interview",
        cascade="all, delete-orphan",
        order_by="InterviewRound.position",
    )


class InterviewRound(Base):
    __tablename__ = "interview_rounds"

    id = Column(String, primary_key=True, default=generate_uuid)
    interviewId = Column(String, ForeignKey("interviews.id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, nullable=False)
    roundType = Column(String, nullable=False)
    status = Column(String, nullable=False, default=RoundStatus.PENDING.value)
    durationMinutes = Column(Integer, nullable=False)
    startedAt = Column(DateTime, nullable=True)
    completedAt = Column(DateTime, nullable=True)

    interview = relationship("Interview", back_populates="rounds")

    __table_args__ = (
        Index("idx_round_interview_status", "interviewId", "status"),
    )
