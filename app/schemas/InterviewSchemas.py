from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


class RoundSchema(BaseModel):
    roundId: str
    interviewId: str
    position: int
    roundType: str
    status: str
    durationMinutes: int
    startedAt: Optional[datetime] = None
    completedAt: Optional[datetime] = None

    @classmethod
    def from_model(cls, r) -> "RoundSchema":
        return cls(
            roundId=r.id,
            interviewId=r.interviewId,
            position=r.position,
            roundType=r.roundType,
            status=r.status,
            durationMinutes=r.durationMinutes,
            startedAt=r.startedAt,
            completedAt=r.completedAt,
        )


class CandidateQuestion(BaseModel):
    """Read-facing projection of a question. Never carries the correct answer."""
    questionId: str
    interviewId: str
    roundId: str
    position: int = 0
    questionText: str
    questionType: str
    options: Optional[List[str]] = None

    @classmethod
    def from_model(cls, q) -> "CandidateQuestion":
        return cls(
            questionId=q.id,
            interviewId=q.interviewId,
            roundId=q.roundId,
            position=q.position or 0,
            questionText=q.questionText,
            questionType=q.questionType,
            options=q.options,
        )


class GeneratedQuestionSchema(CandidateQuestion):
    """Question as returned right after generation, correct answer included."""
    correctAnswer: Optional[str] = None

    @classmethod
    def from_model(cls, q) -> "GeneratedQuestionSchema":
        return cls(
            questionId=q.id,
            interviewId=q.interviewId,
            roundId=q.roundId,
            position=q.position or 0,
            questionText=q.questionText,
            questionType=q.questionType,
            options=q.options,
            correctAnswer=q.correctAnswer,
        )


class AnswerSchema(BaseModel):
    answerId: str
    interviewId: str
    roundId: str
    questionId: str
    answerText: str
    score: float
    feedback: Optional[str] = None
    submittedAt: Optional[datetime] = None

    @classmethod
    def from_model(cls, a) -> "AnswerSchema":
        return cls(
            answerId=a.id,
            interviewId=a.interviewId,
            roundId=a.roundId,
            questionId=a.questionId,
            answerText=a.answerText or "",
            score=a.score,
            feedback=a.feedback,
            submittedAt=a.submittedAt,
        )


class SessionSnapshot(BaseModel):
    """Externally visible state of an interview after a status/advance call."""
    interviewId: str
    status: str
    jobRole: str
    activeRound: Optional[RoundSchema] = None
    rounds: List[RoundSchema] = Field(default_factory=list)
    totalScore: Optional[float] = None
    feedback: Optional[str] = None


class SubmitAnswerResult(BaseModel):
    questionId: str
    score: float
    feedback: str
    roundCompleted: bool = False


# --- Requests ---

class StartInterviewRequest(BaseModel):
    """Both fields are required; they are optional here so a missing one
    surfaces as a 400 with a clear message rather than a schema error."""
    resumeId: Optional[str] = None
    jobRole: Optional[str] = None


class SubmitAnswerRequest(BaseModel):
    roundId: str
    questionId: str
    answer: str = ""
    # Accepted for compatibility with older clients; grading always uses
    # the stored question instead.
    questionText: Optional[str] = None
    type: Optional[str] = None
    options: Optional[List[str]] = None
    correct: Optional[str] = None


# --- Response envelopes ---

class StartInterviewData(BaseModel):
    interviewId: str
    status: str
    rounds: List[RoundSchema]


class StartInterviewResponse(BaseModel):
    status: int
    message: str
    data: StartInterviewData


class SessionStatusResponse(BaseModel):
    status: int
    message: str
    data: SessionSnapshot


class GeneratedQuestionListResponse(BaseModel):
    status: int
    message: str
    data: List[GeneratedQuestionSchema]


class CandidateQuestionListResponse(BaseModel):
    status: int
    message: str
    data: List[CandidateQuestion]


class AnswerListResponse(BaseModel):
    status: int
    message: str
    data: List[AnswerSchema]


class SubmitAnswerResponse(BaseModel):
    status: int
    message: str
    data: SubmitAnswerResult
