"""
Interview API Endpoints

Thin mapping of HTTP requests onto the InterviewSessionEngine.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_current_user_id, get_interview_engine
from app.api.errors import to_http_exception
from app.core.config import settings
from app.core.exceptions import InterviewBackendError
from app.schemas.InterviewSchemas import (
    AnswerListResponse,
    CandidateQuestionListResponse,
    GeneratedQuestionListResponse,
    RoundSchema,
    SessionStatusResponse,
    StartInterviewData,
    StartInterviewRequest,
    StartInterviewResponse,
    SubmitAnswerRequest,
    SubmitAnswerResponse,
)
from app.services.interview_engine import InterviewSessionEngine

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/start-interview", response_model=StartInterviewResponse)
def start_interview(
    request: StartInterviewRequest,
    engine: InterviewSessionEngine = Depends(get_interview_engine),
    user_id: str = Depends(get_current_user_id),
):
    """
    Create an interview session with its full round plan. All rounds start
    PENDING; the first status call activates round one.
    """
    try:
        interview = engine.start_interview(user_id, request.resumeId, request.jobRole, settings.ROUND_PLAN)
    except InterviewBackendError as e:
        raise to_http_exception(e, "Failed to start interview")
    except Exception as e:
        logger.exception(f"Start interview error: {e}")
        raise HTTPException(status_code=500, detail="Failed to start interview")

    return StartInterviewResponse(
        status=200,
        message="Interview Session Created",
        data=StartInterviewData(
            interviewId=interview.id,
            status=interview.status,
            rounds=[RoundSchema.from_model(r) for r in interview.rounds],
        ),
    )


@router.get("/interview/{interview_id}/status", response_model=SessionStatusResponse)
def interview_status(interview_id: str, engine: InterviewSessionEngine = Depends(get_interview_engine)):
    """
    Current session state. Note this is not a pure read: it completes a
    finished round, activates the next one, or finalizes the interview.
    """
    try:
        snapshot = engine.get_status(interview_id)
    except InterviewBackendError as e:
        raise to_http_exception(e, "Failed to get status")
    except Exception as e:
        logger.exception(f"Status error: {e}")
        raise HTTPException(status_code=500, detail="Failed to get status")

    return SessionStatusResponse(status=200, message="Session status", data=snapshot)


@router.post("/interview/{interview_id}/round/{round_id}/generate", response_model=GeneratedQuestionListResponse)
def generate_questions(
    interview_id: str,
    round_id: str,
    engine: InterviewSessionEngine = Depends(get_interview_engine),
):
    try:
        questions = engine.generate_questions(interview_id, round_id)
    except InterviewBackendError as e:
        raise to_http_exception(e, "Failed to generate questions")
    except Exception as e:
        logger.exception(f"Generate error: {e}")
        raise HTTPException(status_code=500, detail="Failed to generate questions")

    return GeneratedQuestionListResponse(status=200, message="Questions ready", data=questions)


@router.get("/interview/{interview_id}/round/{round_id}/questions", response_model=CandidateQuestionListResponse)
def fetch_questions(
    interview_id: str,
    round_id: str,
    engine: InterviewSessionEngine = Depends(get_interview_engine),
):
    """Questions of a round as shown to the candidate (no correct answers)."""
    try:
        questions = engine.get_round_questions(interview_id, round_id)
    except Exception as e:
        logger.exception(f"Fetch questions error: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch questions")

    return CandidateQuestionListResponse(status=200, message="Questions returned successfully", data=questions)


@router.get("/interview/{interview_id}/round/{round_id}/answers", response_model=AnswerListResponse)
def fetch_round_answers(
    interview_id: str,
    round_id: str,
    engine: InterviewSessionEngine = Depends(get_interview_engine),
):
    try:
        answers = engine.get_answers(interview_id, round_id)
    except InterviewBackendError as e:
        raise to_http_exception(e, "Failed to fetch answers")
    except Exception as e:
        logger.exception(f"Fetch answers error: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch answers")

    return AnswerListResponse(status=200, message="Answers returned successfully", data=answers)


@router.get("/interview/{interview_id}/answers", response_model=AnswerListResponse)
def fetch_all_answers(interview_id: str, engine: InterviewSessionEngine = Depends(get_interview_engine)):
    try:
        answers = engine.get_answers(interview_id)
    except InterviewBackendError as e:
        raise to_http_exception(e, "Failed to fetch answers")
    except Exception as e:
        logger.exception(f"Fetch all answers error: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch answers")

    return AnswerListResponse(status=200, message="Answers returned successfully", data=answers)


@router.post("/interview/{interview_id}/submit", response_model=SubmitAnswerResponse)
def submit_answer(
    interview_id: str,
    request: SubmitAnswerRequest,
    engine: InterviewSessionEngine = Depends(get_interview_engine),
):
    """
    Grade and store an answer. MCQ answers are graded against the stored
    correct option; other types are scored by the content generator.
    """
    try:
        result = engine.submit_answer(interview_id, request.roundId, request.questionId, request.answer)
    except InterviewBackendError as e:
        raise to_http_exception(e, "Failed to submit answer")
    except Exception as e:
        logger.exception(f"Submit error: {e}")
        raise HTTPException(status_code=500, detail="Failed to submit answer")

    return SubmitAnswerResponse(status=200, message="Answer submitted", data=result)
