from typing import Optional

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from app.agents.content_generator import ContentGenerator
from app.core.config import settings
from app.db.session import get_db
from app.services.interview_engine import InterviewSessionEngine
from app.services.question_cache import QuestionCache
from app.tools.file_uploader import LocalObjectStorage


# Process-scoped collaborators are created once in main.create_app and kept on app.state

def get_content_generator(request: Request) -> ContentGenerator:
    return request.app.state.content_generator


def get_question_cache(request: Request) -> QuestionCache:
    return request.app.state.question_cache


def get_storage(request: Request) -> LocalObjectStorage:
    return request.app.state.storage


def get_current_user_id(x_user_id: Optional[str] = Header(None)) -> str:
    """Explicit caller identity; falls back to the single demo user."""
    return x_user_id or settings.DEMO_USER_ID


def get_interview_engine(
    db: Session = Depends(get_db),
    generator: ContentGenerator = Depends(get_content_generator),
    question_cache: QuestionCache = Depends(get_question_cache),
) -> InterviewSessionEngine:
    return InterviewSessionEngine(db=db, generator=generator, question_cache=question_cache)
