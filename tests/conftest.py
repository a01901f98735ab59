from datetime import datetime, timedelta

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.agents.mock_generator import MockContentGenerator
from app.crud import crud_resume
from app.db.session import Base
from app.models import interview, question, resume  # noqa: F401  (register tables)
from app.services.interview_engine import InterviewSessionEngine
from app.services.question_cache import QuestionCache
from app.tools.file_uploader import LocalObjectStorage

THREE_ROUND_PLAN = [
    {"round_type": "TECHNICAL", "duration_minutes": 10},
    {"round_type": "CODING", "duration_minutes": 20},
    {"round_type": "BEHAVIORAL", "duration_minutes": 10},
]


class FakeClock:
    """Controllable replacement for utcnow."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(bind=db_engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def clock():
    return FakeClock(datetime(2025, 1, 6, 9, 0, 0))


@pytest.fixture
def generator():
    return MockContentGenerator(questions_per_round=3)


@pytest.fixture
def question_cache():
    return QuestionCache(max_size=16, ttl_seconds=60)


@pytest.fixture
def session_engine(db, generator, question_cache, clock):
    return InterviewSessionEngine(db=db, generator=generator, question_cache=question_cache, clock=clock)


@pytest.fixture
def storage(tmp_path):
    return LocalObjectStorage(str(tmp_path / "local_storage"), "ai-interview-resumes")


@pytest.fixture
def parsed_resume(db):
    record = crud_resume.save_resume_metadata(db, "user-1", "abc-cv.pdf", "cv.pdf")
    return crud_resume.update_parsed_data(
        db,
        record,
        ["Python", "Docker"],
        ["Chat App project"],
        ["Backend Developer"],
    )


@pytest.fixture
def make_interview(session_engine, parsed_resume):
    def _make(plan=None, job_role="Backend Developer"):
        return session_engine.start_interview("user-1", parsed_resume.id, job_role, plan or THREE_ROUND_PLAN)

    return _make
