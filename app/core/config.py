from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file
load_dotenv()

DEFAULT_ROUND_PLAN: List[Dict[str, Any]] = [
    {"round_type": "TECHNICAL", "duration_minutes": 10},
    {"round_type": "CODING", "duration_minutes": 20},
    {"round_type": "BEHAVIORAL", "duration_minutes": 10},
]


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./interview_bot.sqlite"

    # Mock object storage (served under /local_storage)
    STORAGE_ROOT: str = "local_storage"
    STORAGE_BUCKET: str = "ai-interview-resumes"

    # Used when a request carries no X-User-Id header
    DEMO_USER_ID: str = "demo-user-123"

    # "mock" (default) or "gemini"
    CONTENT_GENERATOR: str = "mock"
    GOOGLE_API_KEY: Optional[str] = None
    GEMINI_MODEL: str = "gemini-2.5-flash"

    QUESTIONS_PER_ROUND: int = 3
    ROUND_PLAN: List[Dict[str, Any]] = DEFAULT_ROUND_PLAN

    QUESTION_CACHE_SIZE: int = 256
    QUESTION_CACHE_TTL_SECONDS: float = 3600.0

    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
