from .content_generator import (
    AnswerEvaluation,
    ContentGenerator,
    GeneratedQuestion,
    ResumeExtraction,
)
from .mock_generator import MockContentGenerator


def build_content_generator(settings) -> ContentGenerator:
    """Pick the generator named by CONTENT_GENERATOR."""
    provider = (settings.CONTENT_GENERATOR or "mock").lower()
    if provider == "gemini":
        from .gemini_generator import GeminiContentGenerator

        return GeminiContentGenerator(
            api_key=settings.GOOGLE_API_KEY,
            model_name=settings.GEMINI_MODEL,
            questions_per_round=settings.QUESTIONS_PER_ROUND,
        )
    if provider != "mock":
        raise ValueError(f"Unknown CONTENT_GENERATOR: {settings.CONTENT_GENERATOR}")
    return MockContentGenerator(questions_per_round=settings.QUESTIONS_PER_ROUND)


__all__ = [
    "AnswerEvaluation",
    "ContentGenerator",
    "GeneratedQuestion",
    "ResumeExtraction",
    "MockContentGenerator",
    "build_content_generator",
]
