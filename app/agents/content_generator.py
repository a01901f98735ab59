"""
Content generation contract used by the résumé workflow and the interview engine.

Concrete generators (mock, Gemini) subclass ContentGenerator. Outputs are
validated with the Pydantic schemas below before anything is persisted.
"""
import json
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator


# --- Pydantic output schemas ---

class ResumeExtraction(BaseModel):
    """Fields pulled out of a résumé."""
    skills: List[str] = Field(default_factory=list)
    projects: List[str] = Field(default_factory=list)
    recommended_roles: List[str] = Field(default_factory=list)


class GeneratedQuestion(BaseModel):
    """One candidate question. Text may be missing; callers drop those."""
    text: Optional[str] = None
    question_type: str = Field(default="OPEN", validation_alias=AliasChoices("question_type", "type"))
    options: Optional[List[str]] = None
    correct_answer: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("correct_answer", "correct")
    )

    @field_validator("text")
    @classmethod
    def _empty_text_is_missing(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return str(v) or None


class AnswerEvaluation(BaseModel):
    score: float = Field(ge=0, le=10)
    feedback: str = ""


class ContentGenerator(ABC):
    """Language-model backed capabilities the backend depends on."""

    name: str = "base"

    @abstractmethod
    def parse_resume(self, file_path: str) -> ResumeExtraction:
        """Extract skills, projects and recommended roles from a stored résumé file."""

    @abstractmethod
    def generate_questions(
        self,
        context: str,
        role: str,
        round_type: str,
        exclude_texts: List[str],
    ) -> List[Dict[str, Any]]:
        """Return a batch of candidate questions.

        `exclude_texts` is a hint only. Implementations may still return
        duplicates; callers re-validate.
        """

    @abstractmethod
    def evaluate_answer(self, question_text: str, answer: str, question_type: str) -> AnswerEvaluation:
        """Score a free-text answer on a 0-10 scale with feedback."""

    @abstractmethod
    def generate_feedback_summary(
        self,
        role: str,
        round_scores: Dict[str, str],
        final_score: float,
    ) -> str:
        """Natural-language summary of the whole interview."""


def extract_json_block(raw: str) -> Any:
    """Pull the first JSON object or array out of model output.

    Models often wrap JSON in prose or ``` fences.
    """
    text = (raw or "").strip()
    text = re.sub(r"^```(?:json)?\s*", "", text, flags=re.IGNORECASE)
    text = re.sub(r"\s*```$", "", text)

    starts = [i for i in (text.find("{"), text.find("[")) if i != -1]
    if not starts:
        raise ValueError("No valid JSON found in AI response")
    start = min(starts)
    closing = "}" if text[start] == "{" else "]"
    end = text.rfind(closing) + 1
    if end <= start:
        raise ValueError("No valid JSON found in AI response")
    return json.loads(text[start:end])
