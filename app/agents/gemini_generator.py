import json
import logging
from typing import Any, Dict, List, Optional

import google.generativeai as genai

from app.agents.content_generator import (
    AnswerEvaluation,
    ContentGenerator,
    ResumeExtraction,
    extract_json_block,
)
from app.services.pdf_service import read_resume_text

logger = logging.getLogger(__name__)


class GeminiContentGenerator(ContentGenerator):
    """ContentGenerator backed by Google Generative AI text generation.

    Every capability is a single prompt that asks for JSON (or plain text for
    the summary); responses are validated with the shared Pydantic schemas.
    """

    name = "gemini"

    def __init__(self, api_key: Optional[str], model_name: str = "gemini-2.5-flash", questions_per_round: int = 3):
        if api_key:
            genai.configure(api_key=api_key)
        self.model = genai.GenerativeModel(model_name)
        self.questions_per_round = questions_per_round

    def _generate(self, prompt: str) -> str:
        response = self.model.generate_content(prompt)
        return (response.text or "").strip()

    def parse_resume(self, file_path: str) -> ResumeExtraction:
        resume_text = read_resume_text(file_path)
        prompt = f"""
        Extract information from this resume and return it as a clean JSON object.

        Return ONLY valid JSON with these fields:
        - skills: array of skill names (strings)
        - projects: array of short project titles (strings)
        - recommended_roles: array of job roles that suit this candidate (strings)

        Use empty arrays [] for missing sections.

        Resume text:
        {resume_text}

        JSON:
        """
        data = extract_json_block(self._generate(prompt))
        return ResumeExtraction.model_validate(data)

    def generate_questions(
        self,
        context: str,
        role: str,
        round_type: str,
        exclude_texts: List[str],
    ) -> List[Dict[str, Any]]:
        previous = json.dumps(exclude_texts or [])
        prompt = f"""
        You are interviewing a candidate for the role of {role}.
        Candidate background: {context}
        Round type: {round_type}

        Write {self.questions_per_round} new interview questions for this round.
        Do NOT repeat or paraphrase any of these earlier questions: {previous}

        Return ONLY a JSON array. Each item has:
        - text: the question
        - question_type: "MCQ" for multiple choice, otherwise "OPEN" (or "CODING" for coding tasks)
        - options: array of 4 choices (MCQ only)
        - correct_answer: the correct option text (MCQ only)
        """
        data = extract_json_block(self._generate(prompt))
        if isinstance(data, dict):
            data = data.get("questions", [])
        return [item for item in data if isinstance(item, dict)]

    def evaluate_answer(self, question_text: str, answer: str, question_type: str) -> AnswerEvaluation:
        prompt = f"""
        Evaluate this interview answer.

        Question ({question_type}): {question_text}
        Answer: {answer}

        Return ONLY JSON: {{"score": <number from 0 to 10>, "feedback": "<one or two sentences>"}}
        """
        data = extract_json_block(self._generate(prompt))
        return AnswerEvaluation.model_validate(data)

    def generate_feedback_summary(
        self,
        role: str,
        round_scores: Dict[str, str],
        final_score: float,
    ) -> str:
        prompt = f"""
        A candidate finished a mock interview for the role of {role}.
        Average score per round (out of 10): {json.dumps(round_scores)}
        Final score: {final_score}

        Write a short, encouraging feedback summary (3-5 sentences) naming
        strengths and the areas to improve. Plain text only.
        """
        summary = self._generate(prompt)
        logger.info(f"[Gemini] Feedback summary generated for {role}")
        return summary
