"""
Deterministic stand-in for the language model.

Used by default so the whole interview flow runs without network access.
Résumé extraction is keyword based; questions come from fixed banks keyed
by round type; open answers are scored by length and topical overlap.
"""
import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from app.agents.content_generator import AnswerEvaluation, ContentGenerator, ResumeExtraction
from app.models.question import MCQ_QUESTION_TYPE
from app.services.pdf_service import read_resume_text

logger = logging.getLogger(__name__)

SKILL_PATTERNS: List[Tuple[str, str]] = [
    (r"\bpython\b", "Python"),
    (r"\bjava\b", "Java"),
    (r"\bjavascript\b", "JavaScript"),
    (r"\btypescript\b", "TypeScript"),
    (r"\breact\b", "React"),
    (r"\bnode(?:\.js)?\b", "Node.js"),
    (r"\bdjango\b", "Django"),
    (r"\bfastapi\b", "FastAPI"),
    (r"\bsql\b", "SQL"),
    (r"\bdocker\b", "Docker"),
    (r"\bkubernetes\b", "Kubernetes"),
    (r"\baws\b", "AWS"),
    (r"\bmachine learning\b", "Machine Learning"),
    (r"\bgit\b", "Git"),
]

DEFAULT_SKILLS = ["Communication", "Problem Solving"]
DEFAULT_PROJECTS = ["Personal Portfolio Website"]

ROLE_RULES: List[Tuple[str, set]] = [
    ("Backend Developer", {"Python", "Java", "Django", "FastAPI", "SQL", "Node.js"}),
    ("Frontend Developer", {"JavaScript", "TypeScript", "React"}),
    ("DevOps Engineer", {"Docker", "Kubernetes", "AWS"}),
    ("Machine Learning Engineer", {"Machine Learning"}),
]

MCQ_BANK: List[Dict[str, Any]] = [
    {
        "text": "What is the time complexity of binary search on a sorted array?",
        "options": ["O(n)", "O(log n)", "O(n log n)", "O(1)"],
        "correct_answer": "O(log n)",
    },
    {
        "text": "Which HTTP method is idempotent and typically used to replace a resource?",
        "options": ["POST", "PUT", "PATCH", "CONNECT"],
        "correct_answer": "PUT",
    },
    {
        "text": "Which data structure follows the last-in, first-out principle?",
        "options": ["Queue", "Stack", "Heap", "Linked list"],
        "correct_answer": "Stack",
    },
    {
        "text": "What does the 'I' in ACID stand for?",
        "options": ["Integrity", "Isolation", "Indexing", "Immutability"],
        "correct_answer": "Isolation",
    },
    {
        "text": "Which git command creates a new commit that undoes an earlier one?",
        "options": ["git reset", "git revert", "git stash", "git checkout"],
        "correct_answer": "git revert",
    },
    {
        "text": "Which status code indicates that a requested resource was not found?",
        "options": ["200", "301", "404", "500"],
        "correct_answer": "404",
    },
]

CODING_TEMPLATES = [
    "Using {skill}, write a function that returns the first non-repeating character in a string.",
    "Using {skill}, implement an LRU cache with get and put operations.",
    "Using {skill}, write code that merges two sorted lists into one sorted list.",
    "Using {skill}, design a rate limiter that allows N requests per minute per user.",
]

BEHAVIORAL_TEMPLATES = [
    "Walk me through {project}. What was the hardest decision you made?",
    "Tell me about a time you disagreed with a teammate. How did you resolve it?",
    "Describe a situation where you had to learn something new quickly as a {role}.",
    "What would you do differently if you rebuilt {project} today?",
    "Tell me about a deadline you missed or nearly missed. What did you learn?",
]

GENERIC_TEMPLATES = [
    "Why are you interested in working as a {role}?",
    "Which of your skills ({skill}) do you consider your strongest, and why?",
    "How do you keep your knowledge of {skill} up to date?",
]


def _extract_skills(text: str) -> List[str]:
    lowered = text.lower()
    return [name for pattern, name in SKILL_PATTERNS if re.search(pattern, lowered)]


def _extract_projects(text: str) -> List[str]:
    projects = []
    for line in text.splitlines():
        line = line.strip(" -•*\t")
        if "project" in line.lower() and 3 < len(line) <= 120:
            projects.append(line)
    return projects[:5]


def _recommend_roles(skills: List[str]) -> List[str]:
    found = set(skills)
    roles = [role for role, keys in ROLE_RULES if found & keys]
    if "Backend Developer" in roles and "Frontend Developer" in roles:
        roles.insert(0, "Full Stack Developer")
    return roles or ["Software Engineer"]


def _split_context(context: str) -> Tuple[List[str], List[str]]:
    """Invert the 'Skills: ... Projects: ...' context built by the engine."""
    match = re.match(r"\s*Skills:\s*(.*?)\s*Projects:\s*(.*)$", context or "", re.DOTALL)
    if not match:
        return [], []

    def _items(raw: str) -> List[str]:
        return [item.strip() for item in raw.rstrip(". ").split(",") if item.strip()]

    return _items(match.group(1)), _items(match.group(2))


class MockContentGenerator(ContentGenerator):
    name = "mock"

    def __init__(self, questions_per_round: int = 3):
        self.questions_per_round = questions_per_round

    def parse_resume(self, file_path: str) -> ResumeExtraction:
        text = read_resume_text(file_path)
        skills = _extract_skills(text) or list(DEFAULT_SKILLS)
        projects = _extract_projects(text) or list(DEFAULT_PROJECTS)
        logger.info(f"[MockAI] Extracted {len(skills)} skills, {len(projects)} projects from {file_path}")
        return ResumeExtraction(
            skills=skills,
            projects=projects,
            recommended_roles=_recommend_roles(skills),
        )

    def _candidates(self, skills: List[str], projects: List[str], role: str, round_type: str) -> List[Dict[str, Any]]:
        skill_pool = skills or list(DEFAULT_SKILLS)
        project_pool = projects or list(DEFAULT_PROJECTS)
        kind = (round_type or "").upper()

        if kind in ("TECHNICAL", "APTITUDE"):
            return [dict(item, question_type=MCQ_QUESTION_TYPE) for item in MCQ_BANK]

        if kind == "CODING":
            return [
                {"text": template.format(skill=skill), "question_type": "CODING"}
                for template in CODING_TEMPLATES
                for skill in skill_pool
            ]

        if kind in ("BEHAVIORAL", "HR"):
            out = []
            for template in BEHAVIORAL_TEMPLATES:
                for project in project_pool:
                    out.append({"text": template.format(project=project, role=role), "question_type": "OPEN"})
            return out

        return [
            {"text": template.format(role=role, skill=skill), "question_type": "OPEN"}
            for template in GENERIC_TEMPLATES
            for skill in skill_pool
        ]

    def generate_questions(
        self,
        context: str,
        role: str,
        round_type: str,
        exclude_texts: List[str],
    ) -> List[Dict[str, Any]]:
        skills, projects = _split_context(context)
        excluded = set(exclude_texts or [])

        batch: List[Dict[str, Any]] = []
        seen = set()
        for candidate in self._candidates(skills, projects, role, round_type):
            text = candidate["text"]
            if text in excluded or text in seen:
                continue
            seen.add(text)
            batch.append(candidate)
            if len(batch) >= self.questions_per_round:
                break

        logger.info(f"[MockAI] Generated {len(batch)} {round_type} questions for {role}")
        return batch

    def evaluate_answer(self, question_text: str, answer: str, question_type: str) -> AnswerEvaluation:
        words = (answer or "").split()
        if not words:
            return AnswerEvaluation(score=0, feedback="No answer was provided.")

        length_score = min(len(words) / 10.0, 6.0)
        question_terms = {w.lower().strip(".,?!()") for w in (question_text or "").split() if len(w) > 3}
        answer_terms = {w.lower().strip(".,?!()") for w in words if len(w) > 3}
        overlap_score = min(len(question_terms & answer_terms), 4)
        score = round(min(length_score + overlap_score, 10.0), 1)

        if score >= 8:
            feedback = "Strong, well-developed answer that stays on topic."
        elif score >= 5:
            feedback = "Reasonable answer. Add concrete examples and more detail."
        else:
            feedback = "Answer is too brief or off topic. Address the question directly with specifics."
        return AnswerEvaluation(score=score, feedback=feedback)

    def generate_feedback_summary(
        self,
        role: str,
        round_scores: Dict[str, str],
        final_score: Optional[float],
    ) -> str:
        final = float(final_score or 0)
        parts = [f"Interview for the {role} role is complete with an overall score of {final:.1f}/10."]
        if round_scores:
            rounds = ", ".join(f"{name}: {score}" for name, score in round_scores.items())
            parts.append(f"Round averages - {rounds}.")
        else:
            parts.append("No answers were recorded in any round.")

        if final >= 8:
            parts.append("Excellent performance; you are well prepared for this role.")
        elif final >= 5:
            parts.append("Solid foundation; focus on depth and concrete examples in weaker rounds.")
        else:
            parts.append("Keep practicing; review fundamentals and answer every question in each round.")
        return " ".join(parts)
