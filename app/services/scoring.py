from typing import Dict, Iterable, List, Optional, Tuple

from app.models.interview import InterviewRound
from app.models.question import Answer

MCQ_FULL_SCORE = 10


def grade_choice_answer(answer: str, correct_answer: Optional[str]) -> Tuple[int, str]:
    """Binary grading for fixed-choice questions: full credit or nothing."""
    if answer == correct_answer:
        return MCQ_FULL_SCORE, "Correct"
    return 0, f"Correct was: {correct_answer}"


def format_score(value: float) -> str:
    return f"{value:.1f}"


def aggregate_round_scores(
    rounds: Iterable[InterviewRound],
    answers: Iterable[Answer],
) -> Tuple[Dict[str, str], float]:
    """
    Per-round mean answer score and the interview's final score.

    Rounds without answers are left out entirely, so the final score is the
    mean of per-round means over rounds that have data (each such round
    weighs the same regardless of how many answers it holds). With no
    answers at all the final score is 0.

    Returns ({round_type: "x.y"}, final_score).
    """
    by_round: Dict[str, List[float]] = {}
    for answer in answers:
        by_round.setdefault(answer.roundId, []).append(float(answer.score or 0))

    round_scores: Dict[str, str] = {}
    means: List[float] = []
    for rnd in rounds:
        scores = by_round.get(rnd.id)
        if not scores:
            continue
        mean = sum(scores) / len(scores)
        round_scores[rnd.roundType] = format_score(mean)
        means.append(mean)

    if not means:
        return round_scores, 0
    return round_scores, float(format_score(sum(means) / len(means)))
