from types import SimpleNamespace

from app.services.scoring import MCQ_FULL_SCORE, aggregate_round_scores, format_score, grade_choice_answer


def _round(round_id, round_type):
    return SimpleNamespace(id=round_id, roundType=round_type)


def _answer(round_id, score):
    return SimpleNamespace(roundId=round_id, score=score)


def test_grade_choice_answer():
    assert grade_choice_answer("B", "B") == (MCQ_FULL_SCORE, "Correct")
    assert grade_choice_answer("A", "B") == (0, "Correct was: B")


def test_format_score_uses_one_decimal():
    assert format_score(7) == "7.0"
    assert format_score(6.66) == "6.7"


def test_round_means_and_final_score():
    rounds = [_round("r1", "TECHNICAL"), _round("r2", "CODING")]
    answers = [_answer("r1", 10), _answer("r1", 0), _answer("r1", 10), _answer("r2", 4)]

    round_scores, final = aggregate_round_scores(rounds, answers)

    assert round_scores == {"TECHNICAL": "6.7", "CODING": "4.0"}
    # Mean of round means, not of all answers
    assert final == 5.3


def test_rounds_without_answers_are_left_out():
    rounds = [_round("r1", "TECHNICAL"), _round("r2", "CODING"), _round("r3", "BEHAVIORAL")]

    round_scores, final = aggregate_round_scores(rounds, [_answer("r1", 8), _answer("r1", 6)])

    assert round_scores == {"TECHNICAL": "7.0"}
    assert final == 7.0


def test_no_answers_gives_zero():
    round_scores, final = aggregate_round_scores([_round("r1", "TECHNICAL")], [])

    assert round_scores == {}
    assert final == 0
