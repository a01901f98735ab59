"""
Tests for question generation, de-duplication and the cached read path.
"""

from unittest.mock import MagicMock

import pytest

from app.agents.content_generator import ContentGenerator
from app.core.exceptions import NotFoundError, UpstreamServiceError
from app.crud import crud_question
from app.services.interview_engine import InterviewSessionEngine, build_generation_context
from app.services.question_cache import QuestionCache


@pytest.fixture
def fake_generator():
    return MagicMock(spec=ContentGenerator)


@pytest.fixture
def mocked_engine(db, fake_generator, question_cache, clock):
    return InterviewSessionEngine(db=db, generator=fake_generator, question_cache=question_cache, clock=clock)


def _rounds(engine, interview_id):
    return engine.get_status(interview_id).rounds


def test_build_generation_context():
    assert build_generation_context(["Python", "SQL"], ["Chat App"]) == "Skills: Python, SQL. Projects: Chat App"
    assert build_generation_context(None, None) == "Skills: . Projects: "


def test_generate_with_mock_generator_returns_mcq_with_correct_answers(session_engine, make_interview):
    interview = make_interview()
    technical = _rounds(session_engine, interview.id)[0]

    questions = session_engine.generate_questions(interview.id, technical.roundId)

    assert len(questions) == 3
    assert all(q.questionType == "MCQ" for q in questions)
    assert all(q.correctAnswer in q.options for q in questions)
    assert [q.position for q in questions] == [0, 1, 2]


def test_generate_is_idempotent_per_round(mocked_engine, fake_generator, db, parsed_resume):
    fake_generator.generate_questions.return_value = [
        {"text": "What is a closure?", "type": "OPEN"},
        {"text": "Explain the GIL.", "type": "OPEN"},
    ]
    interview = mocked_engine.start_interview("user-1", parsed_resume.id, "Backend Developer", [{"round_type": "TECHNICAL", "duration_minutes": 10}])
    round_id = interview.rounds[0].id

    first = mocked_engine.generate_questions(interview.id, round_id)
    second = mocked_engine.generate_questions(interview.id, round_id)

    assert [q.questionId for q in first] == [q.questionId for q in second]
    assert [q.questionText for q in second] == ["What is a closure?", "Explain the GIL."]
    fake_generator.generate_questions.assert_called_once()
    assert crud_question.count_questions(db, interview.id, round_id) == 2


def test_generator_receives_context_role_round_type_and_previous_texts(mocked_engine, fake_generator, make_interview):
    interview = make_interview()
    rounds = interview.rounds
    fake_generator.generate_questions.return_value = [{"text": "Shared question?"}]
    mocked_engine.generate_questions(interview.id, rounds[0].id)

    fake_generator.generate_questions.return_value = []
    mocked_engine.generate_questions(interview.id, rounds[1].id)

    context, role, round_type, exclude = fake_generator.generate_questions.call_args.args
    assert context == "Skills: Python, Docker. Projects: Chat App project"
    assert role == "Backend Developer"
    assert round_type == "CODING"
    assert exclude == ["Shared question?"]


def test_duplicate_text_from_earlier_round_is_dropped(mocked_engine, fake_generator, db, make_interview):
    interview = make_interview()
    rounds = interview.rounds
    fake_generator.generate_questions.return_value = [{"text": "Tell me about yourself."}]
    mocked_engine.generate_questions(interview.id, rounds[0].id)

    # The generator ignores the exclusion hint
    fake_generator.generate_questions.return_value = [
        {"text": "Tell me about yourself."},
        {"text": "Reverse a linked list.", "type": "CODING"},
    ]
    saved = mocked_engine.generate_questions(interview.id, rounds[1].id)

    assert [q.questionText for q in saved] == ["Reverse a linked list."]
    texts = [q.questionText for q in crud_question.get_all_questions(db, interview.id)]
    assert texts.count("Tell me about yourself.") == 1


def test_duplicates_within_batch_and_missing_text_are_dropped(mocked_engine, fake_generator, make_interview):
    interview = make_interview()
    fake_generator.generate_questions.return_value = [
        {"text": "Define REST."},
        {"text": "Define REST."},
        {"text": None},
        {"text": ""},
        {"type": "OPEN"},
        {"text": "What is idempotency?", "type": "MCQ", "options": ["a", "b"], "correct": "a"},
    ]

    saved = mocked_engine.generate_questions(interview.id, interview.rounds[0].id)

    assert [q.questionText for q in saved] == ["Define REST.", "What is idempotency?"]
    assert saved[1].questionType == "MCQ"
    assert saved[1].correctAnswer == "a"


def test_duplicate_check_compares_text_exactly(mocked_engine, fake_generator, make_interview):
    interview = make_interview()
    fake_generator.generate_questions.return_value = [
        {"text": "Define REST."},
        {"text": "  Define REST.  "},
        {"text": "define rest."},
    ]

    saved = mocked_engine.generate_questions(interview.id, interview.rounds[0].id)

    assert [q.questionText for q in saved] == ["Define REST.", "  Define REST.  ", "define rest."]


def test_generator_failure_persists_nothing(mocked_engine, fake_generator, db, make_interview):
    interview = make_interview()
    round_id = interview.rounds[0].id
    fake_generator.generate_questions.side_effect = RuntimeError("quota exceeded")

    with pytest.raises(UpstreamServiceError):
        mocked_engine.generate_questions(interview.id, round_id)

    assert crud_question.count_questions(db, interview.id, round_id) == 0


def test_generate_for_unknown_round_raises_not_found(session_engine, make_interview):
    interview = make_interview()

    with pytest.raises(NotFoundError):
        session_engine.generate_questions(interview.id, "no-such-round")


def test_round_questions_hide_correct_answer(session_engine, make_interview):
    interview = make_interview()
    round_id = interview.rounds[0].id
    session_engine.generate_questions(interview.id, round_id)

    questions = session_engine.get_round_questions(interview.id, round_id)

    assert len(questions) == 3
    for q in questions:
        assert "correctAnswer" not in q.model_dump()
        assert q.options


def test_round_questions_are_served_from_cache(session_engine, make_interview, question_cache, db):
    interview = make_interview()
    round_id = interview.rounds[0].id
    session_engine.generate_questions(interview.id, round_id)

    first = session_engine.get_round_questions(interview.id, round_id)
    assert question_cache.get(QuestionCache.key_for(interview.id, round_id)) == first

    # A row added behind the cache's back is not visible until the entry goes away
    crud_question.save_question(db, interview.id, round_id, "Late question?", "OPEN", position=9)
    assert len(session_engine.get_round_questions(interview.id, round_id)) == 3

    question_cache.invalidate(QuestionCache.key_for(interview.id, round_id))
    assert len(session_engine.get_round_questions(interview.id, round_id)) == 4


def test_empty_question_list_is_not_cached(session_engine, make_interview, question_cache):
    interview = make_interview()
    round_id = interview.rounds[0].id

    assert session_engine.get_round_questions(interview.id, round_id) == []
    assert len(question_cache) == 0

    session_engine.generate_questions(interview.id, round_id)
    assert len(session_engine.get_round_questions(interview.id, round_id)) == 3


def test_save_question_rejects_repeated_text_within_interview(db, make_interview):
    first = make_interview()
    second = make_interview()

    assert crud_question.save_question(db, first.id, first.rounds[0].id, "Explain MVCC.", "OPEN") is not None
    assert crud_question.save_question(db, first.id, first.rounds[1].id, "Explain MVCC.", "OPEN") is None
    assert crud_question.save_question(db, second.id, second.rounds[0].id, "Explain MVCC.", "OPEN") is not None
    assert [q.questionText for q in crud_question.get_all_questions(db, first.id)] == ["Explain MVCC."]


def test_overlapping_generate_calls_for_same_round_store_one_set(db, session_factory, question_cache, clock, make_interview):
    interview = make_interview()
    round_id = interview.rounds[0].id

    other_db = session_factory()
    other_generator = MagicMock(spec=ContentGenerator)
    other_generator.generate_questions.return_value = [{"text": "Same question?"}]
    other_engine = InterviewSessionEngine(db=other_db, generator=other_generator, question_cache=question_cache, clock=clock)
    first_result = []

    def generate_while_other_request_finishes(*args):
        # The other request sees the same empty round and persists first
        first_result.extend(other_engine.generate_questions(interview.id, round_id))
        return [{"text": "Same question?"}]

    generator = MagicMock(spec=ContentGenerator)
    generator.generate_questions.side_effect = generate_while_other_request_finishes
    engine = InterviewSessionEngine(db=db, generator=generator, question_cache=question_cache, clock=clock)

    try:
        second_result = engine.generate_questions(interview.id, round_id)
    finally:
        other_db.close()

    assert crud_question.count_questions(db, interview.id, round_id) == 1
    assert [q.questionText for q in second_result] == ["Same question?"]
    assert [q.questionId for q in second_result] == [q.questionId for q in first_result]


def test_generate_drops_cached_entry_for_round(session_engine, make_interview, question_cache):
    interview = make_interview()
    round_id = interview.rounds[0].id
    key = QuestionCache.key_for(interview.id, round_id)
    question_cache.set(key, [])

    session_engine.generate_questions(interview.id, round_id)

    assert question_cache.get(key) is None
    assert len(session_engine.get_round_questions(interview.id, round_id)) == 3
