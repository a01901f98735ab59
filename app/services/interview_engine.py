"""
Interview Session Engine

Owns the round state machine (PENDING -> ACTIVE -> COMPLETED), question
generation with interview-wide de-duplication, answer grading and the final
score aggregation. All state transitions go through compare-and-set updates
in app.crud.crud_interview, so concurrent status and submit requests for the
same interview can apply the same transition without harm.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Iterable, List, Optional

from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.agents.content_generator import ContentGenerator, GeneratedQuestion
from app.core.exceptions import InvalidInputError, NotFoundError, UpstreamServiceError
from app.crud import crud_interview, crud_question, crud_resume
from app.db.session import utcnow
from app.models.interview import Interview, InterviewRound, InterviewStatus, RoundStatus
from app.models.question import MCQ_QUESTION_TYPE
from app.schemas.InterviewSchemas import (
    AnswerSchema,
    CandidateQuestion,
    GeneratedQuestionSchema,
    RoundSchema,
    SessionSnapshot,
    SubmitAnswerResult,
)
from app.services.question_cache import QuestionCache
from app.services.scoring import aggregate_round_scores, grade_choice_answer

logger = logging.getLogger(__name__)


def build_generation_context(skills: Optional[List[str]], projects: Optional[List[str]]) -> str:
    return f"Skills: {', '.join(skills or [])}. Projects: {', '.join(projects or [])}"


def timer_expired(rnd: InterviewRound, now: datetime) -> bool:
    if rnd.startedAt is None:
        return False
    return now - rnd.startedAt > timedelta(minutes=rnd.durationMinutes)


class InterviewSessionEngine:
    """Per-request facade over the stores and the content generator.

    The question cache is process-scoped and shared between engines; the
    database session and the clock are per instance.
    """

    def __init__(
        self,
        db: Session,
        generator: ContentGenerator,
        question_cache: QuestionCache,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.db = db
        self.generator = generator
        self.question_cache = question_cache
        self.clock = clock

    # ------------------------------------------------------------------
    # Loading helpers
    # ------------------------------------------------------------------

    def _load_interview(self, interview_id: str) -> Interview:
        interview = crud_interview.get_interview(self.db, interview_id)
        if interview is None:
            raise NotFoundError(f"Interview not found: {interview_id}")
        return interview

    def _load_round(self, interview_id: str, round_id: str) -> InterviewRound:
        rnd = crud_interview.get_round(self.db, interview_id, round_id)
        if rnd is None:
            raise NotFoundError(f"Round {round_id} not found for interview {interview_id}")
        return rnd

    def _reload_interview(self, interview_id: str) -> Interview:
        # Transitions bypass the identity map; drop cached attribute state
        self.db.expire_all()
        return self._load_interview(interview_id)

    @staticmethod
    def _snapshot(interview: Interview) -> SessionSnapshot:
        rounds = [RoundSchema.from_model(r) for r in interview.rounds]
        active = next((r for r in rounds if r.status == RoundStatus.ACTIVE.value), None)
        return SessionSnapshot(
            interviewId=interview.id,
            status=interview.status,
            jobRole=interview.jobRole,
            activeRound=active,
            rounds=rounds,
            totalScore=interview.totalScore,
            feedback=interview.feedback,
        )

    # ------------------------------------------------------------------
    # Session start
    # ------------------------------------------------------------------

    def start_interview(
        self,
        user_id: str,
        resume_id: Optional[str],
        job_role: Optional[str],
        round_plan: Iterable[Dict[str, Any]],
    ) -> Interview:
        if not resume_id or not job_role:
            raise InvalidInputError("Missing resumeId or jobRole")
        if crud_resume.get_resume(self.db, resume_id) is None:
            raise NotFoundError(f"Resume not found: {resume_id}")

        plan = list(round_plan)
        if not plan:
            raise InvalidInputError("Round plan is empty")

        interview = crud_interview.create_interview_session(self.db, user_id, resume_id, job_role, plan)
        logger.info(f"[Session] Interview {interview.id} created for {job_role} with {len(plan)} rounds")
        return interview

    # ------------------------------------------------------------------
    # Round completion
    # ------------------------------------------------------------------

    def try_complete_round(self, rnd: InterviewRound, now: Optional[datetime] = None) -> bool:
        """Complete an ACTIVE round when every question has an answer or its timer ran out.

        Shared by the status/advance path and the submit path. Returns True
        when the round is complete after the call (whoever applied the
        transition). A round without questions only completes by timer.
        """
        now = now or self.clock()
        question_count = crud_question.count_questions(self.db, rnd.interviewId, rnd.id)
        answer_count = crud_question.count_answers(self.db, rnd.interviewId, rnd.id)

        all_answered = question_count > 0 and answer_count >= question_count
        expired = timer_expired(rnd, now)
        if not (all_answered or expired):
            return False

        if crud_interview.complete_round(self.db, rnd.id, now):
            reason = "All questions answered" if all_answered else "Timer expired"
            logger.info(f"[Round Complete] Round {rnd.id} ({rnd.roundType}): {reason}")

        # A concurrent request may have completed it first; the row decides
        self.db.refresh(rnd)
        return rnd.status == RoundStatus.COMPLETED.value

    # ------------------------------------------------------------------
    # Status / advance
    # ------------------------------------------------------------------

    def get_status(self, interview_id: str) -> SessionSnapshot:
        """Return the session state, advancing the state machine on the way.

        Every call may mutate: an ACTIVE round that is done gets completed,
        then the next PENDING round (creation order) is activated, and once
        none is left the interview is finalized.
        """
        interview = self._reload_interview(interview_id)
        now = self.clock()

        active = next((r for r in interview.rounds if r.status == RoundStatus.ACTIVE.value), None)
        if active is not None and self.try_complete_round(active, now):
            active = None

        if active is None:
            next_round = next((r for r in interview.rounds if r.status == RoundStatus.PENDING.value), None)
            if next_round is not None:
                if crud_interview.activate_round(self.db, interview.id, next_round.id, now):
                    logger.info(f"[Round Start] Round {next_round.id} ({next_round.roundType}) is now ACTIVE")
            elif interview.status != InterviewStatus.COMPLETED.value:
                self._finalize(interview, now)

        return self._snapshot(self._reload_interview(interview_id))

    def _finalize(self, interview: Interview, now: datetime) -> None:
        answers = crud_question.get_answers(self.db, interview.id)
        round_scores, final_score = aggregate_round_scores(interview.rounds, answers)

        try:
            feedback = self.generator.generate_feedback_summary(interview.jobRole, round_scores, final_score)
        except Exception as e:
            logger.exception(f"Feedback summary failed for interview {interview.id}")
            raise UpstreamServiceError("Failed to generate feedback summary") from e

        if crud_interview.update_interview_result(self.db, interview.id, final_score, feedback, now):
            logger.info(f"[Interview Complete] {interview.id}: final score {final_score}")

    # ------------------------------------------------------------------
    # Questions
    # ------------------------------------------------------------------

    def generate_questions(self, interview_id: str, round_id: str) -> List[GeneratedQuestionSchema]:
        """Questions for a round, generated on the first call only.

        Candidate texts already used anywhere in the interview (or earlier in
        the same batch) are dropped regardless of what the generator was told.
        """
        existing = crud_question.get_questions(self.db, interview_id, round_id)
        if existing:
            return [GeneratedQuestionSchema.from_model(q) for q in existing]

        interview = self._load_interview(interview_id)
        rnd = self._load_round(interview_id, round_id)
        resume = crud_resume.get_resume(self.db, interview.resumeId)
        if resume is None:
            raise NotFoundError(f"Resume not found: {interview.resumeId}")

        previous_texts = [q.questionText for q in crud_question.get_all_questions(self.db, interview_id)]
        seen = set(previous_texts)
        context = build_generation_context(resume.parsedSkills, resume.parsedProjects)

        try:
            raw_questions = self.generator.generate_questions(context, interview.jobRole, rnd.roundType, previous_texts)
        except Exception as e:
            logger.exception(f"Question generation failed for round {round_id}")
            raise UpstreamServiceError("Failed to generate questions") from e

        accepted: List[GeneratedQuestion] = []
        for raw in raw_questions or []:
            try:
                candidate = GeneratedQuestion.model_validate(raw)
            except ValidationError:
                logger.warning(f"[AI] Skipping malformed question: {raw!r}")
                continue
            if not candidate.text:
                continue
            if candidate.text in seen:
                logger.warning(f'[AI] Skipping duplicate question text: "{candidate.text}"')
                continue
            seen.add(candidate.text)
            accepted.append(candidate)

        saved = 0
        for position, candidate in enumerate(accepted):
            question = crud_question.save_question(
                self.db,
                interview_id,
                round_id,
                candidate.text,
                candidate.question_type,
                candidate.options,
                candidate.correct_answer,
                position=position,
            )
            if question is None:
                logger.warning(f'[AI] Skipping question stored concurrently: "{candidate.text}"')
                continue
            saved += 1
        logger.info(f"[Questions] Saved {saved} questions for round {round_id}")

        self.question_cache.invalidate(QuestionCache.key_for(interview_id, round_id))
        # A concurrent generate for this round may have written first; return what is stored
        stored = crud_question.get_questions(self.db, interview_id, round_id)
        return [GeneratedQuestionSchema.from_model(q) for q in stored]

    def get_round_questions(self, interview_id: str, round_id: str) -> List[CandidateQuestion]:
        """Candidate-facing questions of a round, without correct answers."""
        key = QuestionCache.key_for(interview_id, round_id)
        cached = self.question_cache.get(key)
        if cached is not None:
            return cached

        questions = [CandidateQuestion.from_model(q) for q in crud_question.get_questions(self.db, interview_id, round_id)]
        # Only non-empty sets are cached; an empty one may be generated later
        if questions:
            self.question_cache.set(key, questions)
        return questions

    # ------------------------------------------------------------------
    # Answers
    # ------------------------------------------------------------------

    def submit_answer(self, interview_id: str, round_id: str, question_id: str, answer: str) -> SubmitAnswerResult:
        """Grade and store an answer, then try to complete its round.

        Grading uses the stored question, never client-supplied type or
        correct answer.
        """
        question = crud_question.get_question(self.db, question_id)
        if question is None or question.interviewId != interview_id or question.roundId != round_id:
            raise NotFoundError(f"Question {question_id} not found in round {round_id}")
        rnd = self._load_round(interview_id, round_id)

        if question.questionType == MCQ_QUESTION_TYPE:
            score, feedback = grade_choice_answer(answer, question.correctAnswer)
        else:
            try:
                evaluation = self.generator.evaluate_answer(question.questionText, answer, question.questionType)
            except Exception as e:
                logger.exception(f"Answer evaluation failed for question {question_id}")
                raise UpstreamServiceError("Failed to evaluate answer") from e
            score, feedback = evaluation.score, evaluation.feedback

        crud_question.save_answer(self.db, interview_id, round_id, question_id, answer, score, feedback)
        round_completed = self.try_complete_round(rnd)

        return SubmitAnswerResult(
            questionId=question_id,
            score=score,
            feedback=feedback,
            roundCompleted=round_completed,
        )

    def get_answers(self, interview_id: str, round_id: Optional[str] = None) -> List[AnswerSchema]:
        self._load_interview(interview_id)
        return [AnswerSchema.from_model(a) for a in crud_question.get_answers(self.db, interview_id, round_id)]
