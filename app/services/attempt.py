from typing import List, Optional
from datetime import datetime, timezone
import logging

from sqlalchemy.orm import Session
from fastapi import HTTPException, status

from app.core.config import settings
from app.core.constants import AttemptStatusEnum, AttemptStartPolicyEnum
from app.crud.answer import answer as crud_answer, CRUDAnswer
from app.crud.attempt import attempt as crud_attempt, CRUDAttempt
from app.crud.exam import exam as crud_exam, CRUDExam
from app.crud.question import question as crud_question, CRUDQuestion
from app.models.attempt import Attempt
from app.schemas.answer import AutosaveEntry
from app.schemas.attempt import AttemptResult
from app.schemas.user import UserContext
from app.services.answer_value import (
    AnswerValueError, attachments_for, has_attachments, normalize_answer_value
)
from app.services.grading import grade, is_auto_gradable
from app.utils.permission import PermissionHelper as permission_helper

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _elapsed_seconds(started_at: Optional[datetime], submitted_at: datetime) -> Optional[int]:
    if started_at is None:
        return None
    # SQLite hands back naive datetimes; they were written as UTC.
    if started_at.tzinfo is None:
        started_at = started_at.replace(tzinfo=timezone.utc)
    return max(0, int((submitted_at - started_at).total_seconds()))


class AttemptService:
    """Start, autosave, submit and read back exam attempts."""

    def __init__(
        self,
        questions: CRUDQuestion,
        exams: CRUDExam,
        attempts: CRUDAttempt,
        answers: CRUDAnswer,
        start_policy: AttemptStartPolicyEnum = AttemptStartPolicyEnum.ALWAYS_NEW,
    ):
        self.questions = questions
        self.exams = exams
        self.attempts = attempts
        self.answers = answers
        self.start_policy = AttemptStartPolicyEnum(start_policy)

    def _get_attempt_or_404(self, db: Session, attempt_id: int) -> Attempt:
        attempt = self.attempts.get(db, id=attempt_id)
        if not attempt:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Attempt not found.")
        return attempt

    def _require_attempt_owner(self, current_user_context: Optional[UserContext], attempt: Attempt):
        if current_user_context is None:
            return
        if not permission_helper.is_owner(current_user_context, attempt.user_id):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You can only change your own attempts."
            )

    def _require_attempt_view_permission(self, current_user_context: Optional[UserContext], attempt: Attempt):
        if current_user_context is None:
            return
        if permission_helper.is_owner(current_user_context, attempt.user_id):
            return
        if permission_helper.is_student(current_user_context):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You can only view your own attempts."
            )

    def start_attempt(self, db: Session, exam_id: int, user_id: int) -> Attempt:
        exam = self.exams.get(db, id=exam_id)
        if not exam:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Exam not found.")

        if self.start_policy == AttemptStartPolicyEnum.RESUME_IN_PROGRESS:
            existing = self.attempts.get_in_progress_for_user_and_exam(db, user_id=user_id, exam_id=exam_id)
            if existing:
                logger.info(f"Resuming attempt {existing.id} for user {user_id} on exam {exam_id}")
                return existing

        new_attempt = self.attempts.create(
            db,
            obj_in={
                "exam_id": exam_id,
                "user_id": user_id,
                "status": AttemptStatusEnum.IN_PROGRESS,
                "started_at": _utcnow(),
            },
            commit=False
        )
        questions = self.exams.get_questions(db, exam_id=exam_id)
        for question in questions:
            self.answers.create_empty(db, attempt_id=new_attempt.id, question_id=question.id)
        db.commit()
        db.refresh(new_attempt)

        logger.info(
            f"Started attempt {new_attempt.id} for user {user_id} on exam {exam_id} "
            f"with {len(questions)} question(s)"
        )
        return new_attempt

    def autosave(self, db: Session, attempt_id: int, entries: List[AutosaveEntry],
                 current_user_context: Optional[UserContext] = None) -> int:
        """Store answer values; returns how many entries matched an answer of the attempt.

        Every value is checked before anything is written. Each write is then
        committed on its own, so a failure part way through keeps the earlier ones.
        """
        attempt = self._get_attempt_or_404(db, attempt_id)
        self._require_attempt_owner(current_user_context, attempt)

        answers_by_question = {ans.question_id: ans for ans in attempt.answers}
        questions_by_id = {q.id: q for q in self.questions.get_by_ids(db, ids=list(answers_by_question))}
        pending = []
        errors = []
        for entry in entries:
            if entry.question_id not in answers_by_question:
                continue
            question = questions_by_id[entry.question_id]
            try:
                value = normalize_answer_value(question, entry.answer)
            except AnswerValueError as e:
                errors.append({"questionId": entry.question_id, "error": str(e)})
                continue
            extra_fields = {"attachments": attachments_for(question, value)} if has_attachments(question) else {}
            pending.append((entry.question_id, value, extra_fields))

        if errors:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail={"message": "Invalid answer value(s).", "answers": errors}
            )

        for question_id, value, extra_fields in pending:
            self.answers.save_value(db, attempt_id=attempt.id, question_id=question_id, value=value, **extra_fields)

        logger.info(
            f"Autosaved {len(pending)} answer(s) for attempt {attempt.id} "
            f"({len(entries) - len(pending)} ignored)"
        )
        return len(pending)

    def submit(self, db: Session, attempt_id: int,
               current_user_context: Optional[UserContext] = None) -> float:
        attempt = self._get_attempt_or_404(db, attempt_id)
        self._require_attempt_owner(current_user_context, attempt)

        if attempt.status != AttemptStatusEnum.IN_PROGRESS:
            logger.warning(f"Attempt {attempt.id} is already {attempt.status.value}; grading it again")

        total = 0.0
        for existing_answer in attempt.answers:
            question = existing_answer.question
            if not is_auto_gradable(question):
                continue
            score = grade(question, existing_answer.answer)
            existing_answer.score = score
            existing_answer.is_graded = True
            total += score

        submitted_at = _utcnow()
        attempt.submitted_at = submitted_at
        attempt.status = AttemptStatusEnum.SUBMITTED
        attempt.time_spent_seconds = _elapsed_seconds(attempt.started_at, submitted_at)
        attempt.total_score = total
        db.add(attempt)
        db.commit()

        logger.info(f"Submitted attempt {attempt.id} with total score {total}")
        return total

    def get_result(self, db: Session, attempt_id: int,
                   current_user_context: Optional[UserContext] = None) -> AttemptResult:
        attempt = self._get_attempt_or_404(db, attempt_id)
        self._require_attempt_view_permission(current_user_context, attempt)

        result = AttemptResult.model_validate(attempt)
        if result.status == AttemptStatusEnum.IN_PROGRESS:
            for result_answer in result.answers:
                if result_answer.question is not None:
                    result_answer.question.correct_answer = None
        return result


attempt_service = AttemptService(
    questions=crud_question,
    exams=crud_exam,
    attempts=crud_attempt,
    answers=crud_answer,
    start_policy=settings.ATTEMPT_START_POLICY,
)
