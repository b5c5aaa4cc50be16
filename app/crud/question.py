from typing import List
from sqlalchemy.orm import Session

from app.core.constants import AttemptStatusEnum
from app.crud.base import CRUDBase
from app.models.answer import Answer
from app.models.attempt import Attempt
from app.models.question import Question
from app.schemas.question import QuestionCreate, QuestionUpdate

class CRUDQuestion(CRUDBase[Question, QuestionCreate, QuestionUpdate]):
    def get_by_ids(self, db: Session, *, ids: List[int]) -> List[Question]:
        if not ids:
            return []
        return db.query(Question).filter(Question.id.in_(ids)).all()

    def is_referenced_by_submitted_attempt(self, db: Session, *, question_id: int) -> bool:
        return (
            db.query(Answer.id)
            .join(Attempt, Attempt.id == Answer.attempt_id)
            .filter(Answer.question_id == question_id)
            .filter(Attempt.status.in_([AttemptStatusEnum.SUBMITTED, AttemptStatusEnum.GRADED]))
            .first()
            is not None
        )

question = CRUDQuestion(Question)
