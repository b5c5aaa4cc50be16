from typing import List, Optional
from sqlalchemy.orm import Session, selectinload

from app.core.constants import AttemptStatusEnum
from app.crud.base import CRUDBase
from app.models.answer import Answer
from app.models.attempt import Attempt

class CRUDAttempt(CRUDBase[Attempt, dict, dict]):

    def _query_with_relationships(self, db: Session):
        return db.query(Attempt).options(
            selectinload(Attempt.answers).selectinload(Answer.question)
        )

    def get(self, db: Session, id: int) -> Optional[Attempt]:
        return self._query_with_relationships(db).filter(Attempt.id == id).first()

    def get_by_user_and_exam(self, db: Session, user_id: int, exam_id: int) -> List[Attempt]:
        return (
            db.query(Attempt)
            .filter(Attempt.user_id == user_id)
            .filter(Attempt.exam_id == exam_id)
            .order_by(Attempt.id.desc())
            .all()
        )

    def get_in_progress_for_user_and_exam(self, db: Session, user_id: int, exam_id: int) -> Optional[Attempt]:
        return (
            db.query(Attempt)
            .filter(Attempt.user_id == user_id)
            .filter(Attempt.exam_id == exam_id)
            .filter(Attempt.status == AttemptStatusEnum.IN_PROGRESS)
            .order_by(Attempt.id.desc())
            .first()
        )

attempt = CRUDAttempt(Attempt)
