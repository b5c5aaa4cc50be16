from typing import Any, List, Optional
from sqlalchemy.orm import Session, selectinload

from app.crud.base import CRUDBase
from app.models.answer import Answer

class CRUDAnswer(CRUDBase[Answer, dict, dict]):

    def get_by_attempt_and_question(self, db: Session, attempt_id: int,
                                    question_id: int) -> Optional[Answer]:
        return (
            db.query(Answer)
            .filter(Answer.attempt_id == attempt_id)
            .filter(Answer.question_id == question_id)
            .first()
        )

    def get_all_by_attempt(self, db: Session, attempt_id: int) -> List[Answer]:
        return (
            db.query(Answer)
            .options(selectinload(Answer.question))
            .filter(Answer.attempt_id == attempt_id)
            .order_by(Answer.id)
            .all()
        )

    def create_empty(self, db: Session, *, attempt_id: int, question_id: int) -> Answer:
        return self.create(
            db,
            obj_in={"attempt_id": attempt_id, "question_id": question_id, "answer": None, "is_graded": False},
            commit=False
        )

    def save_value(self, db: Session, *, attempt_id: int, question_id: int, value: Any,
                   **extra_fields) -> bool:
        """Write one answer value keyed by (attempt_id, question_id) and commit it on its own."""
        values = {"answer": value, **extra_fields}
        updated = (
            db.query(Answer)
            .filter(Answer.attempt_id == attempt_id)
            .filter(Answer.question_id == question_id)
            .update(values, synchronize_session="fetch")
        )
        db.commit()
        return updated > 0

answer = CRUDAnswer(Answer)
