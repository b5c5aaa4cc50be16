from typing import List, Optional
from sqlalchemy.orm import Session, selectinload

from app.crud.base import CRUDBase
from app.models.exam import Exam
from app.models.exam_question import ExamQuestion
from app.schemas.exam import ExamCreate
from app.models.question import Question


class CRUDExam(CRUDBase[Exam, ExamCreate, ExamCreate]):

    def _query_with_relationships(self, db: Session):
        return db.query(Exam).options(
            selectinload(Exam.question_links).selectinload(ExamQuestion.question)
        )

    def get(self, db: Session, id: int) -> Optional[Exam]:
        return self._query_with_relationships(db).filter(Exam.id == id).first()

    def get_multi(self, db: Session, skip: int = 0, limit: int = 100) -> List[Exam]:
        return (
            self._query_with_relationships(db)
            .order_by(Exam.id)
            .offset(skip)
            .limit(limit)
            .all()
        )

    def get_questions(self, db: Session, *, exam_id: int) -> List[Question]:
        return (
            db.query(Question)
            .join(ExamQuestion, ExamQuestion.question_id == Question.id)
            .filter(ExamQuestion.exam_id == exam_id)
            .order_by(ExamQuestion.position, ExamQuestion.id)
            .all()
        )

    def set_questions(self, db: Session, *, exam: Exam, question_ids: List[int]) -> Exam:
        db.query(ExamQuestion).filter(ExamQuestion.exam_id == exam.id).delete(synchronize_session=False)
        for position, question_id in enumerate(question_ids):
            db.add(ExamQuestion(exam_id=exam.id, question_id=question_id, position=position))
        db.commit()
        db.expire(exam)
        return self.get(db, id=exam.id)

exam = CRUDExam(Exam)
