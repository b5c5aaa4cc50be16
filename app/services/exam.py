from typing import List
import logging

from sqlalchemy.orm import Session
from fastapi import HTTPException, status

from app.crud.exam import exam as crud_exam
from app.crud.question import question as crud_question
from app.models.exam import Exam
from app.schemas.exam import ExamCreate
from app.schemas.user import UserContext
from app.utils.permission import PermissionHelper as permission_helper

logger = logging.getLogger(__name__)


class ExamService:

    def create_exam(self, db: Session, exam_in: ExamCreate, current_user_context: UserContext) -> Exam:
        permission_helper.require_not_student(current_user_context, "Students cannot create exams.")

        exam_data = exam_in.model_dump()
        exam_data["created_by"] = current_user_context.user.id
        new_exam = crud_exam.create(db, obj_in=exam_data)
        logger.info(f"Exam {new_exam.id} created by user {current_user_context.user.id}")
        return crud_exam.get(db, id=new_exam.id)

    def get_exam(self, db: Session, exam_id: int) -> Exam:
        exam = crud_exam.get(db, id=exam_id)
        if not exam:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Exam not found.")
        return exam

    def get_all_exams(self, db: Session, skip: int = 0, limit: int = 100) -> List[Exam]:
        return crud_exam.get_multi(db, skip=skip, limit=limit)

    def assign_questions(self, db: Session, exam_id: int, question_ids: List[int],
                         current_user_context: UserContext) -> Exam:
        permission_helper.require_not_student(current_user_context, "Students cannot manage exam questions.")

        exam = self.get_exam(db, exam_id)

        if len(question_ids) != len(set(question_ids)):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Duplicate question ids found in assignment.")

        found_ids = {q.id for q in crud_question.get_by_ids(db, ids=question_ids)}
        missing = [qid for qid in question_ids if qid not in found_ids]
        if missing:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Question(s) not found: {missing}"
            )

        updated_exam = crud_exam.set_questions(db, exam=exam, question_ids=question_ids)
        logger.info(f"Assigned {len(question_ids)} question(s) to exam {exam.id}")
        return updated_exam


exam_service = ExamService()
