from typing import List
import io
import logging

import pandas as pd
from pydantic import ValidationError
from sqlalchemy.orm import Session
from fastapi import HTTPException, status

from app.core.constants import QUESTION_IMPORT_COLUMNS, QUESTION_IMPORT_OPTION_KEYS
from app.crud.question import question as crud_question
from app.models.question import Question
from app.schemas.question import QuestionCreate, QuestionUpdate
from app.schemas.user import UserContext
from app.utils.permission import PermissionHelper as permission_helper

logger = logging.getLogger(__name__)

# Type names written by older spreadsheets.
LEGACY_TYPE_NAMES = {
    "mcq_single": "single_choice",
    "mcq_multiple": "multiple_choice",
}


def _cell(row, column):
    value = row.get(column)
    if value is None or pd.isna(value):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip() or None


class QuestionService:

    def create_question(self, db: Session, question_in: QuestionCreate,
                        current_user_context: UserContext) -> Question:
        permission_helper.require_not_student(current_user_context, "Students cannot create questions.")
        return crud_question.create(db, obj_in=question_in)

    def get_question(self, db: Session, question_id: int) -> Question:
        question = crud_question.get(db, id=question_id)
        if not question:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Question not found.")
        return question

    def get_all_questions(self, db: Session, skip: int = 0, limit: int = 100) -> List[Question]:
        return crud_question.get_multi(db, skip=skip, limit=limit)

    def update_question(self, db: Session, question_id: int, question_in: QuestionUpdate,
                        current_user_context: UserContext) -> Question:
        permission_helper.require_not_student(current_user_context, "Students cannot edit questions.")

        question = self.get_question(db, question_id)
        if crud_question.is_referenced_by_submitted_attempt(db, question_id=question.id):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Question is part of a submitted attempt and can no longer be changed."
            )

        try:
            merged = QuestionCreate.model_validate({
                "type": question.type,
                "content": question.content,
                "options": question.options,
                "correct_answer": question.correct_answer,
                "points": question.points,
                **question_in.model_dump(exclude_unset=True),
            })
        except ValidationError as e:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail={"message": "Invalid question update.", "errors": e.errors(include_url=False, include_context=False)}
            )
        return crud_question.update(db, db_obj=question, obj_in=merged.model_dump())

    def parse_question_file(self, file_content: bytes, filename: str) -> pd.DataFrame:
        if filename.lower().endswith('.csv'):
            df = pd.read_csv(io.BytesIO(file_content), dtype=object)
        elif filename.lower().endswith('.xlsx'):
            df = pd.read_excel(io.BytesIO(file_content), dtype=object)
        else:
            raise ValueError("Unsupported file format. Please upload CSV or .xlsx files.")

        if len(df.columns) < 2:
            raise ValueError("The sheet needs at least the type and content columns.")

        # Columns are read by position; the header row only labels them.
        df = df.iloc[:, :len(QUESTION_IMPORT_COLUMNS)]
        df.columns = QUESTION_IMPORT_COLUMNS[:len(df.columns)]
        return df.dropna(how="all")

    def _row_to_question(self, row) -> QuestionCreate:
        question_type = (_cell(row, "type") or "").lower()
        question_type = LEGACY_TYPE_NAMES.get(question_type, question_type)

        options = []
        for column, key in QUESTION_IMPORT_OPTION_KEYS.items():
            label = _cell(row, column)
            if label:
                options.append({"key": key, "label": label})

        correct = _cell(row, "correct")
        points = row.get("points")

        return QuestionCreate.model_validate({
                "type": question_type,
            "content": _cell(row, "content") or "",
            "options": options,
            "correct_answer": [key.strip() for key in correct.split("|") if key.strip()] if correct else [],
            "points": 1 if points is None or pd.isna(points) else points,
        })

    def import_questions(self, db: Session, file_content: bytes, filename: str,
                         current_user_context: UserContext) -> int:
        permission_helper.require_not_student(current_user_context, "Students cannot import questions.")

        try:
            df = self.parse_question_file(file_content, filename)
        except Exception as e:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Failed to read question file: {str(e)}"
            )

        questions_in = []
        row_errors = []
        for index, row in df.iterrows():
            row_number = index + 2  # +2 because pandas is 0-indexed and the sheet has a header row
            try:
                questions_in.append(self._row_to_question(row))
            except ValidationError as e:
                row_errors.append({"row": row_number, "errors": e.errors(include_url=False, include_context=False)})

        if row_errors:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail={"message": "Some rows could not be imported.", "rows": row_errors}
            )

        for question_in in questions_in:
            crud_question.create(db, obj_in=question_in, commit=False)
        db.commit()

        logger.info(f"Imported {len(questions_in)} question(s) from {filename}")
        return len(questions_in)


question_service = QuestionService()
