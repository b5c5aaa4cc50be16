from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Optional, List, Any, Dict
from datetime import datetime

from app.schemas.question import Question

class ExamBase(BaseModel):
    title: str
    description: Optional[str] = None
    schedule_start: Optional[datetime] = None
    schedule_end: Optional[datetime] = None
    duration_minutes: Optional[int] = Field(default=None, gt=0)
    randomize_questions: bool = False
    randomize_options: bool = False
    settings: Optional[Dict[str, Any]] = None

class ExamCreate(ExamBase):

    @model_validator(mode="after")
    def check_schedule(self):
        if self.schedule_start and self.schedule_end and self.schedule_end < self.schedule_start:
            raise ValueError("schedule_end must not be before schedule_start.")
        return self

class ExamAssignQuestions(BaseModel):
    question_ids: List[int] = Field(..., alias="questionIds")

    model_config = ConfigDict(populate_by_name=True)

class Exam(ExamBase):
    id: int
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    questions: List[Question] = []

    model_config = ConfigDict(from_attributes=True)
