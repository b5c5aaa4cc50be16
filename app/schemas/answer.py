from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Any, List

from app.core.constants import QuestionTypeEnum

class AutosaveEntry(BaseModel):
    question_id: int = Field(..., alias="questionId")
    answer: Optional[Any] = None

    model_config = ConfigDict(populate_by_name=True)

class AutosaveRequest(BaseModel):
    answers: List[AutosaveEntry] = []

class AnswerQuestion(BaseModel):
    """Question as embedded in an attempt result; correct_answer is hidden while in progress."""
    id: int
    type: QuestionTypeEnum
    content: str
    options: Optional[List[Any]] = None
    correct_answer: Optional[List[str]] = None
    points: float

    model_config = ConfigDict(from_attributes=True)

class Answer(BaseModel):
    id: int
    attempt_id: int
    question_id: int
    answer: Optional[Any] = None
    attachments: Optional[Any] = None
    score: Optional[float] = None
    is_graded: bool = False
    question: Optional[AnswerQuestion] = None

    model_config = ConfigDict(from_attributes=True)
