from sqlalchemy import Column, Integer, Text, DateTime, Float, Enum, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base
from app.core.constants import QuestionTypeEnum

class Question(Base):
    __tablename__ = "questions"

    id = Column(Integer, primary_key=True, index=True)
    type = Column(Enum(QuestionTypeEnum), nullable=False)
    content = Column(Text, nullable=False)
    options = Column(JSON, nullable=True) # [{"key": "A", "label": "..."}] for choice types
    correct_answer = Column(JSON, nullable=True) # List of correct option keys
    points = Column(Float, nullable=False, default=1.0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    exam_links = relationship("ExamQuestion", back_populates="question", cascade="all, delete-orphan")
    answers = relationship("Answer", back_populates="question")

    @property
    def option_keys(self):
        return [option["key"] for option in (self.options or [])]
