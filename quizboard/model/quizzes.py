from sqlalchemy import Column, String, Boolean, ForeignKey, DateTime, Integer, Text
from sqlalchemy.orm import relationship
from quizboard.database.base_class import Base
from quizboard.time_util import utcnow


class Quiz(Base):
    __tablename__ = "quizzes"

    quiz_id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # FK
    creator_id = Column(String(255), ForeignKey("users.user_id"), nullable=False)

    # attributes
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    duration = Column(Integer, nullable=False)  # minutes
    scheduled_start = Column(DateTime, nullable=True)
    scheduled_end = Column(DateTime, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    total_questions = Column(Integer, default=0, nullable=False)
    passing_score = Column(Integer, default=70, nullable=False)  # percentage
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # relationship
    creator = relationship("User", back_populates="quizzes")
    questions = relationship(
        "Question",
        back_populates="quiz",
        cascade="all, delete-orphan",
        order_by="Question.position",
    )
    attempts = relationship("Attempt", back_populates="quiz", passive_deletes="all")
