from sqlalchemy import Column, String, Boolean, ForeignKey, DateTime, Integer, JSON, UniqueConstraint
from sqlalchemy.orm import relationship
from quizboard.database.base_class import Base


class Attempt(Base):
    __tablename__ = "attempts"
    __table_args__ = (
        UniqueConstraint("quiz_id", "user_id", name="uq_attempts_quiz_user"),
    )

    attempt_id = Column(Integer, index=True, primary_key=True, autoincrement=True)

    # FK
    user_id = Column(String(255), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    quiz_id = Column(Integer, ForeignKey("quizzes.quiz_id", ondelete="RESTRICT"), nullable=False)

    # attributes
    answers = Column(JSON, nullable=True)  # question id -> submitted value
    score = Column(Integer, nullable=False, default=0)
    total_score = Column(Integer, nullable=False, default=0)
    percentage = Column(Integer, nullable=False, default=0)
    completed = Column(Boolean, nullable=False, default=False)
    started_at = Column(DateTime, nullable=False)
    completed_at = Column(DateTime, nullable=True)
    time_taken = Column(Integer, nullable=True)  # seconds from start to completion

    # relationship
    user = relationship("User", back_populates="attempts")
    quiz = relationship("Quiz", back_populates="attempts")
