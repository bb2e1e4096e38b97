from sqlalchemy import Column, String, ForeignKey, Integer, Text, JSON
from sqlalchemy.orm import relationship
from quizboard.database.base_class import Base


MULTIPLE_CHOICE = "multiple_choice"
TRUE_FALSE = "true_false"
SHORT_ANSWER = "short_answer"
QUESTION_TYPES = (MULTIPLE_CHOICE, TRUE_FALSE, SHORT_ANSWER)


class Question(Base):
    __tablename__ = "questions"

    question_id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    quiz_id = Column(Integer, ForeignKey("quizzes.quiz_id", ondelete="CASCADE"), nullable=False, index=True)

    # attributes
    position = Column(Integer, nullable=False)
    content = Column(Text, nullable=False)
    question_type = Column(String(50), nullable=False, default=MULTIPLE_CHOICE)
    options = Column(JSON, nullable=True)  # option key -> option text, multiple choice only
    correct_answer = Column(String(255), nullable=False)
    points = Column(Integer, nullable=False, default=1)
    explanation = Column(Text, nullable=True)

    # relationship
    quiz = relationship("Quiz", back_populates="questions")
