from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship
from quizboard.database.base_class import Base
from quizboard.time_util import utcnow


class User(Base):
    """Local mirror of an identity-provider account, kept for display only."""
    __tablename__ = "users"

    # external subject id
    user_id = Column(String(255), primary_key=True, index=True)

    # attributes
    email = Column(String(255), nullable=True, unique=True)
    first_name = Column(String(255), nullable=True)
    last_name = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    last_synced_at = Column(DateTime, nullable=True)

    # relationship
    quizzes = relationship("Quiz", back_populates="creator")
    attempts = relationship("Attempt", back_populates="user")

    @property
    def display_name(self) -> str:
        full_name = f"{self.first_name or ''} {self.last_name or ''}".strip()
        return full_name or self.email or self.user_id
