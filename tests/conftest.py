import os

os.environ["SECRET_KEY"] = "test-secret"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ADMIN_USER_IDS"] = '["admin-1"]'
os.environ["ADMIN_EMAILS"] = '["boss@example.com"]'

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from quizboard.config import settings
from quizboard.database import get_db
from quizboard.database.base_class import Base
from quizboard.database.session import get_local_session
from quizboard.main import app
from quizboard.model import Attempt, Question, Quiz, User
from quizboard.router.dependencies import get_is_admin
from quizboard.time_util import utcnow

ADMIN_ID = "admin-1"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return get_local_session(engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def is_admin():
    return lambda user_id: user_id == ADMIN_ID


@pytest.fixture
def client(session_factory, is_admin):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_is_admin] = lambda: is_admin
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def make_token(user_id, **claims):
    payload = {"sub": user_id, "exp": utcnow() + timedelta(hours=1), **claims}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


@pytest.fixture
def auth_headers():
    def _headers(user_id, **claims):
        return {"Authorization": f"Bearer {make_token(user_id, **claims)}"}
    return _headers


@pytest.fixture
def make_user(db):
    def _make_user(user_id, first_name=None, last_name=None, email=None):
        user = User(user_id=user_id, first_name=first_name, last_name=last_name, email=email)
        db.add(user)
        db.commit()
        return user
    return _make_user


def mc_question(correct="a", points=1):
    return {
        "content": "Pick one",
        "question_type": "multiple_choice",
        "options": {"a": "Alpha", "b": "Beta", "c": "Gamma"},
        "correct_answer": correct,
        "points": points,
    }


@pytest.fixture
def make_quiz(db, make_user):
    """Persist a quiz directly, bypassing the admin create path."""

    def _make_quiz(questions=None, start=None, end=None, is_active=True, created_at=None, title="Quiz"):
        if db.get(User, ADMIN_ID) is None:
            make_user(ADMIN_ID, "Ada", "Admin")
        questions = questions if questions is not None else [mc_question("a"), mc_question("b")]
        quiz = Quiz(
            creator_id=ADMIN_ID,
            title=title,
            duration=10,
            scheduled_start=start,
            scheduled_end=end,
            is_active=is_active,
            total_questions=len(questions),
        )
        if created_at is not None:
            quiz.created_at = created_at
        quiz.questions = [Question(position=i, **q) for i, q in enumerate(questions)]
        db.add(quiz)
        db.commit()
        db.refresh(quiz)
        return quiz
    return _make_quiz


def answers_for(quiz, *values):
    """Map the quiz's questions, in order, to the given submitted values."""
    return {str(q.question_id): v for q, v in zip(quiz.questions, values) if v is not None}


def attempt_count(db, quiz_id):
    return db.query(Attempt).filter(Attempt.quiz_id == quiz_id).count()
