from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from quizboard.exceptions import (
    AlreadyCompletedError,
    QuizError,
    QuizExpiredError,
    QuizNotStartedError,
)
from quizboard.log import get_logger
from quizboard.model.attempts import Attempt
from quizboard.model.quizzes import Quiz
from quizboard.time_util import utcnow

log = get_logger(__name__)


def has_completed_attempt(db: Session, quiz_id: int, user_id: str) -> bool:
    return db.query(
        db.query(Attempt)
        .filter(
            Attempt.quiz_id == quiz_id,
            Attempt.user_id == user_id,
            Attempt.completed.is_(True),
        )
        .exists()
    ).scalar()


def check_window(quiz: Quiz, now: datetime) -> None:
    """
    Raises if `now` falls outside the quiz's availability window.

    Both ends of the window are inclusive; a missing end is unbounded. An
    inactive quiz is treated as closed.
    """
    if not quiz.is_active:
        raise QuizExpiredError("Quiz is no longer active")
    if quiz.scheduled_start is not None and now < quiz.scheduled_start:
        raise QuizNotStartedError()
    if quiz.scheduled_end is not None and now > quiz.scheduled_end:
        raise QuizExpiredError()


def ensure_attemptable(db: Session, quiz: Quiz, user_id: str, now: Optional[datetime] = None) -> None:
    """
    Raises unless `user_id` may attempt `quiz` at `now`.

    Raises:
        QuizExpiredError: The quiz is inactive or its window has closed.
        QuizNotStartedError: The window has not opened yet.
        AlreadyCompletedError: The user already has a completed attempt.
    """
    now = now or utcnow()
    try:
        check_window(quiz, now)
        if has_completed_attempt(db, quiz.quiz_id, user_id):
            raise AlreadyCompletedError()
    except QuizError as e:
        log.info("Quiz %s not attemptable by %s: %s", quiz.quiz_id, user_id, e.kind)
        raise


def is_attemptable(db: Session, quiz: Quiz, user_id: str, now: Optional[datetime] = None) -> bool:
    try:
        ensure_attemptable(db, quiz, user_id, now)
    except QuizError:
        return False
    return True
