from datetime import datetime
from typing import Dict, Optional

from sqlalchemy import desc
from sqlalchemy.orm import Session

from quizboard.database.db import dialect_insert, transaction
from quizboard.exceptions import AttemptConflictError
from quizboard.log import get_logger
from quizboard.model.attempts import Attempt
from quizboard.model.quizzes import Quiz
from quizboard.router.api.logics.availability_logic import ensure_attemptable
from quizboard.router.api.logics.catalog_logic import get_quiz_logic
from quizboard.router.api.logics.scoring_logic import ScoreResult, percentage, score_answers
from quizboard.schema.attempt_schema import AttemptResult, UserAttemptOut, UserAttemptsOut
from quizboard.time_util import utcnow

log = get_logger(__name__)

attempts_table = Attempt.__table__


def get_user_attempt_logic(db: Session, quiz_id: int, user_id: str) -> Optional[Attempt]:
    return (
        db.query(Attempt)
        .populate_existing()
        .filter(Attempt.quiz_id == quiz_id, Attempt.user_id == user_id)
        .first()
    )


def upsert_completed_attempt(
    db: Session,
    quiz_id: int,
    user_id: str,
    answers: Dict[str, str],
    result: ScoreResult,
    now: datetime,
) -> None:
    """
    Record a scored attempt with one conditional write.

    Inserts a completed row, or completes the user's in-progress row in place.
    A row that is already completed is never touched. time_taken counts from
    the in-progress row's start, or is 0 for a submission without one.

    Raises:
        AttemptConflictError: Another request completed the attempt first.
    """
    started_at = (
        db.query(Attempt.started_at)
        .filter(Attempt.quiz_id == quiz_id, Attempt.user_id == user_id, Attempt.completed.is_(False))
        .scalar()
    )
    values = {
        "answers": answers,
        "score": result.score,
        "total_score": result.total_score,
        "percentage": percentage(result.score, result.total_score),
        "completed": True,
        "completed_at": now,
        "time_taken": max(int((now - started_at).total_seconds()), 0) if started_at else 0,
    }
    stmt = dialect_insert(db, attempts_table).values(
        quiz_id=quiz_id, user_id=user_id, started_at=now, **values
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[attempts_table.c.quiz_id, attempts_table.c.user_id],
        set_={key: stmt.excluded[key] for key in values},
        where=attempts_table.c.completed.is_(False),
    )
    with transaction(db):
        written = db.execute(stmt).rowcount
    if not written:
        raise AttemptConflictError()


def _attempt_result(attempt: Attempt, quiz: Quiz) -> AttemptResult:
    return AttemptResult(
        score=attempt.score,
        total_score=attempt.total_score,
        percentage=attempt.percentage,
        passed=attempt.percentage >= quiz.passing_score,
    )


def submit_attempt_logic(
    db: Session,
    quiz_id: int,
    user_id: str,
    answers: Dict[str, str],
    now: Optional[datetime] = None,
) -> AttemptResult:
    """
    Score and store a user's submission for a quiz.

    The availability check here is the authoritative one. Scoring always uses
    the quiz's current questions. When a concurrent submission wins the race,
    its stored result is returned instead of an error.
    """
    now = now or utcnow()
    quiz = get_quiz_logic(db, quiz_id)
    ensure_attemptable(db, quiz, user_id, now)

    result = score_answers(quiz.questions, answers)
    try:
        upsert_completed_attempt(db, quiz.quiz_id, user_id, answers, result, now)
    except AttemptConflictError:
        log.warning("Attempt for quiz %s by %s was completed concurrently, returning stored result", quiz_id, user_id)
    attempt = get_user_attempt_logic(db, quiz.quiz_id, user_id)
    log.info(
        "Quiz %s submitted by %s: %d/%d",
        quiz_id, user_id, attempt.score, attempt.total_score,
    )
    return _attempt_result(attempt, quiz)


def start_attempt_logic(db: Session, quiz_id: int, user_id: str, now: Optional[datetime] = None) -> Attempt:
    """Open an in-progress attempt, or return the one already open."""
    now = now or utcnow()
    quiz = get_quiz_logic(db, quiz_id)
    ensure_attemptable(db, quiz, user_id, now)

    stmt = dialect_insert(db, attempts_table).values(
        quiz_id=quiz.quiz_id,
        user_id=user_id,
        answers={},
        score=0,
        total_score=0,
        percentage=0,
        completed=False,
        started_at=now,
    )
    stmt = stmt.on_conflict_do_nothing(
        index_elements=[attempts_table.c.quiz_id, attempts_table.c.user_id]
    )
    with transaction(db):
        db.execute(stmt)
    return get_user_attempt_logic(db, quiz.quiz_id, user_id)


def list_user_attempts_logic(db: Session, user_id: str, skip: int = 0, limit: Optional[int] = None) -> UserAttemptsOut:
    """Completed attempts of a user with their quiz titles, newest completion first."""
    query = (
        db.query(Attempt, Quiz.title, Quiz.description)
        .join(Quiz, Attempt.quiz_id == Quiz.quiz_id)
        .filter(Attempt.user_id == user_id, Attempt.completed.is_(True))
        .order_by(desc(Attempt.completed_at), desc(Attempt.attempt_id))
        .offset(skip)
    )
    if limit is not None:
        query = query.limit(limit)
    return UserAttemptsOut(
        attempts=[
            UserAttemptOut(
                attempt_id=attempt.attempt_id,
                quiz_id=attempt.quiz_id,
                quiz_title=title,
                quiz_description=description,
                score=attempt.score,
                total_score=attempt.total_score,
                percentage=attempt.percentage,
                completed_at=attempt.completed_at,
                time_taken=attempt.time_taken,
            )
            for attempt, title, description in query.all()
        ]
    )
