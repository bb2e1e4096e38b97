from typing import Optional

from sqlalchemy import asc, desc
from sqlalchemy.orm import Session

from quizboard.exceptions import NotFoundError
from quizboard.model.attempts import Attempt
from quizboard.model.quizzes import Quiz
from quizboard.model.users import User
from quizboard.schema.attempt_schema import RankingEntry, RankingsOut


def get_rankings_logic(db: Session, quiz_id: int, skip: int = 0, limit: Optional[int] = None) -> RankingsOut:
    """
    Leaderboard of completed attempts for a quiz.

    Higher scores rank first; equal scores go to whoever completed earlier,
    then to the lower attempt id so the order never depends on storage.
    """
    if not db.query(db.query(Quiz).filter(Quiz.quiz_id == quiz_id).exists()).scalar():
        raise NotFoundError("Quiz not found")

    query = (
        db.query(Attempt, User)
        .outerjoin(User, Attempt.user_id == User.user_id)
        .filter(Attempt.quiz_id == quiz_id, Attempt.completed.is_(True))
        .order_by(desc(Attempt.score), asc(Attempt.completed_at), asc(Attempt.attempt_id))
        .offset(skip)
    )
    if limit is not None:
        query = query.limit(limit)

    rankings = []
    for position, (attempt, user) in enumerate(query.all(), start=skip + 1):
        rankings.append(RankingEntry(
            rank=position,
            user_id=attempt.user_id,
            name=user.display_name if user else attempt.user_id,
            score=attempt.score,
            total_score=attempt.total_score,
            completed_at=attempt.completed_at,
        ))
    return RankingsOut(quiz_id=quiz_id, rankings=rankings)
