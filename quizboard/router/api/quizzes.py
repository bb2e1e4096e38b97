from typing import Tuple

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from quizboard.database import get_db
from quizboard.directory import IsAdmin
from quizboard.exceptions import NotFoundError
from quizboard.model.users import User
from quizboard.router.dependencies import get_current_user, get_is_admin, get_pagination_params
from quizboard.router.api.logics.attempt_logic import (
    get_user_attempt_logic,
    start_attempt_logic,
    submit_attempt_logic,
)
from quizboard.router.api.logics.availability_logic import ensure_attemptable
from quizboard.router.api.logics.catalog_logic import (
    create_quiz_logic,
    get_quiz_logic,
    list_active_quizzes_logic,
    set_quiz_active_logic,
)
from quizboard.router.api.logics.ranking_logic import get_rankings_logic
from quizboard.schema.attempt_schema import AttemptOut, AttemptResult, AttemptSubmission, RankingsOut
from quizboard.schema.quiz_schema import (
    QuizActiveUpdate,
    QuizAdminOut,
    QuizCreate,
    QuizDetailOut,
    QuizOut,
    QuizzesOut,
)

router = APIRouter()


@router.get("/active", response_model=QuizzesOut, status_code=status.HTTP_200_OK)
def get_active_quizzes(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    """Quizzes that are open right now, newest first. Questions are not included."""
    quizzes = list_active_quizzes_logic(db)
    return QuizzesOut(quizzes=[QuizOut.model_validate(q) for q in quizzes])


@router.post("", response_model=QuizAdminOut, status_code=status.HTTP_201_CREATED)
def create_quiz(
    payload: QuizCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    is_admin: IsAdmin = Depends(get_is_admin),
):
    """Create a quiz together with its questions. Administrators only.

    Args:
        payload (QuizCreate): quiz fields and the ordered list of questions.

    Raises:
        ForbiddenError: the caller is not an administrator.
        QuizValidationError: one entry per invalid field.
    """
    quiz = create_quiz_logic(db, user.user_id, payload, is_admin)
    return QuizAdminOut.model_validate(quiz)


@router.get("/{quiz_id}", response_model=QuizDetailOut, status_code=status.HTTP_200_OK)
def get_quiz(quiz_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    """Quiz with its questions, if the caller could attempt it right now.

    The availability check here is advisory; submission checks again.
    """
    quiz = get_quiz_logic(db, quiz_id)
    ensure_attemptable(db, quiz, user.user_id)
    return QuizDetailOut.model_validate(quiz)


@router.patch("/{quiz_id}/active", response_model=QuizOut, status_code=status.HTTP_200_OK)
def update_quiz_active(
    quiz_id: int,
    payload: QuizActiveUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    is_admin: IsAdmin = Depends(get_is_admin),
):
    quiz = set_quiz_active_logic(db, quiz_id, user.user_id, payload.is_active, is_admin)
    return QuizOut.model_validate(quiz)


@router.post("/{quiz_id}/attempts/start", response_model=AttemptOut, status_code=status.HTTP_201_CREATED)
def start_attempt(quiz_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    """Open an in-progress attempt for the caller."""
    attempt = start_attempt_logic(db, quiz_id, user.user_id)
    return AttemptOut.model_validate(attempt)


@router.post("/{quiz_id}/attempts", response_model=AttemptResult, status_code=status.HTTP_201_CREATED)
def submit_attempt(
    quiz_id: int,
    submission: AttemptSubmission,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Score the caller's answers and record the attempt.

    Args:
        submission (AttemptSubmission): submitted values keyed by question id.

    Returns:
        AttemptResult: score, total score, rounded percentage and pass flag.
    """
    return submit_attempt_logic(db, quiz_id, user.user_id, submission.answers)


@router.get("/{quiz_id}/attempts/me", response_model=AttemptOut, status_code=status.HTTP_200_OK)
def get_my_attempt(quiz_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    attempt = get_user_attempt_logic(db, quiz_id, user.user_id)
    if not attempt:
        raise NotFoundError("Attempt not found")
    return AttemptOut.model_validate(attempt)


@router.get("/{quiz_id}/rankings", response_model=RankingsOut, status_code=status.HTTP_200_OK)
def get_rankings(
    quiz_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    pagination: Tuple[int, int] = Depends(get_pagination_params),
):
    """Leaderboard for a quiz: score descending, earlier completion wins ties."""
    skip, limit = pagination
    return get_rankings_logic(db, quiz_id, skip, limit)
