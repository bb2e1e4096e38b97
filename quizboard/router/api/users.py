from typing import Tuple

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from quizboard.database import get_db
from quizboard.directory import IsAdmin
from quizboard.model.users import User
from quizboard.router.dependencies import get_current_user, get_is_admin, get_pagination_params
from quizboard.router.api.logics.attempt_logic import list_user_attempts_logic
from quizboard.router.api.logics.user_logic import get_profile_logic
from quizboard.schema.attempt_schema import UserAttemptsOut
from quizboard.schema.user_schema import UserOut

router = APIRouter()


@router.get("/me", response_model=UserOut, status_code=status.HTTP_200_OK)
def get_me(user: User = Depends(get_current_user), is_admin: IsAdmin = Depends(get_is_admin)):
    """Mirrored profile of the caller and whether they administer quizzes."""
    return get_profile_logic(user, is_admin)


@router.get("/me/attempts", response_model=UserAttemptsOut, status_code=status.HTTP_200_OK)
def get_my_attempts(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    pagination: Tuple[int, int] = Depends(get_pagination_params),
):
    """Completed attempts of the caller with quiz titles, newest first."""
    skip, limit = pagination
    return list_user_attempts_logic(db, user.user_id, skip, limit)
