from typing import Optional, Tuple

from fastapi import Depends, Query, status, HTTPException, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import jwt
from pydantic import ValidationError
from sqlalchemy.orm import Session

from quizboard.config import settings
from quizboard.database import get_db
from quizboard.directory import AdminDirectory, IsAdmin
from quizboard.log import get_logger
from quizboard.model.users import User
from quizboard.router.api.logics.user_logic import sync_user_logic
from quizboard.schema.auth_schema import TokenPayload

log = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_pagination_params(
    skip: int = Query(0, ge=0), limit: int = Query(50, gt=0, le=500)
) -> Tuple[int, int]:
    return skip, limit


def get_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
) -> TokenPayload:
    if credentials is None:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authenticated")
    try:
        payload = jwt.decode(credentials.credentials, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        token_data = TokenPayload(**payload)
    except (jwt.JWTError, ValidationError) as e:
        log.info("Rejected bearer token: %s", e)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Could not validate credentials") from e
    return token_data


def get_current_user(
    db: Session = Depends(get_db), token: TokenPayload = Depends(get_token)
) -> User:
    """Resolve the caller, refreshing their mirrored name and email from the token."""
    return sync_user_logic(db, token)


def get_is_admin(db: Session = Depends(get_db)) -> IsAdmin:
    directory = AdminDirectory(db, settings.ADMIN_USER_IDS, settings.ADMIN_EMAILS)
    return directory.is_admin
