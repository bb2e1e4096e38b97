from sqlalchemy import func
from sqlalchemy.orm import Session

from quizboard.database.db import dialect_insert, transaction
from quizboard.directory import IsAdmin
from quizboard.log import get_logger
from quizboard.model.users import User
from quizboard.schema.auth_schema import TokenPayload
from quizboard.schema.user_schema import UserOut
from quizboard.time_util import utcnow

log = get_logger(__name__)

users_table = User.__table__


def sync_user_logic(db: Session, token: TokenPayload) -> User:
    """
    Upsert the local mirror of the caller from their token claims.

    A token without an email claim keeps the stored email. An email now
    claimed by this user is taken away from any other mirrored account in
    the same transaction, since the identity provider has moved it.
    """
    now = utcnow()
    values = {
        "email": token.email,
        "first_name": token.first_name or "",
        "last_name": token.last_name or "",
        "last_synced_at": now,
    }
    stmt = dialect_insert(db, users_table).values(user_id=token.sub, created_at=now, **values)
    stmt = stmt.on_conflict_do_update(
        index_elements=[users_table.c.user_id],
        set_={**values, "email": func.coalesce(stmt.excluded.email, users_table.c.email)},
    )
    with transaction(db):
        if token.email:
            released = (
                db.query(User)
                .filter(User.email == token.email, User.user_id != token.sub)
                .update({User.email: None}, synchronize_session=False)
            )
            if released:
                log.info("Email of %s moved to %s, cleared on the previous account", token.email, token.sub)
        db.execute(stmt)
    user = db.get(User, token.sub, populate_existing=True)
    log.debug("Synced user mirror for %s", token.sub)
    return user


def get_profile_logic(user: User, is_admin: IsAdmin) -> UserOut:
    return UserOut(
        user_id=user.user_id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        is_admin=is_admin(user.user_id),
    )
