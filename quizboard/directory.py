from typing import Callable, Iterable

from sqlalchemy.orm import Session

from quizboard.model.users import User

IsAdmin = Callable[[str], bool]


class AdminDirectory:
    """
    Answers `is_admin(user_id)` from configured allow-lists.

    A user is an administrator when their id is allow-listed, or when the
    email mirrored for them is. Emails compare case-insensitively.
    """

    def __init__(self, db: Session, admin_user_ids: Iterable[str] = (), admin_emails: Iterable[str] = ()):
        self.db = db
        self.admin_user_ids = set(admin_user_ids)
        self.admin_emails = {e.lower() for e in admin_emails}

    def is_admin(self, user_id: str) -> bool:
        if user_id in self.admin_user_ids:
            return True
        if not self.admin_emails:
            return False
        email = self.db.query(User.email).filter(User.user_id == user_id).scalar()
        return bool(email) and email.lower() in self.admin_emails
