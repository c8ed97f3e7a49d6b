"""
User identity lookup.

Resolves numeric user ids to "<username> (<first name> <last name>)" display
strings. A resolver owns its cache, so create one per request.
"""
import logging
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database import UserInformation

logger = logging.getLogger(__name__)

UNKNOWN_USER = "Unknown"


def _as_user_id(value: Any) -> Optional[int]:
    """Return the numeric user id, or None for anything non-numeric."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if text.isdigit():
        return int(text)
    return None


def format_identity(user: UserInformation) -> str:
    first = user.user_firstname or ""
    last = user.user_lastname or ""
    return f"{user.username} ({first} {last})"


class IdentityResolver:
    """Cached user id -> display name lookups against the host user table."""

    def __init__(self, db: Session):
        self.db = db
        self._cache: dict[int, str] = {}
        self.lookups = 0

    def resolve(self, ui_id: Any) -> str:
        user_id = _as_user_id(ui_id)
        if user_id is None:
            return UNKNOWN_USER

        if user_id in self._cache:
            return self._cache[user_id]

        self.lookups += 1
        try:
            user = self.db.query(UserInformation).filter(UserInformation.ui_id == user_id).first()
        except SQLAlchemyError as e:
            logger.warning(f"Identity lookup failed for user {user_id}: {e}")
            return UNKNOWN_USER

        if user is None:
            logger.info(f"No user found for id {user_id}")
            self._cache[user_id] = UNKNOWN_USER
        else:
            self._cache[user_id] = format_identity(user)

        return self._cache[user_id]

    def resolve_username(self, username: Optional[str]) -> str:
        """Resolve a username (as written in log events) through its user id."""
        if not username:
            return UNKNOWN_USER
        try:
            user = self.db.query(UserInformation).filter(UserInformation.username == username).first()
        except SQLAlchemyError as e:
            logger.warning(f"Identity lookup failed for username {username}: {e}")
            return UNKNOWN_USER
        if user is None:
            return UNKNOWN_USER
        return self.resolve(user.ui_id)


def create_user(db: Session, username: str, first_name: Optional[str] = None, last_name: Optional[str] = None) -> UserInformation:
    """Add a host-system user account."""
    user = UserInformation(username=username, user_firstname=first_name, user_lastname=last_name)
    db.add(user)
    db.commit()
    logger.info(f"Created user {username} (id {user.ui_id})")
    return user
