"""
CRUD operations for local user accounts.
"""

import secrets
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from auth0_login.core.logging import get_logger
from auth0_login.models.user import User

logger = get_logger(__name__)

# Column width of user.name
USERNAME_MAX_LENGTH = 60


def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
    """
    Get a user by ID.

    Args:
        db: Database session
        user_id: User ID

    Returns:
        User object or None if not found
    """
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """
    Get a user by email.

    Args:
        db: Database session
        email: Email address

    Returns:
        User object or None if not found
    """
    return db.query(User).filter(User.mail == email).first()


def get_user_by_name(db: Session, name: str) -> Optional[User]:
    """
    Get a user by username.

    Args:
        db: Database session
        name: Username

    Returns:
        User object or None if not found
    """
    return db.query(User).filter(User.name == name).first()


def generate_unique_username(db: Session, base: str) -> str:
    """
    Return ``base``, or ``base`` with the smallest numeric suffix not in use.

    Args:
        db: Database session
        base: Preferred username

    Returns:
        A username no existing user has
    """
    base = base[:USERNAME_MAX_LENGTH]
    if not get_user_by_name(db, base):
        return base

    suffix = 1
    while True:
        tail = str(suffix)
        candidate = f"{base[: USERNAME_MAX_LENGTH - len(tail)]}{tail}"
        if not get_user_by_name(db, candidate):
            logger.info(
                "Username taken, using suffixed username",
                extra={"requested_username": base, "username": candidate},
            )
            return candidate
        suffix += 1


def placeholder_email() -> str:
    """Stand-in address for identities that carry no email claim."""
    return f"change_this_email@{uuid.uuid4().hex}.com"


def create_user(
    db: Session,
    username: str,
    email: Optional[str],
    active: bool,
) -> User:
    """
    Create a new user that authenticates only through Auth0.

    The password column receives a random token nobody knows. The user is
    flushed, not committed, so the caller can persist the Auth0 link in the
    same transaction.

    Args:
        db: Database session
        username: Username, already made unique
        email: Email address from Auth0, or None for a placeholder
        active: Whether the account may log in immediately

    Returns:
        Created User object with its id assigned
    """
    mail = email or placeholder_email()
    new_user = User(
        name=username,
        mail=mail,
        init=mail,
        pass_=secrets.token_urlsafe(32),
        status=active,
        created=datetime.now(),
        firstname="",
        surname="",
        picture="",
        locale="",
        homepage="",
        about="",
    )

    db.add(new_user)
    db.flush()

    logger.info(
        "User created from Auth0 profile",
        extra={
            "user_id": new_user.id,
            "username": username,
            "email": mail,
            "active": active,
        },
    )
    return new_user
