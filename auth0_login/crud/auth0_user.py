"""
CRUD operations for the auth0_user link table.
"""

import json
from typing import Optional

from sqlalchemy.orm import Session

from auth0_login.core.logging import get_logger
from auth0_login.models.auth0_user import Auth0User
from auth0_login.models.user import User
from auth0_login.schemas.claims import Claims

logger = get_logger(__name__)


def get_auth0_user(db: Session, auth0_id: str) -> Optional[Auth0User]:
    return db.query(Auth0User).filter(Auth0User.auth0_id == auth0_id).first()


def get_user_by_auth0_id(db: Session, auth0_id: str) -> Optional[User]:
    """
    Get the local user linked to an Auth0 identity.

    Args:
        db: Database session
        auth0_id: Auth0 user ID

    Returns:
        User object or None if the identity is not linked
    """
    return (
        db.query(User)
        .join(Auth0User, Auth0User.user_id == User.id)
        .filter(Auth0User.auth0_id == auth0_id)
        .first()
    )


def insert_auth0_user(db: Session, claims: Claims, user_id: int) -> Auth0User:
    """
    Link an Auth0 identity to a user. Flushed, not committed.

    Raises:
        sqlalchemy.exc.IntegrityError: The identity is already linked
    """
    link = Auth0User(
        auth0_id=claims.user_id,
        user_id=user_id,
        auth0_object=json.dumps(claims.to_dict()),
    )
    db.add(link)
    db.flush()
    logger.info(
        "Auth0 identity linked",
        extra={"auth0_user_id": claims.user_id, "user_id": user_id},
    )
    return link


def update_auth0_user(db: Session, claims: Claims) -> None:
    """Refresh the cached claims for an already linked identity."""
    db.query(Auth0User).filter(Auth0User.auth0_id == claims.user_id).update(
        {Auth0User.auth0_object: json.dumps(claims.to_dict())},
        synchronize_session=False,
    )
