"""
Find the local account for an Auth0 identity, join it to an existing
account, or create a new one.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from sqlalchemy.orm import Session

from auth0_login.core.config import USER_REGISTER_VISITORS, Settings
from auth0_login.core.exceptions import LoginFailure
from auth0_login.core.logging import get_logger
from auth0_login.crud import auth0_user as auth0_user_crud
from auth0_login.crud import user as user_crud
from auth0_login.models.user import User
from auth0_login.schemas.claims import Claims

logger = get_logger(__name__)

# Used when the configured username claim is missing from the profile
FALLBACK_USERNAME = "auth0_user"


class AccountStatus(str, Enum):
    EXISTING = "existing"
    CREATED = "created"


@dataclass(frozen=True)
class ResolvedAccount:
    """
    Outcome of account resolution.

    Exactly one of ``user`` and ``failure`` is set. ``needs_link`` is True for
    an existing account joined by email or username, whose Auth0 link the
    caller still has to insert.
    """

    user: Optional[User] = None
    status: Optional[AccountStatus] = None
    needs_link: bool = False
    failure: Optional[LoginFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @property
    def is_new_link(self) -> bool:
        """True when this login creates the Auth0 link."""
        return self.status == AccountStatus.CREATED or self.needs_link


class AccountResolver:
    """Resolve claims to a local account, using the login policy in settings."""

    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings

    def resolve(self, claims: Claims) -> ResolvedAccount:
        logger.info(
            "Looking up user by Auth0 user id",
            extra={"auth0_user_id": claims.user_id},
        )
        user = auth0_user_crud.get_user_by_auth0_id(self.db, claims.user_id)
        if user is not None:
            logger.info(
                "Existing linked user found",
                extra={"auth0_user_id": claims.user_id, "user_id": user.id},
            )
            return ResolvedAccount(user=user, status=AccountStatus.EXISTING)

        join_user = self.find_join_candidate(claims)
        if join_user is not None:
            logger.info(
                "User found to join with",
                extra={"auth0_user_id": claims.user_id, "user_id": join_user.id},
            )
            # Linking an unverified identity to an existing account would let
            # anyone claiming the address take it over
            if not claims.email_verified:
                logger.warning(
                    "Refusing to join user with unverified email",
                    extra={"auth0_user_id": claims.user_id, "user_id": join_user.id},
                )
                return ResolvedAccount(failure=LoginFailure.EMAIL_NOT_VERIFIED)
            return ResolvedAccount(
                user=join_user, status=AccountStatus.EXISTING, needs_link=True
            )

        user = self.create_user(claims)
        auth0_user_crud.insert_auth0_user(self.db, claims, int(user.id))
        return ResolvedAccount(user=user, status=AccountStatus.CREATED)

    def find_join_candidate(self, claims: Claims) -> Optional[User]:
        """
        Find an unlinked account this identity may be joined to.

        Lookups only happen for verified emails or Auth0 database users, so an
        unverified social login never reaches an existing account.
        """
        may_join = claims.email_verified or claims.is_database_user

        if self.settings.AUTH0_JOIN_USER_BY_MAIL_ENABLED:
            logger.info(
                "Join user by mail enabled, looking up user by email",
                extra={"email": claims.email, "may_join": may_join},
            )
            if may_join and claims.email:
                return user_crud.get_user_by_email(self.db, claims.email)
            return None

        username = claims.get(self.settings.AUTH0_USERNAME_CLAIM)
        logger.info(
            "Looking up user by username",
            extra={"username": username, "may_join": may_join},
        )
        if may_join and username:
            return user_crud.get_user_by_name(self.db, str(username))
        return None

    def create_user(self, claims: Claims) -> User:
        requested = claims.get(self.settings.AUTH0_USERNAME_CLAIM)
        if not requested and claims.email:
            requested = claims.email.split("@", 1)[0]
        username = user_crud.generate_unique_username(
            self.db, str(requested or FALLBACK_USERNAME)
        )

        logger.info(
            "Creating new user from Auth0 profile",
            extra={"auth0_user_id": claims.user_id, "username": username},
        )
        return user_crud.create_user(
            self.db,
            username=username,
            email=claims.email,
            active=self.activate_new_users,
        )

    @property
    def activate_new_users(self) -> bool:
        """Auto-register bypasses the site's registration approval policy."""
        if self.settings.AUTH0_AUTO_REGISTER:
            return True
        return self.settings.USER_REGISTER == USER_REGISTER_VISITORS
