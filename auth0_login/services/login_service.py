"""
Process a verified Auth0 profile into a local login.

Steps: email policy, account resolution, field/role mapping, Auth0 link
persistence, signin/signup event. Everything is committed in one
transaction; any exception leaves the database untouched.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from auth0_login.core.config import Settings
from auth0_login.core.exceptions import LoginFailure
from auth0_login.core.logging import get_logger
from auth0_login.crud import auth0_user as auth0_user_crud
from auth0_login.models.user import User
from auth0_login.schemas.claims import Claims
from auth0_login.services.account_changes import (
    AccountChanges,
    apply_account_changes,
    compute_account_changes,
)
from auth0_login.services.account_resolver import (
    AccountResolver,
    AccountStatus,
    ResolvedAccount,
)
from auth0_login.services.email_policy import validate_user_email
from auth0_login.services.events import (
    Auth0UserSigninEvent,
    Auth0UserSignupEvent,
    EventDispatcher,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class LoginOutcome:
    user: Optional[User] = None
    status: Optional[AccountStatus] = None
    changes: Optional[AccountChanges] = None
    failure: Optional[LoginFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


class LoginService:
    """Signs in or signs up the local user for a set of Auth0 claims."""

    def __init__(self, db: Session, settings: Settings, dispatcher: EventDispatcher):
        self.db = db
        self.settings = settings
        self.dispatcher = dispatcher
        self.resolver = AccountResolver(db, settings)

    def process_user_login(self, claims: Claims) -> LoginOutcome:
        logger.info("Processing user login", extra={"auth0_user_id": claims.user_id})

        failure = validate_user_email(
            claims, self.settings.AUTH0_REQUIRES_VERIFIED_EMAIL
        )
        if failure is not None:
            logger.info(
                "Login refused by email policy",
                extra={"auth0_user_id": claims.user_id, "failure": failure.value},
            )
            return LoginOutcome(failure=failure)

        try:
            resolved = self.resolver.resolve(claims)
            if not resolved.ok:
                self.db.rollback()
                return LoginOutcome(failure=resolved.failure)
            changes = self._reconcile(claims, resolved)
            self.db.commit()
        except IntegrityError:
            # A concurrent login linked this identity first; the unique
            # auth0_id rejected ours. Continue as that account's signin.
            self.db.rollback()
            user = auth0_user_crud.get_user_by_auth0_id(self.db, claims.user_id)
            if user is None:
                raise
            logger.warning(
                "Auth0 identity linked concurrently, using existing link",
                extra={"auth0_user_id": claims.user_id, "user_id": user.id},
            )
            resolved = ResolvedAccount(user=user, status=AccountStatus.EXISTING)
            changes = self._reconcile(claims, resolved)
            self.db.commit()

        user = resolved.user
        self.db.refresh(user)
        self._dispatch(claims, resolved)
        return LoginOutcome(user=user, status=resolved.status, changes=changes)

    def _reconcile(self, claims: Claims, resolved: ResolvedAccount) -> AccountChanges:
        user = resolved.user
        if resolved.needs_link:
            auth0_user_crud.insert_auth0_user(self.db, claims, int(user.id))
        elif resolved.status == AccountStatus.EXISTING:
            auth0_user_crud.update_auth0_user(self.db, claims)

        changes = compute_account_changes(claims, user, self.settings)
        apply_account_changes(user, changes)
        user.login = datetime.now()
        return changes

    def _dispatch(self, claims: Claims, resolved: ResolvedAccount) -> None:
        if resolved.is_new_link:
            self.dispatcher.dispatch(
                Auth0UserSignupEvent.NAME, Auth0UserSignupEvent(resolved.user, claims)
            )
        else:
            self.dispatcher.dispatch(
                Auth0UserSigninEvent.NAME, Auth0UserSigninEvent(resolved.user, claims)
            )
