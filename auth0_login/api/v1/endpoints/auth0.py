"""
Auth0 login endpoints: widget settings, OAuth callback and resend
verification email.
"""

from typing import Optional
from urllib.parse import urlencode

import jwt
from fastapi import APIRouter, Depends, Query
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from auth0_login.api.deps import (
    get_auth0_client,
    get_db,
    get_event_dispatcher,
    get_settings,
)
from auth0_login.core.config import Settings
from auth0_login.core.exceptions import IdentityProviderFailure, LoginFailure
from auth0_login.core.logging import get_logger
from auth0_login.schemas.user import LoginWidgetSettings
from auth0_login.services.account_resolver import AccountStatus
from auth0_login.services.auth0_client import Auth0Client
from auth0_login.services.events import EventDispatcher
from auth0_login.services.login_service import LoginService
from auth0_login.utils.url import (
    MESSAGE_ERROR,
    MESSAGE_STATUS,
    MESSAGE_WARNING,
    is_local_path,
    redirect_with_message,
)

logger = get_logger(__name__)

router = APIRouter()

SESSION_COOKIE = "auth0_session"

LOGIN_FAILED_MESSAGE = (
    "There was a problem logging you in, sorry for the inconvenience."
)
EMAIL_MISSING_MESSAGE = (
    "This account does not have an email associated. "
    "Please login with a different provider."
)
AWAITING_APPROVAL_MESSAGE = "Your account is awaiting administrator approval."
BLOCKED_MESSAGE = "Your account has not been activated or is blocked."


@router.get("/login", response_model=LoginWidgetSettings)
def login(settings: Settings = Depends(get_settings)) -> LoginWidgetSettings:
    """Settings the front end needs to render the Auth0 Lock widget."""
    return LoginWidgetSettings(
        domain=settings.AUTH0_DOMAIN,
        clientID=settings.AUTH0_CLIENT_ID,
        formTitle=settings.AUTH0_FORM_TITLE,
        showSignup=settings.AUTH0_ALLOW_SIGNUP,
        widgetCdn=settings.AUTH0_WIDGET_CDN,
        loginCSS=settings.AUTH0_LOGIN_CSS,
        lockExtraSettings=settings.lock_extra_settings,
        callbackURL=settings.AUTH0_CALLBACK_URL,
    )


def fail_with_verify_email(settings: Settings, id_token: str) -> RedirectResponse:
    """Redirect home asking the user to verify their email, with a resend link."""
    verify_url = (
        f"{settings.API_V1_STR}/auth0/verify_email?{urlencode({'token': id_token})}"
    )
    return redirect_with_message(
        "/",
        "Please verify your email and log in again. "
        f"Resend the verification email: {verify_url}",
        MESSAGE_WARNING,
    )


@router.get("/callback")
def callback(
    code: Optional[str] = Query(None, description="Authorization code from Auth0"),
    destination: Optional[str] = Query(None, description="Local path to return to"),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    client: Auth0Client = Depends(get_auth0_client),
    dispatcher: EventDispatcher = Depends(get_event_dispatcher),
) -> RedirectResponse:
    """
    Handle the redirect back from Auth0.

    Exchanges the code for the user's claims, signs the user in (creating or
    linking the local account as configured) and redirects to the account
    page or to ``destination``.
    """
    try:
        claims, id_token = client.authenticate(code or "")
    except IdentityProviderFailure as e:
        logger.warning("Failed login", extra={"error": str(e)})
        return redirect_with_message("/", LOGIN_FAILED_MESSAGE, MESSAGE_ERROR)

    logger.info("Good login", extra={"auth0_user_id": claims.user_id})

    outcome = LoginService(db, settings, dispatcher).process_user_login(claims)

    if outcome.failure == LoginFailure.EMAIL_MISSING:
        return redirect_with_message("/", EMAIL_MISSING_MESSAGE, MESSAGE_ERROR)
    if outcome.failure == LoginFailure.EMAIL_NOT_VERIFIED:
        return fail_with_verify_email(settings, id_token)

    user = outcome.user
    if not user.status:
        logger.info("Login of blocked account refused", extra={"user_id": user.id})
        if outcome.status == AccountStatus.CREATED:
            return redirect_with_message("/", AWAITING_APPROVAL_MESSAGE, MESSAGE_STATUS)
        return redirect_with_message("/", BLOCKED_MESSAGE, MESSAGE_ERROR)

    if is_local_path(destination):
        target = destination
    else:
        target = f"{settings.API_V1_STR}/users/{user.id}"

    response = RedirectResponse(url=target, status_code=303)
    response.set_cookie(
        SESSION_COOKIE,
        id_token,
        httponly=True,
        samesite="lax",
        secure=settings.BASE_URL.startswith("https://"),
    )
    return response


@router.get("/verify_email")
def verify_email(
    token: str = Query(..., description="Auth0 id token from the login attempt"),
    client: Auth0Client = Depends(get_auth0_client),
) -> RedirectResponse:
    """Resend the Auth0 verification email for the identity in ``token``."""
    try:
        payload = client.decode_id_token(token)
    except jwt.PyJWTError as e:
        logger.info("Verification token rejected", extra={"error": str(e)})
        return redirect_with_message("/", "Your session has expired.", MESSAGE_ERROR)

    user_id = payload.get("sub")
    if not user_id:
        return redirect_with_message("/", "Your session has expired.", MESSAGE_ERROR)

    try:
        client.send_verification_email(user_id, token)
    except IdentityProviderFailure:
        return redirect_with_message(
            "/", "Sorry, we couldn't send the email.", MESSAGE_ERROR
        )

    return redirect_with_message(
        "/", "An authorization email was sent to your account.", MESSAGE_STATUS
    )
