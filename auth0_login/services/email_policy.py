"""
Verified-email policy check applied before any account lookup.
"""

from typing import Optional

from auth0_login.core.exceptions import LoginFailure
from auth0_login.schemas.claims import Claims


def validate_user_email(
    claims: Claims, requires_verified_email: bool
) -> Optional[LoginFailure]:
    """
    Check the claims against the "require verified email" policy.

    Returns:
        None when the login may proceed, otherwise the reason it may not
    """
    if not requires_verified_email:
        return None
    if not claims.email:
        return LoginFailure.EMAIL_MISSING
    if not claims.email_verified:
        return LoginFailure.EMAIL_NOT_VERIFIED
    return None
