"""
Error types raised or returned during an Auth0 login.

Expected validation outcomes (missing or unverified email) are values of
``LoginFailure`` carried in result objects; exceptions are reserved for
provider failures and broken configuration.
"""

from enum import Enum
from typing import Any, Dict, Optional


class LoginFailure(str, Enum):
    """Recoverable reasons a login is refused."""

    EMAIL_MISSING = "email_missing"
    EMAIL_NOT_VERIFIED = "email_not_verified"


class Auth0LoginError(Exception):
    """Base class for errors that abort a login request."""


class IdentityProviderFailure(Auth0LoginError):
    """Raised when talking to Auth0 fails (network, credentials, bad response)."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}


class InvalidFieldMapping(Auth0LoginError):
    """Raised when a claim mapping targets a field the account does not have."""

    def __init__(self, field_name: str):
        super().__init__(f"User account has no field '{field_name}'")
        self.field_name = field_name
