"""
Auth0 Authentication API client.

This client handles:
- Exchanging the callback authorization code for tokens
- Fetching the user profile (claims) for the access token
- Decoding the id token carried by "resend verification email" links
- Asking Auth0 to resend the verification email
"""

import base64
import binascii
import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

import jwt
import requests
from pydantic import ValidationError

from auth0_login.core.config import Settings
from auth0_login.core.exceptions import IdentityProviderFailure
from auth0_login.core.logging import get_logger
from auth0_login.schemas.claims import Claims

logger = get_logger(__name__)


@dataclass(frozen=True)
class TokenSet:
    access_token: str
    id_token: str


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _response_details(exc: requests.exceptions.RequestException) -> Dict[str, Any]:
    response = getattr(exc, "response", None)
    if response is None:
        return {}
    details: Dict[str, Any] = {
        "status_code": response.status_code,
        "response_text": response.text,
    }
    try:
        details["error_response"] = response.json()
    except ValueError:
        pass
    return details


class Auth0Client:
    """Client for the Auth0 endpoints used during login."""

    def __init__(
        self,
        domain: Optional[str],
        client_id: Optional[str],
        client_secret: Optional[str],
        redirect_uri: str,
        timeout: int = 10,
        secret_base64_encoded: bool = False,
    ):
        if not domain:
            logger.error("AUTH0_DOMAIN is required but not configured")
            raise ValueError("AUTH0_DOMAIN is required but not configured")
        if not client_id or not client_secret:
            logger.error("AUTH0_CLIENT_ID and AUTH0_CLIENT_SECRET are required")
            raise ValueError("AUTH0_CLIENT_ID and AUTH0_CLIENT_SECRET are required")

        self.domain = domain
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.timeout = timeout
        self.secret_base64_encoded = secret_base64_encoded

    @classmethod
    def from_settings(cls, settings: Settings) -> "Auth0Client":
        return cls(
            domain=settings.AUTH0_DOMAIN,
            client_id=settings.AUTH0_CLIENT_ID,
            client_secret=settings.AUTH0_CLIENT_SECRET,
            redirect_uri=settings.AUTH0_CALLBACK_URL,
            timeout=settings.HTTP_TIMEOUT,
            secret_base64_encoded=settings.AUTH0_CLIENT_SECRET_BASE64_ENCODED,
        )

    @property
    def base_url(self) -> str:
        return f"https://{self.domain}"

    def exchange_code(self, code: str) -> TokenSet:
        """
        Exchange an authorization code for tokens.

        Raises:
            IdentityProviderFailure: Request failed or tokens are missing
        """
        if not code:
            raise IdentityProviderFailure("Missing authorization code")

        token_url = f"{self.base_url}/oauth/token"
        payload = {
            "grant_type": "authorization_code",
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "code": code,
            "redirect_uri": self.redirect_uri,
        }
        logger.info(json.dumps({"event": "auth0_code_exchange_started"}))

        try:
            response = requests.post(token_url, json=payload, timeout=self.timeout)
            response.raise_for_status()
            token_data = response.json()
        except requests.exceptions.RequestException as e:
            details = _response_details(e)
            logger.error(
                json.dumps(
                    {
                        "event": "auth0_code_exchange_failed",
                        "error_type": "RequestException",
                        "error_message": str(e),
                        "token_url": token_url,
                        "timestamp": _timestamp(),
                        **details,
                    }
                )
            )
            raise IdentityProviderFailure("Auth0 code exchange failed", details) from e
        except ValueError as e:
            logger.error(
                json.dumps(
                    {
                        "event": "auth0_code_exchange_failed",
                        "error_type": "InvalidJSON",
                        "error_message": str(e),
                    }
                )
            )
            raise IdentityProviderFailure("Auth0 returned an invalid token response") from e

        access_token = token_data.get("access_token")
        id_token = token_data.get("id_token")
        if not access_token or not id_token:
            logger.error(
                json.dumps(
                    {
                        "event": "auth0_code_exchange_failed",
                        "error_type": "MissingTokens",
                        "access_token_present": bool(access_token),
                        "id_token_present": bool(id_token),
                    }
                )
            )
            raise IdentityProviderFailure("Auth0 token response is missing tokens")

        logger.info(json.dumps({"event": "auth0_code_exchange_succeeded"}))
        return TokenSet(access_token=access_token, id_token=id_token)

    def get_user_info(self, access_token: str) -> Claims:
        """
        Fetch the user's claims from /userinfo.

        Raises:
            IdentityProviderFailure: Request failed or the profile is unusable
        """
        url = f"{self.base_url}/userinfo"
        try:
            response = requests.get(
                url,
                headers={"Authorization": f"Bearer {access_token}"},
                timeout=self.timeout,
            )
            response.raise_for_status()
            profile = response.json()
        except requests.exceptions.RequestException as e:
            details = _response_details(e)
            logger.error(
                json.dumps(
                    {
                        "event": "auth0_userinfo_failed",
                        "error_type": "RequestException",
                        "error_message": str(e),
                        "timestamp": _timestamp(),
                        **details,
                    }
                )
            )
            raise IdentityProviderFailure("Auth0 userinfo request failed", details) from e
        except ValueError as e:
            raise IdentityProviderFailure("Auth0 returned an invalid profile") from e

        try:
            claims = Claims.model_validate(profile)
        except ValidationError as e:
            logger.error(
                json.dumps(
                    {
                        "event": "auth0_userinfo_invalid",
                        "error_message": str(e),
                    }
                )
            )
            raise IdentityProviderFailure("Auth0 profile is missing a user id") from e

        logger.info(
            json.dumps(
                {
                    "event": "auth0_userinfo_retrieved",
                    "auth0_user_id": claims.user_id,
                    "email_verified": claims.email_verified,
                }
            )
        )
        return claims

    def authenticate(self, code: str) -> Tuple[Claims, str]:
        """Run the callback exchange, returning the claims and the id token."""
        tokens = self.exchange_code(code)
        return self.get_user_info(tokens.access_token), tokens.id_token

    def _signing_key(self) -> bytes:
        if self.secret_base64_encoded:
            try:
                return base64.urlsafe_b64decode(
                    self.client_secret + "=" * (-len(self.client_secret) % 4)
                )
            except binascii.Error as e:
                logger.error("AUTH0_CLIENT_SECRET is not valid base64url")
                raise jwt.InvalidKeyError("Client secret is not valid base64url") from e
        return self.client_secret.encode()

    def decode_id_token(self, token: str) -> Dict[str, Any]:
        """
        Verify an HS256 id token signed with the client secret.

        Raises:
            jwt.InvalidTokenError: Signature, audience or expiry check failed
            jwt.InvalidKeyError: The base64 client secret cannot be decoded
        """
        return jwt.decode(
            token,
            self._signing_key(),
            algorithms=["HS256"],
            audience=self.client_id,
        )

    def send_verification_email(self, user_id: str, token: str) -> None:
        """
        Ask Auth0 to resend the verification email for ``user_id``.

        Raises:
            IdentityProviderFailure: Auth0 did not accept the request
        """
        url = f"{self.base_url}/api/users/{user_id}/send_verification_email"
        try:
            response = requests.post(
                url,
                headers={"Authorization": f"Bearer {token}"},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            details = _response_details(e)
            logger.warning(
                json.dumps(
                    {
                        "event": "auth0_verification_email_failed",
                        "user_id": user_id,
                        "error_message": str(e),
                        "timestamp": _timestamp(),
                        **details,
                    }
                )
            )
            raise IdentityProviderFailure(
                "Auth0 verification email request failed", details
            ) from e

        logger.info(
            json.dumps(
                {
                    "event": "auth0_verification_email_sent",
                    "user_id": user_id,
                    "timestamp": _timestamp(),
                }
            )
        )


def get_auth0_client() -> Auth0Client:
    """
    FastAPI dependency building a client from the current settings.

    Raises:
        IdentityProviderFailure: Auth0 credentials are not configured
    """
    from auth0_login.core.config import settings

    try:
        return Auth0Client.from_settings(settings)
    except ValueError as e:
        raise IdentityProviderFailure(str(e)) from e
