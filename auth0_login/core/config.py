"""
Core configuration settings for the Auth0 login service.
"""

import json
import logging
from typing import Any, Dict, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# Site registration policies (who may create accounts)
USER_REGISTER_ADMIN_ONLY = "admin_only"
USER_REGISTER_VISITORS = "visitors"
USER_REGISTER_VISITORS_ADMIN_APPROVAL = "visitors_admin_approval"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    API_V1_STR: str = "/v1"
    PROJECT_NAME: str = "Auth0 Login"
    ENVIRONMENT: str = "development"  # staging, production, development
    DEBUG: bool = False

    # Public base URL of this site (used to build the Auth0 callback URL)
    BASE_URL: str = "http://localhost:8000"

    # Database - constructed from individual components
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432  # PostgreSQL default port
    DB_USER: str = "user"
    DB_PASSWORD: str = "pass"
    DB_NAME: str = "db"
    DATABASE_URL_OVERRIDE: Optional[str] = None  # e.g. sqlite:///./auth0.db

    # Database Pool Configuration
    DATABASE_POOL_SIZE: int = 5
    DATABASE_POOL_RECYCLE: int = 300

    @property
    def DATABASE_URL(self) -> str:
        """Construct DATABASE_URL from individual database components."""
        if self.DATABASE_URL_OVERRIDE:
            return self.DATABASE_URL_OVERRIDE
        return f"postgresql+psycopg2://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    # Auth0 application credentials
    AUTH0_DOMAIN: Optional[str] = None  # e.g., example.eu.auth0.com
    AUTH0_CLIENT_ID: Optional[str] = None
    AUTH0_CLIENT_SECRET: Optional[str] = None
    # Legacy Auth0 clients issued base64url-encoded secrets
    AUTH0_CLIENT_SECRET_BASE64_ENCODED: bool = False

    # Login policy
    AUTH0_REQUIRES_VERIFIED_EMAIL: bool = True
    AUTH0_JOIN_USER_BY_MAIL_ENABLED: bool = False
    AUTH0_USERNAME_CLAIM: str = "nickname"
    AUTH0_AUTO_REGISTER: bool = False
    USER_REGISTER: str = USER_REGISTER_VISITORS_ADMIN_APPROVAL

    # Claim mappings, one "<claim>|<field>" or "<claim value>|<role>" per line
    AUTH0_CLAIM_MAPPING: str = ""
    AUTH0_CLAIM_TO_USE_FOR_ROLE: Optional[str] = None
    AUTH0_ROLE_MAPPING: str = ""

    # Login widget (passed through to the front end untouched)
    AUTH0_FORM_TITLE: str = "Sign In"
    AUTH0_ALLOW_SIGNUP: bool = True
    AUTH0_WIDGET_CDN: str = "https://cdn.auth0.com/js/lock/11.35/lock.min.js"
    AUTH0_LOGIN_CSS: str = ""
    AUTH0_LOCK_EXTRA_SETTINGS: str = ""

    # Outgoing HTTP
    HTTP_TIMEOUT: int = 10

    # Logging Configuration
    LOG_LEVEL: str = "INFO"

    @property
    def AUTH0_CALLBACK_URL(self) -> str:
        """Absolute URL Auth0 redirects back to after login."""
        return f"{self.BASE_URL.rstrip('/')}{self.API_V1_STR}/auth0/callback"

    @property
    def lock_extra_settings(self) -> Dict[str, Any]:
        """Decode AUTH0_LOCK_EXTRA_SETTINGS, treating blank as an empty object."""
        raw = self.AUTH0_LOCK_EXTRA_SETTINGS.strip()
        if not raw:
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning("Failed to decode AUTH0_LOCK_EXTRA_SETTINGS JSON: %s", exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("AUTH0_LOCK_EXTRA_SETTINGS must be a JSON object")
            return {}
        return data

    @field_validator("USER_REGISTER")
    @classmethod
    def check_user_register(cls, v: str) -> str:
        """Only the three site registration policies are accepted."""
        allowed = {
            USER_REGISTER_ADMIN_ONLY,
            USER_REGISTER_VISITORS,
            USER_REGISTER_VISITORS_ADMIN_APPROVAL,
        }
        if v not in allowed:
            raise ValueError(f"USER_REGISTER must be one of {sorted(allowed)}")
        return v

    @field_validator("AUTH0_CLAIM_TO_USE_FOR_ROLE", mode="before")
    @classmethod
    def blank_role_claim_is_none(cls, v: Optional[str]) -> Optional[str]:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    model_config = SettingsConfigDict(case_sensitive=True, env_file=".env")


settings = Settings()
