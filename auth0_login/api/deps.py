"""
API dependencies for configuration, database access and Auth0.
"""

from auth0_login.core import config
from auth0_login.core.config import Settings
from auth0_login.db.database import get_db
from auth0_login.services.auth0_client import get_auth0_client
from auth0_login.services.events import get_event_dispatcher

__all__ = ["get_settings", "get_db", "get_auth0_client", "get_event_dispatcher"]


def get_settings() -> Settings:
    """Current application settings."""
    return config.settings
