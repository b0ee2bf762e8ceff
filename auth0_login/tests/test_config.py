"""
Tests for the config module.
"""

import pytest
from pydantic import ValidationError

from auth0_login.core.config import Settings


class TestConfig:
    """Test config module."""

    def test_default_values(self):
        """Check field defaults directly, bypassing environment variables."""
        model_fields = Settings.model_fields

        assert model_fields["API_V1_STR"].default == "/v1"
        assert model_fields["DEBUG"].default is False
        assert model_fields["DB_PORT"].default == 5432
        assert model_fields["AUTH0_DOMAIN"].default is None
        assert model_fields["AUTH0_REQUIRES_VERIFIED_EMAIL"].default is True
        assert model_fields["AUTH0_JOIN_USER_BY_MAIL_ENABLED"].default is False
        assert model_fields["AUTH0_USERNAME_CLAIM"].default == "nickname"
        assert model_fields["AUTH0_AUTO_REGISTER"].default is False
        assert model_fields["AUTH0_FORM_TITLE"].default == "Sign In"
        assert model_fields["LOG_LEVEL"].default == "INFO"

    def test_database_url_from_components(self):
        settings = Settings(
            DB_USER="u", DB_PASSWORD="p", DB_HOST="h", DB_PORT=1, DB_NAME="n"
        )

        assert settings.DATABASE_URL == "postgresql+psycopg2://u:p@h:1/n"

    def test_database_url_override(self):
        settings = Settings(DATABASE_URL_OVERRIDE="sqlite:///./auth0.db")

        assert settings.DATABASE_URL == "sqlite:///./auth0.db"

    def test_callback_url(self):
        settings = Settings(BASE_URL="https://example.com/")

        assert settings.AUTH0_CALLBACK_URL == "https://example.com/v1/auth0/callback"

    def test_lock_extra_settings_invalid_json(self):
        settings = Settings(AUTH0_LOCK_EXTRA_SETTINGS="{not json")

        assert settings.lock_extra_settings == {}

    def test_lock_extra_settings_not_an_object(self):
        settings = Settings(AUTH0_LOCK_EXTRA_SETTINGS="[1, 2]")

        assert settings.lock_extra_settings == {}

    def test_blank_role_claim_is_none(self):
        settings = Settings(AUTH0_CLAIM_TO_USE_FOR_ROLE="  ")

        assert settings.AUTH0_CLAIM_TO_USE_FOR_ROLE is None

    def test_user_register_rejects_unknown_policy(self):
        with pytest.raises(ValidationError):
            Settings(USER_REGISTER="everyone")

    def test_environment_variables(self, monkeypatch):
        monkeypatch.setenv("AUTH0_JOIN_USER_BY_MAIL_ENABLED", "true")
        monkeypatch.setenv("AUTH0_ROLE_MAPPING", "admin|administrator")

        settings = Settings()

        assert settings.AUTH0_JOIN_USER_BY_MAIL_ENABLED is True
        assert settings.AUTH0_ROLE_MAPPING == "admin|administrator"
