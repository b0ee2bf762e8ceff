"""
Unit tests for the Auth0 Authentication API client.
"""

import base64
import time
from unittest.mock import Mock, patch

import jwt
import pytest
import requests

from auth0_login.core.exceptions import IdentityProviderFailure
from auth0_login.services.auth0_client import Auth0Client, get_auth0_client

SECRET = "test-client-secret-that-is-long-enough-for-hs256"


def make_client(**overrides):
    kwargs = {
        "domain": "test-tenant.eu.auth0.com",
        "client_id": "test-client-id",
        "client_secret": SECRET,
        "redirect_uri": "http://localhost:8000/v1/auth0/callback",
    }
    kwargs.update(overrides)
    return Auth0Client(**kwargs)


def json_response(data, status_code=200):
    response = Mock()
    response.status_code = status_code
    response.json.return_value = data
    response.raise_for_status.return_value = None
    return response


class TestAuth0Client:
    """Test cases for Auth0Client."""

    def test_init_requires_domain(self):
        with pytest.raises(ValueError, match="AUTH0_DOMAIN is required"):
            make_client(domain=None)

    def test_init_requires_credentials(self):
        with pytest.raises(ValueError, match="AUTH0_CLIENT_ID"):
            make_client(client_secret="")

    def test_from_settings(self, login_settings):
        client = Auth0Client.from_settings(login_settings)

        assert client.domain == "test-tenant.eu.auth0.com"
        assert client.redirect_uri.endswith("/v1/auth0/callback")

    @patch("requests.post")
    def test_exchange_code_success(self, mock_post):
        mock_post.return_value = json_response(
            {"access_token": "access-123", "id_token": "id-456"}
        )

        tokens = make_client().exchange_code("code-abc")

        assert tokens.access_token == "access-123"
        assert tokens.id_token == "id-456"
        url = mock_post.call_args[0][0]
        payload = mock_post.call_args[1]["json"]
        assert url == "https://test-tenant.eu.auth0.com/oauth/token"
        assert payload["grant_type"] == "authorization_code"
        assert payload["code"] == "code-abc"
        assert payload["redirect_uri"] == "http://localhost:8000/v1/auth0/callback"

    def test_exchange_code_requires_code(self):
        with pytest.raises(IdentityProviderFailure, match="Missing authorization code"):
            make_client().exchange_code("")

    @patch("requests.post")
    def test_exchange_code_http_error(self, mock_post):
        error_response = Mock()
        error_response.status_code = 403
        error_response.text = "invalid_grant"
        error_response.json.return_value = {"error": "invalid_grant"}
        mock_post.return_value.raise_for_status.side_effect = requests.HTTPError(
            "403", response=error_response
        )

        with pytest.raises(IdentityProviderFailure) as exc_info:
            make_client().exchange_code("code-abc")

        assert exc_info.value.details["status_code"] == 403
        assert exc_info.value.details["error_response"] == {"error": "invalid_grant"}

    @patch("requests.post")
    def test_exchange_code_missing_tokens(self, mock_post):
        mock_post.return_value = json_response({"access_token": "access-123"})

        with pytest.raises(IdentityProviderFailure, match="missing tokens"):
            make_client().exchange_code("code-abc")

    @patch("requests.get")
    def test_get_user_info(self, mock_get):
        mock_get.return_value = json_response(
            {
                "sub": "google-oauth2|123",
                "email": "a@example.com",
                "email_verified": True,
                "nickname": "a",
                "https://example.com/roles": ["admin"],
            }
        )

        claims = make_client().get_user_info("access-123")

        assert claims.user_id == "google-oauth2|123"
        assert claims.get("https://example.com/roles") == ["admin"]
        assert mock_get.call_args[1]["headers"] == {"Authorization": "Bearer access-123"}

    @patch("requests.get")
    def test_get_user_info_without_subject(self, mock_get):
        mock_get.return_value = json_response({"email": "a@example.com"})

        with pytest.raises(IdentityProviderFailure, match="missing a user id"):
            make_client().get_user_info("access-123")

    @patch("requests.get")
    def test_get_user_info_network_error(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("boom")

        with pytest.raises(IdentityProviderFailure):
            make_client().get_user_info("access-123")

    @patch("requests.get")
    @patch("requests.post")
    def test_authenticate(self, mock_post, mock_get):
        mock_post.return_value = json_response(
            {"access_token": "access-123", "id_token": "id-456"}
        )
        mock_get.return_value = json_response({"user_id": "auth0|1", "email": "x@y.z"})

        claims, id_token = make_client().authenticate("code-abc")

        assert claims.user_id == "auth0|1"
        assert id_token == "id-456"

    def test_decode_id_token(self):
        token = jwt.encode(
            {"sub": "auth0|1", "aud": "test-client-id", "exp": int(time.time()) + 60},
            SECRET,
            algorithm="HS256",
        )

        assert make_client().decode_id_token(token)["sub"] == "auth0|1"

    def test_decode_id_token_base64_secret(self):
        raw_secret = b"legacy-secret-bytes-long-enough-for-hs256!"
        encoded = base64.urlsafe_b64encode(raw_secret).decode().rstrip("=")
        token = jwt.encode(
            {"sub": "auth0|1", "aud": "test-client-id"}, raw_secret, algorithm="HS256"
        )

        client = make_client(client_secret=encoded, secret_base64_encoded=True)

        assert client.decode_id_token(token)["sub"] == "auth0|1"

    def test_decode_id_token_invalid_base64_secret(self):
        client = make_client(client_secret="a", secret_base64_encoded=True)

        with pytest.raises(jwt.InvalidKeyError):
            client.decode_id_token("header.payload.signature")

    def test_decode_id_token_expired(self):
        token = jwt.encode(
            {"sub": "auth0|1", "aud": "test-client-id", "exp": int(time.time()) - 60},
            SECRET,
            algorithm="HS256",
        )

        with pytest.raises(jwt.ExpiredSignatureError):
            make_client().decode_id_token(token)

    @patch("requests.post")
    def test_send_verification_email(self, mock_post):
        mock_post.return_value = json_response({})

        make_client().send_verification_email("auth0|1", "id-token")

        assert (
            mock_post.call_args[0][0]
            == "https://test-tenant.eu.auth0.com/api/users/auth0|1/send_verification_email"
        )
        assert mock_post.call_args[1]["headers"] == {"Authorization": "Bearer id-token"}

    @patch("requests.post")
    def test_send_verification_email_failure(self, mock_post):
        mock_post.side_effect = requests.Timeout("slow")

        with pytest.raises(IdentityProviderFailure):
            make_client().send_verification_email("auth0|1", "id-token")

    @patch("auth0_login.core.config.settings")
    def test_get_auth0_client_unconfigured(self, mock_settings):
        mock_settings.AUTH0_DOMAIN = None

        with pytest.raises(IdentityProviderFailure):
            get_auth0_client()
