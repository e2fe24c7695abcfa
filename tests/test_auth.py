"""Tests for owner resolution in the API auth dependency."""
from __future__ import annotations

import pytest

from event_planner.api import auth
from event_planner.api.auth import AuthError, get_current_user, owner_from_email


@pytest.fixture
def dev_bypass(monkeypatch):
    monkeypatch.setenv("EP_DEV_AUTH_BYPASS", "1")


@pytest.fixture
def token_auth(monkeypatch):
    """Verify tokens against a fixed audience with a stubbed verifier."""
    monkeypatch.delenv("EP_DEV_AUTH_BYPASS", raising=False)
    monkeypatch.delenv("GOOGLE_OAUTH_AUDIENCE", raising=False)
    monkeypatch.setenv("GOOGLE_OAUTH_CLIENT_ID", "planner-client")
    auth._audiences.cache_clear()
    claims = {}

    def fake_verify(token, request, audience):
        if token != "good-token" or audience != "planner-client":
            raise ValueError("wrong token")
        return dict(claims)

    monkeypatch.setattr(auth.id_token, "verify_oauth2_token", fake_verify)
    yield claims
    auth._audiences.cache_clear()


class TestOwnerFromEmail:
    """Tests for owner_from_email()."""

    def test_email_is_trimmed_and_lowercased(self):
        assert owner_from_email("  Traveler@Example.COM ") == "traveler@example.com"

    @pytest.mark.parametrize("email", [None, "", "   "])
    def test_blank_email_is_rejected(self, email):
        with pytest.raises(AuthError) as exc_info:
            owner_from_email(email)

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "User ID not found. Please log in."


class TestDevBypass:
    """Tests for the X-User-Email development header."""

    def test_header_is_normalized(self, dev_bypass):
        owner = get_current_user(authorization=None, dev_user="  Tester@Example.com ")

        assert owner == "tester@example.com"

    @pytest.mark.parametrize("header", [None, "", "   "])
    def test_blank_header_is_rejected(self, dev_bypass, header):
        with pytest.raises(AuthError) as exc_info:
            get_current_user(authorization=None, dev_user=header)

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "User ID not found. Please log in."


class TestBearerToken:
    """Tests for Google ID token verification."""

    def test_email_claim_becomes_owner(self, token_auth):
        token_auth["email"] = "Traveler@Example.com"

        assert get_current_user(authorization="Bearer good-token", dev_user=None) == (
            "traveler@example.com"
        )

    def test_header_ignored_without_bypass(self, token_auth):
        token_auth["email"] = "traveler@example.com"

        owner = get_current_user(authorization="Bearer good-token", dev_user="intruder@example.com")

        assert owner == "traveler@example.com"

    @pytest.mark.parametrize("email", [None, "", "  "])
    def test_blank_email_claim_is_rejected(self, token_auth, email):
        token_auth["email"] = email

        with pytest.raises(AuthError) as exc_info:
            get_current_user(authorization="Bearer good-token", dev_user=None)

        assert exc_info.value.detail == "User ID not found. Please log in."

    def test_invalid_token(self, token_auth):
        with pytest.raises(AuthError) as exc_info:
            get_current_user(authorization="Bearer forged", dev_user=None)

        assert exc_info.value.detail.startswith("Invalid token")

    def test_missing_bearer(self, token_auth):
        with pytest.raises(AuthError) as exc_info:
            get_current_user(authorization=None, dev_user=None)

        assert exc_info.value.detail == "Missing Bearer token."

    def test_missing_audience_config(self, token_auth, monkeypatch):
        monkeypatch.delenv("GOOGLE_OAUTH_CLIENT_ID")
        auth._audiences.cache_clear()

        with pytest.raises(AuthError) as exc_info:
            get_current_user(authorization="Bearer good-token", dev_user=None)

        assert "GOOGLE_OAUTH_CLIENT_ID" in exc_info.value.detail
