"""
Tests for Jive community Pydantic models.
"""

import pytest
from pydantic import ValidationError

from ..models import (
    Community,
    JiveResponse,
    OAuthTokens,
)


class TestOAuthTokens:
    """Tests for OAuthTokens model."""

    def test_from_token_endpoint(self):
        """Test parsing a token endpoint answer keeps extra fields."""
        tokens = OAuthTokens.model_validate({
            "access_token": "at",
            "refresh_token": "rt",
            "expires_in": "172799",
            "token_type": "bearer",
        })
        assert tokens.expires_in == 172799
        assert tokens.to_record()["token_type"] == "bearer"

    def test_bad_expires_in(self):
        """Test non-numeric expires_in is rejected."""
        with pytest.raises(ValidationError):
            OAuthTokens(expires_in="soon")

    def test_jive_signature_alias(self):
        """Test jiveSignature is stored camelCase."""
        tokens = OAuthTokens(jive_signature="sig")
        assert tokens.to_record() == {"jiveSignature": "sig"}
        assert OAuthTokens.model_validate({"jiveSignature": "sig"}).jive_signature == "sig"

    def test_merge_new_values_win(self):
        """Test merge overlays non-empty new values and keeps the rest."""
        old = OAuthTokens(access_token="old", refresh_token="rt-old", code="c1", jive_signature="s1")
        merged = old.merged_with(OAuthTokens(access_token="new", refresh_token=""))
        assert merged.access_token == "new"
        assert merged.refresh_token == "rt-old"
        assert merged.code == "c1"
        assert merged.jive_signature == "s1"


class TestCommunity:
    """Tests for Community model."""

    def test_record_roundtrip_camel_case(self):
        """Test records use the camelCase field names."""
        community = Community(
            tenant_id="t1",
            jive_url="https://jive.example.com",
            client_id="cid",
            oauth=OAuthTokens(access_token="at"),
        )
        record = community.to_record()
        assert record == {
            "tenantId": "t1",
            "jiveUrl": "https://jive.example.com",
            "clientId": "cid",
            "oauth": {"access_token": "at"},
        }
        assert Community.model_validate(record) == community

    def test_unauthenticated_community_is_valid(self):
        """Test a community without oauth block."""
        community = Community.model_validate({"tenantId": "t1", "jiveUrl": "https://x.example.com"})
        assert community.oauth is None

    def test_unknown_fields_preserved(self):
        """Test extra fields on stored records survive a load/save cycle."""
        community = Community.model_validate({"tenantId": "t1", "displayName": "Acme"})
        assert community.to_record()["displayName"] == "Acme"

    def test_principal(self):
        """Test principal prefers tenant id."""
        assert Community(tenant_id="t1", jive_community="c").principal == "t1"
        assert Community(jive_community="c").principal == "c"
        assert Community().principal == ""


class TestJiveResponse:
    """Tests for JiveResponse model."""

    def test_ok(self):
        assert JiveResponse(status_code=204).ok
        assert not JiveResponse(status_code=302).ok
