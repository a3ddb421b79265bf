"""
Tests for Jive community utility functions.
"""

import hashlib

import pytest

from ..utils import (
    build_validation_block,
    format_block_value,
    join_url,
    mask_token,
    parse_jive_community,
    sha256_hex,
)
from ..exceptions import JiveValidationError


class TestParseJiveCommunity:
    """Tests for parse_jive_community."""

    def test_www_prefix_stripped(self):
        """Test leading www. is removed and the path ignored."""
        assert parse_jive_community("https://www.example.com/x") == "example.com"

    def test_subdomain_kept(self):
        """Test hosts without www. are returned as is."""
        assert parse_jive_community("https://foo.example.com") == "foo.example.com"

    def test_port_kept(self):
        """Test the port stays part of the community name."""
        assert parse_jive_community("http://www.localhost:8080/jive") == "localhost:8080"

    def test_empty_raises(self):
        """Test missing URL raises."""
        with pytest.raises(JiveValidationError) as exc_info:
            parse_jive_community(None)
        assert "jiveUrl" in str(exc_info.value)

    def test_no_host_raises(self):
        """Test a URL without host raises."""
        with pytest.raises(JiveValidationError):
            parse_jive_community("not-a-url")


class TestJoinUrl:
    """Tests for join_url."""

    @pytest.mark.parametrize("base,path", [
        ("https://jive.example.com", "/api/core/v3"),
        ("https://jive.example.com/", "/api/core/v3"),
        ("https://jive.example.com", "api/core/v3"),
        ("https://jive.example.com/", "api/core/v3"),
    ])
    def test_exactly_one_slash(self, base, path):
        """Test exactly one slash between base and path."""
        assert join_url(base, path) == "https://jive.example.com/api/core/v3"

    def test_base_with_context_path(self):
        """Test base URLs with a context path keep it."""
        assert join_url("https://example.com/jive/", "/api") == "https://example.com/jive/api"


class TestValidationBlock:
    """Tests for build_validation_block."""

    def test_sorted_lines_without_signature(self):
        """Test keys are sorted, signature dropped, every line newline-terminated."""
        block = build_validation_block({
            "tenantId": "t1",
            "jiveUrl": "https://jive.example.com",
            "jiveSignature": "sig",
            "jiveSignatureURL": "https://market.example.com/validate",
            "timestamp": "2013-06-04T19:55:03.234+0000",
        })
        assert block == (
            "jiveSignatureURL:https://market.example.com/validate\n"
            "jiveUrl:https://jive.example.com\n"
            "tenantId:t1\n"
            "timestamp:2013-06-04T19:55:03.234+0000\n"
        )

    def test_client_secret_hashed(self):
        """Test client secret is replaced by its SHA-256 hex digest."""
        block = build_validation_block({"clientSecret": "s3cret", "tenantId": "t1"})
        digest = hashlib.sha256(b"s3cret").hexdigest()
        assert block == f"clientSecret:{digest}\ntenantId:t1\n"
        assert "s3cret\n" not in block

    def test_input_not_modified(self):
        """Test the caller's packet is left untouched."""
        packet = {"clientSecret": "s3cret", "jiveSignature": "sig"}
        build_validation_block(packet)
        assert packet == {"clientSecret": "s3cret", "jiveSignature": "sig"}

    def test_value_formatting(self):
        """Test booleans and None render like the Jive side expects."""
        assert format_block_value(True) == "true"
        assert format_block_value(False) == "false"
        assert format_block_value(None) == "null"
        assert format_block_value(42) == "42"

    def test_composite_and_float_formatting(self):
        """Test lists, objects and floats render as Jive's string conversion does."""
        assert format_block_value(["a", "b"]) == "a,b"
        assert format_block_value([1, None, True]) == "1,,true"
        assert format_block_value(["a", ["b", "c"]]) == "a,b,c"
        assert format_block_value([]) == ""
        assert format_block_value({"k": 1}) == "[object Object]"
        assert format_block_value(1.0) == "1"
        assert format_block_value(1.5) == "1.5"
        block = build_validation_block({"scopes": ["read", "write"], "ttl": 60.0, "extra": {"k": 1}})
        assert block == "extra:[object Object]\nscopes:read,write\nttl:60\n"

    def test_uppercase_sorts_first(self):
        """Test sorting is by code point."""
        block = build_validation_block({"b": 1, "B": 2, "a": 3})
        assert block.splitlines() == ["B:2", "a:3", "b:1"]


class TestSmallHelpers:
    """Tests for hashing and masking helpers."""

    def test_sha256_hex(self):
        assert sha256_hex("") == "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"

    def test_mask_token(self):
        assert mask_token("abcdefgh") == "...efgh"
        assert mask_token(None) == "None"
