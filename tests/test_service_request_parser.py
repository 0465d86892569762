"""Tests for lookup request parsing."""

import pytest

from resolve_node.constants import OutputFormat
from resolve_node.errors import UnrecognizedFormatError
from resolve_node.service.request_parser import output_format, parse_lookup, tag_from_request


class TestTagFromRequest:
    """Tag source precedence."""

    def test_path_segment(self):
        assert tag_from_request("/lts/Carbon", {}) == "lts/Carbon"

    def test_path_is_url_decoded(self):
        assert tag_from_request("/%3E%3D12%20%3C14", {}) == ">=12 <14"

    def test_query_wins(self):
        assert tag_from_request("/lts", {"tag": "8.x"}) == "8.x"

    def test_empty_query_tag_falls_back_to_path(self):
        assert tag_from_request("/10", {"tag": ""}) == "10"

    def test_default_wildcard(self):
        assert tag_from_request("/", {}) == "*"


class TestOutputFormat:
    """Body format negotiation."""

    def test_explicit(self):
        assert output_format("json", None) == OutputFormat.JSON
        assert output_format("TEXT", "application/json") == OutputFormat.TEXT

    def test_accept_header(self):
        assert output_format(None, "application/json, text/plain") == OutputFormat.JSON
        assert output_format(None, "*/*") == OutputFormat.TEXT
        assert output_format(None, None) == OutputFormat.TEXT

    def test_unknown(self):
        with pytest.raises(UnrecognizedFormatError) as excinfo:
            output_format("yaml", None)
        assert excinfo.value.format == "yaml"
        assert excinfo.value.http_status == 500


class TestParseLookup:
    """Full request parsing."""

    def test_parse(self):
        query = {"security": "yes", "platform": "darwin", "arch": "x86_64"}
        parsed = parse_lookup("/lts/Erbium", query, "application/json")

        assert parsed.format == OutputFormat.JSON
        assert parsed.request.tag == "lts/Erbium"
        assert parsed.request.security is True
        assert parsed.request.platform == "osx"
        assert parsed.request.arch == "x64"
        assert parsed.request.download_platform == "darwin"
        assert parsed.query == {"security": True, "platform": "darwin", "arch": "x86_64"}

    def test_security_echo_unparseable(self):
        parsed = parse_lookup("/", {"security": "perhaps"})
        assert parsed.request.security is False
        assert parsed.query == {}

    def test_unknown_format_raises_on_access(self):
        """The format is checked when read, not while parsing."""
        parsed = parse_lookup("/8.x", {"format": "xml"})
        assert parsed.query == {"format": "xml"}
        with pytest.raises(UnrecognizedFormatError):
            parsed.format

    def test_no_security_key_in_echo(self):
        parsed = parse_lookup("/8.x", {})
        assert parsed.query == {}
        assert parsed.format == OutputFormat.TEXT
