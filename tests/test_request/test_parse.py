"""Tests for reverse-parsing URLs into requests."""

from __future__ import annotations

import pytest

from apicaller.models import DEFAULT_BASE_URL, Endpoint
from apicaller.request import QueryItem, build, parse


class TestPathStyle:
    def test_endpoint_and_segments(self) -> None:
        request = parse(f"{DEFAULT_BASE_URL}/two/users/42")
        assert request is not None
        assert request.endpoint is Endpoint.TWO
        assert request.path_components == ("users", "42")
        assert request.query_parameters == ()

    def test_bare_endpoint(self) -> None:
        request = parse(f"{DEFAULT_BASE_URL}/three")
        assert request is not None
        assert request.endpoint is Endpoint.THREE
        assert request.path_components == ()

    def test_round_trip(self) -> None:
        original = build(Endpoint.ONE, ["a", "b", "c"])
        parsed = parse(original.url)
        assert parsed is not None
        assert parsed.endpoint is original.endpoint
        assert parsed.path_components == original.path_components
        assert parsed.url == original.url

    def test_trailing_slash_is_rejected(self) -> None:
        assert parse(f"{DEFAULT_BASE_URL}/one/") is None

    def test_empty_middle_segment_is_rejected(self) -> None:
        assert parse(f"{DEFAULT_BASE_URL}/one//x") is None


class TestQueryStyle:
    def test_query_items(self) -> None:
        request = parse(f"{DEFAULT_BASE_URL}/one?page=2&limit=10")
        assert request is not None
        assert request.endpoint is Endpoint.ONE
        assert request.query_parameters == (
            QueryItem(name="page", value="2"),
            QueryItem(name="limit", value="10"),
        )

    def test_items_without_equals_dropped(self) -> None:
        request = parse(f"{DEFAULT_BASE_URL}/one?flag&page=2")
        assert request is not None
        assert request.query_parameters == (QueryItem(name="page", value="2"),)

    def test_value_keeps_text_after_first_equals(self) -> None:
        request = parse(f"{DEFAULT_BASE_URL}/one?expr=a=b")
        assert request is not None
        assert request.query_parameters == (QueryItem(name="expr", value="a=b"),)

    def test_empty_value(self) -> None:
        request = parse(f"{DEFAULT_BASE_URL}/two?q=")
        assert request is not None
        assert request.query_parameters == (QueryItem(name="q", value=""),)

    def test_round_trip(self) -> None:
        original = build(Endpoint.TWO, query_parameters=[("q", "python"), ("page", "1")])
        parsed = parse(original.url)
        assert parsed is not None
        assert parsed == original


class TestRejected:
    def test_foreign_base(self) -> None:
        assert parse("https://other.example/one") is None

    def test_base_must_be_prefix(self) -> None:
        assert parse(f"https://mirror.test/?next={DEFAULT_BASE_URL}/one") is None

    def test_unknown_endpoint(self) -> None:
        assert parse(f"{DEFAULT_BASE_URL}/four/x") is None

    def test_unknown_endpoint_query_style(self) -> None:
        assert parse(f"{DEFAULT_BASE_URL}/four?x=1") is None

    def test_mixed_path_and_query(self) -> None:
        assert parse(f"{DEFAULT_BASE_URL}/one/users?page=2") is None

    @pytest.mark.parametrize("url", ["", DEFAULT_BASE_URL, f"{DEFAULT_BASE_URL}/"])
    def test_degenerate_inputs(self, url: str) -> None:
        assert parse(url) is None


class TestCustomBase:
    def test_parse_with_custom_base(self) -> None:
        request = parse("http://localhost:8080/v2/one/x", base_url="http://localhost:8080/v2")
        assert request is not None
        assert request.base_url == "http://localhost:8080/v2"
        assert request.url == "http://localhost:8080/v2/one/x"

    def test_default_base_rejected_under_custom_base(self) -> None:
        assert parse(f"{DEFAULT_BASE_URL}/one", base_url="http://localhost:8080") is None
