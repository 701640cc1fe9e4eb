"""Tests for apicomplete.index."""

from __future__ import annotations

import pytest

from apicomplete.index import PathIndex, normalize_path, static_prefix
from apicomplete.models import CachedSpec

BASE = "https://petstore3.swagger.io/api/v3"


@pytest.fixture()
def index(petstore_cached: CachedSpec) -> PathIndex:
    return PathIndex(BASE, petstore_cached)


def _templates(entries) -> list[str]:
    return [e.template for e in entries]


class TestHelpers:
    @pytest.mark.parametrize(
        ("template", "expected"),
        [
            ("/pet", "/pet"),
            ("/pet/{petId}", "/pet/"),
            ("/pet/{petId}/uploadImage", "/pet/"),
            ("/{tenant}/items", "/"),
        ],
    )
    def test_static_prefix(self, template: str, expected: str) -> None:
        assert static_prefix(template) == expected

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("/pet/", "/pet"),
            ("/pet?status=sold", "/pet"),
            ("/pet#top", "/pet"),
            ("/", "/"),
            ("", ""),
        ],
    )
    def test_normalize_path(self, path: str, expected: str) -> None:
        assert normalize_path(path) == expected


class TestPathIndex:
    def test_base_url_trailing_slash_stripped(self, petstore_cached: CachedSpec) -> None:
        assert PathIndex(BASE + "/", petstore_cached).base_url == BASE

    def test_full_url(self, index: PathIndex, petstore_cached: CachedSpec) -> None:
        assert index.full_url(petstore_cached.paths[3]) == BASE + "/pet/{petId}"

    def test_paths_under_own_base_url(self, index: PathIndex) -> None:
        assert len(index.paths_under()) == 10
        assert len(index.paths_under(BASE + "/")) == 10

    def test_paths_under_narrower_url(self, index: PathIndex) -> None:
        assert _templates(index.paths_under(BASE + "/store")) == [
            "/store/inventory",
            "/store/order",
            "/store/order/{orderId}",
        ]

    def test_paths_under_unrelated_url(self, index: PathIndex) -> None:
        assert index.paths_under("https://example.com") == []


class TestFind:
    def test_most_specific_first(self, index: PathIndex) -> None:
        assert _templates(index.find(BASE, "/pet")) == [
            "/pet/findByStatus",
            "/pet/findByTags",
            "/pet/{petId}",
            "/pet/{petId}/uploadImage",
            "/pet",
        ]

    def test_trailing_slash_excludes_parent(self, index: PathIndex) -> None:
        assert "/pet" not in _templates(index.find(BASE, "/pet/"))

    def test_ties_keep_declaration_order(self, index: PathIndex) -> None:
        assert _templates(index.find(BASE, "/user")) == ["/user/login", "/user/{username}"]

    def test_no_match(self, index: PathIndex) -> None:
        assert index.find(BASE, "/nothing") == []

    def test_empty_prefix_returns_everything(self, index: PathIndex) -> None:
        assert len(index.find(BASE, "")) == 10


class TestLookup:
    @pytest.mark.parametrize(
        ("path", "template"),
        [
            ("/pet", "/pet"),
            ("/pet/", "/pet"),
            ("/pet/findByStatus", "/pet/findByStatus"),
            ("/pet/123", "/pet/{petId}"),
            ("/pet/{petId}", "/pet/{petId}"),
            ("/pet/123/uploadImage", "/pet/{petId}/uploadImage"),
            ("/store/order/7?verbose=true", "/store/order/{orderId}"),
            ("/user/login", "/user/login"),
            ("/user/alice", "/user/{username}"),
        ],
    )
    def test_resolves_typed_path(self, index: PathIndex, path: str, template: str) -> None:
        entry = index.lookup(path)
        assert entry is not None
        assert entry.template == template

    @pytest.mark.parametrize("path", ["/nothing", "/pet/1/2/3", "/store"])
    def test_unknown_path(self, index: PathIndex, path: str) -> None:
        assert index.lookup(path) is None


class TestFilter:
    def test_substring_match(self, index: PathIndex) -> None:
        assert _templates(index.filter("order")) == ["/store/order", "/store/order/{orderId}"]

    def test_empty_pattern_matches_all(self, index: PathIndex) -> None:
        assert len(index.filter("")) == 10
