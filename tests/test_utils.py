# File: tests/test_utils.py
"""Тесты канонизации URL и вспомогательных функций для доменов."""
import pytest

from page_scout.utils import get_domain, homepage_url, is_homepage, normalize_url, remove_duplicates


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("https://example.com/about/", "https://example.com/about"),
        ("https://example.com/about#team", "https://example.com/about"),
        ("https://example.com/?b=2&a=1", "https://example.com/?a=1&b=2"),
        ("https://example.com", "https://example.com/"),
        ("https://example.com/", "https://example.com/"),
        ("HTTPS://Example.COM:443/Path", "https://example.com/Path"),
        ("http://example.com:80/x", "http://example.com/x"),
        ("http://example.com:8080/x/", "http://example.com:8080/x"),
        ("https://example.com/a//", "https://example.com/a"),
    ],
)
def test_normalize_url(raw, expected):
    assert normalize_url(raw) == expected


@pytest.mark.parametrize(
    "url",
    [
        "https://example.com/about/?z=1&a=2#frag",
        "http://Example.com:80/a//",
        "https://example.com",
        "https://example.com/?q=&a=1",
    ],
)
def test_normalize_url_is_idempotent(url):
    once = normalize_url(url)
    assert normalize_url(once) == once


def test_normalize_url_keeps_repeated_keys_in_order():
    assert normalize_url("https://a.com/p?b=1&a=2&b=0") == "https://a.com/p?a=2&b=1&b=0"


@pytest.mark.parametrize("bad", ["not a url", "/relative/path", "mailto:someone@example.com", ""])
def test_normalize_url_returns_unparsable_input_unchanged(bad):
    assert normalize_url(bad) == bad


def test_get_domain():
    assert get_domain("https://Example.com:8443/path") == "example.com"
    assert get_domain("not a url") == ""


def test_homepage_helpers():
    assert homepage_url("example.com") == "https://example.com/"
    assert homepage_url("example.com", "http") == "http://example.com/"
    assert is_homepage("https://example.com/", "example.com")
    assert is_homepage("http://example.com", "example.com")
    assert not is_homepage("https://example.com/about", "example.com")
    assert not is_homepage("https://sub.example.com/", "example.com")


def test_remove_duplicates_preserves_order():
    assert remove_duplicates(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]
