# File: tests/test_filters.py
"""Тесты фильтра URL: домен, схема и список исключений."""
import pytest
from pydantic import ValidationError

from page_scout.crawler.filters import DEFAULT_FILTER_RULES, FilterRules, should_crawl


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://example.com/about", True),
        ("http://example.com/blog/post-1", True),
        ("https://example.com/", True),
        ("https://other.com/about", False),
        ("https://sub.example.com/about", False),
        ("https://example.com/file.pdf", False),
        ("https://example.com/IMAGE.JPG", False),
        ("https://example.com/wp-admin/options", False),
        ("https://example.com/login", False),
        ("https://example.com/feed", False),
        ("https://example.com/feed/", False),
        ("https://example.com/feedback", True),
        ("https://example.com/page?print=1", False),
        ("https://example.com/tag/python/", False),
        ("https://example.com/cart/", False),
        ("mailto:info@example.com", False),
        ("javascript:void(0)", False),
        ("ftp://example.com/file", False),
        ("not a url", False),
        ("http://[::1", False),
    ],
)
def test_should_crawl_default_rules(url, expected):
    assert should_crawl(url, "example.com") is expected


def test_scope_only_rules_allow_any_path():
    rules = FilterRules.scope_only()
    assert should_crawl("https://example.com/file.pdf", "example.com", rules)
    assert should_crawl("https://example.com/login", "example.com", rules)
    assert not should_crawl("https://other.com/", "example.com", rules)


def test_custom_rules():
    rules = FilterRules(extensions=[".svg"], path_patterns=[r"^/private/"])
    assert not should_crawl("https://example.com/logo.svg", "example.com", rules)
    assert not should_crawl("https://example.com/private/page", "example.com", rules)
    assert should_crawl("https://example.com/file.pdf", "example.com", rules)
    assert should_crawl("https://example.com/login", "example.com", rules)


def test_rules_are_frozen_and_strict():
    with pytest.raises(ValidationError):
        FilterRules(unknown=["x"])
    with pytest.raises(ValidationError):
        DEFAULT_FILTER_RULES.extensions = []
