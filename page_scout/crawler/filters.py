# page_scout/crawler/filters.py
"""
Domain scoping and content-type exclusion for discovered URLs.

The denylist is a :class:`FilterRules` value rather than a module constant so
that configs and tests can supply their own rule sets.
"""
from __future__ import annotations

import re
from typing import List, Pattern
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

__all__ = ("FilterRules", "DEFAULT_FILTER_RULES", "should_crawl")

_DEFAULT_EXTENSIONS = [
    "jpg", "jpeg", "png", "gif", "pdf", "zip", "exe",
    "dmg", "mp3", "mp4", "doc", "docx", "xls", "xlsx",
]

_DEFAULT_PATTERNS = [
    r"/wp-admin/",
    r"/admin/",
    r"/login",
    r"/logout",
    r"/signin",
    r"/signup",
    r"/register",
    r"/api/",
    r"/feed/?$",
    r"/rss/?$",
    r"/print/",
    r"/cdn-cgi/",
    r"\?print=",
    r"#",
    r"/tag/",
    r"/category/",
    r"/author/",
    r"/search/",
    r"/cart/",
    r"/checkout/",
]


class FilterRules(BaseModel):
    """Denylist applied to ``path + query`` of a candidate URL."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    extensions: List[str] = Field(default_factory=lambda: list(_DEFAULT_EXTENSIONS))
    path_patterns: List[str] = Field(default_factory=lambda: list(_DEFAULT_PATTERNS))

    _compiled: List[Pattern[str]] = PrivateAttr(default_factory=list)

    def model_post_init(self, __context) -> None:
        compiled = [re.compile(p) for p in self.path_patterns]
        if self.extensions:
            exts = "|".join(re.escape(e.lstrip(".")) for e in self.extensions)
            compiled.insert(0, re.compile(rf"\.({exts})$", re.IGNORECASE))
        self._compiled = compiled

    @classmethod
    def scope_only(cls) -> FilterRules:
        """Rules that exclude nothing: only scheme and host are checked."""
        return cls(extensions=[], path_patterns=[])

    def matches(self, path_and_query: str) -> bool:
        return any(p.search(path_and_query) for p in self._compiled)


DEFAULT_FILTER_RULES = FilterRules()


def should_crawl(url: str, base_domain: str, rules: FilterRules = DEFAULT_FILTER_RULES) -> bool:
    """
    Return True if *url* is an http(s) URL on exactly *base_domain*
    whose path and query hit none of the *rules*. Never raises.
    """
    try:
        parsed = urlsplit(url)
        hostname = parsed.hostname
    except ValueError:
        return False
    if parsed.scheme not in ("http", "https"):
        return False
    if hostname != base_domain:
        return False
    target = parsed.path + (f"?{parsed.query}" if parsed.query else "")
    return not rules.matches(target)
