# File: page_scout/exceptions.py
"""Exceptions raised by network-calling parts of PageScout.

Leaf helpers (URL normalization, filtering, link extraction) never raise;
these are used only where a whole sitemap fetch fails, and are caught one
level up by the sitemap resolver.
"""
from __future__ import annotations


class PageScoutError(Exception):
    """Base class for all PageScout errors."""


class FetchError(PageScoutError):
    """A document could not be fetched: network error, timeout or bad status."""

    def __init__(self, url: str, reason: str, status: int | None = None) -> None:
        super().__init__(f"Failed to fetch {url}: {reason}")
        self.url = url
        self.reason = reason
        self.status = status


class ParseError(PageScoutError):
    """A fetched document is not well-formed (e.g. broken sitemap XML)."""


__all__ = ["PageScoutError", "FetchError", "ParseError"]
