# page_scout/crawler/models.py
"""
Data models for the PageScout crawler.
"""
from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, List, Optional


@dataclass(frozen=True, slots=True)
class CrawlTarget:
    """A queued URL: normalized, scoped to a domain, with the page it was found on."""

    url: str
    domain: str
    discovered_from: Optional[str] = None


def _headings() -> Dict[str, List[str]]:
    return {"h1": [], "h2": [], "h3": []}


@dataclass(slots=True)
class PageMetadata:
    """On-page SEO annotations, computed once when the page is fetched."""

    title: str = ""
    meta_description: str = ""
    meta_keywords: str = ""
    canonical: str = ""
    robots: str = ""
    og_title: str = ""
    og_description: str = ""
    og_image: str = ""
    structured_data: List[Any] = field(default_factory=list)
    headings: Dict[str, List[str]] = field(default_factory=_headings)
    links: Dict[str, int] = field(default_factory=lambda: {"internal": 0, "external": 0})
    images: Dict[str, int] = field(default_factory=lambda: {"total": 0, "with_alt": 0})
    content_length: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> PageMetadata:
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


@dataclass(slots=True)
class PageRecord:
    """Result of one fetch attempt (success or failure), cached by normalized URL."""

    url: str
    domain: str
    html: Optional[str] = None
    title: Optional[str] = None
    meta_description: Optional[str] = None
    status_code: int = 0
    content_type: Optional[str] = None
    error: Optional[str] = None
    metadata: Optional[PageMetadata] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self, *, include_html: bool = True) -> Dict[str, Any]:
        data = asdict(self)
        if not include_html:
            data.pop("html")
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> PageRecord:
        meta = data.get("metadata")
        if isinstance(meta, dict):
            meta = PageMetadata.from_dict(meta)
        return cls(
            url=data["url"],
            domain=data.get("domain", ""),
            html=data.get("html"),
            title=data.get("title"),
            meta_description=data.get("meta_description"),
            status_code=data.get("status_code") or 0,
            content_type=data.get("content_type"),
            error=data.get("error"),
            metadata=meta,
        )


@dataclass(slots=True)
class DiscoveredUrlEntry:
    """A page URL found in a sitemap, with the hints the sitemap declared for it."""

    url: str
    source: str = "sitemap"
    lastmod: Optional[str] = None
    priority: Optional[str] = None
    changefreq: Optional[str] = None

    @property
    def priority_value(self) -> float:
        """Declared priority as a float; missing or unparsable means 0.5."""
        if self.priority is None:
            return 0.5
        try:
            value = float(self.priority)
        except ValueError:
            return 0.5
        return 0.5 if math.isnan(value) else value
