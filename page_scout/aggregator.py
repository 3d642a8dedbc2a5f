# File: page_scout/aggregator.py
"""page_scout.aggregator: Сводный отчёт по результатам обхода."""

from __future__ import annotations

import json
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, TypedDict

from page_scout.crawler.models import PageRecord


class PageInfo(TypedDict, total=False):
    """Краткая информация о загруженной странице."""

    url: str
    status_code: int
    title: str
    meta_description: str
    canonical: str
    h1: List[str]
    headings: int
    internal_links: int
    external_links: int
    images: int
    images_with_alt: int
    structured_data: int
    content_length: int


@dataclass(slots=True)
class CrawlReport:
    """Результаты обхода одного сайта за один прогон."""

    name: str = ""
    url: str = ""
    run: int = 1
    pages: List[PageInfo] = field(default_factory=list)
    status_codes: Dict[str, int] = field(default_factory=dict)
    error: Optional[str] = None

    raw_results: Optional[List[PageRecord]] = None

    @property
    def pages_crawled(self) -> int:
        return len(self.pages)

    def to_dict(self) -> Dict[str, Any]:
        """Словарь для JSON без сырых данных."""
        return {
            "name": self.name,
            "url": self.url,
            "run": self.run,
            "pages_crawled": self.pages_crawled,
            "status_codes": dict(self.status_codes),
            "error": self.error,
            "pages": [dict(p) for p in self.pages],
        }

    def json(self, *, pretty: bool = False) -> str:
        """Возвращает JSON-представление CrawlReport без сырых данных."""
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2 if pretty else None)


def _page_info(page: PageRecord) -> PageInfo:
    info: PageInfo = {
        "url": page.url,
        "status_code": page.status_code,
        "title": page.title or "",
        "meta_description": page.meta_description or "",
    }
    meta = page.metadata
    if meta is not None:
        info.update(
            canonical=meta.canonical,
            h1=list(meta.headings.get("h1", [])),
            headings=sum(len(v) for v in meta.headings.values()),
            internal_links=meta.links.get("internal", 0),
            external_links=meta.links.get("external", 0),
            images=meta.images.get("total", 0),
            images_with_alt=meta.images.get("with_alt", 0),
            structured_data=len(meta.structured_data),
            content_length=meta.content_length,
        )
    return info


def aggregate_results(
    raw_results: Sequence[PageRecord], *, name: str = "", url: str = "", run: int = 1
) -> CrawlReport:
    """Собирает строки по страницам и счётчики HTTP-статусов в CrawlReport."""
    report = CrawlReport(name=name, url=url, run=run, raw_results=list(raw_results))
    report.pages = [_page_info(p) for p in raw_results]
    counts = Counter(str(p.status_code) for p in raw_results)
    report.status_codes = dict(sorted(counts.items()))
    return report


__all__ = ["PageInfo", "CrawlReport", "aggregate_results"]
