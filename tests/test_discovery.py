# File: tests/test_discovery.py
"""Тесты поиска URL по robots.txt и sitemap (SitemapResolver) на подменной сессии."""
import pytest
from fakes import FakeResponse, FakeSession, index_xml, urlset_xml, xml_response

from page_scout.config import CrawlerConfig
from page_scout.crawler.sitemaps import COMMON_SITEMAP_PATHS, SitemapResolver, common_sitemap_urls
from page_scout.exceptions import FetchError
from page_scout.parser.sitemap_parser import UrlSet

BASE = "https://a.com"


def make_resolver(routes, **overrides) -> tuple[SitemapResolver, FakeSession]:
    session = FakeSession(routes)
    return SitemapResolver(session, CrawlerConfig(**overrides)), session


def test_common_sitemap_urls():
    urls = common_sitemap_urls("http://a.com/some/page")
    assert len(urls) == len(COMMON_SITEMAP_PATHS)
    assert urls[0] == "https://a.com/sitemap.xml"
    assert all(u.startswith("https://a.com/") for u in urls)


@pytest.mark.asyncio()
async def test_index_with_two_urlsets():
    routes = {
        f"{BASE}/sitemap.xml": xml_response(index_xml([f"{BASE}/s1.xml", f"{BASE}/s2.xml"])),
        f"{BASE}/s1.xml": xml_response(urlset_xml([f"{BASE}/p1", f"{BASE}/p2", f"{BASE}/p3"])),
        f"{BASE}/s2.xml": xml_response(urlset_xml([f"{BASE}/p4", f"{BASE}/p5", f"{BASE}/p6"])),
    }
    resolver, _ = make_resolver(routes)
    entries = await resolver.discover_urls_from_sitemaps(BASE)
    assert sorted(e.url for e in entries) == [f"{BASE}/p{i}" for i in range(1, 7)]
    assert all(e.source == "sitemap" for e in entries)


@pytest.mark.asyncio()
async def test_homepage_first_then_priority():
    routes = {
        f"{BASE}/sitemap.xml": xml_response(
            urlset_xml([(f"{BASE}/low", "0.2"), (f"{BASE}/high", "0.9"), (f"{BASE}/", "0.1"), f"{BASE}/none"])
        ),
    }
    resolver, _ = make_resolver(routes)
    entries = await resolver.discover_urls_from_sitemaps(BASE)
    assert [e.url for e in entries] == [f"{BASE}/", f"{BASE}/high", f"{BASE}/none", f"{BASE}/low"]


@pytest.mark.asyncio()
async def test_nested_indexes_respect_max_depth():
    routes = {
        f"{BASE}/sitemap.xml": xml_response(index_xml([f"{BASE}/l1.xml"])),
        f"{BASE}/l1.xml": xml_response(index_xml([f"{BASE}/l2.xml"])),
        f"{BASE}/l2.xml": xml_response(index_xml([f"{BASE}/l3.xml"])),
        f"{BASE}/l3.xml": xml_response(index_xml([f"{BASE}/l4.xml"])),
        f"{BASE}/l4.xml": xml_response(urlset_xml([f"{BASE}/deep"])),
    }
    resolver, session = make_resolver(routes, sitemap_max_depth=3)
    entries = await resolver.discover_urls_from_sitemaps(BASE)
    assert entries == []
    assert f"{BASE}/l2.xml" in session.calls
    assert f"{BASE}/l3.xml" not in session.calls
    assert f"{BASE}/l4.xml" not in session.calls


@pytest.mark.asyncio()
async def test_failing_sitemap_does_not_abort_discovery():
    routes = {
        f"{BASE}/sitemap.xml": xml_response(index_xml([f"{BASE}/s1.xml", f"{BASE}/s2.xml"])),
        f"{BASE}/s1.xml": xml_response("", status=503),
        f"{BASE}/s2.xml": xml_response(urlset_xml([f"{BASE}/ok1", f"{BASE}/ok2"])),
        f"{BASE}/sitemap_index.xml": xml_response("<urlset><url>"),
        f"{BASE}/sitemaps.xml": TimeoutError(),
    }
    resolver, _ = make_resolver(routes)
    entries = await resolver.discover_urls_from_sitemaps(BASE)
    assert sorted(e.url for e in entries) == [f"{BASE}/ok1", f"{BASE}/ok2"]


@pytest.mark.asyncio()
async def test_sitemaps_from_robots_txt_are_used():
    routes = {
        f"{BASE}/robots.txt": FakeResponse(
            "User-agent: *\nSitemap: https://a.com/custom.xml\n", content_type="text/plain"
        ),
        f"{BASE}/custom.xml": xml_response(urlset_xml([f"{BASE}/from-robots"])),
    }
    resolver, session = make_resolver(routes)
    entries = await resolver.discover_urls_from_sitemaps(BASE)
    assert [e.url for e in entries] == [f"{BASE}/from-robots"]
    assert session.calls[0] == f"{BASE}/robots.txt"
    assert session.calls[1] == f"{BASE}/custom.xml"


@pytest.mark.asyncio()
async def test_entries_are_filtered_normalized_and_deduplicated():
    routes = {
        f"{BASE}/sitemap.xml": xml_response(
            urlset_xml([
                f"{BASE}/about/",
                f"{BASE}/about",
                f"{BASE}/report.pdf",
                "https://other.com/page",
                f"{BASE}/wp-admin/",
            ])
        ),
    }
    resolver, _ = make_resolver(routes)
    entries = await resolver.discover_urls_from_sitemaps(BASE)
    assert [e.url for e in entries] == [f"{BASE}/about"]


@pytest.mark.asyncio()
async def test_max_urls_caps_result():
    routes = {
        f"{BASE}/sitemap.xml": xml_response(urlset_xml([f"{BASE}/p{i}" for i in range(10)])),
    }
    resolver, _ = make_resolver(routes)
    entries = await resolver.discover_urls_from_sitemaps(BASE, max_urls=4)
    assert len(entries) == 4


@pytest.mark.asyncio()
async def test_nothing_found_returns_empty_list():
    resolver, session = make_resolver({})
    assert await resolver.discover_urls_from_sitemaps(BASE) == []
    assert len(session.calls) == 1 + len(COMMON_SITEMAP_PATHS)


@pytest.mark.asyncio()
async def test_fetch_sitemap_errors():
    routes = {
        f"{BASE}/missing.xml": xml_response("", status=404),
        f"{BASE}/good.xml": xml_response(urlset_xml([f"{BASE}/x"])),
    }
    resolver, session = make_resolver(routes)
    with pytest.raises(FetchError) as exc_info:
        await resolver.fetch_sitemap(f"{BASE}/missing.xml")
    assert exc_info.value.status == 404
    doc = await resolver.fetch_sitemap(f"{BASE}/good.xml")
    assert isinstance(doc, UrlSet)
    assert session.kwargs[-1]["headers"]["User-Agent"] == CrawlerConfig().sitemap_user_agent


@pytest.mark.asyncio()
async def test_sitemaps_per_level_are_capped():
    children = [f"{BASE}/c{i}.xml" for i in range(5)]
    routes = {f"{BASE}/index.xml": xml_response(index_xml(children))}
    routes.update({child: xml_response(urlset_xml([f"{BASE}/p{i}"])) for i, child in enumerate(children)})
    resolver, session = make_resolver(routes, max_sitemaps_per_level=2)

    entries = await resolver.resolve([f"{BASE}/index.xml"], "a.com")

    assert session.calls == [f"{BASE}/index.xml", f"{BASE}/c0.xml", f"{BASE}/c1.xml"]
    assert [e.url for e in entries] == [f"{BASE}/p0", f"{BASE}/p1"]


@pytest.mark.asyncio()
async def test_urls_per_sitemap_are_capped():
    routes = {f"{BASE}/big.xml": xml_response(urlset_xml([f"{BASE}/p{i}" for i in range(10)]))}
    resolver, _ = make_resolver(routes, max_urls_per_sitemap=3)

    entries = await resolver.resolve([f"{BASE}/big.xml"], "a.com")

    assert [e.url for e in entries] == [f"{BASE}/p0", f"{BASE}/p1", f"{BASE}/p2"]


@pytest.mark.asyncio()
async def test_candidate_sitemaps_are_truncated_to_max_sitemaps():
    resolver, session = make_resolver({})
    assert await resolver.discover_urls_from_sitemaps(BASE, max_sitemaps=2) == []
    assert session.calls == [f"{BASE}/robots.txt", *common_sitemap_urls(BASE)[:2]]


@pytest.mark.asyncio()
async def test_self_referencing_indexes_are_fetched_once():
    routes = {
        f"{BASE}/sitemap.xml": xml_response(index_xml([f"{BASE}/sitemap.xml", f"{BASE}/s1.xml"])),
        f"{BASE}/s1.xml": xml_response(index_xml([f"{BASE}/sitemap.xml", f"{BASE}/s2.xml"])),
        f"{BASE}/s2.xml": xml_response(urlset_xml([f"{BASE}/leaf"])),
    }
    resolver, session = make_resolver(routes)

    entries = await resolver.resolve([f"{BASE}/sitemap.xml"], "a.com")

    assert [e.url for e in entries] == [f"{BASE}/leaf"]
    assert session.calls == [f"{BASE}/sitemap.xml", f"{BASE}/s1.xml", f"{BASE}/s2.xml"]
