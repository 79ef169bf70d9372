"""Tests for the site crawler with stubbed HTTP."""

import asyncio
import time

import httpx
import pytest

from geotracker.config import Settings
from geotracker.services.crawler import SiteCrawler

from conftest import HOME_HTML, SERVICES_HTML, make_site_transport


class TestBuildSiteSnapshot:

    @pytest.mark.asyncio
    async def test_homepage_first_then_internal_pages(self, settings):
        crawler = SiteCrawler(settings, transport=make_site_transport())

        pages = await crawler.build_site_snapshot("https://acmeplumbing.com")

        assert [p.url for p in pages] == [
            "https://acmeplumbing.com",
            "https://acmeplumbing.com/services",
            "https://acmeplumbing.com/areas/leeds",
        ]
        assert pages[0].title == "Acme Plumbing - Emergency Plumbers"

    @pytest.mark.asyncio
    async def test_https_failure_falls_back_to_http(self, settings):
        crawler = SiteCrawler(settings, transport=make_site_transport(https_down=True))

        pages = await crawler.build_site_snapshot("https://acmeplumbing.com")

        assert pages
        assert pages[0].url.startswith("http://")

    @pytest.mark.asyncio
    async def test_unreachable_site_returns_empty(self, settings):
        crawler = SiteCrawler(settings, transport=make_site_transport(down=True))

        assert await crawler.build_site_snapshot("https://acmeplumbing.com") == []

    @pytest.mark.asyncio
    async def test_failed_secondary_pages_are_skipped(self, settings):
        transport = make_site_transport(pages={"/": HOME_HTML, "/services": "<h1>Services</h1>"})
        crawler = SiteCrawler(settings, transport=transport)

        pages = await crawler.build_site_snapshot("https://acmeplumbing.com")

        assert [p.url for p in pages] == [
            "https://acmeplumbing.com",
            "https://acmeplumbing.com/services",
        ]

    @pytest.mark.asyncio
    async def test_link_with_malformed_port_is_skipped(self, settings):
        home = HOME_HTML.replace("</body>", '<a href="https://acmeplumbing.com:abc/x">Broken</a></body>')
        transport = make_site_transport(pages={"/": home, "/services": SERVICES_HTML})
        crawler = SiteCrawler(settings, transport=transport)

        pages = await crawler.build_site_snapshot("https://acmeplumbing.com")

        assert [p.url for p in pages] == [
            "https://acmeplumbing.com",
            "https://acmeplumbing.com/services",
        ]

    @pytest.mark.asyncio
    async def test_page_count_is_bounded(self):
        settings = Settings(_env_file=None, max_pages=2)
        crawler = SiteCrawler(settings, transport=make_site_transport())

        pages = await crawler.build_site_snapshot("https://acmeplumbing.com")

        assert len(pages) == 2


class TestFetchHtml:

    @pytest.mark.asyncio
    async def test_non_html_response_is_ignored(self, settings):
        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, json={"ok": True})
        )
        crawler = SiteCrawler(settings, transport=transport)

        async with crawler._client() as client:
            assert await crawler.fetch_html(client, "https://a.test") is None

    @pytest.mark.asyncio
    async def test_error_status_is_ignored(self, settings):
        transport = httpx.MockTransport(
            lambda request: httpx.Response(503, text="<p>down</p>", headers={"content-type": "text/html"})
        )
        crawler = SiteCrawler(settings, transport=transport)

        async with crawler._client() as client:
            assert await crawler.fetch_html(client, "https://a.test") is None

    @pytest.mark.asyncio
    async def test_body_is_truncated(self):
        settings = Settings(_env_file=None, max_html_chars=100)
        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, text="x" * 1000, headers={"content-type": "text/html"})
        )
        crawler = SiteCrawler(settings, transport=transport)

        async with crawler._client() as client:
            html = await crawler.fetch_html(client, "https://a.test")

        assert html == "x" * 100

    @pytest.mark.asyncio
    async def test_user_agent_header(self, settings):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["ua"] = request.headers.get("user-agent")
            return httpx.Response(200, text="<p>ok</p>", headers={"content-type": "text/html"})

        crawler = SiteCrawler(settings, transport=httpx.MockTransport(handler))

        async with crawler._client() as client:
            await crawler.fetch_html(client, "https://a.test")

        assert seen["ua"] == settings.user_agent

    @pytest.mark.asyncio
    async def test_invalid_url_is_ignored(self, settings):
        crawler = SiteCrawler(settings, transport=make_site_transport())

        async with crawler._client() as client:
            assert await crawler.fetch_html(client, "https://acmeplumbing.com:abc/x") is None

    @pytest.mark.asyncio
    async def test_slow_body_hits_overall_deadline(self):
        settings = Settings(_env_file=None, fetch_timeout_seconds=0.5)

        async def trickle():
            for _ in range(50):
                await asyncio.sleep(0.1)
                yield b"<p>slow</p>"

        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, headers={"content-type": "text/html"}, content=trickle())
        )
        crawler = SiteCrawler(settings, transport=transport)

        started = time.monotonic()
        async with crawler._client() as client:
            html = await crawler.fetch_html(client, "https://a.test")

        assert html is None
        assert time.monotonic() - started < 2.5

    @pytest.mark.asyncio
    async def test_endless_body_stops_at_cap(self):
        settings = Settings(_env_file=None, max_html_chars=2500)
        served = []

        async def endless():
            while True:
                served.append(1)
                yield b"x" * 1000

        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, headers={"content-type": "text/html"}, content=endless())
        )
        crawler = SiteCrawler(settings, transport=transport)

        async with crawler._client() as client:
            html = await crawler.fetch_html(client, "https://a.test")

        assert html == "x" * 2500
        assert len(served) < 5
