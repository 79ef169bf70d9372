"""Shallow site crawler used to bootstrap prompts for a domain."""

import asyncio
import logging

import httpx

from geotracker.config import Settings
from geotracker.services.html_extractor import ParsedPage, extract_internal_links, parse_page

logger = logging.getLogger(__name__)


class SiteCrawler:
    """Fetch a homepage plus a handful of same-host pages.

    Only static HTML is read. Each request has its own deadline and the body
    is read only up to the character cap, so a slow or huge page cannot
    stall the crawl or exhaust memory.
    """

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        self.settings = settings
        self.timeout = settings.fetch_timeout_seconds
        self.max_chars = settings.max_html_chars
        self.max_pages = settings.max_pages
        self.user_agent = settings.user_agent
        self._transport = transport  # Injected in tests

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            headers={"User-Agent": self.user_agent},
            transport=self._transport,
        )

    async def fetch_html(self, client: httpx.AsyncClient, url: str) -> str | None:
        """Fetch one page; None on any failure or non-HTML response.

        The client timeout only bounds each read, so the whole request is
        also capped at ``self.timeout`` seconds.
        """
        try:
            return await asyncio.wait_for(self._read_html(client, url), self.timeout)
        except TimeoutError:
            logger.warning(f"Fetch failed for {url}: no complete response within {self.timeout}s")
            return None
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"Fetch failed for {url}: {type(e).__name__}: {e}")
            return None

    async def _read_html(self, client: httpx.AsyncClient, url: str) -> str | None:
        async with client.stream("GET", url) as response:
            if not response.is_success:
                logger.warning(f"Fetch failed for {url}: HTTP {response.status_code}")
                return None

            content_type = response.headers.get("content-type", "")
            if "text/html" not in content_type.lower():
                logger.info(f"Skipping {url}: content type {content_type or 'missing'}")
                return None

            # Stop reading once the cap is reached
            chunks: list[str] = []
            size = 0
            async for chunk in response.aiter_text():
                chunks.append(chunk)
                size += len(chunk)
                if size >= self.max_chars:
                    break

        return "".join(chunks)[: self.max_chars]

    async def fetch_primary_html(
        self, client: httpx.AsyncClient, base_url: str
    ) -> tuple[str, str] | None:
        """Fetch the homepage, retrying once over plain HTTP if HTTPS fails."""
        html = await self.fetch_html(client, base_url)
        if html is not None:
            return base_url, html

        if base_url.lower().startswith("https://"):
            fallback_url = "http://" + base_url[len("https://"):]
            logger.info(f"Retrying {base_url} over plain HTTP")
            html = await self.fetch_html(client, fallback_url)
            if html is not None:
                return fallback_url, html

        return None

    async def build_site_snapshot(self, base_url: str) -> list[ParsedPage]:
        """Crawl the homepage and up to max_pages - 1 internal pages.

        Returns an empty list when the homepage is unreachable; otherwise the
        homepage comes first, followed by the secondary pages that could be
        fetched, in link order.
        """
        async with self._client() as client:
            primary = await self.fetch_primary_html(client, base_url)
            if primary is None:
                logger.warning(f"Homepage unreachable: {base_url}")
                return []

            primary_url, primary_html = primary
            pages = [parse_page(primary_url, primary_html)]
            links = extract_internal_links(primary_html, primary_url, self.max_pages - 1)

            # Secondary pages are independent, fetch them together
            bodies = await asyncio.gather(*(self.fetch_html(client, link) for link in links))

        for link, html in zip(links, bodies):
            if html is None:
                continue
            pages.append(parse_page(link, html))

        logger.info(f"Crawled {len(pages)} pages from {primary_url} ({len(links)} links found)")
        return pages
