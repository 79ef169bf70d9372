"""
Pytest configuration and shared fixtures.
"""

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from geotracker.config import Settings
from geotracker.database import Base
from geotracker.exceptions import UnknownProviderError
from geotracker.services.crawler import SiteCrawler
from geotracker.services.html_extractor import parse_page
from geotracker.services.providers import LLMProvider

import geotracker.models  # noqa: F401


# ============================================
# Sample site
# ============================================

HOME_HTML = """<!doctype html>
<html>
<head>
  <title>Acme Plumbing - Emergency Plumbers</title>
  <meta name="description" content="Emergency repairs and boiler installation in Leeds and Manchester.">
  <script>var tracking = "<b>should never appear</b>";</script>
  <style>.hero { color: red; }</style>
</head>
<body>
  <h1>Emergency repairs</h1>
  <h2>Boiler installation in Leeds</h2>
  <p>Our engineers handle boiler repairs, leak detection and drain cleaning for
  homeowners and landlords. Boiler servicing, radiator repairs and drain
  unblocking are booked online. Landlords get annual boiler safety checks.</p>
  <a href="/services/">Services</a>
  <a href="/areas/leeds?ref=nav">Leeds</a>
  <a href="#top">Back to top</a>
  <a href="mailto:hello@acmeplumbing.com">Email us</a>
  <a href="https://partner.example.org/page">Partner</a>
  <a href="/brochure.pdf">Brochure</a>
</body>
</html>"""

SERVICES_HTML = """<html><head><title>Services | Acme Plumbing</title>
<meta property="og:description" content="Boiler servicing, radiator repairs and drain unblocking.">
</head><body><h1>Our services</h1><p>Boiler servicing for landlords and homeowners.
Radiator repairs. Drain unblocking within two hours.</p></body></html>"""

LEEDS_HTML = """<html><head><title>Leeds</title></head>
<body><h1>Boiler repairs in Leeds</h1><h2>Headingley</h2>
<p>Same-day boiler repairs across Leeds and Headingley.</p></body></html>"""

SITE_PAGES = {
    "/": HOME_HTML,
    "/services": SERVICES_HTML,
    "/areas/leeds": LEEDS_HTML,
}


def make_site_transport(
    pages: dict[str, str] | None = None,
    https_down: bool = False,
    down: bool = False,
) -> httpx.MockTransport:
    """MockTransport serving the sample site on acmeplumbing.com."""
    pages = SITE_PAGES if pages is None else pages

    def handler(request: httpx.Request) -> httpx.Response:
        if down or (https_down and request.url.scheme == "https"):
            raise httpx.ConnectError("connection refused", request=request)
        if request.url.host != "acmeplumbing.com":
            return httpx.Response(404, text="not found")
        body = pages.get(request.url.path)
        if body is None:
            return httpx.Response(404, text="not found")
        return httpx.Response(200, text=body, headers={"content-type": "text/html; charset=utf-8"})

    return httpx.MockTransport(handler)


# ============================================
# Fake providers
# ============================================

class FakeProvider(LLMProvider):
    """In-memory provider returning a canned reply or raising."""

    def __init__(self, name: str, reply: str = "", error: Exception | None = None):
        self.name = name
        self.display_name = name.title()
        self.models = (f"{name}-model",)
        self.bootstrap_model = f"{name}-model"
        self.reply = reply
        self.error = error
        self.calls: list[tuple[str, str, str]] = []

    def query(self, api_key: str, prompt: str, model: str) -> str:
        self.calls.append((api_key, prompt, model))
        if self.error is not None:
            raise self.error
        return self.reply

    def _ping(self, api_key: str) -> None:
        if self.error is not None:
            raise self.error


def make_lookup(*providers: LLMProvider):
    """Provider lookup over fakes, failing like the real registry."""
    by_name = {p.name: p for p in providers}

    def lookup(name: str) -> LLMProvider:
        if name not in by_name:
            raise UnknownProviderError(f"Unknown provider: {name}")
        return by_name[name]

    return lookup


# ============================================
# Fixtures
# ============================================

@pytest.fixture
def settings():
    """Settings independent of any local .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def site_crawler(settings):
    return SiteCrawler(settings, transport=make_site_transport())


@pytest.fixture
def site_pages():
    """Parsed pages of the sample site, homepage first."""
    return [
        parse_page("https://acmeplumbing.com", HOME_HTML),
        parse_page("https://acmeplumbing.com/services", SERVICES_HTML),
        parse_page("https://acmeplumbing.com/areas/leeds", LEEDS_HTML),
    ]


@pytest_asyncio.fixture
async def db_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session
