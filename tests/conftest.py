"""Shared fixtures: a fake renderer serving canned HTML."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager

import pytest
from bs4 import BeautifulSoup

from docset_generator.config import AppConfig, FetcherConfig
from docset_generator.errors import RenderError
from docset_generator.renderer.base import BaseRenderer, RenderedPage

SITE = "https://registry.terraform.io"
PREFIX = "/providers/terraform-routeros/routeros"
LISTING_URL = f"{SITE}{PREFIX}/latest/docs"

LISTING_HTML = f"""<html><head><title>Docs | Terraform Registry</title></head>
<body>
<nav>
  <button>Resources</button>
  <ul>
    <li class="menu-list-link"><a class="ember-view" href="{PREFIX}/latest/docs/resources/interface">routeros_interface</a></li>
    <li class="menu-list-link"><a class="ember-view" href="{PREFIX}/latest/docs/data-sources/address">routeros_ip_addresses</a></li>
  </ul>
</nav>
<main>
  <a href="{PREFIX}/latest/docs/guides/upgrade">Upgrade Guide</a>
  <a href="{PREFIX}/latest/docs/resources/interface">Interface again</a>
  <a href="/providers/hashicorp/aws/latest/docs/resources/instance">AWS Provider</a>
  <a href="/search">Search</a>
  <a href="{PREFIX}/latest/docs/functions/format"></a>
</main>
</body></html>"""


def doc_page(title: str, body: str) -> str:
    return f"""<html><head>
<title>{title} | Resources | terraform-routeros/routeros | Terraform Registry</title>
<link rel="stylesheet" href="/assets/app.css">
</head><body><article><div class="markdown">{body}</div></article></body></html>"""


class FakePage(RenderedPage):
    def __init__(self, renderer: FakeRenderer):
        self.renderer = renderer
        self.html = ""

    async def goto(self, url: str) -> None:
        self.renderer.visited.append(url)
        self.renderer.active += 1
        self.renderer.max_active = max(self.renderer.max_active, self.renderer.active)
        try:
            await asyncio.sleep(0)
        finally:
            self.renderer.active -= 1
        if url in self.renderer.failing:
            raise RenderError(url, "Timeout 30000ms exceeded")
        if url not in self.renderer.pages:
            raise RenderError(url, "HTTP 404")
        self.html = self.renderer.pages[url]

    async def content(self) -> str:
        return self.html

    async def wait_for_selector(self, selector: str, timeout_ms: int) -> bool:
        self.renderer.waits.append((selector, timeout_ms))
        return BeautifulSoup(self.html, "lxml").select_one(selector) is not None

    async def count(self, selector: str) -> int:
        if self.renderer.counts:
            return self.renderer.counts.pop(0)
        return len(BeautifulSoup(self.html, "lxml").select(selector))

    async def click_matching(self, selector, exact_texts, substrings) -> int:
        if self.renderer.click_error:
            raise self.renderer.click_error
        self.renderer.clicks += 1
        return 1


class FakeRenderer(BaseRenderer):
    """Serves HTML per URL; URLs in ``failing`` raise ``RenderError``."""

    def __init__(self, pages: dict[str, str] | None = None, failing: set[str] | None = None):
        super().__init__(FetcherConfig())
        self.pages = dict(pages or {})
        self.failing = set(failing or ())
        self.visited: list[str] = []
        self.waits: list[tuple[str, int]] = []
        self.counts: list[int] = []
        self.click_error: Exception | None = None
        self.clicks = 0
        self.active = 0
        self.max_active = 0
        self.open_contexts = 0
        self.entered = False

    async def __aenter__(self):
        self.entered = True
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.entered = False

    @asynccontextmanager
    async def page(self):
        self.open_contexts += 1
        try:
            yield FakePage(self)
        finally:
            self.open_contexts -= 1


@pytest.fixture
def app_config(tmp_path) -> AppConfig:
    config = AppConfig()
    config.docset.output_dir = tmp_path
    config.discovery.settle_ms = 0
    config.discovery.ready_poll_ms = 50
    config.discovery.ready_timeout_ms = 500
    return config


@pytest.fixture
def site_pages() -> dict[str, str]:
    docs = f"{SITE}{PREFIX}/latest/docs"
    return {
        LISTING_URL: LISTING_HTML,
        f"{docs}/resources/interface": doc_page(
            "routeros_interface",
            '<h1>routeros_interface</h1>'
            '<h2 id="example-usage"># Example Usage</h2><pre>resource "x" {}</pre>'
            '<h3 id="argument-reference"><a href="#argument-reference">#</a> Argument Reference</h3>'
            '<h2 id="import">Import</h2>',
        ),
        f"{docs}/data-sources/address": doc_page(
            "routeros_ip_addresses", '<h2 id="schema">Schema</h2>'
        ),
        f"{docs}/guides/upgrade": doc_page("Upgrade Guide", "<p>Upgrade steps.</p>"),
    }
