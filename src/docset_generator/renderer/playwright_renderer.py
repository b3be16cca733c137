"""Playwright-based renderer for JavaScript-rendered pages."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from playwright.async_api import Browser, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError

from docset_generator.config import FetcherConfig
from docset_generator.errors import RenderError
from docset_generator.renderer.base import BaseRenderer, RenderedPage

logger = logging.getLogger(__name__)

_CLICK_MATCHING_JS = """([selector, exactTexts, substrings]) => {
    let clicked = 0;
    document.querySelectorAll(selector).forEach(element => {
        const text = element.textContent.trim().toLowerCase();
        if (exactTexts.includes(text) || substrings.some(s => text.includes(s))) {
            element.click();
            clicked++;
        }
    });
    return clicked;
}"""


class PlaywrightPage(RenderedPage):
    """A Playwright page wrapped in the renderer interface."""

    def __init__(self, page: Page, config: FetcherConfig):
        self._page = page
        self.config = config

    async def goto(self, url: str) -> None:
        try:
            response = await self._page.goto(
                url,
                wait_until="networkidle",
                timeout=self.config.timeout_ms,
            )
        except PlaywrightError as e:
            raise RenderError(url, str(e)) from e

        if response is not None and response.status >= 400:
            raise RenderError(url, f"HTTP {response.status}")

    async def content(self) -> str:
        return await self._page.content()

    async def wait_for_selector(self, selector: str, timeout_ms: int) -> bool:
        try:
            await self._page.wait_for_selector(selector, timeout=timeout_ms)
            return True
        except PlaywrightError:
            return False

    async def count(self, selector: str) -> int:
        return await self._page.locator(selector).count()

    async def click_matching(
        self, selector: str, exact_texts: list[str], substrings: list[str]
    ) -> int:
        return await self._page.evaluate(
            _CLICK_MATCHING_JS,
            [selector, [t.lower() for t in exact_texts], [s.lower() for s in substrings]],
        )


class PlaywrightRenderer(BaseRenderer):
    """Render pages with headless Chromium.

    One browser is shared for the whole run; every page gets its own
    ``BrowserContext`` so cookies, storage and crashes stay isolated.
    """

    def __init__(self, config: FetcherConfig):
        super().__init__(config)
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None

    async def __aenter__(self):
        """Start Playwright and launch the browser."""
        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.launch(
                headless=self.config.headless
            )
        except Exception:
            await self.__aexit__(None, None, None)
            raise
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Close the browser and stop Playwright."""
        if self._browser:
            await self._browser.close()
            self._browser = None
        if self._playwright:
            await self._playwright.stop()
            self._playwright = None

    @asynccontextmanager
    async def page(self) -> AsyncIterator[RenderedPage]:
        if not self._browser:
            raise RuntimeError("Renderer not initialized. Use 'async with' context manager.")

        context = await self._browser.new_context(
            user_agent=self.config.user_agent,
            viewport={"width": 1280, "height": 720},
        )
        try:
            page = await context.new_page()
            yield PlaywrightPage(page, self.config)
        finally:
            try:
                await context.close()
            except PlaywrightError:
                logger.debug("Failed to close browser context", exc_info=True)
