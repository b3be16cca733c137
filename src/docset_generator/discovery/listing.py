"""Link discovery from a rendered listing page."""

import asyncio
import logging

from bs4 import BeautifulSoup

from docset_generator.config import DiscoveryConfig
from docset_generator.discovery.base import LinkCandidate
from docset_generator.errors import DiscoveryError, RenderError
from docset_generator.renderer.base import BaseRenderer, RenderedPage, wait_until_stable
from docset_generator.utils.url_utils import is_internal, local_path_for, split_href

logger = logging.getLogger(__name__)


def extract_links(html: str, page_url: str, config: DiscoveryConfig) -> list[LinkCandidate]:
    """Collect internal documentation links from rendered listing HTML.

    Each selector in ``config.link_selectors`` is applied in order and the
    results are merged by raw href, first occurrence wins. Only links with
    text whose href contains the doc marker and whose path starts with the
    internal prefix are kept, at most one per local document path.
    """
    soup = BeautifulSoup(html, "lxml")
    seen: set[str] = set()
    seen_paths: set[str] = set()
    candidates: list[LinkCandidate] = []

    for selector in config.link_selectors:
        for anchor in soup.select(selector):
            href = anchor.get("href")
            name = " ".join(anchor.get_text().split())
            if not href or not name or config.doc_marker not in href:
                continue
            if href in seen:
                continue
            seen.add(href)

            path_key, url = split_href(href, page_url)
            if not is_internal(path_key, config.internal_prefix):
                logger.info("Skipping external link: %s (%s)", name, href)
                continue

            # Different hrefs can still name the same document file
            try:
                local_path = local_path_for(path_key)
            except ValueError:
                logger.info("Skipping unsafe link: %s (%s)", name, href)
                continue
            if local_path in seen_paths:
                logger.debug("Skipping duplicate page: %s (%s)", name, href)
                continue
            seen_paths.add(local_path)

            candidates.append(LinkCandidate(name=name, path_key=path_key, url=url))

    return candidates


class ListingDiscoverer:
    """Discover documentation pages linked from the listing page."""

    def __init__(self, config: DiscoveryConfig, renderer: BaseRenderer):
        self.config = config
        self.renderer = renderer

    async def discover(self) -> list[LinkCandidate]:
        """Render the listing page and return the deduplicated candidates.

        Raises:
            DiscoveryError: the listing page could not be loaded.
        """
        url = self.config.listing_url
        async with self.renderer.page() as page:
            try:
                await page.goto(url)
            except RenderError as e:
                raise DiscoveryError(f"Cannot open listing page: {e}") from e

            await self._expand_menu(page)

            if self.config.settle_ms:
                await asyncio.sleep(self.config.settle_ms / 1000)
            count = await wait_until_stable(
                page,
                "a",
                self.config.ready_timeout_ms,
                self.config.ready_poll_ms,
            )
            logger.debug("Listing page settled with %d anchors", count)

            html = await page.content()

        candidates = extract_links(html, url, self.config)
        if not candidates:
            logger.warning("No documentation links found on %s", url)
        else:
            logger.info("Found %d documentation pages", len(candidates))
        return candidates

    async def _expand_menu(self, page: RenderedPage) -> None:
        """Click collapsed navigation groups. Failures are ignored."""
        try:
            clicked = await page.click_matching(
                self.config.expand_selector,
                self.config.expand_exact_texts,
                self.config.expand_substrings,
            )
            logger.debug("Expanded %d menu sections", clicked)
        except Exception:
            logger.debug("Menu expansion failed", exc_info=True)
