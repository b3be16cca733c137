"""Batched, failure-isolated page downloading."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from docset_generator.config import DownloadConfig, FetcherConfig
from docset_generator.discovery.base import LinkCandidate
from docset_generator.extractor.content import ContentExtractor, PageContent
from docset_generator.output.docset import DocsetWriter
from docset_generator.renderer.base import BaseRenderer

logger = logging.getLogger(__name__)


@dataclass
class DownloadFailure:
    """A candidate that could not be downloaded."""

    name: str
    url: str
    error: str


@dataclass
class DownloadReport:
    """Outcome of downloading all candidates."""

    total: int = 0
    downloaded: int = 0
    succeeded: list[LinkCandidate] = field(default_factory=list)
    failed: list[DownloadFailure] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return len(self.succeeded)

    @property
    def error_count(self) -> int:
        return len(self.failed)


class BatchDownloader:
    """Fetch, extract and write every candidate.

    Batches of ``batch_size`` run one after another; the candidates inside a
    batch run concurrently, each in its own browsing context. A failing
    candidate is logged and left without ``local_path``.
    """

    def __init__(
        self,
        renderer: BaseRenderer,
        extractor: ContentExtractor,
        writer: DocsetWriter,
        fetcher_config: FetcherConfig,
        config: DownloadConfig,
    ):
        self.renderer = renderer
        self.extractor = extractor
        self.writer = writer
        self.fetcher_config = fetcher_config
        self.config = config

    async def download(
        self,
        candidates: list[LinkCandidate],
        on_done: Callable[[LinkCandidate], None] | None = None,
    ) -> DownloadReport:
        report = DownloadReport(total=len(candidates))
        batch_size = self.config.batch_size

        for start in range(0, len(candidates), batch_size):
            batch = candidates[start:start + batch_size]
            logger.debug(
                "Downloading batch %d-%d of %d", start + 1, start + len(batch), len(candidates)
            )
            await asyncio.gather(
                *(self._download_one(c, report, on_done) for c in batch)
            )

        # Report in candidate order, not completion order
        report.succeeded = [c for c in candidates if c.fetched]
        order = {c.url: i for i, c in enumerate(candidates)}
        report.failed.sort(key=lambda f: order.get(f.url, len(order)))
        return report

    async def _download_one(
        self,
        candidate: LinkCandidate,
        report: DownloadReport,
        on_done: Callable[[LinkCandidate], None] | None,
    ) -> None:
        try:
            page = await self.fetch(candidate.url, candidate.name)
            local_path = await self.writer.write_page(candidate, page)

            candidate.local_path = local_path
            candidate.sections = page.sections

            report.downloaded += 1
            logger.info(
                "Downloaded [%d/%d]: %s (%d sections)",
                report.downloaded,
                report.total,
                candidate.name,
                len(page.sections),
            )
        except Exception as e:
            logger.error("Error downloading %s: %s", candidate.name, e)
            report.failed.append(DownloadFailure(candidate.name, candidate.url, str(e)))
        finally:
            if on_done:
                on_done(candidate)

    async def fetch(self, url: str, name: str = "") -> PageContent:
        """Render one page and extract its content.

        Raises:
            RenderError: navigation failed or timed out.
        """
        async with self.renderer.page() as page:
            await page.goto(url)

            # 0 disables the wait; Playwright treats a zero timeout as no limit
            wait_ms = self.fetcher_config.content_wait_ms
            if wait_ms and not await page.wait_for_selector(
                self.fetcher_config.content_wait_selector, wait_ms
            ):
                logger.warning("Timeout waiting for content on %s", name or url)

            html = await page.content()

        return self.extractor.extract(html)
