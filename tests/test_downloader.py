"""Tests for docset_generator.downloader."""

from __future__ import annotations

import logging

import pytest

from docset_generator.config import DocsetConfig, DownloadConfig, ExtractorConfig, FetcherConfig
from docset_generator.discovery import LinkCandidate
from docset_generator.downloader import BatchDownloader
from docset_generator.extractor import ContentExtractor
from docset_generator.output import DocsetWriter
from tests.conftest import FakeRenderer, doc_page

SITE = "https://example.com"


def make_candidates(n: int) -> list[LinkCandidate]:
    return [
        LinkCandidate(name=f"page{i}", path_key=f"/p/docs/guides/page{i}", url=f"{SITE}/p/docs/guides/page{i}")
        for i in range(n)
    ]


def make_downloader(renderer, tmp_path, batch_size: int = 10) -> BatchDownloader:
    writer = DocsetWriter(DocsetConfig(output_dir=tmp_path, name="Test"))
    writer.prepare()
    return BatchDownloader(
        renderer,
        ContentExtractor(ExtractorConfig()),
        writer,
        FetcherConfig(),
        DownloadConfig(batch_size=batch_size),
    )


def pages_for(candidates, body='<h2 id="s">S</h2>') -> dict[str, str]:
    return {c.url: doc_page(c.name, body) for c in candidates}


class TestBatchDownloader:
    @pytest.mark.asyncio
    async def test_all_succeed(self, tmp_path):
        candidates = make_candidates(3)
        renderer = FakeRenderer(pages_for(candidates))
        downloader = make_downloader(renderer, tmp_path)

        report = await downloader.download(candidates)

        assert report.success_count == 3
        assert report.error_count == 0
        for c in candidates:
            assert c.local_path == f"p/docs/guides/{c.name}.html"
            assert [s.anchor_id for s in c.sections] == ["s"]
            assert (downloader.writer.documents_path / c.local_path).exists()

    @pytest.mark.asyncio
    async def test_failures_isolated(self, tmp_path, caplog):
        candidates = make_candidates(5)
        failing = {candidates[1].url, candidates[3].url}
        renderer = FakeRenderer(pages_for(candidates), failing=failing)
        downloader = make_downloader(renderer, tmp_path, batch_size=2)

        with caplog.at_level(logging.ERROR):
            report = await downloader.download(candidates)

        assert [c.name for c in report.succeeded] == ["page0", "page2", "page4"]
        assert [f.name for f in report.failed] == ["page1", "page3"]
        assert candidates[1].local_path is None
        assert candidates[1].sections == []
        assert "Error downloading page1" in caplog.text
        assert renderer.open_contexts == 0

    @pytest.mark.asyncio
    async def test_batches_bound_concurrency(self, tmp_path):
        candidates = make_candidates(7)
        renderer = FakeRenderer(pages_for(candidates))
        await make_downloader(renderer, tmp_path, batch_size=3).download(candidates)
        assert renderer.max_active <= 3
        assert sorted(renderer.visited[:3]) == sorted(c.url for c in candidates[:3])
        assert sorted(renderer.visited[3:6]) == sorted(c.url for c in candidates[3:6])

    @pytest.mark.asyncio
    async def test_missing_content_marker_is_not_fatal(self, tmp_path, caplog):
        candidates = make_candidates(1)
        renderer = FakeRenderer({candidates[0].url: "<html><title>Bare</title><p>x</p></html>"})
        with caplog.at_level(logging.WARNING):
            report = await make_downloader(renderer, tmp_path).download(candidates)
        assert report.success_count == 1
        assert candidates[0].sections == []
        assert "Timeout waiting for content on page0" in caplog.text

    @pytest.mark.asyncio
    async def test_zero_content_wait_skips_marker_wait(self, tmp_path, caplog):
        candidates = make_candidates(1)
        renderer = FakeRenderer(pages_for(candidates))
        downloader = make_downloader(renderer, tmp_path)
        downloader.fetcher_config = FetcherConfig(content_wait_ms=0)

        with caplog.at_level(logging.WARNING):
            report = await downloader.download(candidates)

        assert report.success_count == 1
        assert renderer.waits == []
        assert "Timeout waiting" not in caplog.text

    @pytest.mark.asyncio
    async def test_content_wait_uses_configured_marker(self, tmp_path):
        candidates = make_candidates(1)
        renderer = FakeRenderer(pages_for(candidates))
        await make_downloader(renderer, tmp_path).download(candidates)
        assert renderer.waits == [("article", 10000)]

    @pytest.mark.asyncio
    async def test_write_failure_is_per_candidate(self, tmp_path):
        bad = LinkCandidate(name="bad", path_key="/../bad", url=f"{SITE}/bad")
        good = make_candidates(1)[0]
        renderer = FakeRenderer({bad.url: doc_page("bad", ""), good.url: doc_page("good", "")})
        report = await make_downloader(renderer, tmp_path).download([bad, good])
        assert [c.name for c in report.succeeded] == ["page0"]
        assert report.failed[0].name == "bad"
        assert bad.local_path is None

    @pytest.mark.asyncio
    async def test_on_done_called_for_every_candidate(self, tmp_path):
        candidates = make_candidates(4)
        renderer = FakeRenderer(pages_for(candidates), failing={candidates[0].url})
        done = []
        await make_downloader(renderer, tmp_path).download(candidates, on_done=done.append)
        assert sorted(c.name for c in done) == ["page0", "page1", "page2", "page3"]

    @pytest.mark.asyncio
    async def test_empty_input(self, tmp_path):
        report = await make_downloader(FakeRenderer(), tmp_path).download([])
        assert report.total == 0
        assert report.succeeded == []
