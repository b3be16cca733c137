"""Main orchestrator that coordinates the docset pipeline."""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)

from docset_generator.config import AppConfig
from docset_generator.discovery import LinkCandidate, ListingDiscoverer
from docset_generator.downloader import BatchDownloader, DownloadReport
from docset_generator.extractor import ContentExtractor
from docset_generator.index import SearchIndex, build_index_records
from docset_generator.output import DocsetWriter
from docset_generator.renderer import BaseRenderer, PlaywrightRenderer

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    """Result of a docset build."""

    docset_path: Path
    candidates: list[LinkCandidate] = field(default_factory=list)
    download: DownloadReport = field(default_factory=DownloadReport)
    record_count: int = 0
    duration: float = 0.0


class Orchestrator:
    """Coordinates discovery, download, output and indexing."""

    def __init__(
        self,
        config: AppConfig,
        console: Console | None = None,
        renderer: BaseRenderer | None = None,
    ):
        self.config = config
        self.console = console or Console()
        self.renderer = renderer or PlaywrightRenderer(config.fetcher)
        self.writer = DocsetWriter(config.docset, config.classifier)

    async def run(self) -> BuildResult:
        """Execute the full pipeline.

        Raises:
            OutputError: the docset layout could not be created.
            IndexStoreError: the search index could not be created.
            DiscoveryError: the listing page could not be loaded.
        """
        start = time.monotonic()
        result = BuildResult(docset_path=self.writer.bundle_path)

        self.console.print(f"[blue]Creating docset at {self.writer.bundle_path}...[/blue]")
        self.writer.prepare()

        # Opened before any fetching so a broken store fails fast
        with SearchIndex(self.writer.index_db_path) as index:
            async with self.renderer:
                self.console.print(
                    f"[blue]Discovering pages from {self.config.discovery.listing_url}...[/blue]"
                )
                discoverer = ListingDiscoverer(self.config.discovery, self.renderer)
                result.candidates = await discoverer.discover()

                if not result.candidates:
                    self.console.print("[yellow]No pages found to download.[/yellow]")
                else:
                    self.console.print(
                        f"[green]Found {len(result.candidates)} documentation pages[/green]"
                    )
                    result.download = await self._download(result.candidates)

            await self.writer.write_index(result.candidates)

            records = build_index_records(result.candidates, self.config.classifier)
            result.record_count = index.add_records(records)

        result.duration = time.monotonic() - start
        self._print_summary(result)
        return result

    async def _download(self, candidates: list[LinkCandidate]) -> DownloadReport:
        downloader = BatchDownloader(
            self.renderer,
            ContentExtractor(self.config.extractor),
            self.writer,
            self.config.fetcher,
            self.config.download,
        )

        progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TimeElapsedColumn(),
            console=self.console,
        )
        task_id = progress.add_task("Downloading...", total=len(candidates))

        with progress:
            return await downloader.download(
                candidates, on_done=lambda _c: progress.update(task_id, advance=1)
            )

    def _print_summary(self, result: BuildResult) -> None:
        """Print a post-run summary report."""
        report = result.download
        self.console.print()
        self.console.print("[bold]Docset generation complete[/bold]")
        self.console.print()
        self.console.print(f"  Pages found:      {len(result.candidates)}")
        self.console.print(f"  Pages downloaded: [green]{report.success_count}[/green]")
        if report.error_count:
            self.console.print(f"  Errors:           [red]{report.error_count}[/red]")
        self.console.print(f"  Index entries:    {result.record_count}")
        self.console.print(f"  Total time:       {result.duration:.1f}s")

        if report.failed:
            self.console.print()
            self.console.print("[bold red]Errors[/bold red]")
            for failure in report.failed[:10]:
                self.console.print(f"  [red]{escape(failure.name)}[/red]: {escape(failure.error)}")
            if len(report.failed) > 10:
                self.console.print(
                    f"  [dim]... and {len(report.failed) - 10} more errors[/dim]"
                )

        self.console.print()
        self.console.print(f"[green]Docset location: {result.docset_path}[/green]")
