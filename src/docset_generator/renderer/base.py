"""Base classes for page renderers."""

import asyncio
import logging
from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from time import monotonic

from docset_generator.config import FetcherConfig

logger = logging.getLogger(__name__)


class RenderedPage(ABC):
    """A single page open in an isolated browsing context."""

    @abstractmethod
    async def goto(self, url: str) -> None:
        """Navigate and wait for network quiescence.

        Raises:
            RenderError: navigation failed or timed out.
        """

    @abstractmethod
    async def content(self) -> str:
        """Return the current rendered HTML."""

    @abstractmethod
    async def wait_for_selector(self, selector: str, timeout_ms: int) -> bool:
        """Wait for a selector to appear. Returns False on timeout."""

    @abstractmethod
    async def count(self, selector: str) -> int:
        """Count elements currently matching a selector."""

    @abstractmethod
    async def click_matching(
        self, selector: str, exact_texts: list[str], substrings: list[str]
    ) -> int:
        """Click elements whose trimmed, lower-cased text matches.

        An element matches when its text equals one of ``exact_texts`` or
        contains one of ``substrings``. Returns the number of clicks.
        """


class BaseRenderer(ABC):
    """Abstract base class for renderers."""

    def __init__(self, config: FetcherConfig):
        self.config = config

    @abstractmethod
    def page(self) -> AbstractAsyncContextManager[RenderedPage]:
        """Open a page in a fresh browsing context, closed on exit."""

    @abstractmethod
    async def __aenter__(self):
        """Async context manager entry."""

    @abstractmethod
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""


async def wait_until_stable(
    page: RenderedPage,
    selector: str,
    timeout_ms: int,
    poll_ms: int = 500,
) -> int:
    """Poll until the number of elements matching ``selector`` stops changing.

    Returns the last observed count. Gives up quietly after ``timeout_ms``.
    """
    deadline = monotonic() + timeout_ms / 1000
    previous = await page.count(selector)
    while monotonic() < deadline:
        await asyncio.sleep(poll_ms / 1000)
        current = await page.count(selector)
        if current == previous:
            return current
        logger.debug("Element count for %r changed: %d -> %d", selector, previous, current)
        previous = current
    logger.debug("Element count for %r still changing after %d ms", selector, timeout_ms)
    return previous
