"""Main content and heading extraction from rendered HTML."""

import logging
import re
from enum import Enum

from bs4 import BeautifulSoup, Tag
from pydantic import BaseModel, Field

from docset_generator.config import ExtractorConfig

logger = logging.getLogger(__name__)


class HeadingLevel(str, Enum):
    """Heading levels that become index entries."""

    H2 = "h2"
    H3 = "h3"


_LEVELS = frozenset(level.value for level in HeadingLevel)


class Section(BaseModel):
    """A heading with an anchor inside a page."""

    anchor_id: str
    text: str
    level: HeadingLevel


class PageContent(BaseModel):
    """Content extracted from a documentation page."""

    content: str = ""
    title: str = ""
    styles: str = ""
    sections: list[Section] = Field(default_factory=list)


class ContentExtractor:
    """Extract the documentation body, title, stylesheets and outline.

    Missing containers or headings degrade to empty values; ``extract``
    never raises for them.
    """

    def __init__(self, config: ExtractorConfig):
        self.config = config
        self._strip_re = re.compile(config.heading_strip_pattern)

    def extract(self, html: str) -> PageContent:
        soup = BeautifulSoup(html, "lxml")
        container = self._find_container(soup)

        return PageContent(
            content=container.decode_contents() if container else "",
            title=self._extract_title(soup),
            styles="\n".join(str(link) for link in soup.select(self.config.stylesheet_selector)),
            sections=self._extract_sections(container) if container else [],
        )

    def _find_container(self, soup: BeautifulSoup) -> Tag | None:
        for selector in (self.config.content_selector, self.config.fallback_selector):
            container = soup.select_one(selector)
            if container:
                return container
        logger.debug("No content container found")
        return None

    def _extract_title(self, soup: BeautifulSoup) -> str:
        title_tag = soup.find("title")
        if not title_tag:
            return ""
        return title_tag.get_text().split(self.config.title_separator, 1)[0].strip()

    def _extract_sections(self, container: Tag) -> list[Section]:
        """Collect anchored headings in document order."""
        sections = []
        for heading in container.select(self.config.heading_selector):
            if heading.name not in _LEVELS:
                continue
            anchor_id = heading.get("id")
            text = self._strip_re.sub("", heading.get_text().strip()).strip()
            if not anchor_id or not text:
                continue
            sections.append(
                Section(anchor_id=anchor_id, text=text, level=HeadingLevel(heading.name))
            )
        return sections
