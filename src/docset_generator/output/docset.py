"""Dash docset bundle writer."""

import logging
import plistlib
from html import escape
from pathlib import Path

import aiofiles  # type: ignore[import-untyped]

from docset_generator.classifier import classify
from docset_generator.config import ClassifierConfig, DocsetConfig, EntryType
from docset_generator.discovery.base import LinkCandidate
from docset_generator.errors import OutputError
from docset_generator.extractor.content import PageContent
from docset_generator.utils.url_utils import local_path_for

logger = logging.getLogger(__name__)

INDEX_DB_NAME = "docSet.dsidx"

# Landing page groups, in display order.
_GROUPS: list[tuple[EntryType, str]] = [
    (EntryType.GUIDE, "Guides"),
    (EntryType.RESOURCE, "Resources"),
    (EntryType.SOURCE, "Data Sources"),
    (EntryType.FUNCTION, "Functions"),
    (EntryType.PROVIDER, "Provider"),
]

_PAGE_CSS = """
    body {
      font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Helvetica, Arial, sans-serif;
      line-height: 1.6;
      padding: 20px;
      max-width: 980px;
      margin: 0 auto;
    }
    pre {
      background-color: #f6f8fa;
      padding: 16px;
      overflow: auto;
      border-radius: 6px;
    }
    code {
      background-color: #f6f8fa;
      padding: 2px 6px;
      border-radius: 3px;
      font-family: 'SFMono-Regular', Consolas, 'Liberation Mono', Menlo, monospace;
    }
    pre code {
      background-color: transparent;
      padding: 0;
    }
    h1, h2, h3, h4, h5, h6 {
      margin-top: 24px;
      margin-bottom: 16px;
      font-weight: 600;
    }
    a {
      color: #0969da;
      text-decoration: none;
    }
    a:hover {
      text-decoration: underline;
    }
"""

_INDEX_CSS = """
    body {
      font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Helvetica, Arial, sans-serif;
      line-height: 1.6;
      padding: 20px;
      max-width: 980px;
      margin: 0 auto;
    }
    h1 {
      border-bottom: 2px solid #e1e4e8;
      padding-bottom: 10px;
    }
    h2 {
      margin-top: 30px;
      color: #24292e;
    }
    ul {
      list-style: none;
      padding-left: 0;
    }
    li {
      padding: 5px 0;
    }
    a {
      color: #0969da;
      text-decoration: none;
    }
    .section {
      margin-bottom: 40px;
    }
"""


class DocsetWriter:
    """Write the docset layout, documents and landing page.

    Layout::

        <name>.docset/Contents/Info.plist
        <name>.docset/Contents/Resources/docSet.dsidx
        <name>.docset/Contents/Resources/Documents/...
    """

    def __init__(self, config: DocsetConfig, classifier: ClassifierConfig | None = None):
        self.config = config
        self.classifier = classifier
        self.bundle_path = config.bundle_path
        self.contents_path = self.bundle_path / "Contents"
        self.resources_path = self.contents_path / "Resources"
        self.documents_path = self.resources_path / "Documents"

    @property
    def index_db_path(self) -> Path:
        return self.resources_path / INDEX_DB_NAME

    def prepare(self) -> None:
        """Create the directory layout and Info.plist.

        Raises:
            OutputError: the layout could not be created.
        """
        info = {
            "CFBundleIdentifier": self.config.bundle_identifier,
            "CFBundleName": self.config.display_name,
            "DocSetPlatformFamily": self.config.platform_family,
            "isDashDocset": True,
            "dashIndexFilePath": self.config.index_file,
            "DashDocSetFamily": self.config.docset_family,
        }
        try:
            self.documents_path.mkdir(parents=True, exist_ok=True)
            with open(self.contents_path / "Info.plist", "wb") as f:
                plistlib.dump(info, f, sort_keys=False)
        except OSError as e:
            raise OutputError(f"Cannot create docset at {self.bundle_path}: {e}") from e

        logger.info("Created docset structure at %s", self.bundle_path)

    async def write_page(self, candidate: LinkCandidate, page: PageContent) -> str:
        """Write a standalone HTML document and return its local path."""
        local_path = local_path_for(candidate.path_key, self.config.document_suffix)
        filepath = self.documents_path / local_path
        filepath.parent.mkdir(parents=True, exist_ok=True)

        async with aiofiles.open(filepath, "w", encoding="utf-8") as f:
            await f.write(render_page(page))

        return local_path

    async def write_index(self, candidates: list[LinkCandidate]) -> Path:
        """Write the landing page grouping fetched pages by entry type."""
        grouped: dict[EntryType, list[LinkCandidate]] = {t: [] for t, _ in _GROUPS}
        for candidate in candidates:
            if not candidate.fetched:
                continue
            entry_type = classify(candidate.name, candidate.path_key, self.classifier)
            grouped.setdefault(entry_type, []).append(candidate)

        sections = []
        for entry_type, label in _GROUPS:
            links = grouped[entry_type]
            if not links:
                continue
            items = "\n      ".join(
                f'<li><a href="{escape(c.local_path or "")}">{escape(c.name)}</a></li>'
                for c in links
            )
            sections.append(
                f"""  <div class="section">
    <h2>{label}</h2>
    <ul>
      {items}
    </ul>
  </div>"""
            )

        title = escape(self.config.index_title)
        body = "\n".join(sections)
        document = f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="UTF-8">
  <title>{title}</title>
  <style>{_INDEX_CSS}  </style>
</head>
<body>
  <h1>{title}</h1>
  <p>{escape(self.config.index_description)}</p>
{body}
</body>
</html>
"""
        index_path = self.documents_path / self.config.index_file
        async with aiofiles.open(index_path, "w", encoding="utf-8") as f:
            await f.write(document)

        logger.info("Created %s", self.config.index_file)
        return index_path


def render_page(page: PageContent) -> str:
    """Wrap extracted content in a standalone HTML document."""
    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="UTF-8">
  <title>{escape(page.title)}</title>
  {page.styles}
  <style>{_PAGE_CSS}  </style>
</head>
<body>
  {page.content}
</body>
</html>
"""
