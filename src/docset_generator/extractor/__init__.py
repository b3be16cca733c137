"""Content and outline extraction from rendered pages."""

from docset_generator.extractor.content import (
    ContentExtractor,
    HeadingLevel,
    PageContent,
    Section,
)

__all__ = [
    "ContentExtractor",
    "HeadingLevel",
    "PageContent",
    "Section",
]
